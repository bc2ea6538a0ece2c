from fastapi import FastAPI

from common import configure_logging, configure_observability

from .config import get_settings
from .database import get_db
from .dependencies import get_course_creation_limiter, get_enrollment_limiter, get_payment_gateway
from .migrations_runner import run_migrations
from .routers import courses_router


settings = get_settings()
configure_logging(settings)

app = FastAPI(title=settings.app_name)


@app.on_event("startup")
def run_startup_tasks() -> None:
	if settings.run_migrations_on_startup:
		run_migrations()
	# build the shared clients once, before the first request
	get_course_creation_limiter()
	get_enrollment_limiter()
	get_payment_gateway()


configure_observability(app, settings=settings, get_db=get_db)

app.include_router(courses_router)
