from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from common import RateLimiter

from ..config import Settings, get_settings
from ..database import get_db
from ..dependencies import get_course_creation_limiter, get_enrollment_limiter, get_payment_gateway
from ..models import Course, Enrollment, User
from ..schemas import ActionResult, CourseCreate, CourseOut, EnrollmentOut
from ..security import get_current_account, get_current_user_id, require_admin
from ..services import (
	AlreadyEnrolled,
	CheckoutCreated,
	EnrollmentService,
	PaymentGateway,
	PaymentProviderError,
	log_payment_error,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])

RATE_LIMITED_MESSAGE = "You have been blocked due to rate limiting"
BOT_MESSAGE = "You are a bot! if this is a mistake contact our support"
BLOCKED_MESSAGE = "You have been blocked"
INVALID_FORM_MESSAGE = "Invalid Form Data"
ALREADY_ENROLLED_MESSAGE = "You are already enrolled in this Course"
AMOUNT_TOO_SMALL_MESSAGE = "Enrollment completed (amount below Stripe minimum)"
ENROLL_FAILED_MESSAGE = "Failed to enroll in course"


@router.get("/", response_model=List[CourseOut])
async def list_courses(db: AsyncSession = Depends(get_db)) -> List[CourseOut]:
	stmt = select(Course).order_by(Course.created_at.desc(), Course.id.desc())
	result = await db.execute(stmt)
	return list(result.scalars().all())


@router.get("/me/enrollments", response_model=List[EnrollmentOut])
async def my_enrollments(
	current_user_id: int = Depends(get_current_user_id),
	db: AsyncSession = Depends(get_db),
) -> List[EnrollmentOut]:
	stmt = (
		select(Enrollment)
		.where(Enrollment.user_id == current_user_id)
		.order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
	)
	result = await db.execute(stmt)
	return list(result.scalars().all())


@router.get("/{slug}", response_model=CourseOut)
async def get_course(slug: str, db: AsyncSession = Depends(get_db)) -> CourseOut:
	course = await db.scalar(select(Course).where(Course.slug == slug))
	if course is None:
		raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Course not found")
	return course


async def _create_course_record(
	request: Request,
	admin: User,
	db: AsyncSession,
	limiter: RateLimiter,
) -> ActionResult:
	admin_id = admin.id
	try:
		decision = await limiter.protect(request, fingerprint=admin_id)
		if decision.is_denied():
			if decision.reason is not None and decision.reason.is_rate_limit():
				return ActionResult.error(RATE_LIMITED_MESSAGE)
			return ActionResult.error(BOT_MESSAGE)

		try:
			data = CourseCreate.model_validate(await request.json())
		except ValueError:
			return ActionResult.error(INVALID_FORM_MESSAGE)

		course = Course(
			**data.model_dump(),
			user_id=admin_id,
			stripe_price_id=None,
		)
		db.add(course)
		await db.commit()
		logger.info("Admin %s created course %s (%s)", admin_id, course.id, course.slug)
		return ActionResult.success("Course created successfully")
	except Exception:
		logger.exception("Course creation failed for admin %s", admin_id)
		return ActionResult.error("Failed to create course")


@router.post("/", response_model=ActionResult)
async def create_course(
	request: Request,
	admin: User = Depends(require_admin),
	db: AsyncSession = Depends(get_db),
	limiter: RateLimiter = Depends(get_course_creation_limiter),
) -> ActionResult:
	return await _create_course_record(request, admin, db, limiter)


# Accept both /api/courses and /api/courses/ for POST
@router.post("", response_model=ActionResult)
async def create_course_alias(
	request: Request,
	admin: User = Depends(require_admin),
	db: AsyncSession = Depends(get_db),
	limiter: RateLimiter = Depends(get_course_creation_limiter),
) -> ActionResult:
	return await _create_course_record(request, admin, db, limiter)


@router.post("/{course_id}/enroll", response_model=None)
async def enroll_course(
	course_id: int,
	request: Request,
	account: User = Depends(get_current_account),
	db: AsyncSession = Depends(get_db),
	limiter: RateLimiter = Depends(get_enrollment_limiter),
	gateway: PaymentGateway = Depends(get_payment_gateway),
	settings: Settings = Depends(get_settings),
) -> ActionResult | RedirectResponse:
	"""
	Start checkout for a course.

	Redirects (303) to the payment page when a checkout session is created;
	every other path, errors included, returns an ``ActionResult``.
	"""
	user_id = account.id
	try:
		decision = await limiter.protect(request, fingerprint=user_id)
		if decision.is_denied():
			return ActionResult.error(BLOCKED_MESSAGE)

		course = await db.get(Course, course_id)
		if course is None:
			return ActionResult.error("Course not found")

		service = EnrollmentService(
			db,
			gateway,
			base_url=settings.public_base_url,
			currency=settings.stripe_currency,
		)
		outcome = await service.enroll(account, course)
	except IntegrityError:
		logger.exception("Enrollment write conflict for user %s course %s", user_id, course_id)
		return ActionResult.error(ENROLL_FAILED_MESSAGE)
	except PaymentProviderError as exc:
		log_payment_error(logger, exc, f"enroll user={user_id} course={course_id}")
		return ActionResult.error(f"Payment system error: {exc.message}")
	except Exception as exc:
		logger.exception("Enrollment failed for user %s course %s", user_id, course_id)
		return ActionResult.error(str(exc) or ENROLL_FAILED_MESSAGE)

	if isinstance(outcome, CheckoutCreated):
		return RedirectResponse(outcome.url, status_code=status.HTTP_303_SEE_OTHER)
	if isinstance(outcome, AlreadyEnrolled):
		return ActionResult.success(ALREADY_ENROLLED_MESSAGE)
	return ActionResult.success(AMOUNT_TOO_SMALL_MESSAGE)
