from __future__ import annotations

from alembic import context
from sqlalchemy import create_engine, pool

from courses_service.app.config import get_settings
from courses_service.app.database import Base
from courses_service.app import models  # noqa: F401  (registers tables on Base.metadata)


config = context.config

target_metadata = Base.metadata


def get_url() -> str:
	url = config.get_main_option("sqlalchemy.url")
	if url:
		return url
	return get_settings().database_url


def run_migrations_offline() -> None:
	"""Run migrations in 'offline' mode."""
	context.configure(
		url=get_url(),
		target_metadata=target_metadata,
		literal_binds=True,
		dialect_opts={"paramstyle": "named"},
	)

	with context.begin_transaction():
		context.run_migrations()


def run_migrations_online() -> None:
	"""Run migrations in 'online' mode."""
	connectable = create_engine(get_url(), poolclass=pool.NullPool)

	with connectable.connect() as connection:
		context.configure(connection=connection, target_metadata=target_metadata)

		with context.begin_transaction():
			context.run_migrations()


if context.is_offline_mode():
	run_migrations_offline()
else:
	run_migrations_online()
