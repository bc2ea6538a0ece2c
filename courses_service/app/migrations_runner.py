from __future__ import annotations

from logging import getLogger
from pathlib import Path

from alembic import command
from alembic.config import Config

from .config import get_settings


logger = getLogger(__name__)


def _sync_url(url: str) -> str:
	# Alembic runs on a sync engine
	for async_driver, sync_driver in (("+asyncpg", "+psycopg2"), ("+aiosqlite", "")):
		url = url.replace(async_driver, sync_driver, 1)
	return url


def get_alembic_config() -> Config:
	# Alembic scripts live next to this module in ./migrations
	base_dir = Path(__file__).resolve().parent

	alembic_cfg = Config()
	alembic_cfg.set_main_option("script_location", str(base_dir / "migrations"))
	# configparser interpolation: a literal % in passwords must be doubled
	alembic_cfg.set_main_option("sqlalchemy.url", _sync_url(get_settings().database_url).replace("%", "%%"))
	return alembic_cfg


def run_migrations() -> None:
	"""Apply pending Alembic migrations at app startup."""
	cfg = get_alembic_config()
	try:
		command.upgrade(cfg, "head")
	except Exception as exc:
		logger.error("Failed to run migrations: %s", exc)
		raise
	logger.info("Alembic migrations applied")
