"""Общий модуль для работы с базой данных во всех сервисах."""
from collections.abc import AsyncIterator
from typing import Any, Callable

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
	"""Базовый класс для всех моделей SQLAlchemy."""
	pass


ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite")


def resolve_async_url(database_url: str, database_url_async: str | None) -> str:
	"""
	Преобразует синхронный URL базы данных в асинхронный.
	
	Args:
		database_url: URL базы данных (синхронный или уже асинхронный)
		database_url_async: Опциональный асинхронный URL (если задан, используется он)
	
	Returns:
		Асинхронный URL базы данных
	
	Raises:
		ValueError: Если не удалось определить async URL
	"""
	if database_url_async:
		return database_url_async
	if any(driver in database_url for driver in ASYNC_DRIVERS):
		return database_url
	replacements = [
		("+psycopg2", "+asyncpg"),
		("+psycopg", "+asyncpg"),
		("postgresql://", "postgresql+asyncpg://"),
		("postgres://", "postgresql+asyncpg://"),
		("sqlite://", "sqlite+aiosqlite://"),
	]
	for needle, replacement in replacements:
		if needle in database_url:
			return database_url.replace(needle, replacement, 1)
	raise ValueError(
		"Не удалось определить async URL: задайте database_url_async или используйте PostgreSQL"
	)


def _pool_options(url: str, settings: Any) -> dict[str, Any]:
	# sqlite (тесты, локальный запуск) не поддерживает параметры QueuePool
	if make_url(url).get_backend_name() == "sqlite":
		return {}
	return {
		"pool_pre_ping": True,
		"pool_size": settings.db_pool_size,
		"max_overflow": settings.db_max_overflow,
		"pool_timeout": settings.db_pool_timeout,
		"pool_recycle": settings.db_pool_recycle,
	}


def create_database_engines(
	get_settings: Callable,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
	"""
	Создает асинхронный движок базы данных и sessionmaker.
	
	Args:
		get_settings: Функция для получения настроек (database_url, database_url_async
			и параметры пула db_*)
	
	Returns:
		Кортеж (async_engine, SessionLocal)
	"""
	settings = get_settings()
	url = resolve_async_url(settings.database_url, settings.database_url_async)

	async_engine = create_async_engine(url, **_pool_options(url, settings))
	
	SessionLocal = async_sessionmaker(
		async_engine,
		expire_on_commit=False,
		autoflush=False,
		class_=AsyncSession,
	)
	
	return async_engine, SessionLocal


def make_get_db(SessionLocal: async_sessionmaker) -> Callable:
	"""
	Создает функцию get_db для использования в FastAPI зависимостях.
	
	Args:
		SessionLocal: Sessionmaker для создания сессий
	
	Returns:
		Функция get_db для использования в Depends()
	"""
	async def get_db() -> AsyncIterator[AsyncSession]:
		async with SessionLocal() as session:
			yield session
	
	return get_db
