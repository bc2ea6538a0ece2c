"""Базовый класс настроек для всех сервисов."""
from functools import lru_cache
from typing import Callable, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


RateLimitMode = Literal["LIVE", "DRY_RUN"]


class BaseServiceSettings(BaseSettings):
	"""Общие настройки сервисов: база данных, JWT, логирование и лимиты запросов."""
	
	app_name: str
	database_url: str
	database_url_async: str | None = None
	jwt_secret: str
	jwt_algorithm: str = "HS256"
	metrics_enabled: bool = True
	log_level: str = "INFO"
	
	# Пул соединений (для sqlite игнорируется)
	db_pool_size: int = 10
	db_max_overflow: int = 20
	db_pool_timeout: int = 30  # секунды
	db_pool_recycle: int = 1800  # 30 минут
	
	# Ограничение частоты запросов на пользователя: фиксированное окно
	rate_limit_window_seconds: int = 60
	rate_limit_max_requests: int = 5
	rate_limit_mode: RateLimitMode = "LIVE"
	bot_detection_enabled: bool = True
	
	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

	@field_validator("rate_limit_mode", mode="before")
	@classmethod
	def _normalize_mode(cls, value: object) -> object:
		if isinstance(value, str):
			return value.strip().upper().replace("-", "_")
		return value


def make_get_settings(settings_class: type[BaseServiceSettings]) -> Callable:
	"""
	Создает кешированную функцию get_settings для конкретного сервиса.
	
	Один экземпляр настроек на процесс; в тестах кеш сбрасывается через
	``get_settings.cache_clear()``.
	"""
	@lru_cache
	def get_settings() -> BaseServiceSettings:
		return settings_class()
	
	return get_settings
