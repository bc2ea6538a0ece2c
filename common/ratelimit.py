"""Ограничение частоты запросов по отпечатку вызывающего (fixed window).

Лимитер хранит окна в памяти процесса, поэтому создается один раз на процесс
и передается в обработчики через зависимости FastAPI.
"""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from fastapi import Request

from .config import RateLimitMode


logger = logging.getLogger(__name__)

# Сигнатуры краулеров и управляемых браузеров в User-Agent.
# HTTP-клиенты (curl, okhttp, python-requests) ботами не считаются.
BOT_USER_AGENT_PATTERN = re.compile(
	r"bot|crawl|spider|slurp|headless|phantomjs|selenium|puppeteer",
	re.IGNORECASE,
)


class DenialKind(str, Enum):
	RATE_LIMIT = "rate_limit"
	BOT = "bot"


@dataclass(frozen=True)
class DenialReason:
	kind: DenialKind

	def is_rate_limit(self) -> bool:
		return self.kind is DenialKind.RATE_LIMIT

	def is_bot(self) -> bool:
		return self.kind is DenialKind.BOT


@dataclass(frozen=True)
class RateLimitDecision:
	allowed: bool
	reason: DenialReason | None = None
	remaining: int = 0

	def is_denied(self) -> bool:
		return not self.allowed

	@classmethod
	def allow(cls, remaining: int) -> "RateLimitDecision":
		return cls(allowed=True, remaining=remaining)

	@classmethod
	def deny(cls, kind: DenialKind) -> "RateLimitDecision":
		return cls(allowed=False, reason=DenialReason(kind))


@dataclass
class RateLimitConfig:
	window_seconds: int = 60
	max_requests: int = 5
	mode: RateLimitMode = "LIVE"
	bot_detection_enabled: bool = True

	@classmethod
	def from_settings(cls, settings: object) -> "RateLimitConfig":
		return cls(
			window_seconds=getattr(settings, "rate_limit_window_seconds", 60),
			max_requests=getattr(settings, "rate_limit_max_requests", 5),
			mode=getattr(settings, "rate_limit_mode", "LIVE"),
			bot_detection_enabled=getattr(settings, "bot_detection_enabled", True),
		)


def looks_automated(request: Request) -> bool:
	user_agent = request.headers.get("user-agent", "")
	return bool(BOT_USER_AGENT_PATTERN.search(user_agent))


class FixedWindowLimiter:
	"""Счетчик запросов в фиксированном окне для каждого ключа."""

	def __init__(self, limit: int, window_seconds: float, time_fn: Callable[[], float]):
		self.limit = limit
		self.window_seconds = window_seconds
		self.time_fn = time_fn
		self.windows: dict[str, tuple[float, int]] = {}
		self._last_sweep = time_fn()

	def _sweep(self, now: float) -> None:
		# не чаще раза в окно удаляет истекшие окна
		if now - self._last_sweep < self.window_seconds:
			return
		self._last_sweep = now
		expired = [key for key, (start, _) in self.windows.items() if now - start >= self.window_seconds]
		for key in expired:
			del self.windows[key]

	def hit(self, key: str) -> tuple[bool, int]:
		"""Учитывает запрос; возвращает (разрешен, сколько осталось в окне)."""
		now = self.time_fn()
		self._sweep(now)
		window_start, count = self.windows.get(key, (now, 0))
		if now - window_start >= self.window_seconds:
			window_start, count = now, 0
		if count >= self.limit:
			self.windows[key] = (window_start, count)
			return False, 0
		count += 1
		self.windows[key] = (window_start, count)
		return True, self.limit - count


class RateLimiter:
	"""
	Клиент лимитера: ``protect`` возвращает решение ALLOW/DENY.

	В режиме DRY_RUN отказ только логируется, запрос пропускается.
	"""

	def __init__(
		self,
		config: RateLimitConfig,
		*,
		name: str = "default",
		time_fn: Callable[[], float] = time.monotonic,
	) -> None:
		self.config = config
		self.name = name
		self._window = FixedWindowLimiter(config.max_requests, config.window_seconds, time_fn)

	async def protect(self, request: Request, *, fingerprint: str | int) -> RateLimitDecision:
		key = str(fingerprint)
		decision = await self._decide(request, key)
		if decision.is_denied():
			logger.warning(
				"Rate limiter %s denied %s (%s, mode=%s)",
				self.name,
				key,
				decision.reason.kind.value if decision.reason else "unknown",
				self.config.mode,
			)
			if self.config.mode == "DRY_RUN":
				return RateLimitDecision.allow(remaining=0)
		return decision

	async def _decide(self, request: Request, key: str) -> RateLimitDecision:
		if self.config.bot_detection_enabled and looks_automated(request):
			return RateLimitDecision.deny(DenialKind.BOT)
		# hit() не содержит await, поэтому атомарен в пределах event loop
		allowed, remaining = self._window.hit(key)
		if not allowed:
			return RateLimitDecision.deny(DenialKind.RATE_LIMIT)
		return RateLimitDecision.allow(remaining=remaining)

	def reset(self) -> None:
		self._window.windows.clear()
