"""Process-wide clients, built once and injected with ``Depends``."""
from functools import lru_cache

from common import RateLimitConfig, RateLimiter

from .config import get_settings
from .services import PaymentGateway, StripeGateway


@lru_cache
def get_course_creation_limiter() -> RateLimiter:
	return RateLimiter(RateLimitConfig.from_settings(get_settings()), name="course-create")


@lru_cache
def get_enrollment_limiter() -> RateLimiter:
	return RateLimiter(RateLimitConfig.from_settings(get_settings()), name="course-enroll")


@lru_cache
def get_payment_gateway() -> PaymentGateway:
	return StripeGateway(get_settings().stripe_secret_key)
