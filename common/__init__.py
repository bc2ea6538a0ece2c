from .observability import configure_logging, configure_observability
from .database import Base, create_database_engines, make_get_db, resolve_async_url
from .ratelimit import (
	DenialKind,
	DenialReason,
	RateLimitConfig,
	RateLimitDecision,
	RateLimiter,
)
from .security import (
	CurrentUser,
	bearer_scheme,
	decode_access_token,
	make_get_current_user,
	make_get_current_user_id,
)
from .config import BaseServiceSettings, make_get_settings

__all__ = [
	"configure_logging",
	"configure_observability",
	# Database
	"Base",
	"create_database_engines",
	"make_get_db",
	"resolve_async_url",
	# Rate limiting
	"DenialKind",
	"DenialReason",
	"RateLimitConfig",
	"RateLimitDecision",
	"RateLimiter",
	# Security
	"CurrentUser",
	"bearer_scheme",
	"decode_access_token",
	"make_get_current_user",
	"make_get_current_user_id",
	# Config
	"BaseServiceSettings",
	"make_get_settings",
]
