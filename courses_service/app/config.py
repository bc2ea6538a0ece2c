from pydantic import field_validator

from common import BaseServiceSettings, make_get_settings


class Settings(BaseServiceSettings):
	app_name: str = "Courses Service"
	run_migrations_on_startup: bool = True

	# Base URL of the web app; checkout success/cancel pages live under it
	public_base_url: str = "http://localhost:3000"

	# Stripe
	stripe_secret_key: str | None = None
	stripe_currency: str = "huf"

	@field_validator("stripe_currency", mode="before")
	@classmethod
	def _lower_currency(cls, value: object) -> object:
		if isinstance(value, str):
			return value.strip().lower() or "huf"
		return value

	@field_validator("public_base_url")
	@classmethod
	def _strip_trailing_slash(cls, value: str) -> str:
		return value.rstrip("/")


get_settings = make_get_settings(Settings)
