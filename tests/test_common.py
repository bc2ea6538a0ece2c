"""Tests for the shared settings, database URL and token helpers."""

from __future__ import annotations

import pytest
from fastapi import HTTPException

from common import decode_access_token, resolve_async_url
from conftest import make_token

SECRET = "test-secret-key-for-courses-tests"


class TestResolveAsyncUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db/courses", "postgresql+asyncpg://u:p@db/courses"),
            ("postgresql+psycopg2://u:p@db/courses", "postgresql+asyncpg://u:p@db/courses"),
            ("postgres://u:p@db/courses", "postgresql+asyncpg://u:p@db/courses"),
            ("postgresql+asyncpg://u:p@db/courses", "postgresql+asyncpg://u:p@db/courses"),
            ("sqlite:///./courses.db", "sqlite+aiosqlite:///./courses.db"),
        ],
    )
    def test_sync_urls_are_converted(self, url, expected) -> None:
        assert resolve_async_url(url, None) == expected

    def test_explicit_async_url_wins(self) -> None:
        assert resolve_async_url("postgresql://a/b", "postgresql+asyncpg://c/d") == "postgresql+asyncpg://c/d"

    def test_unknown_backend_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            resolve_async_url("mysql://u:p@db/courses", None)


class TestDecodeAccessToken:
    def test_valid_token(self) -> None:
        user = decode_access_token(make_token(42), SECRET)

        assert user.id == 42

    @pytest.mark.parametrize(
        "token",
        [
            make_token(42, token_type="refresh"),
            make_token(42, expires_in=-10),
            "not-a-jwt",
        ],
    )
    def test_rejected_tokens(self, token) -> None:
        with pytest.raises(HTTPException) as excinfo:
            decode_access_token(token, SECRET)

        assert excinfo.value.status_code == 401
        assert excinfo.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_wrong_secret(self) -> None:
        with pytest.raises(HTTPException):
            decode_access_token(make_token(42), "another-secret")


class TestSettings:
    def test_currency_and_base_url_are_normalized(self) -> None:
        from courses_service.app.config import Settings

        settings = Settings(stripe_currency=" EUR ", public_base_url="https://academy.test/")

        assert settings.stripe_currency == "eur"
        assert settings.public_base_url == "https://academy.test"


class TestOperational:
    @pytest.mark.asyncio
    async def test_healthz_pings_database(self, client) -> None:
        resp = await client.get("/healthz")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "checks": {"database": "ok"}}

    def test_alembic_config_uses_sync_driver(self, monkeypatch) -> None:
        from courses_service.app import migrations_runner
        from courses_service.app.config import get_settings

        monkeypatch.setattr(get_settings(), "database_url", "postgresql+asyncpg://u:p%40ss@db/courses")

        cfg = migrations_runner.get_alembic_config()

        assert cfg.get_main_option("sqlalchemy.url") == "postgresql+psycopg2://u:p%40ss@db/courses"
        assert cfg.get_main_option("script_location").endswith("migrations")
