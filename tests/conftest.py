"""Shared fixtures for the courses service tests.

Every test gets its own SQLite file database (aiosqlite) and a recording
fake payment gateway, so no PostgreSQL or Stripe account is needed.
"""

from __future__ import annotations

import os
import time
from collections import defaultdict
from itertools import count
from typing import Any

# Settings are read on first import of the app; set them before that happens.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-courses-tests")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("PUBLIC_BASE_URL", "https://academy.test")
os.environ.setdefault("STRIPE_CURRENCY", "HUF")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from common import RateLimitConfig, RateLimiter
from courses_service.app.database import Base, get_db
from courses_service.app.dependencies import (
    get_course_creation_limiter,
    get_enrollment_limiter,
    get_payment_gateway,
)
from courses_service.app.main import app
from courses_service.app.models import Course, User, UserRoleEnum
from courses_service.app.services import PaymentProviderError, PriceInfo, ProductInfo

BROWSER_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
CRAWLER_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeTime:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, seconds: float) -> None:
        self.current += seconds

    def __call__(self) -> float:
        return self.current


class FakePaymentGateway:
    """In-memory payment processor that records every call.

    ``fail_on[method] = PaymentProviderError(...)`` makes that method raise.
    """

    def __init__(self) -> None:
        self.calls: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.fail_on: dict[str, PaymentProviderError] = {}
        self.products: dict[str, ProductInfo] = {}
        self.prices: dict[str, PriceInfo] = {}
        self._ids = count(1)

    def call_count(self, method: str) -> int:
        return len(self.calls[method])

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls[method].append(kwargs)
        if method in self.fail_on:
            raise self.fail_on[method]

    def add_plan(self, *, product_active: bool = True) -> str:
        """Register an existing product/price pair and return the price id."""
        n = next(self._ids)
        product = ProductInfo(id=f"prod_existing_{n}", active=product_active)
        price = PriceInfo(id=f"price_existing_{n}", product_id=product.id, active=True)
        self.products[product.id] = product
        self.prices[price.id] = price
        return price.id

    async def retrieve_price(self, price_id: str) -> PriceInfo:
        self._record("retrieve_price", price_id=price_id)
        if price_id not in self.prices:
            raise PaymentProviderError(
                f"No such price: '{price_id}'",
                error_type="invalid_request_error",
                code="resource_missing",
                status_code=404,
            )
        return self.prices[price_id]

    async def retrieve_product(self, product_id: str) -> ProductInfo:
        self._record("retrieve_product", product_id=product_id)
        return self.products[product_id]

    async def create_product(self, *, name: str, metadata: dict[str, str]) -> str:
        self._record("create_product", name=name, metadata=metadata)
        product = ProductInfo(id=f"prod_{next(self._ids)}", active=True)
        self.products[product.id] = product
        return product.id

    async def create_price(self, *, product_id: str, unit_amount: int, currency: str) -> str:
        self._record("create_price", product_id=product_id, unit_amount=unit_amount, currency=currency)
        price = PriceInfo(id=f"price_{next(self._ids)}", product_id=product_id, active=True)
        self.prices[price.id] = price
        return price.id

    async def create_customer(
        self, *, email: str, name: str | None = None, metadata: dict[str, str] | None = None
    ) -> str:
        self._record("create_customer", email=email, name=name, metadata=metadata)
        return f"cus_{next(self._ids)}"

    async def create_checkout_session(
        self,
        *,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> str:
        self._record(
            "create_checkout_session",
            customer_id=customer_id,
            price_id=price_id,
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
        )
        return f"https://checkout.stripe.test/c/pay/cs_test_{next(self._ids)}"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session maker bound to a fresh SQLite file database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'courses.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def create_user(
    session_factory,
    *,
    email: str,
    role: UserRoleEnum = UserRoleEnum.USER,
    name: str | None = "Test User",
    stripe_customer_id: str | None = None,
) -> User:
    async with session_factory() as session:
        user = User(email=email, name=name, role=role.value, stripe_customer_id=stripe_customer_id)
        session.add(user)
        await session.commit()
        return user


async def create_course(
    session_factory,
    *,
    owner_id: int,
    slug: str = "chess-openings",
    title: str = "Chess Openings",
    price: int = 1000,
    stripe_price_id: str | None = None,
) -> Course:
    async with session_factory() as session:
        course = Course(
            slug=slug,
            title=title,
            description="",
            price=price,
            user_id=owner_id,
            stripe_price_id=stripe_price_id,
        )
        session.add(course)
        await session.commit()
        return course


@pytest_asyncio.fixture
async def admin(session_factory) -> User:
    return await create_user(session_factory, email="admin@academy.test", role=UserRoleEnum.ADMIN, name="Admin")


@pytest_asyncio.fixture
async def student(session_factory) -> User:
    return await create_user(session_factory, email="student@academy.test", name="Student")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


def make_token(user_id: int, *, token_type: str = "access", expires_in: int = 3600) -> str:
    payload = {"sub": str(user_id), "type": token_type, "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, os.environ["JWT_SECRET"], algorithm="HS256")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def limiters(fake_time) -> dict[str, RateLimiter]:
    config = RateLimitConfig(window_seconds=60, max_requests=5, mode="LIVE")
    return {
        "create": RateLimiter(config, name="course-create", time_fn=fake_time),
        "enroll": RateLimiter(config, name="course-enroll", time_fn=fake_time),
    }


@pytest_asyncio.fixture
async def client(session_factory, gateway, limiters):
    async def _override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_course_creation_limiter] = lambda: limiters["create"]
    app.dependency_overrides[get_enrollment_limiter] = lambda: limiters["enroll"]

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"User-Agent": BROWSER_UA}) as ac:
        yield ac

    app.dependency_overrides.clear()
