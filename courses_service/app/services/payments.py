"""
Payment processor access.

``PaymentGateway`` is the interface the provisioners and the enrollment
orchestrator depend on; ``StripeGateway`` implements it with the async
variants of the Stripe resource methods. Every Stripe failure is translated
to :class:`PaymentProviderError` so callers never import ``stripe``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

import stripe


# Stripe rejects checkout totals below the per-currency minimum with this code
AMOUNT_TOO_SMALL = "amount_too_small"


class PaymentProviderError(Exception):
	"""A payment processor call failed; carries the processor's diagnostics."""

	def __init__(
		self,
		message: str,
		*,
		error_type: Optional[str] = None,
		code: Optional[str] = None,
		status_code: Optional[int] = None,
	):
		super().__init__(message)
		self.message = message
		self.error_type = error_type
		self.code = code
		self.status_code = status_code

	@classmethod
	def from_stripe(cls, exc: stripe.StripeError) -> "PaymentProviderError":
		error = getattr(exc, "error", None)
		return cls(
			exc.user_message or str(exc),
			error_type=getattr(error, "type", None),
			code=exc.code,
			status_code=exc.http_status,
		)

	@property
	def is_amount_too_small(self) -> bool:
		return self.code == AMOUNT_TOO_SMALL

	def diagnostics(self) -> Dict[str, Any]:
		return {
			"stripe_error_type": self.error_type,
			"stripe_error_code": self.code,
			"stripe_error_message": self.message,
			"stripe_status_code": self.status_code,
		}


def log_payment_error(logger: logging.Logger, exc: PaymentProviderError, context: str) -> None:
	logger.error(
		"%s: payment processor error type=%s code=%s status=%s message=%s",
		context,
		exc.error_type,
		exc.code,
		exc.status_code,
		exc.message,
		extra=exc.diagnostics(),
	)


@dataclass(frozen=True)
class PriceInfo:
	id: str
	product_id: str
	active: bool


@dataclass(frozen=True)
class ProductInfo:
	id: str
	active: bool


class PaymentGateway(Protocol):
	"""
	Operations the service needs from a payment processor.

	All methods raise :class:`PaymentProviderError` on failure.
	"""

	async def retrieve_price(self, price_id: str) -> PriceInfo:
		...

	async def retrieve_product(self, product_id: str) -> ProductInfo:
		...

	async def create_product(self, *, name: str, metadata: Dict[str, str]) -> str:
		"""Create an active product and return its id."""
		...

	async def create_price(self, *, product_id: str, unit_amount: int, currency: str) -> str:
		"""Create a one-time price (amount in the smallest currency unit) and return its id."""
		...

	async def create_customer(
		self, *, email: str, name: Optional[str] = None, metadata: Optional[Dict[str, str]] = None
	) -> str:
		...

	async def create_checkout_session(
		self,
		*,
		customer_id: str,
		price_id: str,
		success_url: str,
		cancel_url: str,
		metadata: Dict[str, str],
	) -> str:
		"""Create a one-item payment-mode checkout session and return its URL."""
		...


class StripeGateway:
	"""Stripe implementation of :class:`PaymentGateway`."""

	def __init__(self, secret_key: Optional[str]):
		self._api_key = secret_key

	async def _call(self, operation: Callable[..., Awaitable[Any]], *args: Any, **params: Any) -> Any:
		if not self._api_key:
			raise PaymentProviderError(
				"Stripe is not configured",
				error_type="configuration_error",
			)
		try:
			return await operation(*args, api_key=self._api_key, **params)
		except stripe.StripeError as exc:
			raise PaymentProviderError.from_stripe(exc) from exc

	async def retrieve_price(self, price_id: str) -> PriceInfo:
		price = await self._call(stripe.Price.retrieve_async, price_id)
		product = price.product
		product_id = product if isinstance(product, str) else product.id
		return PriceInfo(id=price.id, product_id=product_id, active=bool(price.active))

	async def retrieve_product(self, product_id: str) -> ProductInfo:
		product = await self._call(stripe.Product.retrieve_async, product_id)
		return ProductInfo(id=product.id, active=bool(product.active))

	async def create_product(self, *, name: str, metadata: Dict[str, str]) -> str:
		product = await self._call(
			stripe.Product.create_async,
			name=name,
			active=True,
			metadata=metadata,
		)
		return product.id

	async def create_price(self, *, product_id: str, unit_amount: int, currency: str) -> str:
		price = await self._call(
			stripe.Price.create_async,
			unit_amount=unit_amount,
			currency=currency,
			product=product_id,
		)
		return price.id

	async def create_customer(
		self, *, email: str, name: Optional[str] = None, metadata: Optional[Dict[str, str]] = None
	) -> str:
		params: Dict[str, Any] = {"email": email, "metadata": metadata or {}}
		if name:
			params["name"] = name
		customer = await self._call(stripe.Customer.create_async, **params)
		return customer.id

	async def create_checkout_session(
		self,
		*,
		customer_id: str,
		price_id: str,
		success_url: str,
		cancel_url: str,
		metadata: Dict[str, str],
	) -> str:
		session = await self._call(
			stripe.checkout.Session.create_async,
			customer=customer_id,
			line_items=[{"price": price_id, "quantity": 1}],
			mode="payment",
			success_url=success_url,
			cancel_url=cancel_url,
			metadata=metadata,
		)
		if not session.url:
			raise PaymentProviderError("Checkout session has no URL", error_type="api_error")
		return session.url
