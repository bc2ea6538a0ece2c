from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Course
from .payments import PaymentGateway, PaymentProviderError


logger = logging.getLogger(__name__)


async def _cached_price_is_usable(gateway: PaymentGateway, price_id: str) -> bool:
	try:
		price = await gateway.retrieve_price(price_id)
		product = await gateway.retrieve_product(price.product_id)
	except PaymentProviderError as exc:
		logger.info("Price %s not retrievable (%s), creating new one", price_id, exc.code or exc.message)
		return False
	if not product.active:
		logger.info("Product %s is inactive, creating new product and price", product.id)
		return False
	return True


async def ensure_price_id_for_course(
	db: AsyncSession,
	gateway: PaymentGateway,
	course: Course,
	*,
	currency: str,
) -> str:
	"""
	Return a live payment price id for the course.

	A cached id is reused only while its product is active. Otherwise a new
	product and price are created and the new price id replaces the cached one;
	superseded plans are left in place at the processor.
	"""
	if course.stripe_price_id and await _cached_price_is_usable(gateway, course.stripe_price_id):
		return course.stripe_price_id

	product_id = await gateway.create_product(
		name=course.title,
		metadata={"courseId": str(course.id)},
	)
	price_id = await gateway.create_price(
		product_id=product_id,
		unit_amount=course.price,
		currency=currency,
	)

	course.stripe_price_id = price_id
	await db.commit()
	logger.info("Course %s now uses price %s (product %s)", course.id, price_id, product_id)
	return price_id
