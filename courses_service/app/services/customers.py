from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User
from .payments import PaymentGateway


logger = logging.getLogger(__name__)


async def get_or_create_customer_id(db: AsyncSession, gateway: PaymentGateway, user: User) -> str:
	"""
	Return the user's payment customer id, creating the customer on first use.

	The id is cached on the user row. Two concurrent first calls for the same
	user can still create two customers; the later commit wins.
	"""
	if user.stripe_customer_id:
		return user.stripe_customer_id

	customer_id = await gateway.create_customer(
		email=user.email,
		name=user.name,
		metadata={"userId": str(user.id)},
	)
	user.stripe_customer_id = customer_id
	await db.commit()
	logger.info("Created payment customer %s for user %s", customer_id, user.id)
	return customer_id
