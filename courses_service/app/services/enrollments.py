"""
Enrollment checkout orchestration.

The local state transition (enrollment upsert to ``pending`` with a fresh
price snapshot) commits in its own short transaction before any payment call
is made. Payment plan provisioning and checkout session creation then run
with no data-store transaction held open. If checkout creation fails, the
pending row stays as an inert intent record; it never grants access and the
next attempt reuses it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Course, Enrollment, EnrollmentStatusEnum, User
from .customers import get_or_create_customer_id
from .payments import PaymentGateway, PaymentProviderError, log_payment_error
from .plans import ensure_price_id_for_course


logger = logging.getLogger(__name__)

REASON_AMOUNT_TOO_SMALL = "amount_too_small"


@dataclass(frozen=True)
class AlreadyEnrolled:
	enrollment_id: int


@dataclass(frozen=True)
class CheckoutCreated:
	enrollment_id: int
	url: str


@dataclass(frozen=True)
class EnrolledWithoutPayment:
	enrollment_id: int
	reason: str


EnrollmentOutcome = Union[AlreadyEnrolled, CheckoutCreated, EnrolledWithoutPayment]


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class EnrollmentService:
	def __init__(
		self,
		db: AsyncSession,
		gateway: PaymentGateway,
		*,
		base_url: str,
		currency: str,
	) -> None:
		self.db = db
		self.gateway = gateway
		self.base_url = base_url.rstrip("/")
		self.currency = currency

	async def enroll(self, user: User, course: Course) -> EnrollmentOutcome:
		"""
		Move the user's enrollment in ``course`` towards checkout.

		Raises :class:`PaymentProviderError` for processor failures other than
		``amount_too_small``, which completes the enrollment without payment.
		"""
		customer_id = await get_or_create_customer_id(self.db, self.gateway, user)

		enrollment, already_active = await self._upsert_enrollment(user, course)
		if already_active:
			return AlreadyEnrolled(enrollment.id)

		try:
			price_id = await ensure_price_id_for_course(
				self.db, self.gateway, course, currency=self.currency
			)
			url = await self.gateway.create_checkout_session(
				customer_id=customer_id,
				price_id=price_id,
				success_url=f"{self.base_url}/payment/success",
				cancel_url=f"{self.base_url}/payment/cancel",
				metadata={
					"userId": str(user.id),
					"courseId": str(course.id),
					"enrollmentId": str(enrollment.id),
				},
			)
		except PaymentProviderError as exc:
			if not exc.is_amount_too_small:
				raise
			log_payment_error(logger, exc, f"enroll user={user.id} course={course.id}")
			logger.info("Amount too small for Stripe, completing enrollment %s without payment", enrollment.id)
			await self._set_status(enrollment, EnrollmentStatusEnum.ACTIVE)
			return EnrolledWithoutPayment(enrollment.id, reason=REASON_AMOUNT_TOO_SMALL)

		logger.info("Checkout created for enrollment %s (user %s, course %s)", enrollment.id, user.id, course.id)
		return CheckoutCreated(enrollment.id, url)

	async def _upsert_enrollment(
		self,
		user: User,
		course: Course,
	) -> tuple[Enrollment, bool]:
		"""
		Create or reset the (user, course) enrollment to pending in one transaction.

		Returns ``(enrollment, already_active)``; an active enrollment is left
		untouched. The amount is always re-snapshotted from the current price.
		"""
		stmt = (
			select(Enrollment)
			.where(Enrollment.user_id == user.id, Enrollment.course_id == course.id)
			.with_for_update()
		)
		try:
			enrollment = await self.db.scalar(stmt)
			if enrollment is not None and enrollment.is_active:
				await self.db.commit()
				return enrollment, True

			if enrollment is None:
				enrollment = Enrollment(
					user_id=user.id,
					course_id=course.id,
					amount=course.price,
					status=EnrollmentStatusEnum.PENDING.value,
				)
				self.db.add(enrollment)
			else:
				enrollment.amount = course.price
				enrollment.status = EnrollmentStatusEnum.PENDING.value
				enrollment.updated_at = _utcnow()
			await self.db.commit()
		except Exception:
			await self.db.rollback()
			raise
		return enrollment, False

	async def _set_status(self, enrollment: Enrollment, status: EnrollmentStatusEnum) -> None:
		enrollment.status = status.value
		enrollment.updated_at = _utcnow()
		await self.db.commit()
