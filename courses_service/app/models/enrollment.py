from __future__ import annotations

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class EnrollmentStatusEnum(str, PyEnum):
	PENDING = "pending"
	ACTIVE = "active"
	CANCELLED = "cancelled"


class Enrollment(Base):
	__tablename__ = "enrollments"
	__mapper_args__ = {"eager_defaults": True}
	__table_args__ = (
		UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
	)

	id: Mapped[int] = mapped_column(Integer, primary_key=True)
	user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
	# price snapshot taken at the latest enrollment attempt
	amount: Mapped[int] = mapped_column(Integer, nullable=False)
	status: Mapped[str] = mapped_column(String(16), nullable=False, default=EnrollmentStatusEnum.PENDING.value)
	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
	)

	@property
	def is_active(self) -> bool:
		return self.status == EnrollmentStatusEnum.ACTIVE.value
