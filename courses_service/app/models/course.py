from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class Course(Base):
	__tablename__ = "courses"
	__mapper_args__ = {"eager_defaults": True}
	__table_args__ = (
		CheckConstraint("price >= 0", name="ck_courses_price_non_negative"),
	)

	id: Mapped[int] = mapped_column(Integer, primary_key=True)
	slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
	title: Mapped[str] = mapped_column(String(255), nullable=False)
	description: Mapped[str] = mapped_column(String(2048), default="", nullable=False)
	# smallest currency unit (HUF: forint, USD: cent)
	price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
	user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
	stripe_price_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
	)
