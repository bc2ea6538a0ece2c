from __future__ import annotations

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class UserRoleEnum(str, PyEnum):
	USER = "user"
	ADMIN = "admin"


class User(Base):
	__tablename__ = "users"
	__mapper_args__ = {"eager_defaults": True}

	id: Mapped[int] = mapped_column(Integer, primary_key=True)
	email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
	name: Mapped[str | None] = mapped_column(String(255), nullable=True)
	role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRoleEnum.USER.value)
	stripe_customer_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

	@property
	def is_admin(self) -> bool:
		return self.role == UserRoleEnum.ADMIN.value
