from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from common import CurrentUser, make_get_current_user, make_get_current_user_id

from .config import get_settings
from .database import get_db
from .models import User


get_current_user = make_get_current_user(get_settings)
get_current_user_id = make_get_current_user_id(get_current_user)


async def get_current_account(
	current_user: CurrentUser = Depends(get_current_user),
	db: AsyncSession = Depends(get_db),
) -> User:
	"""Resolve the token subject to a stored user; unknown users are unauthorized."""
	user = await db.get(User, current_user.id)
	if user is None:
		raise HTTPException(
			status.HTTP_401_UNAUTHORIZED,
			detail="User not found",
			headers={"WWW-Authenticate": "Bearer"},
		)
	return user


async def require_admin(account: User = Depends(get_current_account)) -> User:
	if not account.is_admin:
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Admin access required")
	return account


__all__ = [
	"get_current_user",
	"get_current_user_id",
	"get_current_account",
	"require_admin",
]
