"""Общие функции безопасности для всех сервисов."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt


# auto_error=False: отсутствие заголовка всегда дает 401, а не 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
	"""Текущий пользователь из JWT токена."""
	id: int
	token: str


def _unauthorized(detail: str) -> HTTPException:
	return HTTPException(
		status.HTTP_401_UNAUTHORIZED,
		detail=detail,
		headers={"WWW-Authenticate": "Bearer"},
	)


def decode_access_token(
	token: str,
	jwt_secret: str,
	jwt_algorithm: str = "HS256",
) -> CurrentUser:
	"""
	Декодирует и валидирует access токен.
	
	Raises:
		HTTPException: 401, если токен невалиден, истек или имеет неверный тип
	"""
	try:
		payload = jwt.decode(token, jwt_secret, algorithms=[jwt_algorithm])
	except JWTError:
		raise _unauthorized("Invalid token")

	if payload.get("type") != "access":
		raise _unauthorized("Invalid token type")

	exp = payload.get("exp")
	if exp and datetime.fromtimestamp(exp, tz=timezone.utc) < datetime.now(timezone.utc):
		raise _unauthorized("Token expired")

	sub = payload.get("sub")
	if not sub:
		raise _unauthorized("Invalid token payload")
	try:
		user_id = int(sub)
	except (TypeError, ValueError):
		raise _unauthorized("Invalid token payload")

	return CurrentUser(id=user_id, token=token)


def make_get_current_user(
	get_settings: Callable,
) -> Callable:
	"""
	Создает зависимость get_current_user для FastAPI.
	
	Args:
		get_settings: Функция для получения настроек (jwt_secret, jwt_algorithm)
	"""
	async def get_current_user(
		credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
	) -> CurrentUser:
		if credentials is None or not credentials.credentials:
			raise _unauthorized("Not authenticated")
		settings = get_settings()
		return decode_access_token(
			credentials.credentials,
			settings.jwt_secret,
			settings.jwt_algorithm,
		)
	
	return get_current_user


def make_get_current_user_id(
	get_current_user: Callable,
) -> Callable:
	"""Создает зависимость, возвращающую только ID пользователя."""
	async def get_current_user_id(
		current_user: CurrentUser = Depends(get_current_user),
	) -> int:
		return current_user.id
	
	return get_current_user_id
