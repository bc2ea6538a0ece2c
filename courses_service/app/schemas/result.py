from typing import Literal

from pydantic import BaseModel


class ActionResult(BaseModel):
	"""Uniform handler response: ``{"status": "success"|"error", "message": ...}``."""

	status: Literal["success", "error"]
	message: str

	@classmethod
	def success(cls, message: str) -> "ActionResult":
		return cls(status="success", message=message)

	@classmethod
	def error(cls, message: str) -> "ActionResult":
		return cls(status="error", message=message)
