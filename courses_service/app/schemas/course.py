from datetime import datetime

from pydantic import BaseModel, Field, StrictInt


SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CourseOut(BaseModel):
	id: int
	slug: str
	title: str
	description: str
	price: int
	user_id: int
	created_at: datetime

	model_config = {
		"from_attributes": True,
	}


class CourseCreate(BaseModel):
	title: str = Field(min_length=3, max_length=100)
	slug: str = Field(min_length=3, max_length=120, pattern=SLUG_PATTERN)
	description: str = Field(default="", max_length=2048)
	# smallest currency unit
	price: StrictInt = Field(ge=0)

	model_config = {
		"str_strip_whitespace": True,
		"extra": "forbid",
	}
