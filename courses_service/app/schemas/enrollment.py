from datetime import datetime

from pydantic import BaseModel


class EnrollmentOut(BaseModel):
	id: int
	course_id: int
	amount: int
	status: str
	created_at: datetime
	updated_at: datetime

	model_config = {
		"from_attributes": True,
	}
