from .user import User, UserRoleEnum
from .course import Course
from .enrollment import Enrollment, EnrollmentStatusEnum

__all__ = [
	"User",
	"UserRoleEnum",
	"Course",
	"Enrollment",
	"EnrollmentStatusEnum",
]
