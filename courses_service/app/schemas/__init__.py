from .course import CourseCreate, CourseOut
from .enrollment import EnrollmentOut
from .result import ActionResult

__all__ = [
	"ActionResult",
	"CourseCreate",
	"CourseOut",
	"EnrollmentOut",
]
