from .customers import get_or_create_customer_id
from .enrollments import (
	AlreadyEnrolled,
	CheckoutCreated,
	EnrolledWithoutPayment,
	EnrollmentOutcome,
	EnrollmentService,
)
from .payments import (
	AMOUNT_TOO_SMALL,
	PaymentGateway,
	PaymentProviderError,
	PriceInfo,
	ProductInfo,
	StripeGateway,
	log_payment_error,
)
from .plans import ensure_price_id_for_course

__all__ = [
	"AMOUNT_TOO_SMALL",
	"AlreadyEnrolled",
	"CheckoutCreated",
	"EnrolledWithoutPayment",
	"EnrollmentOutcome",
	"EnrollmentService",
	"PaymentGateway",
	"PaymentProviderError",
	"PriceInfo",
	"ProductInfo",
	"StripeGateway",
	"ensure_price_id_for_course",
	"get_or_create_customer_id",
	"log_payment_error",
]
