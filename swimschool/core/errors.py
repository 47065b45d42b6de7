"""Domain error codes shared by the registration and payment modules."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    PAYMENT_INITIATION_FAILED = "PAYMENT_INITIATION_FAILED"
    PAYMENT_VERIFICATION_FAILED = "PAYMENT_VERIFICATION_FAILED"
    RACE_LOST = "RACE_LOST"
    OUT_OF_STOCK = "OUT_OF_STOCK"


HTTP_STATUS_BY_CODE = {
    ErrorCode.CLASS_NOT_FOUND: 404,
    ErrorCode.REGISTRATION_NOT_FOUND: 404,
    ErrorCode.PRODUCT_NOT_FOUND: 404,
    ErrorCode.CAPACITY_EXCEEDED: 400,
    ErrorCode.DUPLICATE_REGISTRATION: 400,
    ErrorCode.PAYMENT_INITIATION_FAILED: 400,
    ErrorCode.PAYMENT_VERIFICATION_FAILED: 502,
    ErrorCode.RACE_LOST: 400,
    ErrorCode.OUT_OF_STOCK: 400,
}


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE.get(self.code, 400)


class ClassNotFoundError(DomainError):
    """Raised when a class session does not exist or is inactive."""

    def __init__(self, class_id: str) -> None:
        super().__init__(code=ErrorCode.CLASS_NOT_FOUND, message="Class not found")
        self.class_id = class_id


class RegistrationNotFoundError(DomainError):
    """Raised when no registration matches a payment reference."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.reference = reference


class ProductNotFoundError(DomainError):
    def __init__(self, product_id: str) -> None:
        super().__init__(code=ErrorCode.PRODUCT_NOT_FOUND, message="Product not found")
        self.product_id = product_id


class OutOfStockError(DomainError):
    def __init__(self, product_id: str) -> None:
        super().__init__(code=ErrorCode.OUT_OF_STOCK, message="Product is out of stock")
        self.product_id = product_id


class CapacityExceededError(DomainError):
    """Raised when a class has no free seats at check time."""

    def __init__(self, class_id: str) -> None:
        super().__init__(code=ErrorCode.CAPACITY_EXCEEDED, message="Class is full")
        self.class_id = class_id


class DuplicateRegistrationError(DomainError):
    """Raised when the student already holds a registration for the class."""

    def __init__(self, student_id: str, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REGISTRATION,
            message="Already registered for this class",
        )
        self.student_id = student_id
        self.class_id = class_id


class PaymentInitiationFailedError(DomainError):
    """Raised when the gateway rejects or fails a payment request."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_INITIATION_FAILED,
            message="Payment initiation failed",
        )


class PaymentVerificationFailedError(DomainError):
    """Raised when the gateway cannot be reached to verify a payment.

    The payment state is unknown, so callers must not resolve it either way.
    """

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_VERIFICATION_FAILED,
            message="Payment verification failed",
        )
        self.reference = reference


class RaceLostError(DomainError):
    """Raised when the class filled up between the seat check and the commit."""

    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.RACE_LOST,
            message="Class became full before the registration was confirmed",
        )
        self.class_id = class_id

