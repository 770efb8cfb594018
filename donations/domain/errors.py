"""Domain error codes for the donations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    DONATION_NOT_FOUND = "DONATION_NOT_FOUND"
    NEED_NOT_FOUND = "NEED_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
    INVALID_FORM = "INVALID_FORM"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    BACKEND_ERROR = "BACKEND_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class DonationNotFoundError(DomainError):
    """Raised when a donation lookup yields no row."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DONATION_NOT_FOUND,
            message="Donation not found",
        )


class NeedNotFoundError(DomainError):
    """Raised when a need lookup yields no row."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NEED_NOT_FOUND,
            message="Need not found",
        )


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {entity} ID format",
        )


class IllegalTransitionError(DomainError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, entity: str, current: Enum, target: Enum) -> None:
        super().__init__(
            code=ErrorCode.ILLEGAL_TRANSITION,
            message=(
                f"Cannot change {entity} status from "
                f"{current.value.lower()} to {target.value.lower()}"
            ),
        )


class DeletionNotAllowedError(DomainError):
    """Raised when deleting a donation that already left PENDING."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ILLEGAL_TRANSITION,
            message="Can only delete pending donations",
        )


class InvalidCategoryError(DomainError):
    """Raised when a category name does not resolve to a backend id."""

    def __init__(self, name: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CATEGORY,
            message=f"Invalid category: {name}",
        )
