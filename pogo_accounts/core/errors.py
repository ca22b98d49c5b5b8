"""Account error taxonomy and its HTTP status mapping."""

from __future__ import annotations


class AccountError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(AccountError):
    """Payload rejected by the sanitization layer."""


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required")
        self.field = field


class InvalidFormatError(ValidationError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidValueError(ValidationError):
    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.field = field


class MalformedIdError(AccountError):
    def __init__(self) -> None:
        super().__init__("Invalid account ID format")


class NotFoundError(AccountError):
    status_code = 404

    def __init__(self) -> None:
        super().__init__("Account not found")


class DuplicateEmailError(AccountError):
    status_code = 409

    def __init__(self) -> None:
        super().__init__("Account with this email already exists")


class StoreError(AccountError):
    """Driver failure; the detail stays in the server log."""

    status_code = 500

    @property
    def public_message(self) -> str:
        return "Internal server error"


__all__ = [
    "AccountError",
    "DuplicateEmailError",
    "InvalidFormatError",
    "InvalidValueError",
    "MalformedIdError",
    "MissingFieldError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
