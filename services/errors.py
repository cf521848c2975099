"""Domain errors raised by the services and mapped to HTTP responses in main.py."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    POLICY_VIOLATION = "POLICY_VIOLATION"


class DomainError(Exception):
    """Base domain error with code, HTTP status and user-safe message."""

    code = ErrorCode.VALIDATION_FAILED
    status_code = 400

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"message": self.message, "code": self.code.value}
        body.update(self.extra)
        return body

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input is malformed or breaks a data invariant."""

    code = ErrorCode.VALIDATION_FAILED
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        if field:
            super().__init__(message, field=field)
        else:
            super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404


class AuthorizationError(DomainError):
    """Raised when the entity exists but the caller does not own it."""

    code = ErrorCode.NOT_AUTHORIZED
    status_code = 403


class AuthenticationError(DomainError):
    """Raised when the request carries no valid identity."""

    code = ErrorCode.NOT_AUTHENTICATED
    status_code = 401


class PolicyViolation(DomainError):
    """Raised when a business rule rejects an otherwise valid request."""

    code = ErrorCode.POLICY_VIOLATION
    status_code = 400
