"""
Identity error taxonomy.

Every failure of sign-up or sign-in is one of:

    IdentityError (base)
    ├── ValidationError        missing or malformed input
    ├── AuthenticationError    credential mismatch, always the same message
    └── PersistenceError       store unreachable, timed out or rejected the write
        └── DuplicateEmailError

Each carries a machine-readable code and the HTTP status the API layer
answers with.
"""

from typing import Any, Optional

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


class IdentityError(Exception):
    """Base exception for identity failures."""

    code: str = "IDENTITY_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready error body."""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(IdentityError):
    """Raised when a sign-up or sign-in payload is missing or malformed."""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message, details={"field": field})
        self.field = field


class AuthenticationError(IdentityError):
    """
    Raised when credentials do not match.

    The message is fixed so that an unknown email and a wrong password are
    indistinguishable to the caller.
    """

    code = "INVALID_CREDENTIALS"
    status_code = 401

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class PersistenceError(IdentityError):
    """Raised when the user store is unreachable or rejects an operation."""

    code = "PERSISTENCE_ERROR"
    status_code = 503


class DuplicateEmailError(PersistenceError):
    """Raised by the store when the email is already registered."""

    code = "EMAIL_TAKEN"
    status_code = 409

    def __init__(self, email: str):
        super().__init__("Email already registered", details={"email": email})
