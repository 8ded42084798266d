"""
Pydantic schemas for API request/response validation.
"""

from taskboard.schemas.auth import (
    SignUpInput,
    SignInInput,
    UserResponse,
    AuthUserResponse,
    TokenClaimsResponse,
)
from taskboard.schemas.project import (
    ProjectResponse,
    TodoResponse,
)
from taskboard.schemas.common import (
    ErrorResponse,
    FieldError,
    ValidationErrorResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "SignUpInput",
    "SignInInput",
    "UserResponse",
    "AuthUserResponse",
    "TokenClaimsResponse",
    # Project
    "ProjectResponse",
    "TodoResponse",
    # Common
    "ErrorResponse",
    "FieldError",
    "ValidationErrorResponse",
    "HealthResponse",
]
