"""
Identity Core - Sign-up, sign-in and session tokens.
"""

from taskboard.kernel.identity.errors import (
    IdentityError,
    ValidationError,
    AuthenticationError,
    PersistenceError,
    DuplicateEmailError,
)
from taskboard.kernel.identity.password import PasswordHasher, get_password_hasher
from taskboard.kernel.identity.tokens import (
    JWTManager,
    TokenIssuer,
    AccessTokenPayload,
    get_jwt_manager,
)
from taskboard.kernel.identity.records import AuthUser, NewUser, UserIdentity, UserRecord
from taskboard.kernel.identity.store import UserStore, SqlAlchemyUserStore
from taskboard.kernel.identity.identity_service import IdentityService

__all__ = [
    "IdentityError",
    "ValidationError",
    "AuthenticationError",
    "PersistenceError",
    "DuplicateEmailError",
    "PasswordHasher",
    "get_password_hasher",
    "JWTManager",
    "TokenIssuer",
    "AccessTokenPayload",
    "get_jwt_manager",
    "AuthUser",
    "NewUser",
    "UserIdentity",
    "UserRecord",
    "UserStore",
    "SqlAlchemyUserStore",
    "IdentityService",
]
