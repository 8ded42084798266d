"""
Identity service: sign-up and sign-in.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from email_validator import EmailNotValidError, validate_email

from taskboard.config import get_settings
from taskboard.kernel.identity.errors import (
    AuthenticationError,
    PersistenceError,
    ValidationError,
)
from taskboard.kernel.identity.password import PasswordHasher, get_password_hasher
from taskboard.kernel.identity.records import AuthUser, NewUser, UserIdentity
from taskboard.kernel.identity.store import UserStore
from taskboard.kernel.identity.tokens import TokenIssuer, get_jwt_manager
from taskboard.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _require(field: str, value: Optional[str]) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{field} is required")
    return value


def _normalize_email(email: Optional[str]) -> str:
    email = _require("email", email).strip()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("email", f"email is not valid: {e}") from e
    return email.lower()


class IdentityService:
    """
    Service for user identity operations.

    Holds no per-request state; one instance can serve concurrent requests.
    Every collaborator is injected: the user store, the password hasher and
    the token issuer.
    """

    def __init__(
        self,
        store: UserStore,
        hasher: Optional[PasswordHasher] = None,
        token_issuer: Optional[TokenIssuer] = None,
        store_timeout: Optional[float] = None,
    ):
        self.store = store
        self.hasher = hasher or get_password_hasher()
        # Unknown-email sign-ins verify against this; build it before any request does
        self.hasher.dummy_hash
        self.token_issuer = token_issuer or get_jwt_manager()
        self.store_timeout = (
            store_timeout if store_timeout is not None
            else get_settings().store_timeout_seconds
        )

    async def _store_call(self, operation: str, call: Awaitable[T]) -> T:
        """Run one store round trip, bounded by ``store_timeout``."""
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                "User store timed out",
                extra={"operation": operation, "timeout_s": self.store_timeout},
            )
            raise PersistenceError(
                "User store timed out",
                details={"operation": operation},
            ) from e

    def _authenticated(self, user: UserIdentity) -> AuthUser:
        token = self.token_issuer.issue_token(user.id, user.email)
        return AuthUser(user=user, token=token)

    async def sign_up(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str],
        avatar: Optional[str] = None,
    ) -> AuthUser:
        """
        Register a new user and sign them in.

        Args:
            email: User's email address
            password: Plain text password, discarded once hashed
            name: Display name
            avatar: Optional avatar URL

        Returns:
            AuthUser with the new identity and a fresh token

        Raises:
            ValidationError: If a required field is missing or the email is malformed
            DuplicateEmailError: If the store already holds this email
            PersistenceError: If the store is unreachable or times out
        """
        email = _normalize_email(email)
        password = _require("password", password)
        name = _require("name", name).strip()

        password_hash = await asyncio.to_thread(self.hasher.hash, password)

        record = NewUser(
            email=email,
            name=name,
            password_hash=password_hash,
            avatar=avatar,
        )
        user_id = await self._store_call("insert_one", self.store.insert_one(record))

        logger.info("User signed up", extra={"user_id": user_id})

        return self._authenticated(
            UserIdentity(id=user_id, name=name, email=email, avatar=avatar)
        )

    async def sign_in(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> AuthUser:
        """
        Authenticate a user by email and password.

        An unknown email and a wrong password raise the same error, and both
        paths run one bcrypt verification.

        Raises:
            ValidationError: If email or password is missing
            AuthenticationError: If the credentials do not match
            PersistenceError: If the store is unreachable or times out
        """
        email = _require("email", email).strip().lower()
        password = _require("password", password)

        user = await self._store_call("find_one", self.store.find_one(email))

        if user is None:
            await asyncio.to_thread(self.hasher.verify, password, self.hasher.dummy_hash)
            logger.info("Sign-in rejected")
            raise AuthenticationError()

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            logger.info("Sign-in rejected")
            raise AuthenticationError()

        if self.hasher.needs_rehash(user.password_hash):
            # No store update operation yet; surface the stale work factor only
            logger.info("Stored hash uses outdated work factor", extra={"user_id": user.id})

        logger.info("User signed in", extra={"user_id": user.id})

        return self._authenticated(
            UserIdentity(id=user.id, name=user.name, email=user.email, avatar=user.avatar)
        )
