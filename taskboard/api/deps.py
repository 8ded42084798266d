"""
FastAPI dependencies for the identity service and bearer authentication.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard.database import async_session_maker
from taskboard.kernel.identity.identity_service import IdentityService
from taskboard.kernel.identity.password import get_password_hasher
from taskboard.kernel.identity.store import SqlAlchemyUserStore, UserStore
from taskboard.kernel.identity.tokens import AccessTokenPayload, JWTManager, get_jwt_manager


# Security scheme
security = HTTPBearer(auto_error=False)


def get_user_store() -> UserStore:
    """The user store shared by every request."""
    return SqlAlchemyUserStore(async_session_maker)


def get_token_manager() -> JWTManager:
    """Token signer/verifier."""
    return get_jwt_manager()


def get_identity_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[JWTManager, Depends(get_token_manager)],
) -> IdentityService:
    """Identity service wired to the configured store and token manager."""
    return IdentityService(
        store=store,
        hasher=get_password_hasher(),
        token_issuer=tokens,
    )


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_claims(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    tokens: Annotated[JWTManager, Depends(get_token_manager)],
) -> AccessTokenPayload:
    """
    Verify the bearer token and return its claims, or raise 401.

    Only the signature and expiry are checked; the user store is not consulted.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = tokens.verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


CurrentClaims = Annotated[AccessTokenPayload, Depends(get_current_claims)]


def get_request_id(request: Request) -> Optional[str]:
    """Get request correlation ID (set by RequestIdMiddleware)."""
    return getattr(request.state, "request_id", None)
