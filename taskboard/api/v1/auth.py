"""
Authentication endpoints.
"""

from fastapi import APIRouter, status

from taskboard.api.deps import CurrentClaims, Identity
from taskboard.schemas.auth import (
    AuthUserResponse,
    SignInInput,
    SignUpInput,
    TokenClaimsResponse,
)
from taskboard.schemas.common import ErrorResponse

router = APIRouter()


@router.post(
    "/sign-up",
    response_model=AuthUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def sign_up(data: SignUpInput, identity: Identity):
    """
    Register a new user account.

    Returns the new user and a session token.
    """
    auth_user = await identity.sign_up(
        email=data.email,
        password=data.password,
        name=data.name,
        avatar=data.avatar,
    )
    return AuthUserResponse.model_validate(auth_user.model_dump())


@router.post(
    "/sign-in",
    response_model=AuthUserResponse,
    responses={
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def sign_in(data: SignInInput, identity: Identity):
    """
    Authenticate user and return a session token.
    """
    auth_user = await identity.sign_in(email=data.email, password=data.password)
    return AuthUserResponse.model_validate(auth_user.model_dump())


@router.get("/me", response_model=TokenClaimsResponse)
async def get_current_identity(claims: CurrentClaims):
    """Identity carried by the caller's token."""
    return TokenClaimsResponse(
        user_id=claims.sub,
        email=claims.email,
        expires_at=claims.exp,
    )
