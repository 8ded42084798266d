"""
Taskboard API

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from taskboard.config import get_settings
from taskboard.database import init_db, close_db
from taskboard.api.deps import get_request_id
from taskboard.api.v1 import router as api_v1_router
from taskboard.api.middleware.request_id import RequestIdMiddleware, REQUEST_ID_HEADER
from taskboard.kernel.identity.errors import IdentityError, PersistenceError
from taskboard.kernel.identity.password import get_password_hasher
from taskboard.schemas.common import (
    ErrorResponse,
    FieldError,
    HealthResponse,
    ValidationErrorResponse,
)
from taskboard.logging_config import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    # Pay for the timing-equalization hash before the first sign-in does
    get_password_hasher().dummy_hash

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Taskboard API

    Project management with a built-in identity service.

    ## Authentication

    - `POST /api/v1/auth/sign-up` registers a user and returns a session token
    - `POST /api/v1/auth/sign-in` exchanges email and password for a session token
    - Send the token as `Authorization: Bearer <token>` on protected routes
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
]

app.add_middleware(RequestIdMiddleware)

# Added last so it is outermost and every response gets CORS headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_headers(request: Request) -> dict:
    req_id = get_request_id(request)
    return {REQUEST_ID_HEADER: req_id} if req_id else {}


@app.exception_handler(IdentityError)
async def identity_exception_handler(request: Request, exc: IdentityError):
    """Map the identity error taxonomy onto HTTP responses."""
    if isinstance(exc, PersistenceError):
        logger.warning("Identity store failure: %s", exc.code)
    content = ErrorResponse(**exc.to_dict(), request_id=get_request_id(request))
    return JSONResponse(
        status_code=exc.status_code,
        content=content.model_dump(exclude_none=True),
        headers=_error_headers(request),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Attach the request ID to 401/404 etc. responses."""
    headers = _error_headers(request)
    if exc.headers:
        headers.update(exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            type=error["type"],
        )
        for error in exc.errors()
    ]
    content = ValidationErrorResponse(errors=errors, request_id=get_request_id(request))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=content.model_dump(exclude_none=True),
        headers=_error_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)
    req_id = get_request_id(request)
    if settings.debug:
        content = {
            "detail": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_error_headers(request),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(status="ok", version=settings.version)


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
