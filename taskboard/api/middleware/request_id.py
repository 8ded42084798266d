"""
Per-request correlation ids for the Taskboard API.

Every sign-up, sign-in and token check logs through the identity core with
``request_id`` attached by the logging filter, so one failed sign-in can be
traced from the access log to the rejection line without logging the email
or password. The id is echoed in the ``X-Request-ID`` response header and in
every error body.
"""

import re
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from taskboard.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Client ids end up verbatim in log lines
_CLIENT_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# bcrypt makes auth requests slow; only flag outliers past this
SLOW_REQUEST_MS = 2000


def resolve_request_id(incoming: Optional[str]) -> str:
    """Keep a well-formed client id, otherwise mint a UUID."""
    if incoming and _CLIENT_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Bind a request id to the context for the lifetime of one API call.

    Auth requests spend most of their time in bcrypt, so the slow-request
    warning only fires past ``SLOW_REQUEST_MS``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id

            if duration_ms > SLOW_REQUEST_MS:
                logger.warning(
                    "Slow request",
                    extra={
                        "path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    },
                )

            return response
        finally:
            request_id_var.reset(token)
