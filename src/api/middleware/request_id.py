"""Request ID tracking middleware."""

import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request and echo it in the response.

    A client-supplied ID is reused when it is short and printable;
    anything else is replaced with a fresh UUID.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = _accept(request.headers.get(REQUEST_ID_HEADER)) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response


def _accept(candidate: str | None) -> str | None:
    if not candidate:
        return None
    if len(candidate) > MAX_REQUEST_ID_LENGTH or not candidate.isprintable():
        return None
    return candidate
