"""
QuickNotes Backend: Request Timeout Middleware
================================================

What:  Bounds the wall-clock time of each request.
How:   Runs the rest of the stack under asyncio.wait_for. When the deadline
       passes, the downstream task (route handler and any storage call it
       is awaiting) is cancelled and the client receives 504.
"""

import asyncio
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from quicknotes.exceptions import RequestTimeoutError
from quicknotes.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 for requests that take longer than `timeout_seconds`."""

    def __init__(self, app, timeout_seconds: float = 30.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            exc = RequestTimeoutError(self.timeout_seconds)
            logger.warning(
                "[%s] %s %s timed out after %gs",
                request_id_var.get(""),
                request.method,
                request.url.path,
                self.timeout_seconds,
            )
            return PlainTextResponse(exc.message, status_code=504)
