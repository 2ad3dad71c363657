"""HTTP middleware: request-scoped logging context and CORS."""

import time
from typing import Sequence

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from infrastructure.logging import bind_request_context, get_module_logger

logger = get_module_logger()

CORRELATION_HEADER = "X-Correlation-ID"


async def request_context_middleware(request: Request, call_next):
    """Bind correlation id, path and method to every log entry of the request."""
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response


class PathExemptCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves some path prefixes to their own handlers.

    The public notification endpoints answer preflight requests themselves
    (204, ``Allow-Origin: *``) and must not be intercepted.
    """

    def __init__(
        self,
        app: ASGIApp,
        exempt_prefixes: Sequence[str] = (),
        **kwargs,
    ) -> None:
        super().__init__(app, **kwargs)
        self.exempt_prefixes = tuple(exempt_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.exempt_prefixes):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
