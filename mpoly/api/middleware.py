"""Middleware for request processing and observability."""

import asyncio
import re
import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DELAY_MS = 10_000


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and log its outcome.

    An incoming ``X-Correlation-Id`` header is reused, otherwise a UUID4 is
    generated. The id is stored on ``request.state``, bound into the structlog
    context and echoed on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get("X-Correlation-Id") or str(uuid4())
        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Correlation-Id"] = correlation_id

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_delay(raw: str | None, max_delay_ms: int) -> int:
    """Turn a ``delay`` query value into milliseconds to wait.

    The leading integer is used, so ``1.5`` means 1 and ``250ms`` means 250.
    Values without one, and non-positive values, mean no delay; larger
    values are clamped to ``max_delay_ms``.
    """
    if raw is None:
        return 0
    match = _LEADING_INT.match(raw)
    if match is None:
        return 0
    requested = int(match.group(1))
    if requested <= 0:
        return 0
    return min(requested, max_delay_ms)


class DelayMiddleware(BaseHTTPMiddleware):
    """Inject client-requested latency via ``?delay=<ms>``.

    The wait happens before any routing or authentication and only suspends
    the requesting task.
    """

    def __init__(self, app: ASGIApp, max_delay_ms: int = DEFAULT_MAX_DELAY_MS):
        super().__init__(app)
        self.max_delay_ms = max_delay_ms

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        delay_ms = parse_delay(request.query_params.get("delay"), self.max_delay_ms)
        if delay_ms:
            logger.debug("artificial_delay", delay_ms=delay_ms)
            await asyncio.sleep(delay_ms / 1000)
        return await call_next(request)
