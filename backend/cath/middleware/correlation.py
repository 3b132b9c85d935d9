"""
Correlation ID middleware
=========================
Tags every request with an X-Correlation-ID so that the log lines for one
HTTP call (page handler, publication processing, notification sends) can be
tied together. The id is taken from the incoming header when a proxy has
already set one.
"""
from __future__ import annotations

import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        logger.info(
            "request",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "locale": request.query_params.get("lng"),
            },
        )

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response
