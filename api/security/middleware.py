# api/security/middleware.py

import time
import logging
from typing import Iterable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

from config import AppConfig
from api.security.cors_policy import (
    DEFAULT_METHODS,
    PIXEL_METHODS,
    build_cors_headers,
    parse_allow_list,
)

logger = logging.getLogger(__name__)


class RelayCORSMiddleware(BaseHTTPMiddleware):
    """
    Middleware that applies the relay's CORS decision to every response.

    OPTIONS requests are answered here with 204 and never reach a route,
    so a preflight can never trigger a downstream call.
    """

    def __init__(self, app, pixel_paths: Iterable[str] = ()):
        super().__init__(app)
        self.pixel_paths = {path.rstrip("/") or "/" for path in pixel_paths}

    async def dispatch(self, request: Request, call_next):
        """Process request through the CORS policy"""
        start_time = time.time()

        origin = request.headers.get("origin", "")
        allow_list = parse_allow_list(AppConfig.CORS_ORIGIN)
        headers = build_cors_headers(origin, allow_list, self._methods_for(request))

        if request.method == "OPTIONS":
            logger.debug(f"✈️ Preflight for {request.url.path} from origin {origin or '-'}")
            return StarletteResponse(status_code=204, headers=headers)

        response = await call_next(request)

        for name, value in headers.items():
            response.headers[name] = value

        # Log processing time for monitoring
        processing_time = time.time() - start_time
        if processing_time > 5.0:
            logger.warning(f"🐌 Slow request from origin {origin or '-'}: {processing_time:.2f}s for {request.url.path}")

        return response

    def _methods_for(self, request: Request) -> Iterable[str]:
        path = request.url.path.rstrip("/") or "/"
        return PIXEL_METHODS if path in self.pixel_paths else DEFAULT_METHODS
