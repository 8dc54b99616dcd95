"""
API middleware for yamcp-dashboard.

Provides security headers, request logging, and a last-resort error handler.
"""

import time
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from yamcp_dashboard.api.models import ErrorResponse
from yamcp_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class SecurityMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response."""
    
    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers to response."""
        response = await call_next(request)
        for header, value in self.HEADERS.items():
            response.headers.setdefault(header, value)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request/response logging middleware."""
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details."""
        start_time = time.time()
        
        logger.debug("API request started", extra={
            "method": request.method,
            "path": request.url.path,
            "client_ip": getattr(request.client, "host", "unknown"),
        })
        
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error("API request failed", extra={
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(duration_ms, 2),
                "error": str(e),
                "error_type": type(e).__name__
            })
            raise
        
        duration_ms = (time.time() - start_time) * 1000
        logger.info("API request completed", extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2)
        })
        
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns uncaught exceptions into a generic JSON 500 response."""
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle uncaught exceptions."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.error("Unhandled API error", extra={
                "method": request.method,
                "path": request.url.path,
                "error": str(e),
                "error_type": type(e).__name__
            }, exc_info=True)
            
            body = ErrorResponse(
                message="Internal server error",
                error_code="INTERNAL_ERROR",
            )
            return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
