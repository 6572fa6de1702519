# middleware.py
"""
Middleware for security headers and request logging.
"""
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.logging import logger
from datetime import datetime

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        # No X-Frame-Options: report previews are embedded by the frontend
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"

        return response

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration."""

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = datetime.utcnow()

        client_ip = request.client.host if request.client else None

        response = await call_next(request)

        duration = (datetime.utcnow() - start_time).total_seconds()

        logger.info(
            f"Request: {request.method} {request.url.path} | "
            f"Status: {response.status_code} | "
            f"Duration: {duration:.3f}s | "
            f"IP: {client_ip}"
        )

        # Log slow requests
        if duration > 2.0:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} | "
                f"Duration: {duration:.3f}s | "
                f"IP: {client_ip}"
            )

        if response.status_code == 404:
            logger.warning(
                f"Not found: {request.method} {request.url.path} | "
                f"IP: {client_ip}"
            )

        return response
