"""
Authentication Middleware
Attaches the upstream-authenticated user id to the request
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from src.config.settings import settings
from src.utils.logger import setup_logger

logger = setup_logger()


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware copying the forwarded identity header onto request state"""

    async def dispatch(self, request: Request, call_next):
        """
        Process request and record the forwarded user id if present

        Args:
            request: FastAPI request
            call_next: Next middleware/route handler

        Returns:
            Response from next handler
        """
        public_paths = [
            "/health",
            "/",
            "/api/docs",
            "/api/redoc",
            "/api/openapi.json"
        ]

        if request.url.path in public_paths:
            return await call_next(request)

        user_id = request.headers.get(settings.USER_ID_HEADER)
        if user_id:
            request.state.user_id = user_id.strip()
        else:
            logger.debug(f"No forwarded identity for path: {request.url.path}")

        return await call_next(request)
