"""
Logging Middleware
Logs every request with the acting user, status and duration
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from src.config.settings import settings
from src.utils.logger import setup_logger

logger = setup_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses"""

    async def dispatch(self, request: Request, call_next):
        """Process request and log details"""
        start_time = time.time()
        actor = request.headers.get(settings.USER_ID_HEADER, "anonymous")
        route = f"{request.method} {request.url.path}"

        logger.info(f"Request: {route} | User: {actor}")

        try:
            response = await call_next(request)
        except Exception:
            # logger.exception copes with braces in exception messages
            logger.exception(f"Error: {route} | User: {actor} | Duration: {time.time() - start_time:.3f}s")
            raise

        duration = time.time() - start_time
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"Response: {route} | User: {actor} | Status: {response.status_code} | Duration: {duration:.3f}s")
        return response
