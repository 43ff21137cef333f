"""
API middleware module
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from caseflow.utils.logger import get_logger
from caseflow.utils.helpers import mask_personal_info

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware"""

    async def dispatch(self, request: Request, call_next):
        """Handle and log a request"""
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        user_id = request.headers.get("X-User-Id", "-")

        logger.info(
            f"Request received: {method} {path} - IP: {client_ip} - user: {user_id}"
        )

        # Request body, with NIC numbers, phones and emails masked
        if request.method in ["POST", "PUT", "PATCH"]:
            try:
                body = await request.body()
                body_str = body.decode("utf-8")
                masked_body = mask_personal_info(body_str)
                logger.debug(f"Request body: {masked_body}")
            except Exception as e:
                logger.warning(f"Request body logging failed: {str(e)}")

        try:
            response = await call_next(request)

            process_time = time.time() - start_time

            logger.info(
                f"Response sent: {method} {path} - "
                f"status: {response.status_code} - "
                f"took: {process_time:.3f}s"
            )

            response.headers["X-Process-Time"] = str(process_time)

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {method} {path} - "
                f"error: {str(e)} - "
                f"took: {process_time:.3f}s"
            )
            raise
