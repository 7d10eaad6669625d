import time
import uuid
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

HDR_REQUEST_ID = "X-Request-Id"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(HDR_REQUEST_ID) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        client = request.client.host if request.client else "unknown"
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} - {client} - "
            f"Status: {response.status_code} - Time: {process_time:.4f}s",
        )

        response.headers[HDR_REQUEST_ID] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
