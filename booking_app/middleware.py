import time
from uuid import uuid4
from fastapi import Request
from booking_app.logger import get_logger

logger = get_logger(__name__)


async def add_request_id_and_process_time(request: Request, call_next):
    """Tag every response with a request id and its processing time"""
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    start_time = time.perf_counter()

    response = await call_next(request)

    process_time = time.perf_counter() - start_time
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({process_time:.4f}s) [request_id={request_id}]"
    )
    return response
