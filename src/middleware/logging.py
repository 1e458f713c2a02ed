"""Request logging middleware with request-id propagation."""

import time
import uuid

from fastapi import Request, Response

from src.utils.logger import get_logger, set_request_id

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next) -> Response:
    """Assign a request id, log start/finish, and echo the id back."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
    set_request_id(request_id)
    start = time.perf_counter()

    log.info("request started", method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        log.exception(
            "request crashed",
            method=request.method,
            path=request.url.path,
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        raise

    log.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    set_request_id(None)
    return response
