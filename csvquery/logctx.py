"""Request-scoped logging: every record carries the id of the request that produced it."""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar

from starlette.requests import Request

REQUEST_ID_HEADER = "x-request-id"

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


async def bind_request_id(request: Request, call_next):
    """HTTP middleware: reuse the caller's request id or mint one, and echo it back."""
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_id_var.set(rid)
    try:
        resp = await call_next(request)
    finally:
        request_id_var.reset(token)

    resp.headers[REQUEST_ID_HEADER] = rid
    return resp


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s")
    )
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    # uvicorn installs its own handlers; route its records through ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True
