"""Problem+JSON utilities and global exception handlers.

Defines the RFC 7807 media type and handler callables that produce
application/problem+json responses for HTTP errors, request validation
errors and anything unexpected.
"""

from __future__ import annotations

from typing import Any
import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem(status: int, title: str, detail: str | None = None, **extra: Any) -> dict:
    body: dict[str, Any] = {"title": title, "status": int(status)}
    if detail:
        body["detail"] = detail
    body.update(extra)
    return body


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)
    if isinstance(detail, dict):
        body = {"status": status, **detail}
        body.setdefault("title", "Error")
    else:
        body = problem(status, "Error", str(detail or ""))
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        body,
        status_code=status,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=dict(headers) if isinstance(headers, dict) else None,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    body = problem(
        422,
        "Invalid Request",
        "Request validation failed",
        errors=[
            {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "")), "type": str(e.get("type", ""))}
            for e in exc.errors()
        ],
    )
    return JSONResponse(body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(problem(500, "Internal Server Error"), status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
