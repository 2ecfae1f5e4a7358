"""Problem+JSON utilities and global exception handlers.

Defines the RFC 7807 media type and handler callables producing
application/problem+json responses.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from records_api.errors import RecordsError
from records_api.http.error_mapping import mapping_for

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(title: str, status: int, detail: str = "", code: str | None = None) -> JSONResponse:
    problem: dict[str, object] = {"title": title, "status": status, "detail": detail}
    if code:
        problem["code"] = code
    return JSONResponse(problem, status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_records_error(request: Request, exc: RecordsError) -> JSONResponse:  # noqa: D401
    entry = mapping_for(exc)
    status = int(entry["status"])
    if status >= 500:
        logger.error("error_handler.handle", extra={"code": entry["code"]}, exc_info=exc)
        # Server-side failures do not leak internal messages
        detail = entry["title"]
    else:
        logger.info("error_handler.handle", extra={"code": entry["code"]})
        detail = exc.message or entry["title"]
    return problem_response(str(entry["title"]), status, str(detail), str(entry["code"]))


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        return JSONResponse(exc.detail, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=exc.headers)
    return JSONResponse(
        {"title": "Error", "status": status, "detail": str(exc.detail or "")},
        status_code=status,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=exc.headers,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "errors": [
            {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
            for err in exc.errors()
        ],
    }
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error", exc_info=exc)
    return problem_response("Internal Server Error", 500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_records_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
