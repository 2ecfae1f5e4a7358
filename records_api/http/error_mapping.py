"""Central mapping of record errors to problem+json codes and statuses.

Single source of truth for the exception handlers in
`records_api.http.problem`; route modules must not hardcode these values.
"""

from __future__ import annotations

from records_api.errors import (
    AuthorizationError,
    EtagGenerationError,
    NotFoundError,
    RecordNotResolvedError,
    RecordsError,
)

RECORD_ERROR_MAP = {
    NotFoundError: {"title": "Not Found", "code": "RUN_RECORD_NOT_FOUND", "status": 404},
    AuthorizationError: {"title": "Forbidden", "code": "RUN_RECORD_FORBIDDEN", "status": 403},
    EtagGenerationError: {"title": "Internal Server Error", "code": "RUN_ETAG_GENERATION_FAILED", "status": 500},
    RecordNotResolvedError: {"title": "Internal Server Error", "code": "RUN_RECORD_NOT_RESOLVED", "status": 500},
}

_FALLBACK = {"title": "Internal Server Error", "code": "RUN_RECORDS_ERROR", "status": 500}


def mapping_for(exc: RecordsError) -> dict:
    """Return the mapping entry for `exc`, honouring subclasses."""
    for cls in type(exc).__mro__:
        if cls in RECORD_ERROR_MAP:
            return RECORD_ERROR_MAP[cls]
    return _FALLBACK


__all__ = ["RECORD_ERROR_MAP", "mapping_for"]
