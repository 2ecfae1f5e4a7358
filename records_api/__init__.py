"""Records service package.

Resolves single records for request handlers (lookup, authorization,
ETag and Last-Modified metadata) and exposes them through a small FastAPI
application. Business logic lives in `records_api/logic/`, routes in
`records_api/routes/`.
"""

from __future__ import annotations

from records_api.main import create_app

__all__ = ["create_app"]
