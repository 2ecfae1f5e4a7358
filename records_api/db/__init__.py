"""Database helpers for the records service.

Exposes engine and session construction only; ORM models live in
`records_api.models.record_row` and never leak into route handlers.
"""

from records_api.db.base import get_engine, get_sessionmaker, session_scope

__all__ = [
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
