"""Adapter exposing SQLAlchemy model instances as resolvable records.

Models opt into behaviour with class attributes:

- ``__updated_at_column__``: name of the last-modified column, or None.
  Defaults to ``updated_at`` when the model maps such a column.
- ``__etag_column__``: column holding a precomputed entity-tag. When set
  and populated it takes priority over generated tags.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from records_api.errors import NotFoundError
from records_api.logic.etag_generator import EtagGenerator
from records_api.models.etag import ETag
from records_api.models.record import EtagCapability, etag_capability_for

logger = logging.getLogger(__name__)

DEFAULT_UPDATED_AT_COLUMN = "updated_at"


def _column_keys(model: Type[Any]) -> list[str]:
    return [attr.key for attr in sa_inspect(model).column_attrs]


def _updated_at_column(model: Type[Any]) -> Optional[str]:
    if hasattr(model, "__updated_at_column__"):
        return getattr(model, "__updated_at_column__")
    if DEFAULT_UPDATED_AT_COLUMN in _column_keys(model):
        return DEFAULT_UPDATED_AT_COLUMN
    return None


def _precomputed_etag(instance: Any) -> Optional[ETag]:
    column = getattr(type(instance), "__etag_column__", None)
    if not column:
        return None
    return ETag.coerce(getattr(instance, column, None))


class OrmRecord:
    def __init__(self, instance: Any, generator: Optional[EtagGenerator] = None) -> None:
        self.instance = instance
        self.updated_at_field: Optional[str] = _updated_at_column(type(instance))
        self.etag_capability: EtagCapability = etag_capability_for(
            _precomputed_etag(instance),
            generator=generator,
            content=self.etag_content,
        )

    @property
    def identity(self) -> tuple:
        state = sa_inspect(self.instance)
        return tuple(state.identity or ())

    def get_field(self, name: str) -> Any:
        if name not in _column_keys(type(self.instance)):
            return None
        return getattr(self.instance, name, None)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self.instance, key, None) for key in _column_keys(type(self.instance))}

    def etag_content(self) -> tuple:
        """Content hashed for generated tags: table, primary key and updated-at."""
        updated_at = self.get_field(self.updated_at_field) if self.updated_at_field else None
        return (type(self.instance).__tablename__, *self.identity, updated_at)


def find_orm_record_or_fail(
    session: Session,
    model: Type[Any],
    key: Any,
    generator: Optional[EtagGenerator] = None,
) -> OrmRecord:
    """Load `model` by primary key or raise NotFoundError."""
    instance = session.get(model, key)
    if instance is None:
        logger.info("record.lookup.missing", extra={"model": model.__name__, "key": str(key)})
        raise NotFoundError(key)
    return OrmRecord(instance, generator=generator)


__all__ = ["OrmRecord", "find_orm_record_or_fail", "DEFAULT_UPDATED_AT_COLUMN"]
