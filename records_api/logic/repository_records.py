"""In-memory repository for records (test/dev only).

Create and update over an injectable store. Stored rows are plain dicts; `load_record`
turns one into a `Record` carrying a generated ETag capability.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from records_api.errors import NotFoundError
from records_api.logic.etag_generator import EtagGenerator
from records_api.models.etag import ETag
from records_api.models.record import Record, etag_capability_for


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_record(
    store: Dict[str, Dict],
    *,
    title: str,
    owner_id: Optional[str] = None,
    visibility: str = "public",
    etag: Optional[str] = None,
) -> Dict:
    record_id = str(uuid.uuid4())
    row = {
        "record_id": record_id,
        "title": str(title),
        "owner_id": owner_id,
        "visibility": visibility,
        "version": 1,
        "updated_at": _now(),
    }
    if etag:
        row["etag"] = etag
    store[record_id] = row
    return row


def update_title(record_id: str, title: str, store: Dict[str, Dict]) -> Optional[Dict]:
    row = store.get(record_id)
    if not row:
        return None
    row["title"] = str(title)
    row["version"] = int(row.get("version", 1)) + 1
    row["updated_at"] = _now()
    return row


def load_record(
    record_id: str,
    store: Dict[str, Dict],
    generator: Optional[EtagGenerator] = None,
    updated_at_field: Optional[str] = "updated_at",
) -> Record:
    """Return the stored record as a `Record` or raise NotFoundError.

    A stored ``etag`` is used as a precomputed tag; otherwise tags are
    generated from id, version and updated-at.
    """
    row = store.get(record_id)
    if row is None:
        raise NotFoundError(record_id)
    fields = {k: v for k, v in row.items() if k not in ("record_id", "etag")}
    precomputed = ETag.coerce(row.get("etag"))
    capability = etag_capability_for(
        precomputed,
        generator=generator,
        content=lambda: (row["record_id"], row.get("version"), row.get(updated_at_field) if updated_at_field else None),
    )
    return Record(key=record_id, fields=fields, updated_at_field=updated_at_field, etag_capability=capability)


__all__ = [
    "create_record",
    "update_title",
    "load_record",
]
