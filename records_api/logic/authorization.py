"""Access rules for records served over HTTP.

Public records are readable by anyone; private records only by their
owner, identified by the X-User-Id header.
"""

from __future__ import annotations

import logging
from typing import Optional

from records_api.models.record import ResolvableRecord

logger = logging.getLogger(__name__)

PUBLIC = "public"


def can_view(record: ResolvableRecord, user_id: Optional[str]) -> bool:
    visibility = record.get_field("visibility") or PUBLIC
    if visibility == PUBLIC:
        return True
    allowed = bool(user_id) and record.get_field("owner_id") == user_id
    logger.debug("record.authorize", extra={"visibility": visibility, "allowed": allowed})
    return allowed


__all__ = ["PUBLIC", "can_view"]
