"""In-memory record state (test/dev only).

Single source of truth for ephemeral records used by routes and the
in-memory repository; injected explicitly so tests can swap or reset it.
"""

from __future__ import annotations

from typing import Dict

# record_id -> stored record dict
RECORDS_STORE: Dict[str, Dict] = {}

__all__ = ["RECORDS_STORE"]
