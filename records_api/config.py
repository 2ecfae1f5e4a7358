"""Configuration loading for the records service.

Rules:
- Primary source: `records_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_RECORDS_CONFIG = Path("records_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class DatabaseConfig(BaseModel):
    dsn: str = Field(default=DEFAULT_DSN)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class EtagConfig(BaseModel):
    algorithm: str = Field(default="sha1")

    @field_validator("algorithm")
    @classmethod
    def algorithm_must_be_available(cls, v: str) -> str:
        name = str(v).strip().lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"etag.algorithm {v!r} is not a hashlib algorithm")
        return name


class RecordsConfig(BaseModel):
    # None means records declare no updated-at field
    updated_at_field: Optional[str] = Field(default="updated_at")

    @field_validator("updated_at_field")
    @classmethod
    def blank_means_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not str(v).strip():
            return None
        return str(v).strip()


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    etag: EtagConfig = Field(default_factory=EtagConfig)
    records: RecordsConfig = Field(default_factory=RecordsConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) records_config.json at project root
    4) Defaults
    """
    base = _read_json_file(ROOT_RECORDS_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = _env("DATABASE_URL") or _read_config_file("database.url") or _base("database.dsn") or DEFAULT_DSN
    algorithm = _env("ETAG_ALGORITHM") or _read_config_file("etag.algorithm") or _base("etag.algorithm", "sha1")

    # An explicitly empty override disables the updated-at field, so test for None
    updated_at_field = _env("RECORDS_UPDATED_AT_FIELD")
    if updated_at_field is None:
        updated_at_field = _read_config_file("records.updated_at_field")
    if updated_at_field is None:
        updated_at_field = _base("records.updated_at_field", "updated_at")

    try:
        return AppConfig(
            database=DatabaseConfig(dsn=dsn),
            etag=EtagConfig(algorithm=algorithm),
            records=RecordsConfig(updated_at_field=updated_at_field),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "EtagConfig",
    "RecordsConfig",
    "load_config",
]
