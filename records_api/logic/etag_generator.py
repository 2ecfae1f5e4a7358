"""ETag generation from record content.

Hashes a deterministic rendering of the content with a hashlib algorithm
(sha1 unless configured otherwise) and wraps the digest in an `ETag`.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from records_api.config import AppConfig
from records_api.errors import EtagGenerationError
from records_api.models.etag import ETag

logger = logging.getLogger(__name__)


def _render(content: Any) -> bytes:
    """Return the bytes hashed for `content`.

    Mappings are rendered key-sorted and sequences in order, members joined
    by '|', so equal content always yields the same digest.
    """
    if content is None:
        raise EtagGenerationError("cannot generate an ETag for empty content")
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, datetime):
        return content.isoformat().encode("utf-8")
    if isinstance(content, Mapping):
        return b"|".join(
            str(key).encode("utf-8") + b"=" + (b"" if value is None else _render(value))
            for key, value in sorted(content.items(), key=lambda item: str(item[0]))
        )
    if isinstance(content, (list, tuple)):
        return b"|".join(_render(v) if v is not None else b"" for v in content)
    return str(content).encode("utf-8")


class EtagGenerator:
    def __init__(self, algorithm: str = "sha1") -> None:
        self.algorithm = str(algorithm).lower()

    @classmethod
    def from_config(cls, config: AppConfig) -> "EtagGenerator":
        return cls(config.etag.algorithm)

    def make(self, content: Any, weak: bool = False) -> ETag:
        """Return an ETag over `content`.

        Raises EtagGenerationError when the algorithm is unknown or the
        content cannot be rendered.
        """
        try:
            hasher = hashlib.new(self.algorithm)
        except (ValueError, TypeError) as e:
            raise EtagGenerationError(f"unsupported hash algorithm {self.algorithm!r}", algorithm=self.algorithm) from e
        try:
            hasher.update(_render(content))
        except UnicodeError as e:
            raise EtagGenerationError("content could not be encoded", algorithm=self.algorithm) from e
        try:
            digest = hasher.hexdigest()
        except TypeError:
            # shake_* digests need an explicit length
            digest = hasher.hexdigest(20)  # type: ignore[call-arg]
        etag = ETag(digest, weak=weak)
        logger.debug("etag.generate", extra={"algorithm": self.algorithm, "weak": weak, "etag": str(etag)})
        return etag

    def make_strong(self, content: Any) -> ETag:
        return self.make(content, weak=False)

    def make_weak(self, content: Any) -> ETag:
        return self.make(content, weak=True)


__all__ = ["EtagGenerator"]
