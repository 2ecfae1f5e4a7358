"""Record shape consumed by the single record resolver.

A record carries exactly one ETag capability, chosen when the record is
built:

- `NoEtag`: no tag is available
- `PrecomputedEtag`: the record already knows its strong and weak tags
- `GeneratableEtag`: tags are produced on demand by an `EtagGenerator`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, Union, runtime_checkable

from records_api.logic.etag_generator import EtagGenerator
from records_api.models.etag import ETag


@dataclass(frozen=True)
class NoEtag:
    pass


@dataclass(frozen=True)
class PrecomputedEtag:
    strong: ETag
    weak: Optional[ETag] = None

    def strong_etag(self) -> ETag:
        return self.strong

    def weak_etag(self) -> ETag:
        if self.weak is not None:
            return self.weak
        return ETag(self.strong.value, weak=True)


@dataclass(frozen=True)
class GeneratableEtag:
    generator: EtagGenerator
    content: Callable[[], Any]

    def strong_etag(self) -> ETag:
        return self.generator.make_strong(self.content())

    def weak_etag(self) -> ETag:
        return self.generator.make_weak(self.content())


EtagCapability = Union[NoEtag, PrecomputedEtag, GeneratableEtag]

NO_ETAG = NoEtag()


def etag_capability_for(
    precomputed: Optional[ETag] = None,
    *,
    precomputed_weak: Optional[ETag] = None,
    generator: Optional[EtagGenerator] = None,
    content: Optional[Callable[[], Any]] = None,
) -> EtagCapability:
    """Pick the capability for a record.

    A precomputed tag wins over a generator; without either the record has
    no ETag.
    """
    if precomputed is not None:
        return PrecomputedEtag(precomputed, precomputed_weak)
    if generator is not None and content is not None:
        return GeneratableEtag(generator, content)
    return NO_ETAG


@runtime_checkable
class ResolvableRecord(Protocol):
    etag_capability: EtagCapability
    updated_at_field: Optional[str]

    def get_field(self, name: str) -> Any:
        ...


@dataclass
class Record:
    """In-memory record backed by a plain field map."""

    key: str
    fields: Dict[str, Any] = field(default_factory=dict)
    updated_at_field: Optional[str] = "updated_at"
    etag_capability: EtagCapability = NO_ETAG

    def get_field(self, name: str) -> Any:
        return self.fields.get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, **self.fields}


__all__ = [
    "NoEtag",
    "PrecomputedEtag",
    "GeneratableEtag",
    "EtagCapability",
    "NO_ETAG",
    "etag_capability_for",
    "ResolvableRecord",
    "Record",
]
