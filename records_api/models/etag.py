"""Entity-tag value type.

An `ETag` holds the opaque tag (without quotes) and whether it is weak.
Parsing follows RFC 9110 section 8.8.3: ``"tag"`` is strong, ``W/"tag"`` is
weak. Comparison supports both strong and weak semantics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

WILDCARD = "*"


@dataclass(frozen=True)
class ETag:
    value: str
    weak: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or self.value == "":
            raise ValueError("entity-tag value must be a non-empty string")
        if '"' in self.value:
            raise ValueError("entity-tag value must not contain double quotes")

    @property
    def strong(self) -> bool:
        return not self.weak

    def __str__(self) -> str:
        prefix = "W/" if self.weak else ""
        return f'{prefix}"{self.value}"'

    @classmethod
    def parse(cls, text: str) -> "ETag":
        """Parse a single entity-tag such as ``"abc"`` or ``W/"abc"``.

        Surrounding whitespace is ignored. Unquoted, empty or internally
        quoted tags raise ValueError.
        """
        if text is None:
            raise ValueError("entity-tag is missing")
        t = str(text).strip()
        weak = False
        if len(t) >= 2 and t[:2].upper() == "W/":
            weak = True
            t = t[2:].lstrip()
        if not (len(t) >= 2 and t.startswith('"') and t.endswith('"')):
            raise ValueError(f"entity-tag must be quoted: {text!r}")
        return cls(t[1:-1], weak=weak)

    @classmethod
    def coerce(cls, raw: object) -> Optional["ETag"]:
        """Build a tag from a stored value.

        Quoted or ``W/``-prefixed text is parsed; bare text becomes a strong
        tag. None and blank values give None.
        """
        if raw is None:
            return None
        if isinstance(raw, ETag):
            return raw
        text = str(raw).strip()
        if not text:
            return None
        if text.startswith('"') or text[:2].upper() == "W/":
            return cls.parse(text)
        return cls(text)

    def matches(self, other: Union["ETag", str], strong_comparison: bool = False) -> bool:
        """Return True when `other` matches this tag.

        Strong comparison requires both tags to be strong with equal values.
        Weak comparison only compares the opaque values. `other` may be header
        text holding a list of tags or the ``*`` wildcard.
        """
        if isinstance(other, str):
            tags = parse_etag_list(other)
            if tags == WILDCARD:
                return True
            return any(self.matches(tag, strong_comparison) for tag in tags)
        if strong_comparison:
            return self.strong and other.strong and self.value == other.value
        return self.value == other.value

    def does_not_match(self, other: Union["ETag", str], strong_comparison: bool = False) -> bool:
        return not self.matches(other, strong_comparison)


def parse_etag_list(header: str | None) -> Union[List[ETag], str]:
    """Parse a comma-separated list of entity-tags.

    Returns the wildcard string when the header is exactly ``*``. Commas
    inside quotes do not split. Invalid members are skipped; an unterminated
    quote raises ValueError.
    """
    if header is None:
        return []
    s = str(header).strip()
    if not s:
        return []
    if s == WILDCARD:
        return WILDCARD

    in_quote = False
    buf: list[str] = []
    parts: list[str] = []
    for ch in s:
        if ch == '"':
            in_quote = not in_quote
            buf.append(ch)
        elif ch == "," and not in_quote:
            parts.append("".join(buf).strip())
            buf.clear()
        else:
            buf.append(ch)
    if in_quote:
        raise ValueError("unterminated quoted string in entity-tag list")
    parts.append("".join(buf).strip())

    tags: list[ETag] = []
    for raw in parts:
        if not raw:
            continue
        try:
            tags.append(ETag.parse(raw))
        except ValueError:
            continue
    return tags


__all__ = ["ETag", "WILDCARD", "parse_etag_list"]
