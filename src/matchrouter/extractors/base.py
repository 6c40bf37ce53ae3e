"""Shared helpers for the built-in extractors."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from matchrouter.core.interfaces import Checker, Handler
from matchrouter.core.patterns import Pattern, matches_value

# Kinds carrying message-like payloads (text, caption, entities)
POST_KINDS = frozenset({"message", "channel_post"})


def field(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an attribute-bearing object, else None."""
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def path(record: Any, *names: str) -> Any:
    """Follow nested fields; None as soon as one is missing."""
    for name in names:
        record = field(record, name)
        if record is None:
            return None
    return record


def text_of(event: Any) -> str | None:
    """Message text, falling back to the media caption."""
    text = field(event, "text") or field(event, "caption")
    return text if isinstance(text, str) and text else None


def entities_of(event: Any) -> list[tuple[str, str]]:
    """``(type, value)`` for every entity in the text or caption.

    Offsets and lengths count UTF-16 code units.
    """
    text = text_of(event)
    entities = field(event, "entities") or field(event, "caption_entities")
    if not text or not isinstance(entities, Sequence):
        return []

    encoded = text.encode("utf-16-le")
    found: list[tuple[str, str]] = []
    for entity in entities:
        kind = field(entity, "type")
        offset = field(entity, "offset")
        length = field(entity, "length")
        if not isinstance(offset, int) or not isinstance(length, int):
            continue
        chunk = encoded[offset * 2 : (offset + length) * 2]
        found.append((str(kind), chunk.decode("utf-16-le", errors="replace")))
    return found


class ValueChecker(Checker):
    """Tests patterns against candidate values, firing on the first match.

    ``candidates`` pairs each value with the extra handler arguments it
    produces.
    """

    def __init__(self, event: Any, candidates: Sequence[tuple[Any, tuple[Any, ...]]]) -> None:
        self._event = event
        self._candidates = candidates

    def test(self, pattern: Pattern, handler: Handler) -> bool:
        for value, args in self._candidates:
            if matches_value(pattern, value):
                handler(self._event, *args)
                return True
        return False
