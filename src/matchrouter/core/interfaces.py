"""Port interfaces for matchrouter (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from matchrouter.core.errors import MalformedPattern, UnknownExtractorName
from matchrouter.core.models import ANY_KIND
from matchrouter.core.patterns import Pattern

Handler = Callable[..., Any]
"""Called as ``handler(event, *extracted)``; the return value is ignored."""

DEFAULT_MAX_DEPTH = 8


class Checker(ABC):
    """Per-event tester produced by :meth:`Extractor.activate`.

    Lives for a single dispatch cycle and must not be retained.
    """

    @abstractmethod
    def test(self, pattern: Pattern, handler: Handler) -> bool:
        """Invoke ``handler`` if ``pattern`` matches this event.

        Args:
            pattern: A coerced pattern owned by this checker's extractor.
            handler: Callable receiving the event and extracted values.

        Returns:
            True if the pattern matched (and the handler was called).
        """


class Extractor(ABC):
    """Pulls a comparable value out of an event and tests patterns against it."""

    kinds: frozenset[str] = frozenset({ANY_KIND})

    def subscribed_kinds(self) -> frozenset[str]:
        """Event kinds this extractor is indexed under at wiring time."""
        return self.kinds

    def accepts_kind(self, kind: str) -> bool:
        kinds = self.subscribed_kinds()
        return ANY_KIND in kinds or kind in kinds

    @abstractmethod
    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        """Build a checker for ``event``, or None if nothing can match.

        Events lacking the fields this extractor needs yield None rather
        than raising.

        Args:
            event: Read-only event record from the transport.
            kind: The event's kind tag.
            scope: Registered extractors, for extractors that re-enter others.
        """


@dataclass(frozen=True)
class ExtractorScope:
    """Name to extractor lookup handed to extractors during activation.

    ``kinds`` holds the kinds each extractor was registered under, which
    may differ from its own ``subscribed_kinds()``. ``depth`` counts how
    many composite levels have been entered; going past ``max_depth`` is a
    :class:`MalformedPattern`.
    """

    extractors: Mapping[str, Extractor] = field(default_factory=dict)
    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    kinds: Mapping[str, frozenset[str]] = field(default_factory=dict)

    def lookup(self, name: str) -> Extractor:
        try:
            return self.extractors[name]
        except KeyError:
            raise UnknownExtractorName(name) from None

    def accepts(self, name: str, kind: str) -> bool:
        """True if extractor ``name`` is registered for ``kind`` (or any kind)."""
        kinds = self.kinds.get(name)
        if kinds is None:
            return self.lookup(name).accepts_kind(kind)
        return ANY_KIND in kinds or kind in kinds

    def descend(self) -> ExtractorScope:
        """Scope for one nesting level deeper."""
        if self.depth >= self.max_depth:
            raise MalformedPattern(
                f"Composite nesting deeper than {self.max_depth} levels"
            )
        return ExtractorScope(self.extractors, self.depth + 1, self.max_depth, self.kinds)


class UpdateSourcePort(ABC):
    """Port for the transport delivering platform updates."""

    @abstractmethod
    def updates(self) -> AsyncIterator[tuple[str, Any]]:
        """Yield ``(kind, event)`` pairs in delivery order."""
