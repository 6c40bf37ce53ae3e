"""ALL/ANY composition over other extractors."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from matchrouter.core.errors import MalformedPattern, UnknownExtractorName
from matchrouter.core.interfaces import Checker, Extractor, ExtractorScope, Handler
from matchrouter.core.patterns import Composite, Pattern, as_pattern, unwrap

logger = logging.getLogger(__name__)


class CompositeMode(str, Enum):
    ALL = "ALL"
    ANY = "ANY"


class CompositeExtractor(Extractor):
    """Matches a list of ``{extractor: pattern}`` items with ALL or ANY logic.

    Nested extractors are activated on the same event and tested with an
    always-true handler; only the outer handler is called, with
    ``(event, kind)``.
    """

    def __init__(self, mode: CompositeMode | str = CompositeMode.ALL) -> None:
        self.mode = CompositeMode(mode)

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        return CompositeChecker(self.mode, event, kind, scope)


class CompositeChecker(Checker):
    def __init__(self, mode: CompositeMode, event: Any, kind: str, scope: ExtractorScope) -> None:
        self._mode = mode
        self._event = event
        self._kind = kind
        self._scope = scope

    def test(self, pattern: Pattern, handler: Handler) -> bool:
        base, _ = unwrap(pattern)
        if not isinstance(base, Composite):
            raise MalformedPattern(
                f"{self._mode.value} patterns must be lists of single-key mappings"
            )

        verdicts = (self._check_item(name, nested) for name, nested in base.items)
        if self._mode is CompositeMode.ALL:
            matched = all(verdicts)
        else:
            matched = any(verdicts)

        if matched:
            handler(self._event, self._kind)
        return matched

    def _check_item(self, name: str, nested: Any) -> bool:
        """True if extractor ``name`` matches ``nested`` on this event.

        Unknown names and malformed nested patterns fail the branch.
        """
        try:
            extractor = self._scope.lookup(name)
            if not self._scope.accepts(name, self._kind):
                return False
            checker = extractor.activate(self._event, self._kind, self._scope.descend())
            if checker is None:
                return False
            return checker.test(as_pattern(nested), _matched)
        except (UnknownExtractorName, MalformedPattern) as e:
            logger.warning("Composite branch %s failed: %s", name, e)
            return False


def _matched(*args: Any) -> bool:
    return True
