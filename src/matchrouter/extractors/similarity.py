"""Fuzzy text matching by normalized edit distance."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from matchrouter.core.errors import MalformedPattern
from matchrouter.core.interfaces import Checker, Extractor, ExtractorScope, Handler
from matchrouter.core.models import SimilarityOptions
from matchrouter.core.patterns import Exact, Pattern, Regex, unwrap
from matchrouter.core.scoring import similarity
from matchrouter.extractors.base import POST_KINDS, text_of

logger = logging.getLogger(__name__)


class SimilarityExtractor(Extractor):
    """Fires when the message text is close enough to a pattern.

    This is a threshold gate, not a best-match selector: every registered
    pattern scoring at or above its threshold fires. Handlers receive
    ``(event, text, score)``.
    """

    kinds = POST_KINDS

    def __init__(self, options: SimilarityOptions | None = None) -> None:
        self.options = options or SimilarityOptions()

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        text = text_of(event)
        if text is None:
            return None
        if self.options.trim:
            text = text.strip()
        return SimilarityChecker(event, text, self.options)


class SimilarityChecker(Checker):
    """Scores one working text; the text is already trimmed per the base options."""

    def __init__(self, event: Any, text: str, options: SimilarityOptions) -> None:
        self._event = event
        self._text = text
        self._options = options

    def test(self, pattern: Pattern, handler: Handler) -> bool:
        base, overrides = unwrap(pattern)
        options = self._resolve(overrides)
        text = self._text

        if isinstance(base, Exact):
            score = _score(text, str(base.value), options)
        elif isinstance(base, Regex):
            found = base.pattern.search(text)
            if found is None:
                return False
            score = _score(text, found.group(0), options)
        else:
            raise MalformedPattern(
                f"Similarity patterns must be strings or regexes, got {type(base).__name__}"
            )

        logger.debug("Similarity %.3f for %r (threshold %.3f)", score, text, options.threshold)
        if score < options.threshold:
            return False
        handler(self._event, text, score)
        return True

    def _resolve(self, overrides: Mapping[str, Any]) -> SimilarityOptions:
        try:
            # trim was applied at activation and cannot change per pattern
            return self._options.merged({k: v for k, v in overrides.items() if k != "trim"})
        except ValidationError as e:
            raise MalformedPattern(f"Invalid similarity overrides {dict(overrides)!r}: {e}") from e


def _score(text: str, value: str, options: SimilarityOptions) -> float:
    if options.case_insensitive:
        text, value = text.lower(), value.lower()
    return similarity(text, value)
