"""Exact/regex/predicate matching on message text."""

from __future__ import annotations

from typing import Any

from matchrouter.core.interfaces import Checker, Extractor, ExtractorScope
from matchrouter.extractors.base import POST_KINDS, ValueChecker, text_of


class TextExtractor(Extractor):
    """Matches the message text (or caption); handler gets ``(event, text)``."""

    kinds = POST_KINDS

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        text = text_of(event)
        if text is None:
            return None
        return ValueChecker(event, [(text, (text,))])
