"""Extractors over message entities (commands, hashtags, mentions)."""

from __future__ import annotations

from typing import Any

from matchrouter.core.interfaces import Checker, Extractor, ExtractorScope, Handler
from matchrouter.core.patterns import Pattern, matches_value
from matchrouter.extractors.base import POST_KINDS, ValueChecker, entities_of


class EntityExtractor(Extractor):
    """Matches entity types; handler gets ``(event, type, value)`` for the first hit."""

    kinds = POST_KINDS

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        found = entities_of(event)
        if not found:
            return None
        return ValueChecker(event, [(etype, (etype, value)) for etype, value in found])


class TypedEntityExtractor(Extractor):
    """Matches the text of entities of one type; handler gets ``(event, value)``."""

    kinds = POST_KINDS

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        values = [value for etype, value in entities_of(event) if etype == self.entity_type]
        if not values:
            return None
        return ValueChecker(event, [(value, (value,)) for value in values])


class CommandExtractor(Extractor):
    """Matches bot commands.

    Unlike the other entity extractors, every matching command is passed
    on: the handler gets ``(event, *commands)``.
    """

    kinds = POST_KINDS

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        commands = [value for etype, value in entities_of(event) if etype == "bot_command"]
        if not commands:
            return None
        return CommandChecker(event, commands)


class CommandChecker(Checker):
    def __init__(self, event: Any, commands: list[str]) -> None:
        self._event = event
        self._commands = commands

    def test(self, pattern: Pattern, handler: Handler) -> bool:
        hits = [command for command in self._commands if matches_value(pattern, command)]
        if not hits:
            return False
        handler(self._event, *hits)
        return True
