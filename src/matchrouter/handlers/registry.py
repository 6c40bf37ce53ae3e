"""Pattern registry: per-extractor ordered pattern/handler tables."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from matchrouter.core.errors import DuplicateExtractorName, UnknownExtractorName
from matchrouter.core.interfaces import Handler
from matchrouter.core.patterns import Pattern, as_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registration:
    """One ``(extractor, pattern, handler)`` entry."""

    extractor: str
    pattern: Pattern
    handler: Handler


class PatternRegistry:
    """Append-only registration tables keyed by extractor name.

    Each table is an immutable tuple replaced wholesale on write, so
    readers iterating a table during dispatch never see a partial update.
    """

    def __init__(self) -> None:
        self._tables: dict[str, tuple[Registration, ...]] = {}
        self._lock = threading.Lock()

    def declare(self, name: str) -> None:
        """Create an empty table for a newly registered extractor."""
        with self._lock:
            if name in self._tables:
                raise DuplicateExtractorName(name)
            self._tables = {**self._tables, name: ()}

    def add(self, name: str, pattern: Any, handler: Handler) -> Registration:
        """Append a registration, coercing ``pattern`` first.

        Raises:
            UnknownExtractorName: If ``name`` was never declared.
            MalformedPattern: If ``pattern`` cannot be coerced.
        """
        if not callable(handler):
            raise TypeError(f"Handler for {name!r} must be callable")
        entry = Registration(name, as_pattern(pattern), handler)
        with self._lock:
            if name not in self._tables:
                raise UnknownExtractorName(name)
            self._tables = {**self._tables, name: self._tables[name] + (entry,)}
        logger.debug("Registered %r on extractor %s", pattern, name)
        return entry

    def entries(self, name: str) -> tuple[Registration, ...]:
        """Registrations for ``name`` in insertion order."""
        return self._tables.get(name, ())

    def bind(self, name: str) -> Registrar:
        """Fluent registrar for ``name``.

        Raises:
            UnknownExtractorName: If ``name`` was never declared.
        """
        if name not in self._tables:
            raise UnknownExtractorName(name)
        return Registrar(self, name)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())


class Registrar:
    """Chainable ``add(pattern, handler)`` bound to one extractor."""

    def __init__(self, registry: PatternRegistry, name: str) -> None:
        self._registry = registry
        self.name = name

    def add(self, pattern: Any, handler: Handler) -> Registrar:
        self._registry.add(self.name, pattern, handler)
        return self

    def on(self, pattern: Any) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`add`; returns the handler unchanged."""

        def decorator(handler: Handler) -> Handler:
            self.add(pattern, handler)
            return handler

        return decorator

    def bind(self, name: str) -> Registrar:
        """Continue the chain on another extractor."""
        return self._registry.bind(name)

    def __repr__(self) -> str:
        return f"Registrar({self.name!r})"
