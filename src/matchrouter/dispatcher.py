"""Dispatcher: indexes extractors by event kind and runs registered patterns."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from matchrouter.core.errors import (
    DuplicateExtractorName,
    EventProcessingError,
    UnknownExtractorName,
    redact_error,
)
from matchrouter.core.interfaces import DEFAULT_MAX_DEPTH, Extractor, ExtractorScope, Handler
from matchrouter.core.models import ANY_KIND, DispatchResult, DispatcherStatus
from matchrouter.handlers.registry import PatternRegistry, Registrar, Registration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractorDescriptor:
    """A registered extractor and the kinds it is indexed under."""

    name: str
    kinds: frozenset[str]
    extractor: Extractor


class Dispatcher:
    """Routes each event to the extractors subscribed to its kind.

    Setup (``register`` then ``bind(...).add(...)``) is expected to finish
    before the first ``dispatch``, but both tables are swapped atomically
    so late registrations are safe for concurrent readers.

    Failures inside ``dispatch`` are isolated per extractor and per
    pattern: they are logged and reported in the result, never raised.
    """

    def __init__(self, max_composite_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._descriptors: Mapping[str, ExtractorDescriptor] = MappingProxyType({})
        self._index: dict[str, tuple[str, ...]] = {}
        self._scope = ExtractorScope(max_depth=max_composite_depth)
        self._registry = PatternRegistry()
        self._lock = threading.Lock()
        self._dispatched = False
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def descriptors(self) -> Mapping[str, ExtractorDescriptor]:
        """Read-only view of registered extractors by name."""
        return self._descriptors

    @property
    def status(self) -> DispatcherStatus:
        if self._dispatched:
            return DispatcherStatus.DISPATCHING
        if len(self._registry):
            return DispatcherStatus.CONFIGURED
        return DispatcherStatus.UNCONFIGURED

    @property
    def pending_tasks(self) -> frozenset[asyncio.Future[Any]]:
        """Async handler tasks scheduled by dispatch and not yet finished."""
        return frozenset(self._pending)

    def register(
        self,
        name: str,
        extractor: Extractor,
        kinds: Iterable[str] | None = None,
    ) -> ExtractorDescriptor:
        """Register an extractor under a unique name.

        Args:
            name: Name patterns are bound to.
            extractor: The extractor instance.
            kinds: Overrides ``extractor.subscribed_kinds()``; empty means any kind.
                A single string is one kind.

        Raises:
            DuplicateExtractorName: If ``name`` is already taken.
        """
        if isinstance(kinds, str):
            kinds = [kinds]
        subscribed = frozenset(
            _kind_name(k) for k in (extractor.subscribed_kinds() if kinds is None else kinds)
        )
        descriptor = ExtractorDescriptor(name, subscribed or frozenset({ANY_KIND}), extractor)

        with self._lock:
            if name in self._descriptors:
                raise DuplicateExtractorName(name)
            self._registry.declare(name)

            descriptors = {**self._descriptors, name: descriptor}
            index = dict(self._index)
            for kind in descriptor.kinds:
                index[kind] = index.get(kind, ()) + (name,)

            self._descriptors = MappingProxyType(descriptors)
            self._index = index
            self._scope = ExtractorScope(
                MappingProxyType({n: d.extractor for n, d in descriptors.items()}),
                max_depth=self._scope.max_depth,
                kinds=MappingProxyType({n: d.kinds for n, d in descriptors.items()}),
            )

        logger.debug("Registered extractor %s for kinds %s", name, sorted(descriptor.kinds))
        return descriptor

    def register_all(self, extractors: Mapping[str, Extractor]) -> None:
        for name, extractor in extractors.items():
            self.register(name, extractor)

    def bind(self, name: str) -> Registrar:
        """Fluent registrar for patterns on extractor ``name``.

        Raises:
            UnknownExtractorName: If ``name`` was never registered.
        """
        if name not in self._descriptors:
            raise UnknownExtractorName(name)
        return self._registry.bind(name)

    def registrations(self, name: str) -> tuple[Registration, ...]:
        return self._registry.entries(name)

    def dispatch(self, event: Any, kind: str) -> DispatchResult:
        """Run every applicable extractor and pattern for one event.

        Extractors indexed under ``kind`` run first, then those indexed
        under any kind; within an extractor, patterns run in registration
        order.
        """
        kind = _kind_name(kind)
        self._dispatched = True
        result = DispatchResult(kind=kind)
        index, scope = self._index, self._scope

        seen: set[str] = set()
        for bucket in (kind, ANY_KIND):
            for name in index.get(bucket, ()):
                if name in seen:
                    continue
                seen.add(name)
                entries = self._registry.entries(name)
                if entries:
                    self._run_extractor(name, entries, event, kind, scope, result)

        if not result.activated:
            logger.debug("No extractor applied to %s event", kind)
        return result

    async def drain(self) -> None:
        """Wait for async handler tasks scheduled by earlier dispatches."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _run_extractor(
        self,
        name: str,
        entries: tuple[Registration, ...],
        event: Any,
        kind: str,
        scope: ExtractorScope,
        result: DispatchResult,
    ) -> None:
        try:
            checker = self._descriptors[name].extractor.activate(event, kind, scope)
        except Exception as e:
            self._record_failure(result, name, kind, e)
            return
        if checker is None:
            return

        result.activated.append(name)
        for entry in entries:
            try:
                if checker.test(entry.pattern, self._settled(name, entry.handler)):
                    result.fired += 1
            except Exception as e:
                self._record_failure(result, name, kind, e)

    def _settled(self, name: str, handler: Handler) -> Handler:
        """Wrap ``handler`` so awaitable results are scheduled, not dropped."""

        def call(*args: Any) -> Any:
            outcome = handler(*args)
            if inspect.isawaitable(outcome):
                self._schedule(name, outcome)
            return outcome

        return call

    def _schedule(self, name: str, awaitable: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Handler on %s returned an awaitable outside a running event loop; discarded",
                name,
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Async handler failed: %s", redact_error(error))

    def _record_failure(
        self, result: DispatchResult, name: str, kind: str, error: Exception
    ) -> None:
        failure = EventProcessingError(name, kind, str(redact_error(error)))
        failure.__cause__ = error
        logger.error("Event processing failed: %s", failure)
        logger.debug("Traceback for %s failure", name, exc_info=error)
        result.errors.append(str(failure))


def _kind_name(kind: str) -> str:
    return kind.value if isinstance(kind, Enum) else str(kind)
