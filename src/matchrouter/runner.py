"""Runner: feeds updates from a source through the dispatcher."""

from __future__ import annotations

import logging

from matchrouter.container import Container
from matchrouter.core.interfaces import UpdateSourcePort
from matchrouter.core.models import RunSummary

logger = logging.getLogger(__name__)


class Runner:
    """Dispatches every update a source yields, one at a time.

    Each dispatch completes (including synchronous handlers) before the
    next update is read. Async handlers run on the loop and are drained
    once the source is exhausted.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    async def run(self, source: UpdateSourcePort) -> RunSummary:
        dispatcher = self._container.dispatcher
        summary = RunSummary()

        async for kind, event in source.updates():
            result = dispatcher.dispatch(event, kind)
            summary.updates += 1
            summary.fired += result.fired
            summary.errors += len(result.errors)
            if result.fired:
                logger.info(
                    "Update %d (%s) matched %d pattern(s) via %s",
                    summary.updates,
                    kind,
                    result.fired,
                    ", ".join(result.activated),
                )

        await dispatcher.drain()
        logger.info(
            "Run complete: %d updates, %d matches, %d errors",
            summary.updates,
            summary.fired,
            summary.errors,
        )
        return summary
