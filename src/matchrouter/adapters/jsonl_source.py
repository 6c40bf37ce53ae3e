"""Update source reading platform updates from a JSON Lines file."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from pathlib import Path
from typing import Any

from matchrouter.core.interfaces import UpdateSourcePort

logger = logging.getLogger(__name__)


class JsonlUpdateSource(UpdateSourcePort):
    """Replays updates stored one JSON object per line.

    Each line is a raw update, e.g. ``{"update_id": 7, "message": {...}}``.
    Blank lines are skipped; undecodable lines are skipped with a warning.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    async def updates(self) -> AsyncIterator[tuple[str, Any]]:
        with open(self.path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    update = json.loads(line)
                except json.JSONDecodeError as e:
                    logger.warning("Skipping %s:%d: invalid JSON (%s)", self.path, lineno, e)
                    continue

                split = split_update(update)
                if split is None:
                    logger.warning("Skipping %s:%d: no update payload", self.path, lineno)
                    continue
                yield split


def split_update(update: Any) -> tuple[str, Any] | None:
    """Return ``(kind, payload)`` for a raw update, or None if it has no payload.

    The kind is the one key besides ``update_id`` whose value is an object.
    """
    if not isinstance(update, Mapping):
        return None
    for key, value in update.items():
        if key != "update_id" and isinstance(value, Mapping):
            return key, value
    return None
