"""Integration test: updates file through a fully wired dispatcher."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pytest

from matchrouter.adapters.jsonl_source import JsonlUpdateSource
from matchrouter.config import MatchRouterConfig
from matchrouter.container import Container
from matchrouter.core.models import SimilarityOptions
from matchrouter.runner import Runner


def build_updates(path: Path) -> Path:
    updates: list[dict[str, Any]] = [
        {
            "update_id": 1,
            "message": {
                "chat": {"id": 10},
                "text": "/start now",
                "entities": [{"type": "bot_command", "offset": 0, "length": 6}],
            },
        },
        {"update_id": 2, "message": {"chat": {"id": 10}, "text": "Helo"}},
        {"update_id": 3, "callback_query": {"id": "a", "data": "page[2]", "message": {"chat": {"id": 10}}}},
        {"update_id": 4, "my_chat_member": {"chat": {"id": 10}, "new_chat_member": {"status": "left"}}},
        {"update_id": 5, "message": {"chat": {"id": 99}, "text": "bye bye"}},
    ]
    file = path / "updates.jsonl"
    file.write_text("\n".join(json.dumps(u) for u in updates) + "\n")
    return file


@pytest.fixture()
def wired(tmp_path: Path) -> tuple[Container, list[tuple[str, tuple[Any, ...]]]]:
    config = MatchRouterConfig(similarity=SimilarityOptions(threshold=0.8))
    container = Container.create_default(config)
    log: list[tuple[str, tuple[Any, ...]]] = []

    def record(label: str) -> Any:
        return lambda event, *values: log.append((label, values))

    def explode(event: Any, *values: Any) -> None:
        raise RuntimeError("handler bug")

    (
        container.dispatcher.bind("command")
        .add("/start", record("start"))
        .bind("similarity")
        .add("hello", record("greeting"))
        .add("hello", explode)
        .bind("callback_query")
        .add("page", record("page"))
        .bind("chat_member")
        .add("left", record("left"))
        .bind("all")
        .add([{"chat": 99}, {"text": re.compile("bye")}], record("farewell"))
        .bind("any")
        .add([{"chat": 10}], record("home-chat"))
    )
    return container, log


class TestRoutingFlow:
    @pytest.mark.asyncio
    async def test_full_replay(
        self, wired: tuple[Container, list[tuple[str, tuple[Any, ...]]]], tmp_path: Path
    ) -> None:
        container, log = wired

        summary = await Runner(container).run(JsonlUpdateSource(build_updates(tmp_path)))

        labels = [label for label, _ in log]
        assert labels == [
            "start",
            "home-chat",
            "greeting",
            "home-chat",
            "page",
            "home-chat",
            "left",
            "home-chat",
            "farewell",
        ]
        assert ("page", (2,)) in log
        assert ("greeting", ("Helo", pytest.approx(0.8))) in log
        assert summary.updates == 5
        assert summary.errors == 1
