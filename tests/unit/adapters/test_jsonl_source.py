"""Tests for the JSON Lines update source."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from matchrouter.adapters.jsonl_source import JsonlUpdateSource, split_update


def write_updates(path: Path, lines: list[str]) -> Path:
    file = path / "updates.jsonl"
    file.write_text("\n".join(lines) + "\n")
    return file


class TestSplitUpdate:
    def test_message_update(self) -> None:
        update = {"update_id": 1, "message": {"text": "hi"}}
        assert split_update(update) == ("message", {"text": "hi"})

    def test_callback_update(self) -> None:
        update = {"update_id": 2, "callback_query": {"data": "x"}}
        assert split_update(update) == ("callback_query", {"data": "x"})

    def test_no_payload(self) -> None:
        assert split_update({"update_id": 3}) is None

    def test_not_a_mapping(self) -> None:
        assert split_update([1, 2]) is None


class TestJsonlUpdateSource:
    @pytest.mark.asyncio
    async def test_yields_updates_in_order(self, tmp_path: Path) -> None:
        file = write_updates(
            tmp_path,
            [
                json.dumps({"update_id": 1, "message": {"text": "a"}}),
                "",
                json.dumps({"update_id": 2, "channel_post": {"text": "b"}}),
            ],
        )

        updates = [u async for u in JsonlUpdateSource(file).updates()]

        assert updates == [("message", {"text": "a"}), ("channel_post", {"text": "b"})]

    @pytest.mark.asyncio
    async def test_skips_bad_lines(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        file = write_updates(
            tmp_path,
            [
                "{not json",
                json.dumps({"update_id": 5}),
                json.dumps({"update_id": 6, "message": {"text": "ok"}}),
            ],
        )

        with caplog.at_level("WARNING"):
            updates = [u async for u in JsonlUpdateSource(file).updates()]

        assert updates == [("message", {"text": "ok"})]
        assert "invalid JSON" in caplog.text
        assert "no update payload" in caplog.text
