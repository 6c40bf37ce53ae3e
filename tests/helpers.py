"""Event factories and handler doubles shared by the test suite."""

from __future__ import annotations

from typing import Any


class Recorder:
    """Handler that records every call's arguments."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


def make_message(
    text: str | None = "hello",
    chat_id: int = 100,
    entities: list[dict[str, Any]] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Factory for message payloads."""
    message: dict[str, Any] = {"message_id": 1, "chat": {"id": chat_id, "type": "private"}}
    if text is not None:
        message["text"] = text
    if entities is not None:
        message["entities"] = entities
    message.update(kwargs)
    return message


def entity(text: str, fragment: str, type: str) -> dict[str, Any]:
    """Entity dict for the first occurrence of ``fragment`` in ``text`` (ASCII only)."""
    return {"type": type, "offset": text.index(fragment), "length": len(fragment)}
