"""Extractors over chat metadata, membership changes, media and callbacks."""

from __future__ import annotations

import json
import logging
from typing import Any

from matchrouter.core.interfaces import Checker, Extractor, ExtractorScope, Handler
from matchrouter.core.patterns import Pattern, matches_value
from matchrouter.extractors.base import ValueChecker, field, path

logger = logging.getLogger(__name__)

MEDIA_TYPES = (
    "photo",
    "video",
    "audio",
    "document",
    "voice",
    "video_note",
    "animation",
    "sticker",
)


class ChatExtractor(Extractor):
    """Matches the chat id; handler gets ``(event, kind)``."""

    kinds = frozenset(
        {
            "message",
            "edited_message",
            "channel_post",
            "edited_channel_post",
            "callback_query",
            "my_chat_member",
            "chat_member",
            "chat_join_request",
        }
    )

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        chat_id = path(event, "chat", "id")
        if chat_id is None:
            # Callback queries carry the chat on the originating message
            chat_id = path(event, "message", "chat", "id")
        if chat_id is None:
            return None
        return ValueChecker(event, [(chat_id, (kind,))])


class ChatMemberExtractor(Extractor):
    """Matches the new membership status; handler gets ``(event, status)``."""

    kinds = frozenset({"chat_member", "my_chat_member"})

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        status = path(event, "new_chat_member", "status")
        if not status:
            return None
        return ValueChecker(event, [(status, (status,))])


class MediaExtractor(Extractor):
    """Matches attached media types.

    The handler gets ``(event, media_type)`` once for every present type
    the pattern matches.
    """

    kinds = frozenset({"message"})

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        present = [m for m in MEDIA_TYPES if field(event, m) is not None]
        if not present:
            return None
        return MediaChecker(event, present)


class MediaChecker(Checker):
    def __init__(self, event: Any, media_types: list[str]) -> None:
        self._event = event
        self._media_types = media_types

    def test(self, pattern: Pattern, handler: Handler) -> bool:
        matched = False
        for media_type in self._media_types:
            if matches_value(pattern, media_type):
                handler(self._event, media_type)
                matched = True
        return matched


class CallbackQueryExtractor(Extractor):
    """Matches callback actions.

    Callback data is ``action`` optionally followed by a JSON array of
    parameters, e.g. ``vote[42, true]``. Patterns test the stripped action;
    handlers get ``(event, *params)``.
    """

    kinds = frozenset({"callback_query"})

    def activate(self, event: Any, kind: str, scope: ExtractorScope) -> Checker | None:
        data = field(event, "data")
        if not isinstance(data, str):
            return None

        parsed = parse_callback_data(data)
        if parsed is None:
            logger.debug("Ignoring callback data with bad parameters: %r", data)
            return None
        action, params = parsed
        return ValueChecker(event, [(action, tuple(params))])


def parse_callback_data(data: str) -> tuple[str, list[Any]] | None:
    """Split callback data into action and parameter list.

    Returns None if the parameter suffix is not a JSON array.
    """
    offset = data.find("[")
    if offset == -1:
        return data.strip(), []

    try:
        params = json.loads(data[offset:])
    except json.JSONDecodeError:
        return None
    if not isinstance(params, list):
        return None
    return data[:offset].strip(), params
