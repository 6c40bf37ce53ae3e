"""Built-in extractors."""

from __future__ import annotations

from matchrouter.core.interfaces import Extractor
from matchrouter.core.models import SimilarityOptions
from matchrouter.extractors.chat import (
    CallbackQueryExtractor,
    ChatExtractor,
    ChatMemberExtractor,
    MediaExtractor,
)
from matchrouter.extractors.composite import CompositeExtractor, CompositeMode
from matchrouter.extractors.entities import (
    CommandExtractor,
    EntityExtractor,
    TypedEntityExtractor,
)
from matchrouter.extractors.similarity import SimilarityExtractor
from matchrouter.extractors.text import TextExtractor


def builtin_extractors(similarity: SimilarityOptions | None = None) -> dict[str, Extractor]:
    """Fresh instances of every built-in extractor, keyed by default name."""
    return {
        "text": TextExtractor(),
        "similarity": SimilarityExtractor(similarity),
        "all": CompositeExtractor(CompositeMode.ALL),
        "any": CompositeExtractor(CompositeMode.ANY),
        "command": CommandExtractor(),
        "entity": EntityExtractor(),
        "hashtag": TypedEntityExtractor("hashtag"),
        "mention": TypedEntityExtractor("mention"),
        "media": MediaExtractor(),
        "chat": ChatExtractor(),
        "chat_member": ChatMemberExtractor(),
        "callback_query": CallbackQueryExtractor(),
    }


__all__ = [
    "CallbackQueryExtractor",
    "ChatExtractor",
    "ChatMemberExtractor",
    "CommandExtractor",
    "CompositeExtractor",
    "CompositeMode",
    "EntityExtractor",
    "MediaExtractor",
    "SimilarityExtractor",
    "TextExtractor",
    "TypedEntityExtractor",
    "builtin_extractors",
]
