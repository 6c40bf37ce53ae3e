"""Matchrouter: pattern-matching event router for chat platform updates."""

from matchrouter.core.errors import (
    DuplicateExtractorName,
    EventProcessingError,
    MalformedPattern,
    MatchRouterError,
    UnknownExtractorName,
)
from matchrouter.core.models import ANY_KIND, EventKind, SimilarityOptions
from matchrouter.core.scoring import levenshtein, similarity
from matchrouter.dispatcher import Dispatcher

__version__ = "0.1.0"

__all__ = [
    "ANY_KIND",
    "Dispatcher",
    "DuplicateExtractorName",
    "EventKind",
    "EventProcessingError",
    "MalformedPattern",
    "MatchRouterError",
    "SimilarityOptions",
    "UnknownExtractorName",
    "levenshtein",
    "similarity",
]
