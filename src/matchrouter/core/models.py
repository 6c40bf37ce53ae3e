"""Domain models for matchrouter."""

from __future__ import annotations

from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

ANY_KIND: Final = "*"
"""Bucket for extractors that want every event regardless of its kind."""


class EventKind(str, Enum):
    """Update kinds produced by the messaging platform.

    The set is open: dispatch accepts any string, and kinds nobody
    subscribes to simply activate no extractors.
    """

    MESSAGE = "message"
    EDITED_MESSAGE = "edited_message"
    CHANNEL_POST = "channel_post"
    EDITED_CHANNEL_POST = "edited_channel_post"
    CALLBACK_QUERY = "callback_query"
    INLINE_QUERY = "inline_query"
    MY_CHAT_MEMBER = "my_chat_member"
    CHAT_MEMBER = "chat_member"
    CHAT_JOIN_REQUEST = "chat_join_request"


class SimilarityOptions(BaseModel):
    """Fuzzy text matching options.

    Per-pattern overrides are merged over a base instance with
    :meth:`merged`; the base is never mutated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    threshold: float = Field(default=0.2, ge=0.0, le=1.0, description="Minimum score to fire")
    case_insensitive: bool = Field(
        default=True,
        alias="caseInsensitive",
        description="Lower-case both sides before scoring",
    )
    trim: bool = Field(default=True, description="Strip surrounding whitespace from event text")

    def merged(self, overrides: dict[str, object]) -> SimilarityOptions:
        """Return a copy with ``overrides`` shallow-merged on top."""
        if not overrides:
            return self
        data: dict[str, object] = self.model_dump()
        for key, value in overrides.items():
            data["case_insensitive" if key == "caseInsensitive" else key] = value
        return SimilarityOptions.model_validate(data)


class DispatcherStatus(str, Enum):
    """Lifecycle of a dispatcher instance."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    DISPATCHING = "dispatching"


class DispatchResult(BaseModel):
    """Outcome of dispatching one event."""

    kind: str = Field(description="Event kind the event was dispatched under")
    activated: list[str] = Field(
        default_factory=list,
        description="Extractors that produced a checker for the event",
    )
    fired: int = Field(default=0, description="Number of patterns that matched")
    errors: list[str] = Field(
        default_factory=list,
        description="Redacted messages of failures caught during dispatch",
    )

    @property
    def ok(self) -> bool:
        """True if no failure was caught."""
        return not self.errors


class RunSummary(BaseModel):
    """Totals for one run over an update source."""

    updates: int = Field(default=0, description="Updates dispatched")
    fired: int = Field(default=0, description="Patterns matched across all updates")
    errors: int = Field(default=0, description="Failures caught across all updates")
