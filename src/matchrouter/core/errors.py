"""Error hierarchy for matchrouter with sensitive data redaction."""

from __future__ import annotations

import re


class MatchRouterError(Exception):
    """Base exception for all matchrouter errors."""

    pass


class ConfigError(MatchRouterError):
    """Configuration loading or validation error."""

    pass


class DuplicateExtractorName(MatchRouterError):
    """An extractor is already registered under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Extractor already registered: {name!r}")
        self.name = name


class UnknownExtractorName(MatchRouterError):
    """No extractor is registered under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown extractor: {name!r}")
        self.name = name


class MalformedPattern(MatchRouterError):
    """A pattern cannot be interpreted by the extractor it was given to."""

    pass


class EventProcessingError(MatchRouterError):
    """Extractor activation or handler execution failed during dispatch."""

    def __init__(self, extractor: str, kind: str, message: str) -> None:
        super().__init__(f"{extractor} on {kind}: {message}")
        self.extractor = extractor
        self.kind = kind


# Patterns for sensitive data redaction
_REDACTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Bot API tokens (<bot id>:<35 char secret>)
    (re.compile(r"\b\d{6,12}:[A-Za-z0-9_-]{30,}"), "<REDACTED_TOKEN>"),
    # Token embedded in Bot API URLs
    (re.compile(r"/bot[^/\s]+/"), "/bot<REDACTED_TOKEN>/"),
    # URL credentials
    (re.compile(r"://[^@\s/]+:[^@\s/]+@"), "://<REDACTED_CREDS>@"),
    # Authorization headers
    (re.compile(r"(Authorization:\s*Bearer\s+)\S+", re.IGNORECASE), r"\1<REDACTED_TOKEN>"),
    # Generic secret-like values (webhook secrets, etc.)
    (
        re.compile(
            r"(secret[\"']?\s*[:=]\s*[\"']?)" r"[A-Za-z0-9_-]{16,}",
            re.IGNORECASE,
        ),
        r"\1<REDACTED_SECRET>",
    ),
]


def redact_error(error: Exception) -> MatchRouterError:
    """Wrap an exception, redacting sensitive data from its message.

    Args:
        error: The original exception.

    Returns:
        A MatchRouterError with redacted message and original preserved.
    """
    message = str(error) or type(error).__name__
    for pattern, replacement in _REDACTION_PATTERNS:
        message = pattern.sub(replacement, message)

    redacted = MatchRouterError(message)
    redacted.__cause__ = error
    return redacted
