"""Pattern types accepted by extractors.

Applications register plain values (strings, numbers, compiled regular
expressions, callables, option mappings, lists of composite items);
:func:`as_pattern` turns them into one of the tagged variants below so
extractors never have to inspect raw values themselves.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from matchrouter.core.errors import MalformedPattern


@dataclass(frozen=True)
class Exact:
    """Equality with the extracted value."""

    value: str | int | float


@dataclass(frozen=True)
class Regex:
    """Regular expression searched in the extracted value."""

    pattern: re.Pattern[str]


@dataclass(frozen=True)
class Predicate:
    """Unary function called with the extracted value."""

    func: Callable[[Any], Any]


@dataclass(frozen=True)
class WithOverrides:
    """A pattern carrying per-evaluation option overrides."""

    pattern: Pattern
    overrides: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Composite:
    """Ordered ``(extractor name, nested raw pattern)`` items for ALL/ANY."""

    items: tuple[tuple[str, Any], ...]


Pattern = Union[Exact, Regex, Predicate, WithOverrides, Composite]

_PATTERN_TYPES = (Exact, Regex, Predicate, WithOverrides, Composite)


def as_pattern(raw: Any) -> Pattern:
    """Coerce an application-supplied value into a :data:`Pattern`.

    Raises:
        MalformedPattern: If the value has no pattern interpretation.
    """
    if isinstance(raw, _PATTERN_TYPES):
        return raw
    if isinstance(raw, bool):
        raise MalformedPattern(f"Booleans are not patterns: {raw!r}")
    if isinstance(raw, (str, int, float)):
        return Exact(raw)
    if isinstance(raw, re.Pattern):
        return Regex(raw)
    if isinstance(raw, Mapping):
        return _from_mapping(raw)
    if isinstance(raw, (list, tuple)):
        return _composite(raw)
    if callable(raw):
        return Predicate(raw)
    raise MalformedPattern(f"Unsupported pattern type: {type(raw).__name__}")


def _from_mapping(raw: Mapping[str, Any]) -> Pattern:
    """Handle ``{"value": ...}`` and ``{"regex": ...}`` option mappings."""
    options = dict(raw)
    if "value" in options:
        base = as_pattern(options.pop("value"))
    elif "regex" in options:
        source = options.pop("regex")
        flags = re.IGNORECASE if options.pop("ignore_case", False) else 0
        try:
            base = Regex(re.compile(source, flags))
        except (re.error, TypeError) as e:
            raise MalformedPattern(f"Invalid regex {source!r}: {e}") from e
    else:
        raise MalformedPattern(f"Pattern mapping needs a 'value' or 'regex' key: {raw!r}")

    if not options:
        return base
    return WithOverrides(base, options)


def _composite(raw: list[Any] | tuple[Any, ...]) -> Composite:
    items: list[tuple[str, Any]] = []
    for item in raw:
        if not isinstance(item, Mapping) or len(item) != 1:
            raise MalformedPattern(
                f"Composite items must be single-key mappings, got {item!r}"
            )
        [(name, nested)] = item.items()
        items.append((str(name), nested))
    return Composite(tuple(items))


def unwrap(pattern: Pattern) -> tuple[Pattern, Mapping[str, Any]]:
    """Split a pattern into its base and the overrides wrapped around it.

    When wrappers nest, the one closest to the base wins for a repeated key.
    """
    overrides: dict[str, Any] = {}
    while isinstance(pattern, WithOverrides):
        overrides = {**overrides, **pattern.overrides}
        pattern = pattern.pattern
    return pattern, overrides


def matches_value(pattern: Pattern, value: Any) -> bool:
    """Test a scalar pattern against an extracted value.

    Overrides are ignored here; only extractors that understand options
    look at them.

    Raises:
        MalformedPattern: For composite patterns, which have no scalar meaning.
    """
    pattern, _ = unwrap(pattern)
    if isinstance(pattern, Exact):
        return pattern.value == value
    if isinstance(pattern, Regex):
        return pattern.pattern.search(str(value)) is not None
    if isinstance(pattern, Predicate):
        return bool(pattern.func(value))
    if isinstance(pattern, Composite):
        raise MalformedPattern("Composite patterns only apply to 'all'/'any' extractors")
    raise MalformedPattern(f"Unsupported pattern: {pattern!r}")
