"""Configuration loading and validation for matchrouter."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from matchrouter.core.errors import ConfigError, MalformedPattern
from matchrouter.core.interfaces import DEFAULT_MAX_DEPTH
from matchrouter.core.models import SimilarityOptions
from matchrouter.core.patterns import as_pattern

DEFAULT_CONFIG_PATH = "~/.matchrouter/config.yaml"


class RouteConfig(BaseModel):
    """A declarative pattern binding.

    ``pattern`` takes the same shapes as code registration, minus
    callables: a literal, ``{"regex": ..., "ignore_case": ...}``,
    ``{"value": ..., <overrides>}``, or a list of ``{extractor: pattern}``
    items for ``all``/``any``.
    """

    name: str = Field(description="Route identifier, reported on match")
    extractor: str = Field(description="Extractor the pattern is bound to")
    pattern: Any = Field(description="Pattern in its YAML form")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Any) -> Any:
        """Reject values that cannot become a pattern."""
        try:
            as_pattern(v)
        except MalformedPattern as e:
            raise ValueError(str(e)) from e
        return v


class MatchRouterConfig(BaseModel):
    """Top-level matchrouter configuration."""

    similarity: SimilarityOptions = Field(default_factory=SimilarityOptions)
    max_composite_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Deepest allowed nesting of all/any patterns",
    )
    disabled_extractors: list[str] = Field(
        default_factory=list,
        description="Built-in extractors not to register",
    )
    routes: list[RouteConfig] = Field(default_factory=list)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v!r}")
        return level

    @property
    def route_names(self) -> list[str]:
        return [r.name for r in self.routes]


def load_config(path: str | None = None) -> MatchRouterConfig:
    """Load and validate configuration from a YAML file.

    Environment variable overrides:
        MATCHROUTER_SIMILARITY_THRESHOLD: overrides similarity.threshold
        MATCHROUTER_LOG_LEVEL: overrides log_level

    Args:
        path: Path to config file. Defaults to ~/.matchrouter/config.yaml,
            which may be absent (defaults are used then).

    Returns:
        Validated MatchRouterConfig.

    Raises:
        ConfigError: If an explicit config file is missing, or any file is
            unreadable or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    if config_path.exists():
        try:
            raw = config_path.read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a YAML mapping")
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        data = {}

    # Apply environment variable overrides
    env_threshold = os.environ.get("MATCHROUTER_SIMILARITY_THRESHOLD")
    if env_threshold:
        similarity = dict(data.get("similarity") or {})
        similarity["threshold"] = env_threshold
        data["similarity"] = similarity

    env_level = os.environ.get("MATCHROUTER_LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level

    try:
        return MatchRouterConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
