"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from matchrouter.config import MatchRouterConfig, RouteConfig, load_config
from matchrouter.core.errors import ConfigError


@pytest.fixture()
def config_dir(tmp_path: Path) -> Path:
    """Create a temp config directory."""
    d = tmp_path / ".matchrouter"
    d.mkdir()
    return d


@pytest.fixture()
def valid_config_data() -> dict:
    """Config data exercising every section."""
    return {
        "similarity": {"threshold": 0.8, "case_insensitive": False},
        "max_composite_depth": 4,
        "disabled_extractors": ["media"],
        "routes": [
            {"name": "greet", "extractor": "similarity", "pattern": "hello"},
            {
                "name": "hi-or-bye",
                "extractor": "any",
                "pattern": [{"text": {"regex": "^hi", "ignore_case": True}}, {"text": "bye"}],
            },
        ],
        "log_level": "debug",
    }


def write_config(path: Path, data: object) -> Path:
    """Write config data to a YAML file."""
    config_file = path / "config.yaml"
    config_file.write_text(yaml.dump(data))
    return config_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MATCHROUTER_SIMILARITY_THRESHOLD", raising=False)
    monkeypatch.delenv("MATCHROUTER_LOG_LEVEL", raising=False)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_valid_config(self, config_dir: Path, valid_config_data: dict) -> None:
        config = load_config(str(write_config(config_dir, valid_config_data)))

        assert config.similarity.threshold == 0.8
        assert config.similarity.case_insensitive is False
        assert config.max_composite_depth == 4
        assert config.disabled_extractors == ["media"]
        assert config.route_names == ["greet", "hi-or-bye"]
        assert config.log_level == "DEBUG"

    def test_explicit_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "missing.yaml"))

    def test_missing_default_file_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        config = load_config()
        assert config == MatchRouterConfig()

    def test_empty_file_uses_defaults(self, config_dir: Path) -> None:
        config_file = config_dir / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)).routes == []

    def test_invalid_yaml(self, config_dir: Path) -> None:
        config_file = config_dir / "config.yaml"
        config_file.write_text("routes: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_non_mapping(self, config_dir: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(write_config(config_dir, ["a", "b"])))

    def test_invalid_threshold(self, config_dir: Path) -> None:
        data = {"similarity": {"threshold": 3}}
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(str(write_config(config_dir, data)))

    def test_invalid_route_pattern(self, config_dir: Path) -> None:
        data = {"routes": [{"name": "bad", "extractor": "text", "pattern": {"threshold": 1}}]}
        with pytest.raises(ConfigError):
            load_config(str(write_config(config_dir, data)))

    def test_invalid_log_level(self, config_dir: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(str(write_config(config_dir, {"log_level": "LOUD"})))


class TestEnvOverrides:
    def test_threshold_override(
        self, config_dir: Path, valid_config_data: dict, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MATCHROUTER_SIMILARITY_THRESHOLD", "0.5")
        config = load_config(str(write_config(config_dir, valid_config_data)))
        assert config.similarity.threshold == 0.5
        assert config.similarity.case_insensitive is False

    def test_log_level_override(
        self, config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MATCHROUTER_LOG_LEVEL", "warning")
        config = load_config(str(write_config(config_dir, {})))
        assert config.log_level == "WARNING"


class TestRouteConfig:
    def test_keeps_raw_pattern(self) -> None:
        route = RouteConfig(name="r", extractor="chat", pattern=42)
        assert route.pattern == 42

    def test_rejects_null_pattern(self) -> None:
        with pytest.raises(ValueError):
            RouteConfig(name="r", extractor="text", pattern=None)
