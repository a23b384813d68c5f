"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from streamlatch.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop STREAMLATCH_* variables leaking in from the outer environment."""
    for key in list(os.environ):
        if key.startswith("STREAMLATCH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "streamlatch-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 15.0,
            "user_agent": "TestAgent/1.0",
        },
        "resolver": {"max_depth": 2},
        "playback": {
            "settle_delay_seconds": 0.5,
            "container_selector": "#player",
        },
        "logging": {"level": "DEBUG", "format": "console"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "streamlatch"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 10.0
        assert config.resolver_max_depth == 4
        assert config.playback.settle_delay_seconds == 0.15
        assert config.playback.container_selector == "#modalBody"
        assert config.playback.media_selector == "audio.preview-audio"
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev → console

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "streamlatch-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.resolver_max_depth == 2
        assert config.log_level == "DEBUG"

    def test_playback_section_merges_with_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.playback.settle_delay_seconds == 0.5
        assert config.playback.container_selector == "#player"
        assert config.playback.media_selector == "audio.preview-audio"

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_empty_yaml_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(config_path=path).resolver_max_depth == 4

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STREAMLATCH_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("STREAMLATCH_RESOLVER_MAX_DEPTH", "6")
        monkeypatch.setenv("STREAMLATCH_PLAYBACK_SETTLE_DELAY_SECONDS", "0.3")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.resolver_max_depth == 6
        assert config.playback.settle_delay_seconds == 0.3
        # YAML values not overridden by ENV stay
        assert config.playback.container_selector == "#player"

    def test_dotenv_file_participates_as_env(self, tmp_path: Path) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text("STREAMLATCH_HTTP_TIMEOUT_SECONDS=42\n", encoding="utf-8")
        try:
            config = load_config(dotenv_path=dotenv)
        finally:
            # load_dotenv writes os.environ directly
            os.environ.pop("STREAMLATCH_HTTP_TIMEOUT_SECONDS", None)
        assert config.http_timeout_seconds == 42.0

    def test_missing_dotenv_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STREAMLATCH_RESOLVER_MAX_DEPTH", "6")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"resolver_max_depth": 1, "log_format": "json"},
        )
        assert config.resolver_max_depth == 1
        assert config.log_format == "json"

    def test_invalid_cli_value_fails_validation(self) -> None:
        with pytest.raises(ValueError):
            load_config(cli_overrides={"resolver_max_depth": -3})


class TestLayerShapes:
    """Flat and sectioned keys are interchangeable in every layer."""

    def test_flat_keys_in_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "flat.yaml"
        path.write_text(
            "resolver_max_depth: 7\nplayback_settle_delay_seconds: 0.25\n",
            encoding="utf-8",
        )
        config = load_config(config_path=path)
        assert config.resolver_max_depth == 7
        assert config.playback.settle_delay_seconds == 0.25
        assert config.playback.container_selector == "#modalBody"

    def test_sectioned_cli_override(self) -> None:
        config = load_config(cli_overrides={"playback": {"media_selector": "audio#x"}})
        assert config.playback.media_selector == "audio#x"
        assert config.playback.container_selector == "#modalBody"

    def test_defaults_are_not_mutated_between_loads(self) -> None:
        load_config(cli_overrides={"playback": {"container_selector": "#other"}})
        assert load_config().playback.container_selector == "#modalBody"
