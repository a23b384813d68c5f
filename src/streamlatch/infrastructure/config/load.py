"""Layered configuration loading.

Layers are applied in order, later ones winning::

    DEFAULT_CONFIG < YAML file < STREAMLATCH_* env (incl. .env) < CLI flags

Every layer may use the sectioned shape (``{"resolver": {"max_depth": 2}}``)
or the flat shape used by env vars and CLI flags (``resolver_max_depth``).
Both are folded into the sectioned shape before merging, and the merged
mapping is validated once by :class:`AppConfig`.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL_KEYS = ("app_name", "environment")

# flat key -> (section, key inside section)
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "http_max_manifest_bytes": ("http", "max_manifest_bytes"),
    "resolver_max_depth": ("resolver", "max_depth"),
    "playback_settle_delay_seconds": ("playback", "settle_delay_seconds"),
    "playback_client_script_url": ("playback", "client_script_url"),
    "playwright_headless": ("playwright", "headless"),
    "playwright_timeout_ms": ("playwright", "timeout_ms"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
}

_SECTIONS = frozenset(section for section, _ in _FLAT_KEYS.values())


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *layer* into *target* in place.

    Nested mappings are merged key by key and always copied, so
    ``DEFAULT_CONFIG`` is never aliased into the result.
    """
    for key, value in layer.items():
        if isinstance(value, Mapping):
            current = target.get(key)
            target[key] = _merge_into(
                current if isinstance(current, dict) else {}, value
            )
        else:
            target[key] = value
    return target


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Fold flat keys of *layer* into sections; unknown keys are dropped."""
    out: dict[str, Any] = {
        key: layer[key] for key in _TOP_LEVEL_KEYS if key in layer
    }
    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)
    for flat_key, (section, key) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[key] = layer[flat_key]
    return out


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(path)
    return path


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None,
    cli_overrides: Mapping[str, Any],
) -> Iterator[Mapping[str, Any]]:
    yield DEFAULT_CONFIG
    if config_path is not None:
        yield _yaml_layer(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated :class:`AppConfig` from all layers.

    A ``.env`` file, when given, is loaded into ``os.environ`` without
    replacing variables that are already set, and so takes part in the env
    layer.  Missing files raise :class:`FileNotFoundError`.  Nothing is
    written to disk.
    """
    if dotenv_path is not None:
        load_dotenv(_require_file(dotenv_path), override=False)
    if config_path is not None:
        _require_file(config_path)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _merge_into(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
