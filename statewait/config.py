"""TOML-based waiter cadence configuration.

Loads ~/.statewait/defaults.toml (global) and statewait.toml (project),
merges them, and resolves per-waiter overrides of WaitSpec cadence fields.

Example statewait.toml:

    [defaults]
    max_interval = 30

    [waiters.db_instance_deleted]
    timeout = 5400
    min_interval = 15
"""

from __future__ import annotations

import dataclasses
import tomllib
from pathlib import Path
from typing import Any

from statewait.constants import CONFIG_DIR_NAME, GLOBAL_CONFIG_NAME, PROJECT_CONFIG_NAME
from statewait.core.exceptions import ConfigurationError
from statewait.spec import WaitSpec

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / CONFIG_DIR_NAME / GLOBAL_CONFIG_NAME

TUNABLE_FIELDS = frozenset({
    "timeout",
    "delay",
    "min_interval",
    "base_interval",
    "max_interval",
    "backoff_factor",
    "poll_interval",
    "not_found_checks",
    "target_occurrences",
})


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("defaults", {})
    merged.setdefault("waiters", {})
    return merged


def _check_keys(section: str, raw: Any) -> RawConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"[{section}] must be a table, got {raw!r}")
    unknown = set(raw) - TUNABLE_FIELDS
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) {', '.join(sorted(unknown))} in [{section}]. "
            f"Valid: {', '.join(sorted(TUNABLE_FIELDS))}"
        )
    return dict(raw)


def resolve_overrides(name: str, config: RawConfig) -> RawConfig:
    """Return the cadence overrides for the waiter called ``name``.

    ``[defaults]`` applies to every waiter; ``[waiters.<name>]`` wins over it.
    """
    defaults = _check_keys("defaults", config.get("defaults", {}))
    waiters = config.get("waiters", {})
    if not isinstance(waiters, dict):
        raise ConfigurationError(f"[waiters] must be a table, got {waiters!r}")
    waiter = _check_keys(f"waiters.{name}", waiters.get(name, {}))
    return {**defaults, **waiter}


def apply_overrides[T](spec: WaitSpec[T], overrides: RawConfig) -> WaitSpec[T]:
    """Return a copy of ``spec`` with the given cadence fields replaced."""
    if not overrides:
        return spec
    _check_keys("overrides", overrides)
    return dataclasses.replace(spec, **overrides)
