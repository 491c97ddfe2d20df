"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Layered merge (system -> user -> project -> environment)
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from terminalsync.config.paths import get_config_paths
from terminalsync.config.schema import (
    Config,
    LauncherConfig,
    LoggingConfig,
    WatcherConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("terminalsync.config")

_cached_config: Config | None = None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested dicts merge recursively, lists and scalars are replaced, and None
    in ``override`` leaves the base value in place.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning an empty dict if missing or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from TERMINALSYNC_* environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("TERMINALSYNC_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    python = os.environ.get("TERMINALSYNC_PYTHON")
    if python:
        overrides.setdefault("launcher", {})["interpreter"] = python

    interval = os.environ.get("TERMINALSYNC_POLL_INTERVAL")
    if interval:
        try:
            overrides.setdefault("watcher", {})["poll_interval"] = float(interval)
        except ValueError:
            _log.warning("Ignoring invalid TERMINALSYNC_POLL_INTERVAL=%r", interval)

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged dict to a typed Config."""
    watcher_data = data.get("watcher") or {}
    watcher = WatcherConfig(
        poll_interval=float(watcher_data.get("poll_interval", 0.1)),
        max_read_failures=int(watcher_data.get("max_read_failures", 50)),
    )

    launcher_data = data.get("launcher") or {}
    launcher = LauncherConfig(
        helper_script=launcher_data.get("helper_script"),
        interpreter=launcher_data.get("interpreter"),
        fallback_interpreter=launcher_data.get("fallback_interpreter", "python"),
        signal_file_suffix=launcher_data.get("signal_file_suffix", ".log"),
        shell=launcher_data.get("shell"),
    )

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    known_keys = {"watcher", "launcher", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(
        watcher=watcher,
        launcher=launcher,
        logging=logging_config,
        extra=extra,
    )


def load_config(
    project_root: str | None = None,
    reload: bool = False,
    config_file: str | Path | None = None,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit config file (``config_file``)
    3. Project config ($project_root/.terminalsync/config.yaml)
    4. User config
    5. System config

    Args:
        project_root: Project directory for project-level config.
        reload: Force reload even if cached.
        config_file: Additional config file, e.g. from --config.

    Returns:
        Merged Config object.
    """
    global _cached_config

    cacheable = project_root is None and config_file is None
    if _cached_config is not None and not reload and cacheable:
        return _cached_config

    paths = get_config_paths(project_root)
    if config_file is not None:
        paths.append(Path(config_file))

    merged: dict[str, Any] = {}
    for path in paths:
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            merged = deep_merge(merged, config_data)

    merged = deep_merge(merged, env_overrides())
    config = dict_to_config(merged)

    if cacheable:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config. Useful for testing or forcing a reload."""
    global _cached_config
    _cached_config = None
