"""Configuration management for terminalsync.

Hierarchical YAML configuration with:
- System-level config (/etc/terminalsync/ or %PROGRAMDATA%)
- User-level config (~/.config/terminalsync/, ~/.terminalsync/ or %APPDATA%)
- Project-level config ($project_root/.terminalsync/)
- Environment variable overrides (highest priority)

Example usage:
    from terminalsync.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.watcher.poll_interval)
"""

from terminalsync.config.loader import (
    deep_merge,
    get_config,
    load_config,
    reset_config,
)
from terminalsync.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from terminalsync.config.schema import (
    Config,
    LauncherConfig,
    LoggingConfig,
    WatcherConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "deep_merge",
    # Schema types
    "LauncherConfig",
    "LoggingConfig",
    "WatcherConfig",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
