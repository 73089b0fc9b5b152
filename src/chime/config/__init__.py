"""Configuration module."""

from chime.config.loader import find_config_path, load_config
from chime.config.models import (
    ChimeConfig,
    ConfigError,
    DispatcherConfig,
    LoggingConfig,
    TelegramConfig,
)
from chime.config.paths import (
    get_chime_home,
    get_config_path,
    get_data_dir,
    get_logs_path,
)

__all__ = [
    "ChimeConfig",
    "ConfigError",
    "DispatcherConfig",
    "LoggingConfig",
    "TelegramConfig",
    "find_config_path",
    "get_chime_home",
    "get_config_path",
    "get_data_dir",
    "get_logs_path",
    "load_config",
]
