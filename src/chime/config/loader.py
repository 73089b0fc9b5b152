"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr

from chime.config.models import ChimeConfig
from chime.config.paths import get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("config.toml"),  # Current directory
        get_config_path(),  # ~/.chime/config.toml (or CHIME_HOME)
        Path("/etc/chime/config.toml"),  # System-wide
    ]


def _resolve_env_secrets(config: dict[str, Any]) -> dict[str, Any]:
    """Fill secrets from environment variables where not set in config."""
    telegram = config.setdefault("telegram", {})
    if telegram.get("bot_token") is None:
        if value := os.environ.get("TELEGRAM_BOT_TOKEN"):
            telegram["bot_token"] = SecretStr(value)
    return config


def find_config_path(path: Path | None = None) -> Path | None:
    """Resolve the config file to load.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
    """
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> ChimeConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated ChimeConfig instance.

    Raises:
        FileNotFoundError: If an explicit config file is missing.
        ValueError: If the config file is invalid.
    """
    raw_config: dict[str, Any] = {}

    config_path = find_config_path(path)
    if config_path is not None:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)

    raw_config = _resolve_env_secrets(raw_config)
    return ChimeConfig.model_validate(raw_config)
