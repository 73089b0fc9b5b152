"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, SecretStr, field_validator

from chime.config.paths import get_data_dir, get_system_timezone


class DispatcherConfig(BaseModel):
    """Configuration for the reminder dispatcher."""

    # Seconds between ticks
    poll_interval: float = Field(default=10.0, gt=0)
    # Ticks between heartbeat log lines
    heartbeat_interval: int = Field(default=60, ge=1)


class TelegramConfig(BaseModel):
    """Configuration for Telegram delivery."""

    bot_token: SecretStr | None = None


class LoggingConfig(BaseModel):
    """Configuration for logging output."""

    # None = use CHIME_LOG_LEVEL env var or INFO
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None
    log_to_file: bool = False
    retention_days: int = Field(default=7, ge=1)


class ConfigError(Exception):
    """Configuration error."""

    pass


class ChimeConfig(BaseModel):
    """Root configuration model."""

    data_dir: Path = Field(default_factory=get_data_dir)
    # IANA timezone used to evaluate cron expressions
    timezone: str = Field(default_factory=get_system_timezone)
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("data_dir")
    @classmethod
    def _expand_data_dir(cls, value: Path) -> Path:
        return value.expanduser()

    def require_bot_token(self) -> str:
        """Get the Telegram bot token.

        Raises:
            ConfigError: If no token is configured.
        """
        if self.telegram.bot_token is None:
            raise ConfigError(
                "No Telegram bot token configured. "
                "Set telegram.bot_token in the config file or TELEGRAM_BOT_TOKEN."
            )
        return self.telegram.bot_token.get_secret_value()
