import sys
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arango_graph.domain.models.options import POLICY_VALUES

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_SETTINGS_PATH = Path("config") / "settings.yaml"


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    colorize: bool = True

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Logging level must be one of {', '.join(sorted(LOG_LEVELS))}")
        return value


class ConnectionSettings(BaseSettings):
    """Connection details and per-connection operation defaults.

    Values are read from ``ARANGO_*`` environment variables or ``.env``;
    nested sections use ``__`` (e.g. ``ARANGO_LOGGING__LEVEL=DEBUG``).
    """

    endpoint: str = Field(
        default="http://localhost:8529", description="Server HTTP endpoint"
    )
    database: Optional[str] = Field(
        default=None,
        description="Database name; when set, requests go to /_db/<database>",
    )
    username: Optional[str] = Field(default=None, description="Basic auth user")
    password: Optional[str] = Field(default=None, description="Basic auth password")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    connect_timeout: float = Field(
        default=10.0, description="Connection timeout in seconds"
    )
    wait_for_sync: bool = Field(
        default=False, description="Default for the waitForSync request flag"
    )
    replace_policy: Optional[str] = Field(
        default="error", description="Default conflict policy for replace operations"
    )
    update_policy: Optional[str] = Field(
        default="error", description="Default conflict policy for update operations"
    )
    delete_policy: Optional[str] = Field(
        default="error", description="Default conflict policy for delete operations"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="ARANGO_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("replace_policy", "update_policy", "delete_policy")
    @classmethod
    def _check_policy(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        if value not in POLICY_VALUES:
            raise ValueError(f"Policy must be one of 'error', 'last', got {value!r}")
        return value

    @field_validator("timeout", "connect_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Timeouts must be positive")
        return value


def load_settings(path: Union[str, Path, None] = None, **overrides: Any) -> ConnectionSettings:
    """
    Load connection settings from a YAML file and environment variables.

    If the YAML file exists its contents are used as defaults; environment
    variables and explicit ``overrides`` take precedence.

    Raises:
        ValueError: If the YAML file cannot be parsed or fails validation.
    """
    yaml_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    data: dict[str, Any] = {}
    if yaml_path.exists():
        try:
            with open(yaml_path) as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse settings file {yaml_path}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {yaml_path} must contain a mapping")
    elif path is not None:
        raise FileNotFoundError(f"Settings file not found: {yaml_path}")

    # init kwargs beat env vars in pydantic-settings, so drop yaml keys the
    # environment already provides
    env_settings = ConnectionSettings()
    env_fields = env_settings.model_fields_set
    merged = {k: v for k, v in data.items() if k not in env_fields}
    merged.update(overrides)
    try:
        return ConnectionSettings(**merged)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


def configure_logging(settings: Optional[ConnectionSettings] = None) -> None:
    """Replace loguru's default sink with one honouring ``settings.logging``."""
    log_settings = (settings or ConnectionSettings()).logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_settings.level,
        format=log_settings.format,
        colorize=log_settings.colorize,
    )
    logger.info("Logger configured with level: {}", log_settings.level)
