"""Bot configuration models and YAML loader."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .common.exceptions import ConfigurationError
from .common.logging import get_logger
from .common.utils import MAX_PORT, MIN_PORT

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "./config.yaml"
DEFAULT_API_URL = "http://localhost:4040/api/tunnels"
BOT_KEY_ENV = "NGROK_BOT_KEY"


class TunnelProfile(BaseModel):
    """One exposable local service as listed under ``ngrok_cmds``."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    description: str = Field(min_length=1, description="Button caption")
    connection_type: str = Field(
        min_length=1, description="ngrok tunnel type (http, tcp, tls)"
    )
    port: int = Field(ge=MIN_PORT, le=MAX_PORT, description="Local port to expose")
    permitted_users: list[int] = Field(
        default_factory=list, description="Telegram user ids allowed to start it"
    )
    howto: str | None = Field(None, description="Usage hint sent with the URL")
    domain: str | None = Field(None, description="Custom domain, http tunnels only")

    @field_validator("connection_type")
    @classmethod
    def validate_connection_type(cls, v: str) -> str:
        """Normalize connection type and reject anything that is not a bare word."""
        v = v.lower()
        if not v.isalnum():
            raise ValueError("Connection type must be a single word like 'http' or 'tcp'")
        return v


class NgrokSettings(BaseModel):
    """Runtime settings of the ngrok supervisor and discovery client."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    binary: str = Field(default="ngrok", min_length=1, description="ngrok executable")
    api_url: str = Field(default=DEFAULT_API_URL, description="ngrok status API")
    api_timeout: float = Field(
        default=1.0, ge=0.1, le=60.0, description="Status API timeout in seconds"
    )
    settle_delay: float = Field(
        default=0.5, ge=0.0, le=30.0, description="Pause between spawn and discovery"
    )
    kill_on_start: bool = Field(
        default=True, description="Kill a running tunnel before starting a new one"
    )


class BotConfig(BaseModel):
    """Top level bot configuration."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    bot_key: str = Field(min_length=1, description="Telegram bot token")
    ngrok_cmds: list[TunnelProfile] = Field(default_factory=list)
    permitted_chats: list[int] = Field(default_factory=list)
    ngrok: NgrokSettings = Field(default_factory=NgrokSettings)


def load_config(path: str | Path | None = None) -> BotConfig:
    """Load and validate the bot configuration file.

    Args:
        path: YAML file to read (``./config.yaml`` if None)

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is missing, not YAML or fails validation
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).resolve()
    logger.info("Loading config", path=str(config_path))

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Config file not found by path {config_path}. Error: {e}"
        ) from e

    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file is malformed. Error: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Config file is malformed. Error: expected a mapping")

    env_key = os.environ.get(BOT_KEY_ENV)
    if env_key:
        data["bot_key"] = env_key

    try:
        config = BotConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Config file is malformed. Error: {e}") from e

    logger.info(
        "Config loaded",
        profiles=len(config.ngrok_cmds),
        permitted_chats=len(config.permitted_chats),
    )
    return config
