"""Configuration management for the inventory API client."""

import os
import tomllib
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "http://localhost:5000/api"


class ClientConfig(BaseModel):
    """Connection and display settings for the inventory backend."""

    base_url: str = Field(
        DEFAULT_BASE_URL, description="Base URL of the inventory REST API"
    )
    api_token: str | None = Field(
        None, description="Bearer token sent in the Authorization header"
    )
    timeout: float = Field(10.0, gt=0, description="Request timeout in seconds")
    page_size: int = Field(10, gt=0, description="Default page size for listings")
    card_width: int = Field(
        60,
        gt=0,
        description="Console width (columns) at or below which tables render as cards",
    )


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".labinv"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the configuration file path."""
    return get_config_dir() / "config.toml"


def load_client_config() -> ClientConfig:
    """Load client configuration.

    Precedence order:
    1. ``LABINV_API_URL`` / ``LABINV_API_TOKEN`` environment variables
    2. ``~/.labinv/config.toml`` → ``[api]`` section
    3. Built-in defaults

    A config file that cannot be parsed is logged and ignored.
    """
    values: dict = {}

    config_file = get_config_file()
    if config_file.exists():
        try:
            with open(config_file, "rb") as f:
                config_data = tomllib.load(f)
            values.update(config_data.get("api", {}))
            logger.debug(f"Loaded client config from {config_file}")
        except Exception as e:
            logger.warning(f"Failed to load config file: {e}")

    base_url = os.getenv("LABINV_API_URL")
    if base_url:
        values["base_url"] = base_url
    api_token = os.getenv("LABINV_API_TOKEN")
    if api_token:
        values["api_token"] = api_token

    return ClientConfig(**values)


def create_default_config() -> None:
    """Create a default configuration file with example settings."""
    config_file = get_config_file()

    if config_file.exists():
        logger.warning(f"Config file already exists at {config_file}")
        return

    default_content = f"""# labinv client configuration

[api]
# Inventory backend (can also be set via LABINV_API_URL env var)
base_url = "{DEFAULT_BASE_URL}"

# Bearer token from the web login (can also be set via LABINV_API_TOKEN)
# api_token = "eyJ..."

timeout = 10.0
page_size = 10

# Tables render as label/value cards at or below this console width
card_width = 60
"""

    config_file.write_text(default_content)
    logger.info(f"Created default config file at {config_file}")
