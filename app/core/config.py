"""
Configuration loading following kkb_fastapi pattern.

Each environment has its own TOML file under app/configs.
"""
import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from app.utils.constants import ConfigFile

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"

logger = logging.getLogger(__name__)

__all__ = ["Config", "ConfigFile", "get_config", "get_environment_config"]


class Config:
    """Parsed configuration file."""

    def __init__(self, data: dict[str, Any], path: Path):
        self.data = data
        self.path = path

    def section(self, name: str) -> dict[str, Any]:
        """Return a top-level table, or an empty dict when it is absent."""
        return self.data.get(name, {})

    def __repr__(self):
        return f"<Config: {self.path.name}>"


@lru_cache(maxsize=8)
def get_config(config_file: str = ConfigFile.DEVELOPMENT) -> Config:
    """
    Load and cache a configuration file.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Config instance wrapping the parsed TOML data

    Raises:
        FileNotFoundError: If the file does not exist in app/configs
    """
    path = CONFIG_DIR / config_file
    with path.open("rb") as fh:
        data = tomllib.load(fh)

    logger.debug(f"Loaded configuration from {path}")
    return Config(data, path)


def get_environment_config() -> Config:
    """Load the configuration selected by the ENVIRONMENT variable."""
    env = os.getenv("ENVIRONMENT", "development")
    return get_config(f"{env}.toml")
