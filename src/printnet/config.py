"""
Printnet Configuration
======================

This module handles configuration loading for the animation server.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    PRINTNET_ANIMATIONS_DIR         -> animations.directory
    PRINTNET_CACHE_MAX_ENTRY_BYTES  -> cache.max_entry_bytes
    PRINTNET_PORT                   -> server.port
    PRINTNET_LOG_LEVEL              -> logging.level
    PRINTNET_LOG_FORMAT             -> logging.format
    PORT                            -> server.port (container platforms)

Example:
    from printnet.config import settings

    print(settings.service.name)
    print(settings.animations.directory)
    print(settings.cache.max_entry_bytes)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# 50 MiB admission budget per cached animation
DEFAULT_MAX_ENTRY_BYTES = 50 * 1024 * 1024


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="printnet", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class AnimationsConfig(BaseModel):
    """Animation definition storage configuration."""

    directory: str = Field(
        default="./anims",
        description="Directory holding <name>.json animation definitions",
    )
    extension: str = Field(
        default=".json",
        description="File extension of animation definitions",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of animation definitions",
    )


class CacheConfig(BaseModel):
    """Precomputed animation cache configuration."""

    max_entry_bytes: int = Field(
        default=DEFAULT_MAX_ENTRY_BYTES,
        gt=0,
        description="Animations at or above this payload size are never cached",
    )
    dedupe_inflight: bool = Field(
        default=True,
        description="Share one computation between concurrent misses for a name",
    )


class StreamConfig(BaseModel):
    """Streaming session configuration."""

    media_type: str = Field(
        default="text/plain; charset=utf-8",
        description="Content type of the animation stream",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=5000, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for Printnet.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    animations: AnimationsConfig = Field(default_factory=AnimationsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

CONFIG_SEARCH_PATHS = (
    Path("config.yaml"),
    Path("config.yml"),
    Path("/app/config.yaml"),
    Path(__file__).parent.parent.parent / "config.yaml",
)

# env var -> (section, key, parser); later entries win for the same key
ENV_OVERRIDES = (
    ("PRINTNET_ANIMATIONS_DIR", "animations", "directory", str),
    ("PRINTNET_CACHE_MAX_ENTRY_BYTES", "cache", "max_entry_bytes", int),
    ("PRINTNET_PORT", "server", "port", int),
    ("PORT", "server", "port", int),
    ("PRINTNET_LOG_LEVEL", "logging", "level", str),
    ("PRINTNET_LOG_FORMAT", "logging", "format", str),
)

LOG_FORMATS = {
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}',
    "text": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def find_config_file() -> Optional[Path]:
    return next((path for path in CONFIG_SEARCH_PATHS if path.exists()), None)


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to config.yaml. If None, searches CONFIG_SEARCH_PATHS.

    Returns:
        Settings: Validated configuration

    Raises:
        pydantic.ValidationError: If a value is out of range
    """
    path = Path(config_path) if config_path else find_config_file()

    config_data = {}
    if path is not None and path.exists():
        logger.info(f"Loading config from: {path}")
        config_data = yaml.safe_load(path.read_text()) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    for var, section, key, parse in ENV_OVERRIDES:
        if value := os.environ.get(var):
            config_data.setdefault(section, {})[key] = parse(value)


def setup_logging(settings: Settings) -> None:
    """Configure root logging from the logging section."""
    logging.basicConfig(
        level=getattr(logging, settings.logging.level.upper(), logging.INFO),
        format=LOG_FORMATS.get(settings.logging.format, LOG_FORMATS["text"]),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
