"""
Configuration management for StreamGuide.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["StreamGuideConfig"] = None


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8420
    debug: bool = False
    log_level: str = "INFO"
    base_url: str = "http://localhost:8420"


class DatabaseConfig(BaseModel):
    """Database configuration."""
    url: str = "sqlite:///./streamguide.db"
    echo: bool = False


class GuideConfig(BaseModel):
    """Guide and viewer settings."""
    timezone: Optional[str] = None  # IANA name; None = system local time
    history_days: int = 7  # Trailing window loaded for the admin view
    date_tabs: int = 7  # Today plus the following days
    poll_interval_seconds: float = 10.0  # Now-playing storage re-query
    tick_seconds: float = 1.0  # Local progress tick


class FillerConfig(BaseModel):
    """Filler program preset."""
    title: str = "Schedule Filler (Timer)"
    description: str = "Automatically added filler video."
    video_id: str = "ILzo07ipH40"
    thumbnail: Optional[str] = "https://img.youtube.com/vi/ILzo07ipH40/hqdefault.jpg"


class SchedulingConfig(BaseModel):
    """Scheduling configuration."""
    filler: FillerConfig = Field(default_factory=FillerConfig)


class YouTubeConfig(BaseModel):
    """YouTube Data API settings."""
    api_key: str = ""
    api_url: str = "https://www.googleapis.com/youtube/v3/videos"
    timeout: float = 15.0


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/streamguide.log"
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StreamGuideConfig(BaseModel):
    """Main StreamGuide configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    guide: GuideConfig = Field(default_factory=GuideConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> StreamGuideConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        # Look for config.yaml in current directory or project root
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = StreamGuideConfig(**config_data)
    return _config


def get_config() -> StreamGuideConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> StreamGuideConfig:
    """
    Reload configuration from disk.

    Returns:
        Freshly loaded configuration.
    """
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Map of environment variables to config paths
    env_map = {
        "STREAMGUIDE_HOST": ("server", "host"),
        "STREAMGUIDE_PORT": ("server", "port"),
        "STREAMGUIDE_DEBUG": ("server", "debug"),
        "STREAMGUIDE_DATABASE_URL": ("database", "url"),
        "STREAMGUIDE_TIMEZONE": ("guide", "timezone"),
        "STREAMGUIDE_YOUTUBE_API_KEY": ("youtube", "api_key"),
        "STREAMGUIDE_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


class _ConfigProxy:
    """
    Proxy object that provides lazy access to configuration.

    Allows modules to import `config` directly and access it like:
        from streamguide.config import config
        config.server.port
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_config(), name)

    def __repr__(self) -> str:
        return f"<ConfigProxy for {get_config()}>"


config = _ConfigProxy()
