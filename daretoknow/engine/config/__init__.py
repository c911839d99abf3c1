"""Application configuration."""

from .settings import (
    AppConfig,
    ContentConfig,
    GameConfig,
    SystemConfig,
    get_default_config,
    get_template_config,
)

__all__ = [
    "AppConfig",
    "ContentConfig",
    "GameConfig",
    "SystemConfig",
    "get_default_config",
    "get_template_config",
]
