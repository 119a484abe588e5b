"""Configuration management for J2J Studio."""

from j2j_studio.config.settings import (
    ServiceConfig,
    Settings,
    USER_CONFIG_FILE,
    get_settings,
    init_user_config,
)

__all__ = ["ServiceConfig", "Settings", "USER_CONFIG_FILE", "get_settings", "init_user_config"]
