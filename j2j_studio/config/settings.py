"""Settings management with Pydantic Settings.

Configuration priority (highest to lowest):
1. Environment variables
2. .env file in current directory
3. User config file (~/.config/j2j-studio/config.yaml)
4. Default values
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# User config directory
USER_CONFIG_DIR = Path.home() / ".config" / "j2j-studio"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"


class ServiceConfig(BaseSettings):
    """Remote transform service configuration."""

    base_url: str = "http://localhost:8080"
    timeout_s: float = Field(default=10.0, gt=0.0, description="Per-request timeout")

    model_config = SettingsConfigDict(
        env_prefix="J2J_STUDIO_SERVICE_",
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class Settings(BaseSettings):
    """Main application settings.

    Configuration is loaded from multiple sources (highest priority first):
    1. Environment variables (J2J_STUDIO_* prefix)
    2. .env file in current directory
    3. User config file (~/.config/j2j-studio/config.yaml)
    4. Default values

    Example .env file:
        J2J_STUDIO_SERVICE__BASE_URL=http://transform.internal:8080
        J2J_STUDIO_DEBOUNCE_MS=250

    Example config.yaml:
        service:
          base_url: http://localhost:8080
          timeout_s: 5
        debounce_ms: 300
    """

    model_config = SettingsConfigDict(
        env_prefix="J2J_STUDIO_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    # Remote service
    service: ServiceConfig = Field(default_factory=ServiceConfig)

    # Validation coalescing window
    debounce_ms: int = Field(default=300, ge=0)

    # Tree view
    render_max_depth: int | None = Field(default=None, ge=1)
    render_indent: int = Field(default=2, ge=1, le=8)

    # Session defaults
    auto_transform_default: bool = False

    @property
    def debounce_s(self) -> float:
        """Coalescing window in seconds."""
        return self.debounce_ms / 1000.0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Nested blocks from different sources are merged key by key.
        user_file = YamlConfigSettingsSource(settings_cls, yaml_file=USER_CONFIG_FILE)
        return init_settings, env_settings, dotenv_settings, user_file, file_secret_settings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Loads configuration from:
    1. Default values
    2. User config file (~/.config/j2j-studio/config.yaml)
    3. .env file
    4. Environment variables (highest priority)
    """
    return Settings()


def init_user_config() -> Path:
    """Initialize user config directory and return the config file path.

    Creates ~/.config/j2j-studio/config.yaml with a template if it doesn't exist.
    """
    USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    if not USER_CONFIG_FILE.exists():
        template = """# J2J Studio Configuration
# This file is loaded automatically. Environment variables take priority.

# Remote transform service
service:
  base_url: "http://localhost:8080"
  # timeout_s: 10

# Validation coalescing window in milliseconds
# debounce_ms: 300

# Tree view
# render_max_depth: 512
# render_indent: 2

# Start sessions with auto-transform armed
# auto_transform_default: false
"""
        USER_CONFIG_FILE.write_text(template, encoding="utf-8")

    return USER_CONFIG_FILE
