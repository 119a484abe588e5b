"""Tests for configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from j2j_studio.config import settings as settings_module
from j2j_studio.config.settings import ServiceConfig, Settings, get_settings, init_user_config


@pytest.fixture
def user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config file at a temporary location."""
    config_dir = tmp_path / "j2j-studio"
    config_file = config_dir / "config.yaml"
    monkeypatch.setattr(settings_module, "USER_CONFIG_DIR", config_dir)
    monkeypatch.setattr(settings_module, "USER_CONFIG_FILE", config_file)
    for name in (
        "J2J_STUDIO_SERVICE__BASE_URL",
        "J2J_STUDIO_SERVICE_BASE_URL",
        "J2J_STUDIO_DEBOUNCE_MS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield config_file
    get_settings.cache_clear()


class TestSettings:
    """Tests for Settings model."""

    def test_default_settings(self) -> None:
        """Test creating settings with defaults."""
        # Avoid reading project .env; this test asserts code defaults.
        settings = Settings(_env_file=None, service=ServiceConfig())

        assert settings.service.base_url == "http://localhost:8080"
        assert settings.service.timeout_s == 10.0
        assert settings.debounce_ms == 300
        assert settings.debounce_s == pytest.approx(0.3)
        assert settings.render_max_depth is None
        assert settings.render_indent == 2
        assert settings.auto_transform_default is False

    def test_base_url_trailing_slash_stripped(self) -> None:
        """Test that a trailing slash on the service URL is dropped."""
        config = ServiceConfig(base_url="http://transform.internal:8080/")
        assert config.base_url == "http://transform.internal:8080"

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading the service URL from a nested environment variable."""
        monkeypatch.setenv("J2J_STUDIO_SERVICE__BASE_URL", "http://env.test")
        settings = Settings(_env_file=None)
        assert settings.service.base_url == "http://env.test"

    def test_top_level_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("J2J_STUDIO_DEBOUNCE_MS", "50")
        settings = Settings(_env_file=None)
        assert settings.debounce_s == pytest.approx(0.05)

    def test_invalid_values_rejected(self) -> None:
        """Test field constraints."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, debounce_ms=-1)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, render_indent=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, render_max_depth=0)
        with pytest.raises(ValidationError):
            ServiceConfig(timeout_s=0)


class TestUserConfig:
    """Tests for the YAML user config file."""

    def test_no_user_file(self, user_config: Path) -> None:
        """Test defaults when no user file exists."""
        settings = get_settings()
        assert settings.debounce_ms == 300

    def test_user_file_values(self, user_config: Path) -> None:
        """Test values loaded from the user file."""
        user_config.parent.mkdir(parents=True)
        user_config.write_text(
            "service:\n"
            "  base_url: http://file.test/\n"
            "  timeout_s: 5\n"
            "debounce_ms: 120\n"
            "render_max_depth: 64\n",
            encoding="utf-8",
        )

        settings = get_settings()

        assert settings.service.base_url == "http://file.test"
        assert settings.service.timeout_s == 5.0
        assert settings.debounce_ms == 120
        assert settings.render_max_depth == 64

    def test_env_beats_user_file_for_service(
        self, user_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an environment service URL wins over the file."""
        user_config.parent.mkdir(parents=True)
        user_config.write_text("service:\n  base_url: http://file.test\n", encoding="utf-8")
        monkeypatch.setenv("J2J_STUDIO_SERVICE__BASE_URL", "http://env.test")

        settings = get_settings()

        assert settings.service.base_url == "http://env.test"

    def test_env_beats_user_file_for_top_level_field(
        self, user_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user_config.parent.mkdir(parents=True)
        user_config.write_text("debounce_ms: 120\nrender_indent: 4\n", encoding="utf-8")
        monkeypatch.setenv("J2J_STUDIO_DEBOUNCE_MS", "50")

        settings = get_settings()

        assert settings.debounce_ms == 50
        assert settings.render_indent == 4

    def test_env_and_user_file_service_keys_merge(
        self, user_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the file fills service keys the environment leaves unset."""
        user_config.parent.mkdir(parents=True)
        user_config.write_text(
            "service:\n  base_url: http://file.test\n  timeout_s: 5\n", encoding="utf-8"
        )
        monkeypatch.setenv("J2J_STUDIO_SERVICE__BASE_URL", "http://env.test")

        settings = get_settings()

        assert settings.service.base_url == "http://env.test"
        assert settings.service.timeout_s == 5.0

    def test_get_settings_cached(self, user_config: Path) -> None:
        assert get_settings() is get_settings()

    def test_init_user_config(self, user_config: Path) -> None:
        """Test template creation."""
        path = init_user_config()

        assert path == user_config
        assert path.exists()
        content = path.read_text(encoding="utf-8")
        assert "base_url" in content

        # Existing file is left alone.
        path.write_text("debounce_ms: 10\n", encoding="utf-8")
        init_user_config()
        assert path.read_text(encoding="utf-8") == "debounce_ms: 10\n"

    def test_template_loads(self, user_config: Path) -> None:
        """Test that the generated template is itself a valid config."""
        init_user_config()
        settings = get_settings()
        assert settings.service.base_url == "http://localhost:8080"
