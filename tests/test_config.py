from __future__ import annotations

from pathlib import Path

import pytest

from usermanager.config import DEFAULT_API_URL, Settings, load_settings, resolve_config_path


def test_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.yaml", environ={})

    assert settings == Settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.placeholder_birthdate == "2001-01-01"
    assert settings.notification_seconds == 1.0


def test_yaml_section_and_environment_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "user_manager.yaml"
    config_path.write_text(
        "user_manager:\n"
        "  api_url: https://users.internal/users\n"
        "  notification_seconds: 2.5\n",
        encoding="utf-8",
    )

    settings = load_settings(
        config_path,
        environ={"USER_MANAGER_REQUEST_TIMEOUT": "3", "USER_MANAGER_API_URL": ""},
    )

    assert settings.api_url == "https://users.internal/users"
    assert settings.notification_seconds == 2.5
    assert settings.request_timeout == 3.0


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "user_manager.yaml"
    config_path.write_text("notification_seconds: 0\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config_path, environ={})

    with pytest.raises(ValueError):
        Settings().with_env_overrides({"USER_MANAGER_NOTIFICATION_SECONDS": "soon"})


def test_resolve_config_path_prefers_environment_value(tmp_path: Path) -> None:
    explicit = tmp_path / "custom.yaml"

    assert resolve_config_path(str(explicit)) == explicit.resolve()
    assert resolve_config_path(None).name == "user_manager.yaml"
