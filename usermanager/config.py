"""Configuration loading for the user management form."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

DEFAULT_API_URL = "https://jsonplaceholder.typicode.com/users"

_ENV_OVERRIDES = {
    "USER_MANAGER_API_URL": "api_url",
    "USER_MANAGER_PLACEHOLDER_BIRTHDATE": "placeholder_birthdate",
    "USER_MANAGER_NOTIFICATION_SECONDS": "notification_seconds",
    "USER_MANAGER_REQUEST_TIMEOUT": "request_timeout",
}


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the controller and its HTTP client."""

    api_url: str = DEFAULT_API_URL
    placeholder_birthdate: str = "2001-01-01"
    notification_seconds: float = 1.0
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.api_url.strip():
            raise ValueError("api_url must not be empty")
        if self.notification_seconds <= 0:
            raise ValueError("notification_seconds must be positive")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Settings":
        """Create :class:`Settings` from raw mapping data, ignoring unknown keys."""
        defaults = Settings()
        try:
            return Settings(
                api_url=str(data.get("api_url", defaults.api_url)),
                placeholder_birthdate=str(
                    data.get("placeholder_birthdate", defaults.placeholder_birthdate)
                ),
                notification_seconds=float(
                    data.get("notification_seconds", defaults.notification_seconds)  # type: ignore[arg-type]
                ),
                request_timeout=float(
                    data.get("request_timeout", defaults.request_timeout)  # type: ignore[arg-type]
                ),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid user manager configuration: {exc}") from exc

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        overrides: Dict[str, object] = {}
        for variable, attribute in _ENV_OVERRIDES.items():
            raw = env.get(variable)
            if raw is None or not raw.strip():
                continue
            value: object = raw.strip()
            if attribute in {"notification_seconds", "request_timeout"}:
                try:
                    value = float(raw)
                except ValueError as exc:
                    raise ValueError(f"{variable} must be a number") from exc
            overrides[attribute] = value
        return replace(self, **overrides) if overrides else self


def load_settings(
    config_path: Optional[Path] = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file, then apply environment overrides."""
    raw: Mapping[str, object] = {}
    if config_path is not None and config_path.is_file():
        with config_path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping")
        section = loaded.get("user_manager", loaded)
        if not isinstance(section, dict):
            raise ValueError("The 'user_manager' section must be a mapping")
        raw = section

    return Settings.from_dict(raw).with_env_overrides(environ)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "user_manager.yaml").resolve(strict=False)
    return candidate


__all__ = ["DEFAULT_API_URL", "Settings", "load_settings", "resolve_config_path"]
