"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``NOTIFAYA_``, nested via ``__``)
2. YAML config file (``NOTIFAYA_CONFIG_PATH`` env var or ``AppConfig.from_yaml``)
3. Defaults defined here

The resulting ``AppConfig`` is built once at startup and handed to the
engine, which passes the relevant sub-config to each collaborator.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class RegistryEngine(enum.StrEnum):
    """Supported registry storage backends."""

    JSON = "json"
    MEMORY = "memory"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    reload: bool = False


class RegistryConfig(BaseSettings):
    """Registration store settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_REGISTRY__",
        case_sensitive=False,
    )

    engine: RegistryEngine = Field(
        default=RegistryEngine.JSON,
        description="Registry backend: json or memory",
    )
    path: str = Field(
        default="registrations.json",
        description="Path of the JSON file holding all registrations",
    )


class EmailConfig(BaseSettings):
    """SendGrid email delivery settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_EMAIL__",
        case_sensitive=False,
    )

    enabled: bool = True
    api_key: str = ""
    from_email: str = ""
    api_url: str = "https://api.sendgrid.com"
    timeout: float = Field(default=5.0, gt=0)
    subject: str = "You received STX!"

    @property
    def is_configured(self) -> bool:
        """Whether real email delivery can be attempted."""
        return self.enabled and bool(self.api_key)


class DispatchConfig(BaseSettings):
    """Notification dispatch settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_DISPATCH__",
        case_sensitive=False,
    )

    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    dead_letter_path: str = Field(
        default="dead_letters.jsonl",
        description="JSON-lines file for notifications that could not be delivered",
    )


class WebhookAuthConfig(BaseSettings):
    """Inbound Chainhook webhook authentication."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_WEBHOOK__",
        case_sensitive=False,
    )

    secret: str = ""


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``NOTIFAYA_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFAYA_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    version: str = "0.1.0"
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    webhook: WebhookAuthConfig = Field(default_factory=WebhookAuthConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                merged = {**val, **values[key]}
                values[key] = merged
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
