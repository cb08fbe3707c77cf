"""Process settings for sqlgate.

Settings are read from ``SQLGATE_*`` environment variables and an optional
``.env`` file. They only supply *defaults*: every value can also be passed
explicitly to :class:`~sqlgate.connection.ConnectionFactory` or
:class:`~sqlgate.executor.SqlGateway`.

Fields
──────
config_path      : Default config source (``SysInfo.xml``)
default_section  : Section used when a call names none (overrides SystemInfo/DBSection)
log_level        : Structlog log level
json_logs        : Force JSON (True) / console (False) rendering; None = auto

Examples:
    >>> from sqlgate.settings import get_settings
    >>> get_settings().config_path
    'SysInfo.xml'
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILENAME = "SysInfo.xml"


class GatewaySettings(BaseSettings):
    """Environment-driven defaults for the gateway."""

    model_config = SettingsConfigDict(
        env_prefix="SQLGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Configuration source ─────────────────────────────────────
    config_path: str = DEFAULT_CONFIG_FILENAME
    default_section: str | None = None

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    """Return the cached settings instance."""
    return GatewaySettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "GatewaySettings",
    "get_settings",
    "clear_settings_cache",
]
