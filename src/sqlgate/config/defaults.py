"""Process-wide default config source.

The default path is a fallback only: callers that pass ``config_source``
explicitly never read it. It starts out as ``GatewaySettings.config_path``
(``SysInfo.xml`` unless ``SQLGATE_CONFIG_PATH`` says otherwise) and can be
replaced at runtime with :func:`set_default_config_path`.
"""

from __future__ import annotations

from os import PathLike

from sqlgate.settings import get_settings

_default_config_path: str | None = None


def get_default_config_path() -> str:
    """Return the process-wide default config source."""
    if _default_config_path is None:
        return get_settings().config_path
    return _default_config_path


def set_default_config_path(path: str | PathLike[str] | None) -> None:
    """Replace the default config source; ``None`` restores the settings value."""
    global _default_config_path
    _default_config_path = None if path is None else str(path)


__all__ = ["get_default_config_path", "set_default_config_path"]
