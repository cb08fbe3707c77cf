"""Configuration lookup for connection targets.

Architecture::

    resolver.py    ConfigResolver protocol + XML / mapping implementations
    defaults.py    Process-wide default config source (fallback only)

Guardrails:
    ❌ Reading the process-wide default deep inside call paths
    ✅ Pass ``config_source`` explicitly; the default is a fallback
"""

from .defaults import get_default_config_path, set_default_config_path
from .resolver import ConfigResolver, MappingConfigResolver, XmlConfigResolver

__all__ = [
    "ConfigResolver",
    "XmlConfigResolver",
    "MappingConfigResolver",
    "get_default_config_path",
    "set_default_config_path",
]
