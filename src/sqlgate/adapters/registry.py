"""Backend adapter registry.

Manifesto:
    Callers name a backend (``"mssql"``, ``BackendKind.ORACLE``); they
    never import adapter classes. The registry maps backend names to
    adapter classes and ``get_adapter()`` returns an instance.

Features:
    - ``AdapterRegistry`` singleton with pre-registered defaults
    - ``register()`` for custom adapters (and test fakes)
    - ``get_adapter()`` factory: name or BackendKind -> adapter

Tags:
    sqlgate, database, registry, factory, singleton
"""

from __future__ import annotations

from sqlgate.errors import UnsupportedBackendError

from .base import DatabaseAdapter
from .mssql import MSSQLAdapter
from .oracle import OracleAdapter
from .types import BackendKind


class AdapterRegistry:
    """
    Registry for backend adapter classes.

    Pre-registered adapters:
    - ``mssql`` / ``sqlserver`` / ``sql_server`` / ``sql-server``: :class:`MSSQLAdapter`
    - ``oracle``: :class:`OracleAdapter`
    """

    def __init__(self):
        self._factories: dict[str, type[DatabaseAdapter]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories["mssql"] = MSSQLAdapter
        self._factories["sqlserver"] = MSSQLAdapter  # Alias
        self._factories["sql_server"] = MSSQLAdapter  # Alias
        self._factories["sql-server"] = MSSQLAdapter  # Alias
        self._factories["oracle"] = OracleAdapter

    def register(self, name: str, adapter_class: type[DatabaseAdapter]) -> None:
        """Register an adapter class under ``name``."""
        self._factories[name.lower()] = adapter_class

    def unregister(self, name: str) -> None:
        self._factories.pop(name.lower(), None)

    def create(self, name: str) -> DatabaseAdapter:
        """Create an adapter by name."""
        key = name.strip().lower()
        if key not in self._factories:
            raise UnsupportedBackendError(name)
        return self._factories[key]()

    def list_adapters(self) -> list[str]:
        """List registered adapter names."""
        return sorted(self._factories.keys())


# Global registry
adapter_registry = AdapterRegistry()


def get_adapter(backend: BackendKind | str, registry: AdapterRegistry | None = None) -> DatabaseAdapter:
    """
    Get an adapter by backend.

    Usage:
        adapter = get_adapter(BackendKind.ORACLE)
        adapter = get_adapter("sqlserver")
    """
    name = backend.value if isinstance(backend, BackendKind) else backend
    return (registry or adapter_registry).create(name)


__all__ = [
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
