"""Connection factory — open backend connections from named config sections.

This is the **single entry point** for opening connections. Calling code
names a backend and (optionally) a config section; host, database or
service name, credentials and port come from the config resolver::

    from sqlgate.connection import ConnectionFactory

    factory = ConnectionFactory()                 # XML resolver, default path
    conn = factory.open("oracle")                 # section "OracleConnection"
    conn = factory.open("mssql", "ReportingDB")   # explicit section
    conn.close()                                  # caller owns the handle

Section fields
--------------
==========  ========  ==========================================
Field       Required  Meaning
==========  ========  ==========================================
``DBIP``    yes       Host name or address
``DBName``  yes       Database (SQL Server) / service name (Oracle)
``UID``     yes       User
``PWD``     yes       Password (may be empty)
``Port``    no        TCP port (Oracle default 1521)
==========  ========  ==========================================

Section selection
-----------------
1. the ``section`` argument,
2. the adapter's default section (Oracle: ``OracleConnection``),
3. ``GatewaySettings.default_section``,
4. ``SystemInfo/DBSection`` from the config source.

Each call resolves the target afresh; nothing is cached between calls.
"""

from __future__ import annotations

from typing import Any

from sqlgate.adapters.base import DatabaseAdapter
from sqlgate.adapters.registry import AdapterRegistry, adapter_registry, get_adapter
from sqlgate.adapters.types import BackendKind, ConnectionTarget
from sqlgate.config.defaults import get_default_config_path
from sqlgate.config.resolver import ConfigResolver, XmlConfigResolver
from sqlgate.errors import ConfigMissingError, InvalidConfigError
from sqlgate.logging import get_logger
from sqlgate.settings import get_settings

logger = get_logger(__name__)

SYSTEM_SECTION = "SystemInfo"
SECTION_FIELD = "DBSection"

HOST_FIELD = "DBIP"
DATABASE_FIELD = "DBName"
USER_FIELD = "UID"
PASSWORD_FIELD = "PWD"
PORT_FIELD = "Port"


class ConnectionFactory:
    """Resolve connection targets and open connections.

    Args:
        resolver: Config resolver; defaults to :class:`XmlConfigResolver`.
        config_source: Source passed to the resolver when a call names none;
            falls back to the process-wide default path.
        registry: Adapter registry (the global one by default).
    """

    def __init__(
        self,
        resolver: ConfigResolver | None = None,
        *,
        config_source: str | None = None,
        registry: AdapterRegistry | None = None,
    ):
        self.resolver = resolver if resolver is not None else XmlConfigResolver()
        self.config_source = config_source
        self.registry = registry or adapter_registry

    def adapter(self, backend: BackendKind | str) -> DatabaseAdapter:
        return get_adapter(backend, self.registry)

    def _source(self, config_source: str | None) -> str:
        return config_source or self.config_source or get_default_config_path()

    def select_section(
        self,
        adapter: DatabaseAdapter,
        section: str | None = None,
        config_source: str | None = None,
    ) -> str:
        """Pick the config section for a call (see module docs for the order)."""
        chosen = section or adapter.default_section or get_settings().default_section
        if not chosen:
            chosen = self.resolver.lookup(self._source(config_source), SYSTEM_SECTION, SECTION_FIELD)
        if not chosen:
            raise ConfigMissingError(SYSTEM_SECTION, SECTION_FIELD)
        return chosen

    def resolve_target(
        self,
        backend: BackendKind | str,
        section: str | None = None,
        config_source: str | None = None,
    ) -> ConnectionTarget:
        """Read host/database/user/password/port for ``section``."""
        adapter = self.adapter(backend)
        return self._resolve(adapter, section, config_source)

    def _resolve(
        self,
        adapter: DatabaseAdapter,
        section: str | None,
        config_source: str | None,
    ) -> ConnectionTarget:
        source = self._source(config_source)
        section = self.select_section(adapter, section, source)

        def field(name: str, *, allow_empty: bool = False) -> str:
            value = self.resolver.lookup(source, section, name)
            if value is None or (not allow_empty and not value.strip()):
                raise ConfigMissingError(section, name).with_context(backend=adapter.backend)
            return value if allow_empty else value.strip()

        host = field(HOST_FIELD)
        database = field(DATABASE_FIELD)
        user = field(USER_FIELD)
        password = field(PASSWORD_FIELD, allow_empty=True)

        port: int | None = None
        raw_port = self.resolver.lookup(source, section, PORT_FIELD)
        if raw_port is not None and raw_port.strip():
            try:
                port = int(raw_port.strip())
            except ValueError:
                raise InvalidConfigError(PORT_FIELD, raw_port).with_context(
                    backend=adapter.backend, section=section
                ) from None

        return ConnectionTarget(
            host=host,
            database=database,
            user=user,
            password=password,
            port=port,
            section=section,
        )

    def describe(
        self,
        backend: BackendKind | str,
        section: str | None = None,
        config_source: str | None = None,
    ) -> str:
        """Connection descriptor with the password masked."""
        adapter = self.adapter(backend)
        target = self._resolve(adapter, section, config_source)
        return adapter.describe(target, mask_password=True)

    def open(
        self,
        backend: BackendKind | str,
        section: str | None = None,
        config_source: str | None = None,
    ) -> Any:
        """Open a connection. The caller owns it and must close it."""
        adapter = self.adapter(backend)
        return self.open_with(adapter, section, config_source)

    def open_with(
        self,
        adapter: DatabaseAdapter,
        section: str | None = None,
        config_source: str | None = None,
    ) -> Any:
        """Open a connection through an already-selected adapter."""
        target = self._resolve(adapter, section, config_source)
        logger.debug("connection_opening", backend=adapter.backend, section=target.section)
        return adapter.open(target)


__all__ = [
    "ConnectionFactory",
    "SYSTEM_SECTION",
    "SECTION_FIELD",
]
