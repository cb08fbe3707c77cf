"""Backend adapters -- one interface over two native driver APIs.

Architecture::

    DatabaseAdapter (base.py)        describe / open / create_command / check_parameters
        |-- MSSQLAdapter             pymssql (SQL Server)
        |-- OracleAdapter            oracledb (Oracle, thin mode)
    Command (base.py)                bind / execute / fetch_tables / read_output / close

    AdapterRegistry (registry.py)    Singleton: backend name -> adapter class
    BackendKind (types.py)           Enum of supported backends
    ConnectionTarget (types.py)      Resolved host/database/user/password/port

Modules
-------
base            Abstract DatabaseAdapter and Command
types           BackendKind, CommandType, ConnectionTarget
registry        AdapterRegistry singleton + get_adapter() factory
mssql           SQL Server adapter (requires pymssql)
oracle          Oracle adapter (requires oracledb)

Guardrails:
    ❌ ``cursor.execute("... WHERE id=" + user_input)``
    ✅ ``gateway.execute_query("... WHERE id = %(id)s", {"id": user_input})``
    ❌ ``adapter = OracleAdapter()`` in application code
    ✅ ``SqlGateway("oracle")`` / ``get_adapter(BackendKind.ORACLE)``
"""

from .base import Command, DatabaseAdapter
from .mssql import MSSQLAdapter
from .oracle import OracleAdapter, build_locator
from .registry import AdapterRegistry, adapter_registry, get_adapter
from .types import BackendKind, CommandType, ConnectionTarget

__all__ = [
    # Types
    "BackendKind",
    "CommandType",
    "ConnectionTarget",
    # Base classes
    "DatabaseAdapter",
    "Command",
    # Implementations
    "MSSQLAdapter",
    "OracleAdapter",
    "build_locator",
    # Registry
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
