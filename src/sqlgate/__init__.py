"""
sqlgate - backend-agnostic SQL execution gateway.

Run parameterized statements and stored procedures against SQL Server
(pymssql) or Oracle (oracledb) through one interface. Connection targets
come from a named configuration section, so the same calling code runs
against any database by changing configuration only.

Quick start::

    from sqlgate import SqlGateway, In, Out

    gw = SqlGateway("oracle")                       # section "OracleConnection"
    result = gw.execute_query("SELECT * FROM dual")
    outputs = gw.execute_procedure_outputs(
        "pkg_orders.count_open",
        [In("customer_id", 42, "NUMBER"), Out("open_orders", "NUMBER")],
    )
"""

from sqlgate.adapters import (
    AdapterRegistry,
    BackendKind,
    CommandType,
    ConnectionTarget,
    DatabaseAdapter,
    adapter_registry,
    get_adapter,
)
from sqlgate.config import (
    ConfigResolver,
    MappingConfigResolver,
    XmlConfigResolver,
    get_default_config_path,
    set_default_config_path,
)
from sqlgate.connection import ConnectionFactory
from sqlgate.errors import (
    ConfigError,
    ConfigMissingError,
    ConnectionOpenError,
    DuplicateParameterError,
    ErrorCategory,
    ExecutionError,
    GatewayError,
    InvalidConfigError,
    MissingOutputSizeError,
    ParameterError,
    UnsupportedBackendError,
)
from sqlgate.executor import CommandExecutor, SqlGateway
from sqlgate.params import In, InOut, Out, ParameterDescriptor, ParameterDirection
from sqlgate.result import ResultTable, TabularResult
from sqlgate.sink import LogSeverity, LogSink, StructlogSink

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Gateway
    "SqlGateway",
    "CommandExecutor",
    "ConnectionFactory",
    # Parameters / results
    "ParameterDescriptor",
    "ParameterDirection",
    "In",
    "Out",
    "InOut",
    "ResultTable",
    "TabularResult",
    # Backends
    "BackendKind",
    "CommandType",
    "ConnectionTarget",
    "DatabaseAdapter",
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
    # Config
    "ConfigResolver",
    "XmlConfigResolver",
    "MappingConfigResolver",
    "get_default_config_path",
    "set_default_config_path",
    # Logging sink
    "LogSeverity",
    "LogSink",
    "StructlogSink",
    # Errors
    "ErrorCategory",
    "GatewayError",
    "ConfigError",
    "ConfigMissingError",
    "InvalidConfigError",
    "UnsupportedBackendError",
    "ConnectionOpenError",
    "ExecutionError",
    "ParameterError",
    "MissingOutputSizeError",
    "DuplicateParameterError",
]
