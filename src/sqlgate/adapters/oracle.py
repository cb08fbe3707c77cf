"""Oracle database adapter.

Uses ``oracledb`` (python-oracledb) in thin mode. Oracle binds by name
(``:name``), so IN parameters are passed as values and OUT / IN_OUT
parameters as ``cursor.var()`` variables that the driver writes into.

Result tables for a procedure come from, in this order:

1. the statement's own rows (plain ``SELECT`` text),
2. every OUT parameter typed ``REF_CURSOR``, in declaration order,
3. implicit results (``DBMS_SQL.RETURN_RESULT``).

Install the driver::

    pip install oracledb

This adapter is import-guarded: if ``oracledb`` is not installed a
clear :class:`~sqlgate.errors.ConfigError` is raised at ``open()`` time.
"""

from __future__ import annotations

from typing import Any

from sqlgate.errors import ConfigError, ConnectionOpenError
from sqlgate.logging import get_logger
from sqlgate.params import ParameterDescriptor
from sqlgate.result import ResultTable

from .base import Command, DatabaseAdapter
from .types import BackendKind, CommandType, ConnectionTarget

logger = get_logger(__name__)

# type tag -> oracledb attribute name
ORACLE_TYPES: dict[str, str] = {
    "VARCHAR2": "DB_TYPE_VARCHAR",
    "VARCHAR": "DB_TYPE_VARCHAR",
    "NVARCHAR2": "DB_TYPE_NVARCHAR",
    "CHAR": "DB_TYPE_CHAR",
    "NCHAR": "DB_TYPE_NCHAR",
    "NUMBER": "DB_TYPE_NUMBER",
    "INTEGER": "DB_TYPE_NUMBER",
    "INT": "DB_TYPE_NUMBER",
    "DECIMAL": "DB_TYPE_NUMBER",
    "FLOAT": "DB_TYPE_NUMBER",
    "BINARY_FLOAT": "DB_TYPE_BINARY_FLOAT",
    "BINARY_DOUBLE": "DB_TYPE_BINARY_DOUBLE",
    "BINARY_INTEGER": "DB_TYPE_BINARY_INTEGER",
    "PLS_INTEGER": "DB_TYPE_BINARY_INTEGER",
    "BOOLEAN": "DB_TYPE_BOOLEAN",
    "DATE": "DB_TYPE_DATE",
    "TIMESTAMP": "DB_TYPE_TIMESTAMP",
    "TIMESTAMP_WITH_TIME_ZONE": "DB_TYPE_TIMESTAMP_TZ",
    "TIMESTAMP_WITH_LOCAL_TIME_ZONE": "DB_TYPE_TIMESTAMP_LTZ",
    "CLOB": "DB_TYPE_CLOB",
    "NCLOB": "DB_TYPE_NCLOB",
    "BLOB": "DB_TYPE_BLOB",
    "RAW": "DB_TYPE_RAW",
    "LONG": "DB_TYPE_LONG",
    "LONG_RAW": "DB_TYPE_LONG_RAW",
    "ROWID": "DB_TYPE_ROWID",
    "JSON": "DB_TYPE_JSON",
    "REF_CURSOR": "DB_TYPE_CURSOR",
    "REFCURSOR": "DB_TYPE_CURSOR",
    "SYS_REFCURSOR": "DB_TYPE_CURSOR",
    "CURSOR": "DB_TYPE_CURSOR",
}

CURSOR_TYPES = frozenset(tag for tag, attr in ORACLE_TYPES.items() if attr == "DB_TYPE_CURSOR")


def _import_oracledb() -> Any:
    try:
        import oracledb
    except ImportError:
        raise ConfigError(
            "oracledb is required for Oracle. "
            "Install with: pip install oracledb"
        ) from None
    return oracledb


def build_locator(host: str, service_name: str, port: int = 1521) -> str:
    """Oracle connect descriptor for a TCP host/port/service."""
    return (
        f"(DESCRIPTION=(ADDRESS_LIST=(ADDRESS=(PROTOCOL=TCP)(HOST={host})(PORT={port})))"
        f"(CONNECT_DATA=(SERVICE_NAME={service_name})))"
    )


class OracleCommand(Command):
    """Statement or procedure call on an oracledb connection."""

    def __init__(self, connection: Any, text: str, command_type: CommandType, adapter: OracleAdapter):
        super().__init__(connection, text, command_type)
        self._adapter = adapter
        self._cursor: Any = None
        self._vars: dict[str, Any] = {}
        self._cursor_tables: dict[str, ResultTable | None] = {}

    @property
    def is_plsql(self) -> bool:
        if self.command_type is CommandType.PROCEDURE:
            return True
        head = self.text.lstrip().split(None, 1)
        return bool(head) and head[0].upper() in ("BEGIN", "DECLARE", "CALL")

    def _bind_values(self) -> dict[str, Any]:
        oracledb = _import_oracledb()
        binds: dict[str, Any] = {}
        for param in self.parameters:
            name = param.bind_name
            if not param.direction.is_output:
                binds[name] = param.value
                continue
            db_type = getattr(oracledb, ORACLE_TYPES[self._adapter.base_type(param)])
            var = self._cursor.var(db_type, size=self._adapter.declared_size(param) or 0)
            if param.direction.is_input:
                var.setvalue(0, param.value)
            self._vars[name] = var
            binds[name] = var
        return binds

    def execute(self) -> None:
        self._cursor = self.connection.cursor()
        binds = self._bind_values()
        if self.command_type is CommandType.PROCEDURE:
            self._cursor.callproc(self.text, keyword_parameters=binds)
        elif binds:
            self._cursor.execute(self.text, binds)
        else:
            self._cursor.execute(self.text)

    def _ref_cursor_table(self, name: str) -> ResultTable | None:
        if name not in self._cursor_tables:
            ref = self._vars[name].getvalue()
            table = None
            if ref is not None:
                table = ResultTable.from_cursor(ref.description or [], ref.fetchall())
                ref.close()
            self._cursor_tables[name] = table
        return self._cursor_tables[name]

    def fetch_tables(self) -> list[ResultTable]:
        tables = []
        if self.command_type is CommandType.TEXT and self._cursor.description:
            tables.append(ResultTable.from_cursor(self._cursor.description, self._cursor.fetchall()))

        for param in self.parameters:
            if param.direction.is_output and self._adapter.base_type(param) in CURSOR_TYPES:
                table = self._ref_cursor_table(param.bind_name)
                if table is not None:
                    tables.append(table)

        if self.is_plsql:
            for implicit in self._cursor.getimplicitresults():
                tables.append(ResultTable.from_cursor(implicit.description, implicit.fetchall()))
        return tables

    def read_output(self, param: ParameterDescriptor) -> Any:
        if self._adapter.base_type(param) in CURSOR_TYPES:
            return self._ref_cursor_table(param.bind_name)
        value = self._vars[param.bind_name].getvalue()
        if value is not None and hasattr(value, "read"):
            value = value.read()  # CLOB/NCLOB/BLOB
        return value

    def _release(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
        self._vars.clear()


class OracleAdapter(DatabaseAdapter):
    """Oracle adapter (enterprise RDBMS backend with PL/SQL procedures)."""

    backend = BackendKind.ORACLE.value
    display_name = "Oracle"
    default_port = 1521
    default_section = "OracleConnection"
    type_tags = frozenset(ORACLE_TYPES)
    variable_length_types = frozenset({"VARCHAR2", "VARCHAR", "NVARCHAR2", "CHAR", "NCHAR", "RAW"})

    def locator(self, target: ConnectionTarget) -> str:
        return build_locator(target.host, target.database, target.port or self.default_port)

    def describe(self, target: ConnectionTarget, *, mask_password: bool = False) -> str:
        password = "***" if mask_password else target.password
        return f"User ID={target.user};Password={password};Data Source={self.locator(target)}"

    def open(self, target: ConnectionTarget) -> Any:
        """Open an oracledb connection in autocommit mode."""
        oracledb = _import_oracledb()

        try:
            conn = oracledb.connect(
                user=target.user,
                password=target.password,
                dsn=self.locator(target),
            )
        except Exception as e:
            raise ConnectionOpenError(
                f"Error: failed to connect to Oracle: {e}",
                cause=e,
            ).with_context(backend=self.backend, section=target.section) from e

        conn.autocommit = True

        logger.debug("connection_opened", backend=self.backend, host=target.host, service=target.database)
        return conn

    def create_command(self, connection: Any, text: str, command_type: CommandType) -> OracleCommand:
        if command_type is CommandType.PROCEDURE:
            self.check_identifier(text)
        return OracleCommand(connection, text, command_type, self)


__all__ = [
    "ORACLE_TYPES",
    "OracleAdapter",
    "OracleCommand",
    "build_locator",
]
