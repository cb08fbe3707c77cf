"""SQL Server adapter.

Uses ``pymssql`` (FreeTDS). pymssql uses **pyformat** (``%(name)s``)
placeholders, which lets every call bind by name.

Procedures run as a T-SQL batch rather than through ``callproc`` so that
parameters bind by name and OUTPUT parameters come back in one round
trip::

    SET NOCOUNT ON;
    DECLARE @sg_out_total INT = %(total)s;
    EXEC [dbo].[usp_count] @region = %(region)s, @total = @sg_out_total OUTPUT;
    SELECT @sg_out_total AS [total];

The trailing SELECT is always the last result set of the batch; the
command consumes it and never reports it as a result table.

Install the driver::

    pip install pymssql
"""

from __future__ import annotations

import re
from typing import Any

from sqlgate.errors import ConfigError, ConnectionOpenError, ParameterError
from sqlgate.logging import get_logger
from sqlgate.params import ParameterDescriptor
from sqlgate.result import ResultTable

from .base import Command, DatabaseAdapter
from .types import BackendKind, CommandType, ConnectionTarget

logger = get_logger(__name__)

_SQL_TYPE_RE = re.compile(r"^[A-Z][A-Z0-9_ ]*(\(\s*(\d+|MAX)\s*(,\s*\d+\s*)?\))?$")
_OUT_VAR_PREFIX = "@sg_out_"


def _import_pymssql() -> Any:
    try:
        import pymssql
    except ImportError:
        raise ConfigError(
            "pymssql is required for SQL Server. "
            "Install with: pip install pymssql"
        ) from None
    return pymssql


def quote_name(name: str) -> str:
    """``dbo.usp_load`` -> ``[dbo].[usp_load]``."""
    return ".".join(f"[{part}]" for part in name.split("."))


class MSSQLCommand(Command):
    """Statement or procedure call on a pymssql connection."""

    def __init__(self, connection: Any, text: str, command_type: CommandType, adapter: MSSQLAdapter):
        super().__init__(connection, text, command_type)
        self._adapter = adapter
        self._cursor: Any = None
        self._tables: list[ResultTable] | None = None
        self._outputs: dict[str, Any] = {}

    @property
    def _output_params(self) -> list[ParameterDescriptor]:
        return [p for p in self.parameters if p.direction.is_output]

    def build_batch(self) -> tuple[str, dict[str, Any]]:
        """Render the SQL text and the named values handed to pymssql."""
        values = {p.bind_name: p.value for p in self.parameters if p.direction.is_input}

        if self.command_type is CommandType.TEXT:
            if self._output_params:
                raise ParameterError(
                    "Error: SQL Server output parameters require a stored procedure",
                    parameter=self._output_params[0].name,
                )
            return self.text, values

        lines = []
        args = []
        for param in self.parameters:
            name = param.bind_name
            if param.direction.is_output:
                var = f"{_OUT_VAR_PREFIX}{name}"
                sql_type = self._adapter.sql_type(param)
                if param.direction.is_input:
                    lines.append(f"DECLARE {var} {sql_type} = %({name})s;")
                else:
                    lines.append(f"DECLARE {var} {sql_type};")
                args.append(f"@{name} = {var} OUTPUT")
            else:
                args.append(f"@{name} = %({name})s")

        exec_line = f"EXEC {quote_name(self.text)}"
        if args:
            exec_line += " " + ", ".join(args)

        if not self._output_params:
            return exec_line, values

        selects = ", ".join(
            f"{_OUT_VAR_PREFIX}{p.bind_name} AS [{p.bind_name}]" for p in self._output_params
        )
        batch = "\n".join(["SET NOCOUNT ON;", *lines, exec_line + ";", f"SELECT {selects};"])
        return batch, values

    def execute(self) -> None:
        sql, values = self.build_batch()
        self._cursor = self.connection.cursor()
        if values:
            self._cursor.execute(sql, values)
        else:
            self._cursor.execute(sql)

        if self._output_params:
            tables = self._drain()
            if not tables:
                raise ParameterError("Error: SQL Server returned no output parameter values")
            out = tables.pop()
            self._outputs = out.rows[0] if out.rows else {}
            self._tables = tables

    def _drain(self) -> list[ResultTable]:
        tables = []
        while True:
            if self._cursor.description:
                tables.append(ResultTable.from_cursor(self._cursor.description, self._cursor.fetchall()))
            if not self._cursor.nextset():
                break
        return tables

    def fetch_tables(self) -> list[ResultTable]:
        if self._tables is None:
            self._tables = self._drain()
        return self._tables

    def read_output(self, param: ParameterDescriptor) -> Any:
        return self._outputs.get(param.bind_name)

    def _release(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None


class MSSQLAdapter(DatabaseAdapter):
    """Microsoft SQL Server adapter (row-oriented server backend)."""

    backend = BackendKind.MSSQL.value
    display_name = "SQL Server"
    default_port = 1433
    type_tags = frozenset({
        "BIGINT", "INT", "SMALLINT", "TINYINT", "BIT",
        "DECIMAL", "NUMERIC", "MONEY", "SMALLMONEY", "FLOAT", "REAL",
        "DATE", "TIME", "DATETIME", "DATETIME2", "SMALLDATETIME", "DATETIMEOFFSET",
        "CHAR", "VARCHAR", "NCHAR", "NVARCHAR", "TEXT", "NTEXT",
        "BINARY", "VARBINARY", "IMAGE",
        "UNIQUEIDENTIFIER", "XML", "SQL_VARIANT",
    })
    variable_length_types = frozenset({"CHAR", "VARCHAR", "NCHAR", "NVARCHAR", "BINARY", "VARBINARY"})
    supports_max_size = True

    def sql_type(self, param: ParameterDescriptor) -> str:
        """T-SQL type for a DECLARE, e.g. ``NVARCHAR(100)`` or ``VARBINARY(MAX)``."""
        tag = " ".join((param.type_tag or "").upper().split())
        if not _SQL_TYPE_RE.match(tag):
            raise ParameterError(f"Error: invalid SQL Server type {param.type_tag!r}", parameter=param.name)
        size = self.declared_size(param)
        if "(" in tag or size is None or self.base_type(param) not in self.variable_length_types:
            return tag
        return f"{tag}({'MAX' if size < 0 else size})"

    def describe(self, target: ConnectionTarget, *, mask_password: bool = False) -> str:
        server = target.host if target.port is None else f"{target.host},{target.port}"
        password = "***" if mask_password else target.password
        return f"Server={server};User ID={target.user};Password={password};Database={target.database}"

    def open(self, target: ConnectionTarget) -> Any:
        """Open a pymssql connection in autocommit mode."""
        pymssql = _import_pymssql()

        kwargs: dict[str, Any] = {
            "server": target.host,
            "user": target.user,
            "password": target.password,
            "database": target.database,
            "autocommit": True,
        }
        if target.port is not None:
            kwargs["port"] = str(target.port)

        try:
            conn = pymssql.connect(**kwargs)
        except Exception as e:
            raise ConnectionOpenError(
                f"Error: failed to connect to SQL Server: {e}",
                cause=e,
            ).with_context(backend=self.backend, section=target.section) from e

        logger.debug("connection_opened", backend=self.backend, host=target.host, database=target.database)
        return conn

    def create_command(self, connection: Any, text: str, command_type: CommandType) -> MSSQLCommand:
        if command_type is CommandType.PROCEDURE:
            self.check_identifier(text)
        return MSSQLCommand(connection, text, command_type, self)


__all__ = [
    "MSSQLAdapter",
    "MSSQLCommand",
    "quote_name",
]
