"""Command executor — the four execution shapes of the gateway.

Manifesto:
    Calling code should not know which backend is active. A
    :class:`SqlGateway` is bound to one backend and exposes the same four
    operations for both, whatever shape the driver API has underneath:

    ==============================  =============================
    Operation                       Returns
    ==============================  =============================
    ``execute_non_query``           ``None``
    ``execute_procedure``           ``None``
    ``execute_query``               :class:`TabularResult`
    ``execute_procedure_query``     :class:`TabularResult`
    ``execute_procedure_outputs``   ``dict`` of OUT / IN_OUT values
    ==============================  =============================

Architecture::

    SqlGateway._run(text, command_type, params, connection, consume)
        1. coerce + validate descriptors         (no I/O)
        2. open connection via ConnectionFactory (only if none supplied)
        3. adapter.create_command -> bind -> execute
        4. consume(command)                      tables / outputs / nothing
        5. ExitStack releases command, then connection (if owned)
        6. failures: GatewayError re-raised as is, anything else wrapped
           as ExecutionError("Error: ..."), reported to the LogSink

Examples:
    >>> from sqlgate import SqlGateway, In, Out
    >>> gw = SqlGateway("mssql", section="ReportingDB")
    >>> gw.execute_query("SELECT id, name FROM dbo.customer WHERE region = %(region)s",
    ...                  {"region": "EU"}).first.rows
    [{'id': 1, 'name': 'Acme'}]
    >>> gw.execute_procedure_outputs("dbo.usp_count", [In("region", "EU"), Out("total", "INT")])
    {'total': 42}

Guardrails:
    ❌ DON'T: Close a connection the caller passed in
    ✅ DO: Close only what ``_run`` opened
    ❌ DON'T: Let a failing ``close()`` hide the error that caused it
    ✅ DO: Swallow release failures, log them at debug level

Tags:
    sqlgate, executor, gateway, resource-guard, error-wrapping
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import ExitStack
from typing import Any, TypeVar

from sqlgate.adapters.base import Command
from sqlgate.adapters.types import BackendKind, CommandType
from sqlgate.connection import ConnectionFactory
from sqlgate.errors import ExecutionError, GatewayError
from sqlgate.logging import LogContext, get_logger
from sqlgate.params import ParameterDescriptor, Parameters, coerce_parameters
from sqlgate.result import TabularResult
from sqlgate.sink import LogSeverity, LogSink, StructlogSink

logger = get_logger(__name__)

T = TypeVar("T")

_DEFAULT_SINK: Any = object()
_COMMAND_LABEL_MAX = 120


def _command_label(text: str) -> str:
    """Single-line, length-capped command text for logs and error context."""
    label = " ".join(text.split())
    if len(label) > _COMMAND_LABEL_MAX:
        label = label[: _COMMAND_LABEL_MAX - 3] + "..."
    return label


class SqlGateway:
    """
    Execute statements and procedures against one backend.

    Args:
        backend: Backend name or :class:`BackendKind` (``"mssql"``, ``"oracle"``).
        factory: Connection factory; a default XML-backed one is created if omitted.
        section: Config section for connections the gateway opens itself.
        config_source: Config source for connections the gateway opens itself.
        sink: Failure reporting sink. Defaults to :class:`StructlogSink`;
            ``None`` disables reporting.

    Every operation takes ``connection=None``. When a connection is passed
    the gateway uses it and leaves it open; otherwise it opens one, uses it
    for exactly one call and closes it.
    """

    def __init__(
        self,
        backend: BackendKind | str,
        *,
        factory: ConnectionFactory | None = None,
        section: str | None = None,
        config_source: str | None = None,
        sink: LogSink | None = _DEFAULT_SINK,
    ):
        self.factory = factory or ConnectionFactory()
        self.adapter = self.factory.adapter(backend)
        self.section = section
        self.config_source = config_source
        self.sink: LogSink | None = StructlogSink() if sink is _DEFAULT_SINK else sink

    @property
    def backend(self) -> str:
        return self.adapter.backend

    def __repr__(self) -> str:
        return f"SqlGateway(backend={self.backend!r}, section={self.section!r})"

    # ── Public operations ───────────────────────────────────────────────

    def execute_non_query(self, sql: str, params: Parameters = None, *, connection: Any = None) -> None:
        """Run a statement that returns no rows (DDL / DML)."""
        self._run(sql, CommandType.TEXT, params, connection, _discard)

    def execute_procedure(self, name: str, params: Parameters = None, *, connection: Any = None) -> None:
        """Call a stored procedure and ignore anything it returns."""
        self._run(name, CommandType.PROCEDURE, params, connection, _discard)

    def execute_query(self, sql: str, params: Parameters = None, *, connection: Any = None) -> TabularResult:
        """Run a statement and return every result table it produced."""
        return self._run(sql, CommandType.TEXT, params, connection, _tables)

    def execute_procedure_query(
        self, name: str, params: Parameters = None, *, connection: Any = None
    ) -> TabularResult:
        """Call a stored procedure and return every result table it produced.

        On Oracle the tables are the procedure's ``REF_CURSOR`` outputs in
        declaration order followed by its implicit results.
        """
        return self._run(name, CommandType.PROCEDURE, params, connection, _tables)

    def execute_procedure_outputs(
        self, name: str, params: Parameters, *, connection: Any = None
    ) -> dict[str, Any]:
        """Call a stored procedure and return its OUT / IN_OUT values.

        Keys are the declared descriptor names, in declaration order.
        """
        return self._run(name, CommandType.PROCEDURE, params, connection, _outputs)

    def describe(self) -> str:
        """Password-masked descriptor of the connection this gateway would open."""
        return self.factory.describe(self.backend, self.section, self.config_source)

    # ── Internals ───────────────────────────────────────────────────────

    def _prepare(self, text: str, command_type: CommandType, params: Parameters) -> list[ParameterDescriptor]:
        descriptors = coerce_parameters(params)
        self.adapter.check_parameters(descriptors)
        if command_type is CommandType.PROCEDURE:
            self.adapter.check_identifier(text)
        return descriptors

    def _run(
        self,
        text: str,
        command_type: CommandType,
        params: Parameters,
        connection: Any,
        consume: Callable[[Command, list[ParameterDescriptor]], T],
    ) -> T:
        label = _command_label(text)
        with LogContext(backend=self.backend, command=label):
            try:
                descriptors = self._prepare(text, command_type, params)
                with ExitStack() as stack:
                    if connection is None:
                        connection = self.factory.open_with(self.adapter, self.section, self.config_source)
                        stack.callback(self._release, "connection", self.adapter.close_connection, connection)

                    command = self.adapter.create_command(connection, text, command_type)
                    stack.callback(self._release, "command", command.close)

                    for param in descriptors:
                        command.bind(param)
                    command.execute()
                    result = consume(command, descriptors)

                logger.debug(
                    "command_executed",
                    backend=self.backend,
                    command_type=command_type.value,
                    command=label,
                    parameters=len(descriptors),
                )
                return result
            except GatewayError as exc:
                self._report(exc)
                raise
            except Exception as exc:
                error = ExecutionError.wrap(exc, backend=self.backend, command=label)
                self._report(error)
                raise error from exc

    def _release(self, resource: str, close: Callable[..., None], *args: Any) -> None:
        try:
            close(*args)
        except Exception as exc:
            logger.debug("release_failed", backend=self.backend, resource=resource, error=str(exc))

    def _report(self, error: GatewayError) -> None:
        if self.sink is None:
            return
        try:
            self.sink.emit(LogSeverity.ERROR, error.message, error.to_dict())
        except Exception as exc:
            logger.debug("sink_emit_failed", backend=self.backend, error=str(exc))


def _discard(command: Command, descriptors: list[ParameterDescriptor]) -> None:
    return None


def _tables(command: Command, descriptors: list[ParameterDescriptor]) -> TabularResult:
    return TabularResult(tables=command.fetch_tables())


def _outputs(command: Command, descriptors: list[ParameterDescriptor]) -> dict[str, Any]:
    return {p.name: command.read_output(p) for p in descriptors if p.direction.is_output}


# Alias kept for callers that think in terms of "the executor"
CommandExecutor = SqlGateway


__all__ = ["SqlGateway", "CommandExecutor"]
