"""Backend adapter base classes.

Manifesto:
    SQL Server (pymssql) and Oracle (oracledb) expose very different
    parameter and result APIs: pyformat placeholders and batches on one
    side, bind variables, ``cursor.var()`` and REF CURSORs on the other.
    The executor is written once, against the capability set below;
    everything driver-shaped lives in one adapter per backend.

Architecture::

    DatabaseAdapter                      one per BackendKind
        describe(target)     -> str      connection descriptor (optionally masked)
        open(target)         -> handle   native driver connection
        create_command(...)  -> Command
        check_parameters(ps)             type tags + output sizes, no I/O

    Command                              one in-flight statement
        bind(param)                      in declaration order, by name
        execute()
        fetch_tables()       -> list[ResultTable]
        read_output(param)   -> value
        close()                          idempotent; releases cursor(s)

Guardrails:
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded at ``open()`` time with clear ``ConfigError``
    ❌ Closing a connection from inside a Command
    ✅ Commands release only what they created (cursors, variables)

Tags:
    sqlgate, database, abstract-base, adapter-pattern
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar

from sqlgate.errors import MissingOutputSizeError, ParameterError
from sqlgate.logging import get_logger
from sqlgate.params import ParameterDescriptor, check_parameters
from sqlgate.result import ResultTable

from .types import CommandType, ConnectionTarget

logger = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#]*(\.[A-Za-z_][A-Za-z0-9_$#]*){0,2}$")
_TYPE_BASE_RE = re.compile(r"^[A-Z][A-Z0-9_]*")
_TYPE_SIZE_RE = re.compile(r"\([\s_]*(\d+|MAX)[\s_]*(?:,[\s_]*\d+[\s_]*)?\)")


class Command(ABC):
    """A statement or procedure call bound to an open connection."""

    def __init__(self, connection: Any, text: str, command_type: CommandType):
        self.connection = connection
        self.text = text
        self.command_type = command_type
        self.parameters: list[ParameterDescriptor] = []
        self._closed = False

    def bind(self, param: ParameterDescriptor) -> None:
        """Register a parameter; drivers receive it at ``execute()``."""
        self.parameters.append(param)

    @abstractmethod
    def execute(self) -> None:
        """Run the command with the bound parameters."""
        ...

    @abstractmethod
    def fetch_tables(self) -> list[ResultTable]:
        """Materialize every result set, in driver-return order."""
        ...

    @abstractmethod
    def read_output(self, param: ParameterDescriptor) -> Any:
        """Post-execution value of an OUT / IN_OUT parameter."""
        ...

    @abstractmethod
    def _release(self) -> None:
        ...

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release driver resources. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._release()

    def __enter__(self) -> Command:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DatabaseAdapter(ABC):
    """
    Abstract base class for backend adapters.

    Subclasses declare the backend's defaults and accepted type tags as
    class attributes and implement the driver-facing methods.
    """

    backend: ClassVar[str]
    display_name: ClassVar[str]
    default_port: ClassVar[int]
    default_section: ClassVar[str | None] = None
    type_tags: ClassVar[frozenset[str]] = frozenset()
    variable_length_types: ClassVar[frozenset[str]] = frozenset()
    # Negative sizes mean MAX only where the backend has one
    supports_max_size: ClassVar[bool] = False

    @abstractmethod
    def describe(self, target: ConnectionTarget, *, mask_password: bool = False) -> str:
        """Connection descriptor for ``target``."""
        ...

    @abstractmethod
    def open(self, target: ConnectionTarget) -> Any:
        """Open a live session. Raises ConnectionOpenError / ConfigError."""
        ...

    @abstractmethod
    def create_command(self, connection: Any, text: str, command_type: CommandType) -> Command:
        """Create a command on an open connection."""
        ...

    def close_connection(self, connection: Any) -> None:
        """Close a connection this library opened."""
        connection.close()

    def check_identifier(self, name: str) -> str:
        """Validate a (schema-qualified) procedure name."""
        if not _IDENTIFIER_RE.match(name):
            raise ParameterError(f"Error: invalid procedure name: {name!r}")
        return name

    def base_type(self, param: ParameterDescriptor) -> str | None:
        """Type tag without any ``(size)`` suffix, e.g. ``NVARCHAR(50)`` -> ``NVARCHAR``."""
        type_name = param.type_name
        if type_name is None:
            return None
        match = _TYPE_BASE_RE.match(type_name)
        if match is None:
            raise ParameterError(f"Error: invalid type tag {param.type_tag!r}", parameter=param.name)
        return match.group(0)

    def declared_size(self, param: ParameterDescriptor) -> int | None:
        """Output size from ``size`` or a ``(n)`` / ``(MAX)`` suffix on the type tag.

        ``MAX`` reads as ``-1``. The explicit ``size`` wins when both are given.
        """
        if param.size is not None:
            return param.size
        match = _TYPE_SIZE_RE.search(param.type_name or "")
        if match is None:
            return None
        return -1 if match.group(1) == "MAX" else int(match.group(1))

    def check_parameters(self, params: Iterable[ParameterDescriptor]) -> None:
        """Validate descriptors without touching the network."""
        params = list(params)
        check_parameters(params)
        for param in params:
            base = self.base_type(param)
            if base is None:
                continue
            if base not in self.type_tags:
                raise ParameterError(
                    f"Error: unknown {self.display_name} type tag {param.type_tag!r}",
                    parameter=param.name,
                )
            size = self.declared_size(param)
            if size is not None and size < 0 and not self.supports_max_size:
                raise ParameterError(
                    f"Error: parameter {param.name!r} has negative size; {self.display_name} has no MAX size",
                    parameter=param.name,
                )
            if param.direction.is_output and base in self.variable_length_types and size is None:
                raise MissingOutputSizeError(param.name, base)


__all__ = [
    "Command",
    "DatabaseAdapter",
]
