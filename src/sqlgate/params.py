"""Backend-neutral parameter descriptors.

A :class:`ParameterDescriptor` replaces positional ``[direction, type,
name, value, size]`` arrays with named fields. Descriptors are bound by
name, so the order of a descriptor sequence never changes what is bound;
it only fixes the order of the returned Output Value Map.

Examples:
    >>> from sqlgate.params import In, Out, InOut
    >>> params = [
    ...     In("customer_id", 42, "NUMBER"),
    ...     Out("status", "VARCHAR2", size=100),
    ...     InOut("counter", 0, "NUMBER"),
    ... ]

A plain mapping is shorthand for IN parameters::

    gateway.execute_procedure("dbo.usp_touch", {"id": 7, "note": None})
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from sqlgate.errors import DuplicateParameterError, ParameterError

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#]*$")
_BIND_PREFIXES = "@:"


class ParameterDirection(str, Enum):
    """Data-flow direction of a bound parameter."""

    IN = "in"
    OUT = "out"
    IN_OUT = "in_out"

    @property
    def is_input(self) -> bool:
        return self in (ParameterDirection.IN, ParameterDirection.IN_OUT)

    @property
    def is_output(self) -> bool:
        return self in (ParameterDirection.OUT, ParameterDirection.IN_OUT)


@dataclass(frozen=True)
class ParameterDescriptor:
    """One bound value.

    Attributes:
        name: Parameter name, unique within a call. A leading ``@`` or ``:``
            is accepted and ignored for binding.
        value: Input value; ``None`` binds as SQL NULL. Ignored for OUT.
        direction: IN, OUT or IN_OUT.
        type_tag: Backend-native type name (``"NVARCHAR"``, ``"VARCHAR2"``,
            ``"REF_CURSOR"`` ...). Required for OUT / IN_OUT.
        size: Maximum size for variable-length output types. May also be
            written into the tag (``"VARCHAR2(50)"``). ``-1`` means ``MAX``
            on SQL Server; other backends reject negative sizes.
    """

    name: str
    value: Any = None
    direction: ParameterDirection = ParameterDirection.IN
    type_tag: str | None = None
    size: int | None = None

    @property
    def bind_name(self) -> str:
        """Name without the ``@`` / ``:`` prefix."""
        return self.name.lstrip(_BIND_PREFIXES)

    @property
    def type_name(self) -> str | None:
        """Normalized (upper-case, underscore-joined) type tag."""
        if self.type_tag is None:
            return None
        return re.sub(r"\s+", "_", self.type_tag.strip()).upper()


def In(name: str, value: Any = None, type_tag: str | None = None, size: int | None = None) -> ParameterDescriptor:
    """Input parameter."""
    return ParameterDescriptor(name, value, ParameterDirection.IN, type_tag, size)


def Out(name: str, type_tag: str, size: int | None = None) -> ParameterDescriptor:
    """Output-only parameter."""
    return ParameterDescriptor(name, None, ParameterDirection.OUT, type_tag, size)


def InOut(name: str, value: Any, type_tag: str, size: int | None = None) -> ParameterDescriptor:
    """Input/output parameter."""
    return ParameterDescriptor(name, value, ParameterDirection.IN_OUT, type_tag, size)


Parameters = Union[Sequence[ParameterDescriptor], Mapping[str, Any], None]


def coerce_parameters(params: Parameters) -> list[ParameterDescriptor]:
    """Normalize the accepted parameter shapes into a descriptor list."""
    if params is None:
        return []
    if isinstance(params, Mapping):
        return [In(name, value) for name, value in params.items()]
    result = []
    for param in params:
        if not isinstance(param, ParameterDescriptor):
            raise ParameterError(f"Error: expected ParameterDescriptor, got {type(param).__name__}")
        result.append(param)
    return result


def check_parameters(params: Iterable[ParameterDescriptor]) -> None:
    """Validate names and uniqueness.

    Names compare case-insensitively after prefix stripping: both backends
    treat ``@Id`` and ``@id`` as the same parameter.
    """
    seen: set[str] = set()
    for param in params:
        name = param.bind_name
        if not _NAME_RE.match(name):
            raise ParameterError(f"Error: invalid parameter name: {param.name!r}", parameter=param.name)
        if param.size is not None and param.size == 0:
            raise ParameterError(f"Error: parameter {param.name!r} has size 0", parameter=param.name)
        if param.direction.is_output and param.type_tag is None:
            raise ParameterError(
                f"Error: output parameter {param.name!r} requires a type tag", parameter=param.name
            )
        key = name.lower()
        if key in seen:
            raise DuplicateParameterError(param.name)
        seen.add(key)


__all__ = [
    "ParameterDirection",
    "ParameterDescriptor",
    "Parameters",
    "In",
    "Out",
    "InOut",
    "coerce_parameters",
    "check_parameters",
]
