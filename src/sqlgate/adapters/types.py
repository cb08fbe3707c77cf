"""Backend kinds and connection targets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BackendKind(str, Enum):
    """Supported backends."""

    MSSQL = "mssql"
    ORACLE = "oracle"


class CommandType(str, Enum):
    """What the command text names."""

    TEXT = "text"
    PROCEDURE = "procedure"


@dataclass(frozen=True)
class ConnectionTarget:
    """Connection parameters resolved from one config section.

    ``port`` is None when the section has no ``Port`` field; each adapter
    applies its own default.
    """

    host: str
    database: str
    user: str
    password: str
    port: int | None = None
    section: str | None = None

    def __repr__(self) -> str:
        return (
            f"ConnectionTarget(host={self.host!r}, database={self.database!r}, "
            f"user={self.user!r}, password='***', port={self.port!r}, section={self.section!r})"
        )


__all__ = [
    "BackendKind",
    "CommandType",
    "ConnectionTarget",
]
