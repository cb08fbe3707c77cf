"""Tabular results.

A :class:`TabularResult` is the ordered list of result tables a call
produced, in the order the driver returned them. Column order and row
order are exactly what the backend sent; nothing is sorted client-side.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ResultTable:
    """One result set: ordered columns and rows keyed by column name."""

    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_cursor(cls, description: Sequence[Sequence[Any]], records: Sequence[Sequence[Any]]) -> ResultTable:
        """Build a table from a DB-API ``cursor.description`` and fetched tuples."""
        columns = [desc[0] for desc in description]
        rows = [dict(zip(columns, record)) for record in records]
        return cls(columns=columns, rows=rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.rows)

    def to_dict(self) -> dict[str, Any]:
        return {"columns": list(self.columns), "rows": [dict(r) for r in self.rows]}


@dataclass
class TabularResult:
    """Ordered collection of :class:`ResultTable`."""

    tables: list[ResultTable] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tables)

    def __getitem__(self, index: int) -> ResultTable:
        return self.tables[index]

    def __iter__(self) -> Iterator[ResultTable]:
        return iter(self.tables)

    @property
    def first(self) -> ResultTable | None:
        """First table, or None when the call produced no result sets."""
        return self.tables[0] if self.tables else None

    def to_dict(self) -> dict[str, Any]:
        return {"tables": [t.to_dict() for t in self.tables]}


__all__ = ["ResultTable", "TabularResult"]
