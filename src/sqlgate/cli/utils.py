"""
CLI utility helpers — output formatting and gateway construction.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from sqlgate.connection import ConnectionFactory
from sqlgate.errors import ERROR_PREFIX, GatewayError
from sqlgate.executor import SqlGateway
from sqlgate.result import ResultTable, TabularResult

console = Console()
err_console = Console(stderr=True)


# ── Gateway helper ───────────────────────────────────────────────────────


def make_gateway(backend: str, *, section: str | None = None, config: str | None = None) -> SqlGateway:
    """Build a gateway for one CLI invocation.

    The CLI prints failures itself, so the gateway's sink is disabled.
    """
    factory = ConnectionFactory(config_source=config)
    return SqlGateway(backend, factory=factory, section=section, sink=None)


def parse_params(items: list[str] | None) -> dict[str, Any]:
    """``["id=7", "note="]`` -> ``{"id": "7", "note": ""}``."""
    params: dict[str, Any] = {}
    for item in items or []:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise typer.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--param")
        params[name] = value
    return params


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: BaseException) -> None:
    """Print an error to stderr and exit with status 1."""
    message = error.message if isinstance(error, GatewayError) else f"{ERROR_PREFIX}{error}"
    err_console.print(f"[bold red]{escape(message)}[/bold red]")
    raise typer.Exit(code=1)


def output_tables(result: TabularResult, *, as_json: bool = False) -> None:
    """Render every result table to the terminal."""
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        return

    if not len(result):
        console.print("[dim]No result sets.[/dim]")
        return

    for index, table in enumerate(result, start=1):
        _print_table(table, title=f"Result {index} ({len(table)} rows)")


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(table: ResultTable, *, title: str = "") -> None:
    """Render one ResultTable as a Rich table. Names and values are plain text, never markup."""
    rendered = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in table.columns:
        rendered.add_column(Text(col), overflow="fold")
    for row in table.rows:
        values = (row.get(col) for col in table.columns)
        rendered.add_row(*(Text("NULL", style="dim") if v is None else Text(str(v)) for v in values))
    console.print(rendered)
