"""
Root Typer application for the sqlgate CLI.

Commands::

    sqlgate dsn BACKEND [--section S] [--config PATH]
    sqlgate query BACKEND SQL [--param NAME=VALUE]... [--procedure] [--json]
    sqlgate exec BACKEND SQL [--param NAME=VALUE]... [--procedure]
"""

from __future__ import annotations

import typer
from typer import Typer

from sqlgate.cli.utils import console, fail, make_gateway, output_tables, parse_params
from sqlgate.errors import GatewayError
from sqlgate.logging import configure_logging
from sqlgate.settings import get_settings

app = Typer(
    name="sqlgate",
    help="sqlgate — run SQL and stored procedures against SQL Server or Oracle.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from sqlgate import __version__

        try:
            v = pkg_version("sqlgate")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"sqlgate {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """sqlgate CLI — backend-agnostic SQL execution."""
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.json_logs,
    )


# ── Shared options ───────────────────────────────────────────────────────

_SECTION = typer.Option(None, "--section", "-s", help="Config section holding DBIP/DBName/UID/PWD.")
_CONFIG = typer.Option(None, "--config", "-c", help="Config source (defaults to SQLGATE_CONFIG_PATH).")
_PARAMS = typer.Option(None, "--param", "-p", help="Input parameter as NAME=VALUE (repeatable).")
_PROCEDURE = typer.Option(False, "--procedure", "-P", help="Treat SQL as a stored procedure name.")


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("dsn")
def show_dsn(
    backend: str = typer.Argument(..., help="mssql | oracle"),
    section: str | None = _SECTION,
    config: str | None = _CONFIG,
) -> None:
    """Show the resolved connection descriptor (password masked)."""
    try:
        gateway = make_gateway(backend, section=section, config=config)
        console.print(gateway.describe(), markup=False)
    except GatewayError as e:
        fail(e)


@app.command("query")
def run_query(
    backend: str = typer.Argument(..., help="mssql | oracle"),
    sql: str = typer.Argument(..., help="Statement text or procedure name."),
    section: str | None = _SECTION,
    config: str | None = _CONFIG,
    param: list[str] | None = _PARAMS,
    procedure: bool = _PROCEDURE,
    as_json: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Run a query and print every result table."""
    params = parse_params(param)
    try:
        gateway = make_gateway(backend, section=section, config=config)
        if procedure:
            result = gateway.execute_procedure_query(sql, params)
        else:
            result = gateway.execute_query(sql, params)
    except GatewayError as e:
        fail(e)
    output_tables(result, as_json=as_json)


@app.command("exec")
def run_exec(
    backend: str = typer.Argument(..., help="mssql | oracle"),
    sql: str = typer.Argument(..., help="Statement text or procedure name."),
    section: str | None = _SECTION,
    config: str | None = _CONFIG,
    param: list[str] | None = _PARAMS,
    procedure: bool = _PROCEDURE,
) -> None:
    """Run a statement or procedure that returns no rows."""
    params = parse_params(param)
    try:
        gateway = make_gateway(backend, section=section, config=config)
        if procedure:
            gateway.execute_procedure(sql, params)
        else:
            gateway.execute_non_query(sql, params)
    except GatewayError as e:
        fail(e)
    console.print("[green]OK[/green]")
