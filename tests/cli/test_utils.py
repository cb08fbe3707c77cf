"""
Tests for CLI utilities.
"""

from __future__ import annotations

import pytest
import typer

from sqlgate.cli.utils import fail, make_gateway, output_tables, parse_params
from sqlgate.errors import ExecutionError
from sqlgate.result import ResultTable, TabularResult


class TestParseParams:
    def test_none(self):
        assert parse_params(None) == {}

    def test_pairs(self):
        assert parse_params(["id=7", "note=", "expr=a=b"]) == {"id": "7", "note": "", "expr": "a=b"}

    @pytest.mark.parametrize("item", ["novalue", "=7", " =x"])
    def test_malformed(self, item):
        with pytest.raises(typer.BadParameter):
            parse_params([item])


class TestMakeGateway:
    def test_wires_section_and_config(self):
        gw = make_gateway("oracle", section="OracleConnection", config="/etc/SysInfo.xml")
        assert gw.backend == "oracle"
        assert gw.section == "OracleConnection"
        assert gw.factory.config_source == "/etc/SysInfo.xml"
        assert gw.sink is None


class TestFail:
    def test_gateway_error_message(self, capsys):
        with pytest.raises(typer.Exit) as exc_info:
            fail(ExecutionError("Error: [boom]"))
        assert exc_info.value.exit_code == 1
        assert "Error: [boom]" in capsys.readouterr().err

    def test_plain_exception_prefixed(self, capsys):
        with pytest.raises(typer.Exit):
            fail(ValueError("bad"))
        assert "Error: bad" in capsys.readouterr().err


class TestOutputTables:
    def test_bracketed_values_printed_verbatim(self, capsys):
        result = TabularResult([ResultTable.from_cursor([("[note]",)], [("[/]",), ("[bold]x",), (None,)])])

        output_tables(result)

        out = capsys.readouterr().out
        assert "[note]" in out
        assert "[/]" in out
        assert "[bold]x" in out
        assert "NULL" in out
