"""sqlgate command-line interface (``sqlgate`` console script)."""

from sqlgate.cli.app import app

__all__ = ["app"]
