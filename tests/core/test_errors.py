"""Tests for sqlgate.errors module."""

import pytest

from sqlgate.errors import (
    ERROR_PREFIX,
    ConfigError,
    ConfigMissingError,
    ConnectionOpenError,
    DuplicateParameterError,
    ErrorCategory,
    ErrorContext,
    ExecutionError,
    GatewayError,
    InvalidConfigError,
    MissingOutputSizeError,
    ParameterError,
    UnsupportedBackendError,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.backend is None
        assert ctx.section is None
        assert ctx.metadata == {}

    def test_to_dict_excludes_none(self):
        ctx = ErrorContext(backend="oracle", command="pkg.load")
        assert ctx.to_dict() == {"backend": "oracle", "command": "pkg.load"}

    def test_to_dict_includes_metadata(self):
        ctx = ErrorContext(section="MainDB", metadata={"field": "DBIP"})
        assert ctx.to_dict() == {"section": "MainDB", "field": "DBIP"}


class TestGatewayError:
    """Test the base error type."""

    def test_default_category(self):
        assert GatewayError("Error: x").category == ErrorCategory.INTERNAL

    def test_wrap_prefixes_and_chains(self):
        original = RuntimeError("ORA-00942: table or view does not exist")

        err = ExecutionError.wrap(original, backend="oracle", command="SELECT * FROM t")

        assert isinstance(err, ExecutionError)
        assert str(err) == "Error: ORA-00942: table or view does not exist"
        assert err.message.startswith(ERROR_PREFIX)
        assert err.cause is original
        assert err.__cause__ is original
        assert err.context.backend == "oracle"
        assert err.context.command == "SELECT * FROM t"

    def test_with_context_skips_none(self):
        err = ExecutionError("Error: x").with_context(backend="mssql", section=None)
        assert err.context.backend == "mssql"
        assert err.context.section is None

    def test_with_context_unknown_key_goes_to_metadata(self):
        err = ExecutionError("Error: x").with_context(attempt=1)
        assert err.context.metadata == {"attempt": 1}

    def test_to_dict(self):
        err = ExecutionError.wrap(ValueError("bad"), backend="mssql")
        assert err.to_dict() == {
            "error_type": "ExecutionError",
            "message": "Error: bad",
            "category": "DATABASE",
            "context": {"backend": "mssql"},
            "cause": "bad",
        }

    def test_repr(self):
        assert repr(ConfigError("Error: x")) == "ConfigError('Error: x', category=CONFIG)"


class TestHierarchy:
    @pytest.mark.parametrize(
        ("error", "parent", "category"),
        [
            (ConfigMissingError("S", "DBIP"), ConfigError, ErrorCategory.CONFIG),
            (InvalidConfigError("Port", "abc"), ConfigError, ErrorCategory.CONFIG),
            (UnsupportedBackendError("db2"), ConfigError, ErrorCategory.CONFIG),
            (ConnectionOpenError("Error: x"), GatewayError, ErrorCategory.NETWORK),
            (ExecutionError("Error: x"), GatewayError, ErrorCategory.DATABASE),
            (ParameterError("Error: x"), ExecutionError, ErrorCategory.VALIDATION),
            (MissingOutputSizeError("s", "VARCHAR2"), ParameterError, ErrorCategory.VALIDATION),
            (DuplicateParameterError("id"), ParameterError, ErrorCategory.VALIDATION),
        ],
    )
    def test_parent_and_category(self, error, parent, category):
        assert isinstance(error, parent)
        assert error.category == category
        assert str(error).startswith(ERROR_PREFIX)


class TestSpecificErrors:
    def test_config_missing_field(self):
        err = ConfigMissingError("MainDB", "UID")
        assert err.section == "MainDB"
        assert err.field_name == "UID"
        assert "'UID'" in str(err) and "'MainDB'" in str(err)
        assert err.context.to_dict() == {"section": "MainDB", "field": "UID"}

    def test_config_missing_section(self):
        assert "section not found" in str(ConfigMissingError("MainDB"))

    def test_config_missing_custom_message(self):
        assert str(ConfigMissingError("S", message="Error: custom")) == "Error: custom"

    def test_unsupported_backend(self):
        err = UnsupportedBackendError("db2")
        assert err.name == "db2"
        assert str(err) == "Error: unknown database backend: db2"

    def test_missing_output_size(self):
        err = MissingOutputSizeError("status", "VARCHAR2")
        assert err.parameter == "status"
        assert err.type_tag == "VARCHAR2"
        assert err.context.parameter == "status"
        assert "requires a size" in str(err)

    def test_duplicate_parameter(self):
        assert DuplicateParameterError("@id").parameter == "@id"
