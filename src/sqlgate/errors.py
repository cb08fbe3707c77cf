"""
Structured error types for the sqlgate execution gateway.

Every failure that leaves the gateway is a :class:`GatewayError`. Driver
exceptions never escape raw: they are wrapped with a uniform ``"Error: "``
message prefix and chained as ``cause`` (and ``__cause__``) so the original
backend message survives for logging and root cause analysis.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure kind the caller can act on
    - **No Retry Semantics:** Every failure is terminal for the call
    - **Rich Context:** Errors carry backend/section/command for logging
    - **Error Chaining:** Preserve original driver exceptions as cause

Architecture:
    ::

        GatewayError (category, context, cause)
        ├── ConfigError                     CONFIG
        │   ├── ConfigMissingError          section/field absent
        │   ├── InvalidConfigError          value present but unusable
        │   └── UnsupportedBackendError     unknown backend name
        ├── ConnectionOpenError             NETWORK  (auth, network, descriptor)
        └── ExecutionError                  DATABASE (backend rejected the call)
            └── ParameterError              VALIDATION
                ├── MissingOutputSizeError  variable-length OUT without size
                └── DuplicateParameterError two descriptors share a name

Examples:
    >>> try:
    ...     cursor.execute("SELEC 1")
    ... except Exception as exc:
    ...     raise ExecutionError.wrap(exc, backend="mssql") from exc
    Traceback (most recent call last):
    ...
    ExecutionError: Error: Incorrect syntax near 'SELEC'.

Guardrails:
    ❌ DON'T: Raise bare Exception from gateway code
    ✅ DO: Use the GatewayError subclass that names the failure

    ❌ DON'T: Swallow the original driver exception
    ✅ DO: Pass it as cause= (``wrap()`` does this for you)

    ❌ DON'T: Put passwords in ErrorContext
    ✅ DO: Store section/backend/command names only

Tags:
    error-handling, exception-hierarchy, error-context, sqlgate
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ERROR_PREFIX = "Error: "


class ErrorCategory(str, Enum):
    """Error categories for classification and routing."""

    CONFIG = "CONFIG"             # Missing or invalid configuration
    NETWORK = "NETWORK"           # Connection could not be established
    DATABASE = "DATABASE"         # Backend rejected statement/procedure
    VALIDATION = "VALIDATION"     # Parameter descriptors are malformed
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a gateway error.

    Only non-None fields are serialized by :meth:`to_dict`; ``metadata``
    holds anything that has no dedicated field.

    Attributes:
        backend: Backend name (``"mssql"`` / ``"oracle"``)
        section: Configuration section used to resolve the target
        command: Statement text head or procedure name
        parameter: Parameter name for parameter-level failures
        metadata: Additional key-value pairs
    """

    backend: str | None = None
    section: str | None = None
    command: str | None = None
    parameter: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["backend", "section", "command", "parameter"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class GatewayError(Exception):
    """
    Base exception for all sqlgate errors.

    Subclasses set ``default_category``; every instance carries a
    ``category``, an :class:`ErrorContext` and an optional chained ``cause``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def wrap(cls, exc: BaseException, **context: Any) -> GatewayError:
        """Wrap a foreign exception with the uniform prefix and chain it."""
        return cls(f"{ERROR_PREFIX}{exc}", cause=exc).with_context(**context)

    def with_context(self, **kwargs: Any) -> GatewayError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ExecutionError("Error: boom").with_context(
                backend="oracle", command="pkg.load"
            )
        """
        for key, value in kwargs.items():
            if value is None:
                continue
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(GatewayError):
    """Configuration is missing, invalid, or names something unknown."""

    default_category = ErrorCategory.CONFIG


class ConfigMissingError(ConfigError):
    """A required section or field is absent from the config source."""

    def __init__(self, section: str | None, field_name: str | None = None, message: str | None = None):
        self.section = section
        self.field_name = field_name
        if message is None:
            if field_name is None:
                message = f"{ERROR_PREFIX}configuration section not found: {section!r}"
            else:
                message = f"{ERROR_PREFIX}missing config field {field_name!r} in section {section!r}"
        super().__init__(message, context=ErrorContext(section=section, metadata={"field": field_name} if field_name else {}))


class InvalidConfigError(ConfigError):
    """A config value is present but cannot be used."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"{ERROR_PREFIX}invalid value for {key}: {value!r}")


class UnsupportedBackendError(ConfigError):
    """The requested backend name has no registered adapter."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{ERROR_PREFIX}unknown database backend: {name}")


# =============================================================================
# CONNECTION / EXECUTION ERRORS
# =============================================================================


class ConnectionOpenError(GatewayError):
    """Network, authentication or descriptor failure while opening a session."""

    default_category = ErrorCategory.NETWORK


class ExecutionError(GatewayError):
    """The backend rejected the statement/procedure or failed mid-execution."""

    default_category = ErrorCategory.DATABASE


class ParameterError(ExecutionError):
    """Parameter descriptors cannot be bound as declared."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, parameter: str | None = None):
        super().__init__(message, context=ErrorContext(parameter=parameter))
        self.parameter = parameter


class MissingOutputSizeError(ParameterError):
    """A variable-length OUT/IN_OUT parameter was declared without a size."""

    def __init__(self, parameter: str, type_tag: str):
        self.type_tag = type_tag
        super().__init__(
            f"{ERROR_PREFIX}output parameter {parameter!r} of variable-length type "
            f"{type_tag} requires a size",
            parameter=parameter,
        )


class DuplicateParameterError(ParameterError):
    """Two parameter descriptors in one call share the same name."""

    def __init__(self, parameter: str):
        super().__init__(f"{ERROR_PREFIX}duplicate parameter name: {parameter!r}", parameter=parameter)


__all__ = [
    "ERROR_PREFIX",
    "ErrorCategory",
    "ErrorContext",
    "GatewayError",
    "ConfigError",
    "ConfigMissingError",
    "InvalidConfigError",
    "UnsupportedBackendError",
    "ConnectionOpenError",
    "ExecutionError",
    "ParameterError",
    "MissingOutputSizeError",
    "DuplicateParameterError",
]
