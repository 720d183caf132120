"""Error Hierarchy: typed, categorized exceptions for every startup failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the process exit status the CLI terminates with
    - Messages never contain an unredacted connection string

Design Decisions:
    - Single hierarchy with ContainerBootError base: cli.main is the only place
      errors become exit codes
    - ErrorContext as dataclass: structured log fields without coupling to logging
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from datetime import datetime, timezone


# Record attributes produced by ContainerBootError.to_log_extra()
LOG_FIELDS = ("error_code", "category", "severity", "step", "attempt")


class ErrorSeverity(str, Enum):
    """Error severity for log level selection."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    CONFIGURATION = "configuration"
    DATABASE = "database"
    COMMAND = "command"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    step: str | None = None
    attempt: int | None = None
    debug_info: dict[str, Any] | None = None


class ContainerBootError(Exception):
    """Base exception for all startup errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.exit_code = exit_code

    def to_log_extra(self) -> dict:
        """Structured fields for logger.*(..., extra=...)."""
        values: dict[str, Any] = {
            "error_code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "step": self.context.step,
            "attempt": self.context.attempt,
        }
        return {key: values[key] for key in LOG_FIELDS if values[key] is not None}


class ConfigurationError(ContainerBootError):
    """Settings or command line cannot be used as given."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 2,
        )


class DatabaseError(ContainerBootError):
    """A single health probe failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.WARNING, context, 1,
        )
        self.operation = operation


class DatabaseUnavailableError(ContainerBootError):
    """Database never answered within the attempt budget."""
    def __init__(
        self, attempts: int, waited_seconds: float, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database connection timeout after {attempts} attempts "
            f"({waited_seconds:g} seconds)",
            "DATABASE_UNAVAILABLE", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, context, 1,
        )
        self.attempts = attempts
        self.waited_seconds = waited_seconds


class CommandFailedError(ContainerBootError):
    """A maintenance command exited non-zero."""
    def __init__(
        self,
        step: str,
        argv: tuple[str, ...],
        returncode: int,
        context: ErrorContext | None = None,
    ):
        ctx = replace(context or ErrorContext(), step=step)
        super().__init__(
            f"Step '{step}' failed: {' '.join(argv)} exited with {returncode}",
            "COMMAND_FAILED", ErrorCategory.COMMAND,
            ErrorSeverity.CRITICAL, ctx, returncode if returncode > 0 else 1,
        )
        self.step = step
        self.argv = argv
        self.returncode = returncode
