"""Structured error types for the scanner with recovery suggestions.

Fatal errors (bad root, bad configuration) carry exit code 3 and stop the
run before any rule executes. Non-fatal errors degrade a single rule or a
single file and never surface as a scan failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

EXIT_INVALID_INVOCATION = 3


class ErrorCategory(Enum):
    """Categories of scanner errors for organization and handling."""

    CONFIGURATION = "configuration"  # Bad flag value, malformed config file
    FILE_SYSTEM = "file_system"  # Root missing or not a directory
    COLLABORATOR = "collaborator"  # Optional external tool missing or failing
    RUNTIME = "runtime"  # Unexpected failure inside a rule


@dataclass
class ScanError(Exception):
    """Base class for structured scanner errors.

    Attributes:
        category: Which part of the run failed.
        message: One-line description shown after "Error:".
        suggestion: How to fix the invocation, if known.
        details: Structured context (path, config file, tool).
        exit_code: Process exit code when the error ends the run.
        fatal: Whether the error aborts the run.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = EXIT_INVALID_INVOCATION
    fatal: bool = True

    def __post_init__(self) -> None:
        """Make the message the exception argument."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error as a single line for the error stream.

        Args:
            use_color: Color the "Error:" prefix.

        Returns:
            One-line error string.
        """
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        return f"{red}Error:{reset} {self.message}"

    def __str__(self) -> str:
        return self.format(use_color=False)


class InvalidRootError(ScanError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path: str):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Directory not found: {path}",
            suggestion="Verify the path exists and is a directory",
            details={"path": path},
        )


class InvalidConfigError(ScanError):
    """A flag value or the configuration file is invalid."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion
            or "Check your configuration file syntax and option values",
            details={"config_file": config_file} if config_file else None,
        )


class OptionalCollaboratorUnavailable(ScanError):
    """An optional external tool (git, npm, eslint...) cannot be used."""

    def __init__(self, tool: str, reason: str | None = None):
        message = f"Optional tool unavailable: {tool}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            category=ErrorCategory.COLLABORATOR,
            message=message,
            details={"tool": tool},
            exit_code=0,
            fatal=False,
        )
        self.tool = tool


class RuleExecutionError(ScanError):
    """Unexpected failure inside one rule, scoped to one file when known."""

    def __init__(self, rule_id: str, message: str, file_path: str | None = None):
        super().__init__(
            category=ErrorCategory.RUNTIME,
            message=f"{rule_id}: {message}",
            details={"file": file_path} if file_path else None,
            exit_code=0,
            fatal=False,
        )
        self.rule_id = rule_id
        self.file_path = file_path


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Turn an exception into the one-line stderr message and an exit code.

    Args:
        error: Any exception that escaped the scan.
        use_color: Color the "Error:" prefix.
        verbose: Append the current traceback.

    Returns:
        (message, exit_code); unknown exceptions map to 3.
    """
    import traceback

    if isinstance(error, ScanError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {error}"
        exit_code = EXIT_INVALID_INVOCATION

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
