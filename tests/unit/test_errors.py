"""Unit tests for techdebt.errors module."""

from techdebt.errors import (
    EXIT_INVALID_INVOCATION,
    ErrorCategory,
    InvalidConfigError,
    InvalidRootError,
    OptionalCollaboratorUnavailable,
    RuleExecutionError,
    ScanError,
    handle_exception,
)


class TestErrorTypes:
    def test_invalid_root(self):
        error = InvalidRootError("./missing")
        assert error.category == ErrorCategory.FILE_SYSTEM
        assert error.exit_code == EXIT_INVALID_INVOCATION == 3
        assert error.fatal
        assert str(error) == "Error: Directory not found: ./missing"

    def test_invalid_config(self):
        error = InvalidConfigError("Bad value", config_file=".techdebt.json")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.details == {"config_file": ".techdebt.json"}
        assert error.suggestion

    def test_collaborator_unavailable_is_not_fatal(self):
        error = OptionalCollaboratorUnavailable("npm", "not installed")
        assert not error.fatal
        assert error.tool == "npm"
        assert error.message == "Optional tool unavailable: npm (not installed)"

    def test_rule_execution_error(self):
        error = RuleExecutionError("TECH_DEBT.MARKERS", "denied", "src/a.ts")
        assert not error.fatal
        assert error.rule_id == "TECH_DEBT.MARKERS"
        assert error.file_path == "src/a.ts"
        assert error.category == ErrorCategory.RUNTIME

    def test_errors_are_exceptions(self):
        assert isinstance(InvalidRootError("x"), Exception)
        assert isinstance(InvalidConfigError("x"), ScanError)

    def test_format_is_single_line(self):
        error = InvalidConfigError("Invalid threshold level 'urgent'")
        assert "\n" not in error.format(use_color=True)
        assert "\033[91m" in error.format(use_color=True)
        assert "\033[" not in error.format(use_color=False)


class TestHandleException:
    def test_scan_error(self):
        message, code = handle_exception(InvalidRootError("nope"), use_color=False)
        assert message == "Error: Directory not found: nope"
        assert code == 3

    def test_unexpected_error(self):
        message, code = handle_exception(RuntimeError("boom"), use_color=False)
        assert message == "Error: boom"
        assert code == EXIT_INVALID_INVOCATION

    def test_verbose_appends_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            message, _ = handle_exception(e, use_color=False, verbose=True)
        assert "Traceback" in message
