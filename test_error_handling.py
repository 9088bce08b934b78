"""
Test suite for the error taxonomy and error tracking.

This test suite validates the exception context, categorization, error
history and summaries of the Java Version Finder.
"""

import logging
import os
import tempfile

import pytest

from core.error_handling import (
    ClassFileIOError,
    ErrorCategory,
    ErrorHandler,
    ErrorSeverity,
    JavaVersionError,
    MalformedClassFile,
    ManifestMissing,
    NoClassFilesFound,
    UnsupportedVersion,
    UsageError,
    categorize_exception,
)


class TestExceptions:
    """Test cases for the exception taxonomy."""

    def test_categories(self):
        assert ClassFileIOError("x").error_category == ErrorCategory.IO_ERROR
        assert MalformedClassFile("x").error_category == ErrorCategory.MALFORMED_CLASS_FILE
        assert UnsupportedVersion(70).error_category == ErrorCategory.UNSUPPORTED_VERSION
        assert ManifestMissing("x").error_category == ErrorCategory.MANIFEST_MISSING
        assert NoClassFilesFound().error_category == ErrorCategory.NO_CLASS_FILES
        assert UsageError("x").error_category == ErrorCategory.USAGE_ERROR

    def test_message_without_context(self):
        assert str(NoClassFilesFound()) == "No class is found"

    def test_message_with_context(self):
        error = MalformedClassFile("Bad magic number", path="app.jar", entry="com/A.class")

        assert str(error) == "Bad magic number (entry com/A.class from app.jar)"

    def test_add_context_keeps_existing_values(self):
        error = UnsupportedVersion(70, entry="com/A.class")
        error.add_context(path="app.jar", entry="com/B.class")

        assert error.path == "app.jar"
        assert error.entry == "com/A.class"
        assert str(error) == "Unsupported major version 70 (entry com/A.class from app.jar)"

    def test_all_are_java_version_errors(self):
        for error in (ClassFileIOError("x"), UnsupportedVersion(1), UsageError("x")):
            assert isinstance(error, JavaVersionError)

    def test_categorize_exception(self):
        assert categorize_exception(ManifestMissing("x")) == ErrorCategory.MANIFEST_MISSING
        assert categorize_exception(FileNotFoundError("x")) == ErrorCategory.IO_ERROR
        assert categorize_exception(KeyError("x")) == ErrorCategory.SYSTEM_ERROR


class TestErrorHandler:
    """Test cases for the ErrorHandler class."""

    def test_error_handler_initialization(self):
        """Test error handler initializes correctly."""
        with tempfile.NamedTemporaryFile(delete=False) as temp_log:
            handler = ErrorHandler(temp_log.name)
            assert handler is not None
            assert len(handler.error_history) == 0
            assert len(handler.error_counts) == 0

        os.unlink(temp_log.name)

    def test_logger_does_not_propagate(self):
        assert ErrorHandler().logger.propagate is False

    def test_handle_error_basic(self):
        """Test basic error handling functionality."""
        handler = ErrorHandler()

        test_exception = MalformedClassFile("Bad magic number", path="app.jar", entry="com/A.class")
        error_context = handler.handle_error(
            exception=test_exception,
            component="test_component",
            operation="test_operation"
        )

        assert error_context.category == ErrorCategory.MALFORMED_CLASS_FILE
        assert error_context.severity == ErrorSeverity.MEDIUM
        assert error_context.component == "test_component"
        assert error_context.operation == "test_operation"
        assert error_context.original_exception is test_exception
        assert error_context.path == "app.jar"
        assert error_context.entry == "com/A.class"
        assert "com/A.class" in error_context.user_message
        assert len(handler.error_history) == 1

    def test_io_errors_are_high_severity(self):
        handler = ErrorHandler()

        try:
            raise ClassFileIOError("Failed to read class", path="Gone.class") from FileNotFoundError(2, "missing")
        except ClassFileIOError as e:
            error_context = handler.handle_error(e, "test_component", "test_operation")

        assert error_context.severity == ErrorSeverity.HIGH
        assert '"error_code": 2' in error_context.technical_details

    def test_explicit_category_and_severity(self):
        handler = ErrorHandler()

        error_context = handler.handle_error(
            ValueError("odd"), "comp", "op",
            category=ErrorCategory.USAGE_ERROR, severity=ErrorSeverity.LOW
        )

        assert error_context.category == ErrorCategory.USAGE_ERROR
        assert error_context.severity == ErrorSeverity.LOW

    def test_unsupported_version_details(self):
        handler = ErrorHandler()

        error_context = handler.handle_error(UnsupportedVersion(70), "comp", "op")

        assert '"version": 70' in error_context.technical_details
        assert any("MAX_RUNTIME_VERSION" in s for s in error_context.recovery_suggestions)

    def test_error_counting(self):
        """Test error counting functionality."""
        handler = ErrorHandler()

        for i in range(3):
            handler.handle_error(
                exception=UsageError(f"Error {i}"),
                component="test_component",
                operation="test_operation"
            )

        assert handler.error_counts["usage_error:test_component"] == 3

    def test_error_summary(self):
        """Test error summary generation."""
        handler = ErrorHandler()

        handler.handle_error(UsageError("Error 1", path="a.txt"), "comp1", "op1")
        handler.handle_error(NoClassFilesFound(path="b.jar"), "comp2", "op2")

        summary = handler.get_error_summary()
        assert summary["total_errors"] == 2
        assert summary["by_category"] == {"usage_error": 1, "no_class_files": 1}
        assert summary["by_path"] == {"a.txt": 1, "b.jar": 1}

    def test_empty_summary(self):
        assert ErrorHandler().get_error_summary()["total_errors"] == 0

    def test_file_logging(self, tmp_path):
        logger = logging.getLogger("JavaVersionFinder.ErrorHandler")
        saved = logger.handlers[:]
        logger.handlers.clear()
        log_file = tmp_path / "logs" / "finder.log"
        try:
            handler = ErrorHandler(str(log_file))
            handler.handle_error(UsageError("bad input"), "comp", "op")
            for h in logger.handlers:
                h.flush()

            assert "bad input" in log_file.read_text()
        finally:
            for h in logger.handlers:
                h.close()
            logger.handlers[:] = saved


def test_console_output_can_be_turned_off(capsys):
    logger = logging.getLogger("JavaVersionFinder.ErrorHandler")
    saved = logger.handlers[:]
    try:
        handler = ErrorHandler(console=False)
        handler.handle_error(UsageError("bad input", path="notes.txt"), "comp", "op")

        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert "bad input" not in capsys.readouterr().err
        assert len(handler.error_history) == 1
    finally:
        logger.handlers[:] = saved
