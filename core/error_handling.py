"""
Error Handling Module

This module defines the exception taxonomy raised while resolving Java
versions, and provides centralized error tracking and logging for the
Java Version Finder command line.
"""

import logging
import traceback
import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for better handling and reporting."""
    IO_ERROR = "io_error"
    MALFORMED_CLASS_FILE = "malformed_class_file"
    UNSUPPORTED_VERSION = "unsupported_version"
    MANIFEST_MISSING = "manifest_missing"
    NO_CLASS_FILES = "no_class_files"
    USAGE_ERROR = "usage_error"
    SYSTEM_ERROR = "system_error"


class JavaVersionError(Exception):
    """
    Base class for every failure of a version resolution.

    Carries the offending file path and, for archives, the entry name so the
    message is actionable on its own.
    """

    error_category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, path: Optional[str] = None, entry: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.entry = entry

    def add_context(self, path: Optional[str] = None, entry: Optional[str] = None) -> "JavaVersionError":
        """Fill in location details that are not yet known, keeping existing ones."""
        if path and not self.path:
            self.path = path
        if entry and not self.entry:
            self.entry = entry
        return self

    def __str__(self) -> str:
        location = []
        if self.entry:
            location.append(f"entry {self.entry}")
        if self.path:
            location.append(f"from {self.path}")
        if location:
            return f"{self.message} ({' '.join(location)})"
        return self.message


class ClassFileIOError(JavaVersionError):
    """A file or archive could not be read."""
    error_category = ErrorCategory.IO_ERROR


class MalformedClassFile(JavaVersionError):
    """The bytes are too short or do not start with the class-file magic."""
    error_category = ErrorCategory.MALFORMED_CLASS_FILE


class UnsupportedVersion(JavaVersionError):
    """A version lies outside the supported range."""
    error_category = ErrorCategory.UNSUPPORTED_VERSION

    def __init__(self, value: int, path: Optional[str] = None, entry: Optional[str] = None):
        super().__init__(f"Unsupported major version {value}", path=path, entry=entry)
        self.value = value


class ManifestMissing(JavaVersionError):
    """The archive has no readable manifest, so multi-release status is unknown."""
    error_category = ErrorCategory.MANIFEST_MISSING


class NoClassFilesFound(JavaVersionError):
    """The archive holds no class entries to inspect."""
    error_category = ErrorCategory.NO_CLASS_FILES

    def __init__(self, message: str = "No class is found", path: Optional[str] = None):
        super().__init__(message, path=path)


class UsageError(JavaVersionError):
    """An input is neither a class file nor a Java archive."""
    error_category = ErrorCategory.USAGE_ERROR


@dataclass
class ErrorContext:
    """Context information for a recorded error."""
    error_id: str
    timestamp: datetime
    category: ErrorCategory
    severity: ErrorSeverity
    component: str
    operation: str
    original_exception: Optional[Exception] = None
    path: Optional[str] = None
    entry: Optional[str] = None
    user_message: str = ""
    technical_details: str = ""
    recovery_suggestions: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


# Default severity per category
CATEGORY_SEVERITY = {
    ErrorCategory.IO_ERROR: ErrorSeverity.HIGH,
    ErrorCategory.MALFORMED_CLASS_FILE: ErrorSeverity.MEDIUM,
    ErrorCategory.UNSUPPORTED_VERSION: ErrorSeverity.MEDIUM,
    ErrorCategory.MANIFEST_MISSING: ErrorSeverity.MEDIUM,
    ErrorCategory.NO_CLASS_FILES: ErrorSeverity.MEDIUM,
    ErrorCategory.USAGE_ERROR: ErrorSeverity.MEDIUM,
    ErrorCategory.SYSTEM_ERROR: ErrorSeverity.CRITICAL,
}


def categorize_exception(exception: Exception) -> ErrorCategory:
    """Map an exception to its error category."""
    if isinstance(exception, JavaVersionError):
        return exception.error_category
    if isinstance(exception, OSError):
        return ErrorCategory.IO_ERROR
    return ErrorCategory.SYSTEM_ERROR


class ErrorHandler:
    """
    Centralized error handler with error processing, user-friendly
    messaging and an in-memory error history.
    """

    def __init__(
        self,
        log_file: Optional[str] = None,
        log_level: int = logging.WARNING,
        console: bool = True
    ):
        """
        Initialize error handler with logging configuration.

        Args:
            log_file: Optional log file path for error logging
            log_level: Level for the console handler
            console: Also log errors to stderr. Turn off when the caller
                reports each error itself.
        """
        self.logger = self._setup_logging(log_file, log_level, console)
        self.error_history: List[ErrorContext] = []
        self.error_counts: Dict[str, int] = {}

    def _setup_logging(self, log_file: Optional[str], log_level: int, console: bool) -> logging.Logger:
        """Set up logging for error handling."""
        logger = logging.getLogger("JavaVersionFinder.ErrorHandler")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        # The logger is shared, so the newest handler decides where errors go
        for old_handler in logger.handlers[:]:
            logger.removeHandler(old_handler)
            old_handler.close()

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            console_handler.setFormatter(console_formatter)
            logger.addHandler(console_handler)

        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
                )
                file_handler.setFormatter(file_formatter)
                logger.addHandler(file_handler)
            except OSError as e:
                logger.warning(f"Failed to set up file logging: {e}")

        # Keep logging.lastResort from printing errors nobody asked for
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        return logger

    def handle_error(
        self,
        exception: Exception,
        component: str,
        operation: str,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        user_message: str = "",
        metadata: Dict[str, Any] = None
    ) -> ErrorContext:
        """
        Record an error and log it.

        Args:
            exception: The original exception
            component: Component where error occurred
            operation: Operation being performed when error occurred
            category: Error category, derived from the exception when omitted
            severity: Error severity, derived from the category when omitted
            user_message: User-friendly error message
            metadata: Additional metadata for error context

        Returns:
            ErrorContext: Processed error context
        """
        category = category or categorize_exception(exception)
        severity = severity or CATEGORY_SEVERITY[category]

        error_context = ErrorContext(
            error_id=self._generate_error_id(),
            timestamp=datetime.now(),
            category=category,
            severity=severity,
            component=component,
            operation=operation,
            original_exception=exception,
            path=getattr(exception, 'path', None),
            entry=getattr(exception, 'entry', None),
            user_message=user_message or str(exception),
            technical_details=self._extract_technical_details(exception),
            recovery_suggestions=self._get_recovery_suggestions(category),
            metadata=metadata or {}
        )

        self._log_error(error_context)
        self.error_history.append(error_context)

        error_key = f"{category.value}:{component}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

        return error_context

    def _generate_error_id(self) -> str:
        """Generate unique error ID for tracking."""
        import uuid
        return str(uuid.uuid4())[:8]

    def _extract_technical_details(self, exception: Exception) -> str:
        """Extract technical details from exception for debugging."""
        details = {
            "exception_type": type(exception).__name__,
            "exception_message": str(exception),
            "traceback": traceback.format_exc()
        }

        if isinstance(exception, UnsupportedVersion):
            details["version"] = exception.value

        if isinstance(exception.__cause__, OSError) and exception.__cause__.errno is not None:
            details["error_code"] = exception.__cause__.errno

        return json.dumps(details, indent=2)

    def _get_recovery_suggestions(self, category: ErrorCategory) -> List[str]:
        """Get recovery suggestions based on error category."""
        suggestions = {
            ErrorCategory.IO_ERROR: [
                "Check that the file exists and is readable",
                "Verify the archive is a valid zip file"
            ],
            ErrorCategory.MALFORMED_CLASS_FILE: [
                "Check that the file is a compiled Java class",
                "Rebuild the archive if it was truncated"
            ],
            ErrorCategory.UNSUPPORTED_VERSION: [
                "Raise MAX_RUNTIME_VERSION in config/settings.py for newer Java releases"
            ],
            ErrorCategory.MANIFEST_MISSING: [
                "Add a UTF-8 META-INF/MANIFEST.MF to the archive"
            ],
            ErrorCategory.NO_CLASS_FILES: [
                "Check that the archive contains compiled classes"
            ],
            ErrorCategory.USAGE_ERROR: [
                "Pass files ending with '.class' or '.jar'"
            ],
        }

        return suggestions.get(category, ["Re-run with --verbose for details"])

    def _log_error(self, error_context: ErrorContext) -> None:
        """Log error with appropriate level and formatting."""
        log_message = (
            f"[{error_context.error_id}] {error_context.component}.{error_context.operation} - "
            f"{error_context.category.value} ({error_context.severity.value}): "
            f"{error_context.user_message}"
        )

        if error_context.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
            self.logger.critical(f"Technical details: {error_context.technical_details}")
        elif error_context.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
            self.logger.debug(f"Technical details: {error_context.technical_details}")
        elif error_context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
            self.logger.debug(f"Technical details: {error_context.technical_details}")
        else:
            self.logger.info(log_message)

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of error statistics."""
        total_errors = len(self.error_history)
        if total_errors == 0:
            return {"total_errors": 0, "message": "No errors recorded"}

        category_counts = {}
        severity_counts = {}
        path_counts = {}

        for error in self.error_history:
            category_counts[error.category.value] = category_counts.get(error.category.value, 0) + 1
            severity_counts[error.severity.value] = severity_counts.get(error.severity.value, 0) + 1
            if error.path:
                path_counts[error.path] = path_counts.get(error.path, 0) + 1

        return {
            "total_errors": total_errors,
            "by_category": category_counts,
            "by_severity": severity_counts,
            "by_path": path_counts,
            "most_recent": self.error_history[-1].timestamp.isoformat()
        }

