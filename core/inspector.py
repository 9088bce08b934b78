"""
Input inspection for Java Version Finder.

This module decides once per input whether it is a class file or an archive,
runs the matching resolution and reports failures to the error handler.
"""

import logging
from typing import Optional

from config.settings import ARCHIVE_SUFFIX, CLASS_FILE_SUFFIX, SystemConfiguration
from core.archive_resolver import ArchiveVersionResolver
from core.class_reader import ClassVersionReader
from core.error_handling import ErrorHandler, JavaVersionError, UsageError
from core.models import InputKind, InspectionResult
from utils.archive_reader import JarArchive, read_class_file


def classify_input(path: str) -> InputKind:
    """
    Select the input kind from the file suffix.

    Raises:
        UsageError: If the path ends with neither '.class' nor '.jar'
    """
    if path.endswith(CLASS_FILE_SUFFIX):
        return InputKind.CLASS_FILE
    if path.endswith(ARCHIVE_SUFFIX):
        return InputKind.ARCHIVE
    raise UsageError(f"Got {path}. Expect a file ends with '.class' or '.jar'")


class JavaVersionInspector:
    """
    Finds the minimum Java version required by one class file or archive.
    """

    def __init__(
        self,
        config: Optional[SystemConfiguration] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        """
        Initialize the inspector.

        Args:
            config: Supported version ranges; defaults to config.settings
            error_handler: Where failures are recorded; nothing is recorded if None
        """
        self.class_reader = ClassVersionReader(config)
        self.archive_resolver = ArchiveVersionResolver(self.class_reader)
        self.error_handler = error_handler
        self.logger = logging.getLogger(self.__class__.__name__)

    def inspect(self, path: str) -> InspectionResult:
        """
        Inspect one input path.

        Returns:
            InspectionResult describing the required runtime version

        Raises:
            JavaVersionError: Any resolution failure, with the path attached
        """
        try:
            kind = classify_input(path)
            if kind is InputKind.CLASS_FILE:
                result = self.inspect_class_file(path)
            else:
                result = self.inspect_archive(path)
        except JavaVersionError as e:
            e.add_context(path=path)
            if self.error_handler is not None:
                self.error_handler.handle_error(e, component=self.__class__.__name__, operation="inspect")
            raise

        self.logger.info(f"{path}: class version {result.class_version()}, Java {result.runtime_version}")
        return result

    def inspect_class_file(self, path: str) -> InspectionResult:
        """Resolve a standalone class file."""
        data = read_class_file(path)
        header, runtime_version = self.class_reader.read_runtime_version(data)
        return InspectionResult(
            path=path,
            kind=InputKind.CLASS_FILE,
            runtime_version=runtime_version,
            major_version=header.major_version,
            minor_version=header.minor_version,
        )

    def inspect_archive(self, path: str) -> InspectionResult:
        """Resolve a Java archive, keeping the archive open only for this call."""
        with JarArchive(path) as jar:
            resolution = self.archive_resolver.resolve_archive(jar.read_manifest(), jar, source=path)

        self.logger.debug(
            f"{path}: {resolution.class_count} classes, {resolution.override_count} overridden, "
            f"multi-release={resolution.multi_release}"
        )
        return InspectionResult(
            path=path,
            kind=InputKind.ARCHIVE,
            runtime_version=resolution.runtime_version,
            major_version=resolution.major_version,
            minor_version=resolution.minor_version,
            class_count=resolution.class_count,
            multi_release=resolution.multi_release,
        )
