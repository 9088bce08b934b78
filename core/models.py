"""
Data models for Java Version Finder.

This module contains the core data structures used throughout the application
for representing class-file headers, archive entries and resolution results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from config.settings import CLASS_FILE_SUFFIX, MAJOR_VERSION_OFFSET


@dataclass(frozen=True)
class ClassFileHeader:
    """
    Version fields of a class file.

    Read from bytes 4..8 of the class file, right after the magic marker.
    """
    major_version: int
    minor_version: int

    def __str__(self) -> str:
        return f"{self.major_version}.{self.minor_version}"


@dataclass
class ArchiveEntry:
    """
    One named entry of an archive.

    The bytes are only materialized when ``read()`` is called, so that an
    archive can be walked without loading every entry up front.
    """
    name: str
    reader: Callable[[], bytes]

    @property
    def is_class_file(self) -> bool:
        return self.name.endswith(CLASS_FILE_SUFFIX)

    def read(self) -> bytes:
        return self.reader()


@dataclass
class ArchiveResolution:
    """
    Result of resolving the minimum runtime version of an archive.

    ``major_version`` is the class-file major version that decided the result;
    when a multi-release directory decided it, the directory version is
    expressed as the equivalent major version and ``minor_version`` is None.
    """
    runtime_version: int
    major_version: int
    minor_version: Optional[int]
    class_count: int
    override_count: int = 0
    multi_release: bool = False

    @property
    def decided_by_override(self) -> bool:
        return self.minor_version is None


class InputKind(Enum):
    """The two kinds of input the tool understands."""
    CLASS_FILE = "class_file"
    ARCHIVE = "archive"

    @property
    def description(self) -> str:
        if self is InputKind.CLASS_FILE:
            return "compiled Java class data"
        return "Java archive data (JAR)"


@dataclass
class InspectionResult:
    """
    Outcome of inspecting one input path.

    This is what the command line prints for a successful input.
    """
    path: str
    kind: InputKind
    runtime_version: int
    major_version: int
    minor_version: Optional[int] = None
    class_count: int = 1
    multi_release: bool = False

    def describe(self) -> str:
        """Render the one-line result shown to the user."""
        return f"{self.path}: {self.kind.description}, require Java {self.runtime_version} or above"

    def class_version(self) -> str:
        """Class-file version that decided the result, e.g. ``61.0``."""
        if self.minor_version is None:
            return f"{self.major_version} (Java {self.major_version - MAJOR_VERSION_OFFSET} directory)"
        return f"{self.major_version}.{self.minor_version}"
