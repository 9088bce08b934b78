"""
Version Mapper for Java Version Finder.

This module maps class-file major versions to Java runtime versions and back,
and provides the tagged ``VersionCandidate`` used when values expressed in
both units have to be compared and folded into one maximum.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.settings import (
    MAJOR_VERSION_OFFSET,
    SystemConfiguration,
)
from .error_handling import UnsupportedVersion


class VersionUnit(Enum):
    """Unit a version number is expressed in."""
    RAW_MAJOR = "raw_major"  # class-file major version, e.g. 61
    RUNTIME = "runtime"      # Java runtime version, e.g. 17


@dataclass(frozen=True)
class VersionCandidate:
    """
    A version number tagged with its unit.

    Candidates are ordered by their runtime equivalent, so a raw major
    version 61 sorts level with a runtime version 17. Equality still compares
    unit and value.
    """
    unit: VersionUnit
    value: int

    @classmethod
    def raw_major(cls, major_version: int) -> "VersionCandidate":
        return cls(VersionUnit.RAW_MAJOR, major_version)

    @classmethod
    def runtime(cls, runtime_version: int) -> "VersionCandidate":
        return cls(VersionUnit.RUNTIME, runtime_version)

    def as_runtime(self) -> int:
        """Runtime equivalent without range checking."""
        if self.unit is VersionUnit.RAW_MAJOR:
            return self.value - MAJOR_VERSION_OFFSET
        return self.value

    def as_major(self) -> int:
        """Major-version equivalent without range checking."""
        if self.unit is VersionUnit.RUNTIME:
            return self.value + MAJOR_VERSION_OFFSET
        return self.value

    def __lt__(self, other: "VersionCandidate") -> bool:
        if not isinstance(other, VersionCandidate):
            return NotImplemented
        return self.as_runtime() < other.as_runtime()

    def __le__(self, other: "VersionCandidate") -> bool:
        if not isinstance(other, VersionCandidate):
            return NotImplemented
        return self.as_runtime() <= other.as_runtime()

    def __gt__(self, other: "VersionCandidate") -> bool:
        if not isinstance(other, VersionCandidate):
            return NotImplemented
        return self.as_runtime() > other.as_runtime()

    def __ge__(self, other: "VersionCandidate") -> bool:
        if not isinstance(other, VersionCandidate):
            return NotImplemented
        return self.as_runtime() >= other.as_runtime()


class VersionMapper:
    """
    Maps class-file major versions to Java runtime versions.

    The supported range is inclusive on both ends. Anything outside it is
    reported as unsupported rather than clamped.
    """

    def __init__(self, config: Optional[SystemConfiguration] = None):
        """
        Initialize the VersionMapper.

        Args:
            config: Configuration providing the supported ranges. Defaults to
                the constants in config.settings.
        """
        if config is None:
            config = SystemConfiguration()
        self.min_runtime_version = config.min_runtime_version
        self.max_runtime_version = config.max_runtime_version
        self.multi_release_min_version = config.multi_release_min_version
        self.multi_release_max_version = config.multi_release_max_version

    def is_supported_runtime_version(self, runtime_version: int) -> bool:
        return self.min_runtime_version <= runtime_version <= self.max_runtime_version

    def is_multi_release_version(self, version: int) -> bool:
        """Check whether META-INF/versions/<version>/ is a recognized directory."""
        return self.multi_release_min_version <= version <= self.multi_release_max_version

    def to_runtime_version(self, major_version: int) -> int:
        """
        Convert a class-file major version into a Java runtime version.

        Args:
            major_version: The major version field of a class file

        Returns:
            The runtime version, e.g. 17 for major version 61

        Raises:
            UnsupportedVersion: If the result is outside the supported range
        """
        runtime_version = major_version - MAJOR_VERSION_OFFSET
        if not self.is_supported_runtime_version(runtime_version):
            raise UnsupportedVersion(major_version)
        return runtime_version

    def to_major_version(self, runtime_version: int) -> int:
        """Convert a Java runtime version into its class-file major version."""
        return runtime_version + MAJOR_VERSION_OFFSET

    def normalize(self, candidate: VersionCandidate) -> int:
        """
        Turn a tagged candidate into a checked runtime version.

        Raw major versions go through ``to_runtime_version``; runtime values
        are only range checked.
        """
        if candidate.unit is VersionUnit.RAW_MAJOR:
            return self.to_runtime_version(candidate.value)
        if not self.is_supported_runtime_version(candidate.value):
            raise UnsupportedVersion(candidate.as_major())
        return candidate.value
