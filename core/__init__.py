"""Core components for Java Version Finder."""

from .models import (
    ClassFileHeader,
    ArchiveEntry,
    ArchiveResolution,
    InputKind,
    InspectionResult
)
from .version_mapper import VersionMapper, VersionCandidate, VersionUnit
from .class_reader import ClassVersionReader
from .archive_resolver import ArchiveVersionResolver, is_multi_release_manifest
from .error_handling import (
    JavaVersionError,
    ClassFileIOError,
    MalformedClassFile,
    UnsupportedVersion,
    ManifestMissing,
    NoClassFilesFound,
    UsageError
)

__all__ = [
    'ClassFileHeader',
    'ArchiveEntry',
    'ArchiveResolution',
    'InputKind',
    'InspectionResult',
    'VersionMapper',
    'VersionCandidate',
    'VersionUnit',
    'ClassVersionReader',
    'ArchiveVersionResolver',
    'is_multi_release_manifest',
    'JavaVersionError',
    'ClassFileIOError',
    'MalformedClassFile',
    'UnsupportedVersion',
    'ManifestMissing',
    'NoClassFilesFound',
    'UsageError'
]
