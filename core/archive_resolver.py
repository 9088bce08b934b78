"""
Archive Version Resolver for Java Version Finder.

This module computes the minimum Java runtime version needed to run every
class of a Java archive. Plain archives take the highest class-file version
found. Multi-release archives additionally honour the version directories
under META-INF/versions/: a base class that has a versioned counterpart only
requires the lower of its own bytecode version and the directory version.
"""

import logging
import re
from typing import Dict, Iterable, Optional, Tuple

from config.settings import (
    MULTI_RELEASE_MARKER,
    VERSIONED_DIRECTORY_PREFIX,
    SystemConfiguration,
)
from .class_reader import ClassVersionReader
from .error_handling import JavaVersionError, ManifestMissing, NoClassFilesFound
from .models import ArchiveEntry, ArchiveResolution, ClassFileHeader
from .version_mapper import VersionCandidate


# META-INF/versions/<N>/<base path>
VERSIONED_PATH_PATTERN = re.compile(
    r'^' + re.escape(VERSIONED_DIRECTORY_PREFIX) + r'(\d+)/(.+)$'
)


def is_multi_release_manifest(manifest_text: str) -> bool:
    """
    Check whether a manifest declares a multi-release archive.

    Only a line exactly equal to ``Multi-Release: true`` counts; there is no
    tolerance for other casing or surrounding whitespace.
    """
    return any(line == MULTI_RELEASE_MARKER for line in manifest_text.split('\n'))


def is_versioned_entry(name: str) -> bool:
    return name.startswith(VERSIONED_DIRECTORY_PREFIX)


def _outranks(
    candidate: VersionCandidate,
    minor_version: Optional[int],
    best: Optional[VersionCandidate],
    best_minor: Optional[int]
) -> bool:
    """Decide whether a candidate replaces the current maximum."""
    if best is None or candidate > best:
        return True
    if candidate < best:
        return False
    # Same runtime version: keep the one carrying the highest minor version
    if minor_version is None:
        return False
    if best_minor is None:
        return True
    return minor_version > best_minor


class ArchiveVersionResolver:
    """
    Resolves the minimum runtime version of an archive from its entries.

    Entries are ``ArchiveEntry`` objects in archive order. The resolver keeps
    no state between calls; every resolution builds its own override map.
    """

    def __init__(
        self,
        class_reader: Optional[ClassVersionReader] = None,
        config: Optional[SystemConfiguration] = None
    ):
        """
        Initialize the resolver.

        Args:
            class_reader: Reader used for every class entry
            config: Configuration used when no reader is given
        """
        self.class_reader = class_reader or ClassVersionReader(config)
        self.version_mapper = self.class_reader.version_mapper
        self.logger = logging.getLogger(self.__class__.__name__)

    def split_versioned_path(self, name: str) -> Optional[Tuple[int, str]]:
        """
        Split a versioned entry name into its directory version and base path.

        Returns:
            ``(version, base_path)`` for names like
            ``META-INF/versions/17/com/A.class``, or None when the name is not
            versioned or the version is not a recognized multi-release version.
        """
        match = VERSIONED_PATH_PATTERN.match(name)
        if not match:
            return None

        version = int(match.group(1))
        if not self.version_mapper.is_multi_release_version(version):
            return None

        return version, match.group(2)

    def build_override_map(self, entries: Iterable[ArchiveEntry]) -> Dict[str, int]:
        """
        Map base entry paths to the version directory that overrides them.

        When several version directories hold the same base path, the last one
        in archive order wins.
        """
        override_map: Dict[str, int] = {}

        for entry in entries:
            split = self.split_versioned_path(entry.name)
            if split is None:
                continue

            version, base_path = split
            previous = override_map.get(base_path)
            if previous is not None and previous != version:
                self.logger.warning(
                    f"{base_path} is overridden by both Java {previous} and Java {version}; using Java {version}"
                )
            override_map[base_path] = version

        return override_map

    def resolve_simple(
        self,
        entries: Iterable[ArchiveEntry],
        source: Optional[str] = None
    ) -> ArchiveResolution:
        """
        Resolve an archive without multi-release semantics.

        Every class entry outside META-INF/versions/ is parsed and the highest
        major version wins.

        Args:
            entries: Archive entries in archive order
            source: Archive path used in error messages

        Returns:
            ArchiveResolution for the archive

        Raises:
            NoClassFilesFound: If no class entry is present
            MalformedClassFile: If any class entry cannot be parsed
            UnsupportedVersion: If the highest major version is out of range
        """
        best: Optional[VersionCandidate] = None
        best_minor: Optional[int] = None
        best_entry: Optional[str] = None
        class_count = 0

        for entry in entries:
            if not entry.is_class_file or is_versioned_entry(entry.name):
                continue

            class_count += 1
            header = self._read_header(entry, source)
            candidate = VersionCandidate.raw_major(header.major_version)

            if _outranks(candidate, header.minor_version, best, best_minor):
                best, best_minor, best_entry = candidate, header.minor_version, entry.name

        if best is None:
            raise NoClassFilesFound(path=source)

        return ArchiveResolution(
            runtime_version=self._normalize(best, source, best_entry),
            major_version=best.as_major(),
            minor_version=best_minor,
            class_count=class_count,
        )

    def resolve_multi_release(
        self,
        entries: Iterable[ArchiveEntry],
        source: Optional[str] = None
    ) -> ArchiveResolution:
        """
        Resolve a multi-release archive.

        The first pass collects the version directories. The second pass
        parses every base class entry; a base entry with a versioned
        counterpart requires the lower of its bytecode version and the
        directory version.

        Args:
            entries: Archive entries in archive order; walked twice
            source: Archive path used in error messages

        Returns:
            ArchiveResolution for the archive

        Raises:
            NoClassFilesFound: If no base class entry is present
            MalformedClassFile: If any base class entry cannot be parsed
            UnsupportedVersion: If the winning version is out of range
        """
        # A one-shot iterator cannot be walked twice
        if iter(entries) is entries:
            entries = list(entries)

        override_map = self.build_override_map(entries)
        self.logger.debug(f"Found {len(override_map)} versioned entries in {source or 'archive'}")

        best: Optional[VersionCandidate] = None
        best_minor: Optional[int] = None
        best_entry: Optional[str] = None
        class_count = 0
        override_count = 0

        for entry in entries:
            if is_versioned_entry(entry.name) or not entry.is_class_file:
                continue

            class_count += 1
            header = self._read_header(entry, source)
            candidate = VersionCandidate.raw_major(header.major_version)
            minor_version: Optional[int] = header.minor_version

            directory_version = override_map.get(entry.name)
            if directory_version is not None:
                override_count += 1
                override = VersionCandidate.runtime(directory_version)
                if override < candidate:
                    candidate, minor_version = override, None

            if _outranks(candidate, minor_version, best, best_minor):
                best, best_minor, best_entry = candidate, minor_version, entry.name

        if best is None:
            raise NoClassFilesFound(path=source)

        return ArchiveResolution(
            runtime_version=self._normalize(best, source, best_entry),
            major_version=best.as_major(),
            minor_version=best_minor,
            class_count=class_count,
            override_count=override_count,
            multi_release=True,
        )

    def resolve_archive(
        self,
        manifest_text: Optional[str],
        entries: Iterable[ArchiveEntry],
        source: Optional[str] = None
    ) -> ArchiveResolution:
        """
        Resolve an archive, choosing the mode from its manifest.

        Args:
            manifest_text: Text of META-INF/MANIFEST.MF, or None when absent
            entries: Archive entries in archive order
            source: Archive path used in error messages

        Raises:
            ManifestMissing: If there is no manifest to decide the mode from
        """
        if manifest_text is None:
            raise ManifestMissing("No manifest file is given", path=source)

        if is_multi_release_manifest(manifest_text):
            self.logger.debug(f"{source or 'archive'} is a multi-release archive")
            return self.resolve_multi_release(entries, source)

        return self.resolve_simple(entries, source)

    def _read_header(self, entry: ArchiveEntry, source: Optional[str]) -> ClassFileHeader:
        try:
            header = self.class_reader.read_version(entry.read())
        except JavaVersionError as e:
            raise e.add_context(path=source, entry=entry.name)
        self.logger.debug(f"{entry.name}: class version {header}")
        return header

    def _normalize(self, candidate: VersionCandidate, source: Optional[str], entry: Optional[str]) -> int:
        try:
            return self.version_mapper.normalize(candidate)
        except JavaVersionError as e:
            raise e.add_context(path=source, entry=entry)
