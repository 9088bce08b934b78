"""
File and archive access for Java Version Finder.

This module provides the byte-provider for standalone class files and a
zip-backed entry enumerator for Java archives.
"""

import logging
import zipfile
import zlib
from pathlib import Path
from typing import Iterator, List, Optional, Union

from config.settings import MANIFEST_PATH
from core.error_handling import ClassFileIOError, ManifestMissing
from core.models import ArchiveEntry


def read_class_file(path: Union[str, Path]) -> bytes:
    """
    Read the raw bytes of a standalone class file.

    Raises:
        ClassFileIOError: If the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ClassFileIOError(f"Failed to read class: {e.strerror or e}", path=str(path)) from e


class JarArchive:
    """
    Read-only view of a Java archive.

    Use as a context manager so the underlying zip handle is released on
    every exit path::

        with JarArchive("app.jar") as jar:
            manifest = jar.read_manifest()
            for entry in jar:
                ...
    """

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._zip: Optional[zipfile.ZipFile] = None

    def open(self) -> "JarArchive":
        try:
            self._zip = zipfile.ZipFile(self.path, 'r')
        except (OSError, zipfile.BadZipFile) as e:
            raise ClassFileIOError(f"Failed to open archive: {e}", path=self.path) from e
        self.logger.debug(f"Opened {self.path} with {len(self._zip.infolist())} entries")
        return self

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self) -> "JarArchive":
        return self.open()

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    @property
    def zip(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise ClassFileIOError("Archive is not open", path=self.path)
        return self._zip

    def infos(self) -> List[zipfile.ZipInfo]:
        """Entry records in archive order, directories excluded.

        A zip may hold several entries with the same name; each one is kept.
        """
        return [info for info in self.zip.infolist() if not info.is_dir()]

    def names(self) -> List[str]:
        """Entry names in archive order, directories excluded."""
        return [info.filename for info in self.infos()]

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield the archive entries in their native order."""
        for info in self.infos():
            yield ArchiveEntry(name=info.filename, reader=self._reader_for(info))

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return self.entries()

    def read_entry(self, member: Union[str, zipfile.ZipInfo]) -> bytes:
        """
        Read and decompress one entry, given by name or by its ZipInfo record.

        Raises:
            ClassFileIOError: If the entry is missing or cannot be decompressed
        """
        try:
            return self.zip.read(member)
        except (KeyError, OSError, EOFError, zipfile.BadZipFile, zlib.error,
                NotImplementedError, RuntimeError) as e:
            # RuntimeError: encrypted entry, NotImplementedError: unknown compression
            name = member.filename if isinstance(member, zipfile.ZipInfo) else member
            raise ClassFileIOError(f"Failed to read entry: {e}", path=self.path, entry=name) from e

    def find_entry(self, name: str) -> Optional[bytes]:
        """Read an entry if it exists, None otherwise."""
        try:
            self.zip.getinfo(name)
        except KeyError:
            return None
        return self.read_entry(name)

    def read_manifest(self) -> Optional[str]:
        """
        Return the manifest text, or None when the archive has no manifest.

        Raises:
            ManifestMissing: If the manifest is not valid UTF-8
        """
        data = self.find_entry(MANIFEST_PATH)
        if data is None:
            return None
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ManifestMissing(
                "Manifest file does not use utf-8 encoding", path=self.path, entry=MANIFEST_PATH
            ) from e

    def _reader_for(self, info: zipfile.ZipInfo):
        return lambda: self.read_entry(info)
