"""
Class file version reader for Java Version Finder.

Only the fixed-position header of a class file is decoded: the magic marker
followed by the minor and major version fields. The rest of the class-file
structure is never looked at.
"""

import logging
import struct
from typing import Optional, Tuple

from config.settings import CLASS_FILE_MAGIC, CLASS_HEADER_SIZE, SystemConfiguration
from .error_handling import MalformedClassFile
from .models import ClassFileHeader
from .version_mapper import VersionMapper


class ClassVersionReader:
    """
    Reads the version header of a class file and maps it to a runtime version.
    """

    def __init__(self, config: Optional[SystemConfiguration] = None):
        self.version_mapper = VersionMapper(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def read_version(self, data: bytes) -> ClassFileHeader:
        """
        Extract the version fields from the raw bytes of a class file.

        Args:
            data: The class file bytes, or at least its first 8 bytes

        Returns:
            ClassFileHeader with the unsigned 16-bit major and minor versions

        Raises:
            MalformedClassFile: If the data is too short or lacks the magic marker
        """
        if len(data) < CLASS_HEADER_SIZE:
            raise MalformedClassFile(
                f"Class file is truncated: expected at least {CLASS_HEADER_SIZE} bytes, got {len(data)}"
            )
        if data[:4] != CLASS_FILE_MAGIC:
            raise MalformedClassFile(f"Bad magic number 0x{bytes(data[:4]).hex().upper()}, expected 0xCAFEBABE")

        minor_version, major_version = struct.unpack('>HH', data[4:CLASS_HEADER_SIZE])
        return ClassFileHeader(major_version=major_version, minor_version=minor_version)

    def to_runtime_version(self, major_version: int) -> int:
        """Map a class-file major version to a runtime version (see VersionMapper)."""
        return self.version_mapper.to_runtime_version(major_version)

    def read_runtime_version(self, data: bytes) -> Tuple[ClassFileHeader, int]:
        """
        Read the header and map its major version in one go.

        Returns:
            Tuple of the parsed header and the runtime version it requires
        """
        header = self.read_version(data)
        runtime_version = self.to_runtime_version(header.major_version)
        self.logger.debug(f"Class version {header} requires Java {runtime_version}")
        return header, runtime_version
