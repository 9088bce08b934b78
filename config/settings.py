"""
Configuration management system for Java Version Finder.

This module holds the class-file and multi-release constants used by the
version-resolution engine, and handles loading and validation of the
runtime configuration (supported version ranges and logging settings).
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Class-file layout
CLASS_FILE_MAGIC = b"\xca\xfe\xba\xbe"
CLASS_HEADER_SIZE = 8

# runtime version = class-file major version - MAJOR_VERSION_OFFSET
MAJOR_VERSION_OFFSET = 44

# Supported runtime versions (inclusive). Raise MAX_RUNTIME_VERSION here when
# a new Java release must be recognized.
MIN_RUNTIME_VERSION = 1
MAX_RUNTIME_VERSION = 21

# Versions for which META-INF/versions/<N>/ directories are honoured
MULTI_RELEASE_MIN_VERSION = 9
MULTI_RELEASE_MAX_VERSION = 21

# Archive layout
CLASS_FILE_SUFFIX = ".class"
ARCHIVE_SUFFIX = ".jar"
MANIFEST_PATH = "META-INF/MANIFEST.MF"
VERSIONED_DIRECTORY_PREFIX = "META-INF/versions/"
MULTI_RELEASE_MARKER = "Multi-Release: true"

CONFIG_PATH_ENV = "JAVA_VERSION_FINDER_CONFIG"
LOG_LEVEL_ENV = "JAVA_VERSION_FINDER_LOG_LEVEL"
LOG_FILE_ENV = "JAVA_VERSION_FINDER_LOG_FILE"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    error_message: Optional[str] = None


@dataclass
class SystemConfiguration:
    """System configuration data structure."""
    min_runtime_version: int = MIN_RUNTIME_VERSION
    max_runtime_version: int = MAX_RUNTIME_VERSION
    multi_release_min_version: int = MULTI_RELEASE_MIN_VERSION
    multi_release_max_version: int = MULTI_RELEASE_MAX_VERSION
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def min_major_version(self) -> int:
        return self.min_runtime_version + MAJOR_VERSION_OFFSET

    @property
    def max_major_version(self) -> int:
        return self.max_runtime_version + MAJOR_VERSION_OFFSET

    def get_log_level(self) -> int:
        """Translate the configured level name into a logging constant."""
        return getattr(logging, self.log_level.upper(), logging.WARNING)


# Default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "min_runtime_version": MIN_RUNTIME_VERSION,
    "max_runtime_version": MAX_RUNTIME_VERSION,
    "multi_release_min_version": MULTI_RELEASE_MIN_VERSION,
    "multi_release_max_version": MULTI_RELEASE_MAX_VERSION,
    "log_level": "WARNING",
    "log_file": None,
}


def load_configuration(config_path: Optional[str] = None) -> SystemConfiguration:
    """
    Load system configuration from an optional config file and environment variables.

    Args:
        config_path: Path to a JSON config file. Falls back to the
            JAVA_VERSION_FINDER_CONFIG environment variable, then to
            config/java_version_finder.json. A missing file means defaults.

    Returns:
        SystemConfiguration: Loaded configuration object

    Raises:
        json.JSONDecodeError: If config file is invalid JSON
        ValueError: If the config file cannot be read, is not a JSON object,
            or holds values of the wrong type
    """
    path = Path(config_path or os.getenv(CONFIG_PATH_ENV) or "config/java_version_finder.json")

    config_data = DEFAULT_CONFIG.copy()
    if path.exists():
        try:
            with open(path, 'r') as f:
                file_data = json.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read configuration {path}: {e}") from e
        if not isinstance(file_data, dict):
            raise ValueError(f"Invalid configuration in {path}: expected a JSON object")
        config_data.update(file_data)

    # Environment overrides for logging
    config_data["log_level"] = os.getenv(LOG_LEVEL_ENV, config_data["log_level"])
    config_data["log_file"] = os.getenv(LOG_FILE_ENV, config_data["log_file"])

    try:
        return SystemConfiguration(
            min_runtime_version=int(config_data["min_runtime_version"]),
            max_runtime_version=int(config_data["max_runtime_version"]),
            multi_release_min_version=int(config_data["multi_release_min_version"]),
            multi_release_max_version=int(config_data["multi_release_max_version"]),
            log_level=str(config_data["log_level"]).upper(),
            log_file=config_data["log_file"] or None,
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e


def validate_configuration(config: SystemConfiguration) -> ValidationResult:
    """
    Validate system configuration for completeness and correctness.

    Args:
        config: Configuration object to validate

    Returns:
        ValidationResult: Validation result with success status and error details
    """
    if config.min_runtime_version < 1:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid minimum runtime version: {config.min_runtime_version}. Must be at least 1."
        )

    if config.max_runtime_version < config.min_runtime_version:
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"Runtime version range is empty: "
                f"{config.min_runtime_version}..{config.max_runtime_version}"
            )
        )

    if config.multi_release_max_version < config.multi_release_min_version:
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"Multi-release version range is empty: "
                f"{config.multi_release_min_version}..{config.multi_release_max_version}"
            )
        )

    # Directory versions are runtime versions, so they must be representable
    if (config.multi_release_min_version < config.min_runtime_version
            or config.multi_release_max_version > config.max_runtime_version):
        return ValidationResult(
            is_valid=False,
            error_message="Multi-release version range must lie within the supported runtime range"
        )

    if config.log_level.upper() not in VALID_LOG_LEVELS:
        return ValidationResult(
            is_valid=False,
            error_message=f"Unknown log level: {config.log_level}"
        )

    return ValidationResult(is_valid=True)

