"""Configuration exceptions: config files, settings values, project paths."""

from pathlib import Path
from typing import Any

from .base import TrinityError


class ConfigurationError(TrinityError):
    """Base class for configuration-related errors."""

    pass


class ConfigFileError(ConfigurationError):
    """Raised when a TOML file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot load {Path(path).name}", details={"path": str(path), "reason": reason})
        self.path = Path(path)
        self.reason = reason


class InvalidPathError(ConfigurationError):
    """Raised when a provided project path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration file or value cannot be used."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
