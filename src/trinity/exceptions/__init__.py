"""Exception hierarchy for Trinity."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    TestRunnerError,
    TestRunnerTimeout,
)
from .base import TrinityError
from .config import (
    ConfigurationError,
    ConfigFileError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "TrinityError",
    "AnalysisError",
    "FileAccessError",
    "TestRunnerError",
    "TestRunnerTimeout",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "InvalidPathError",
]
