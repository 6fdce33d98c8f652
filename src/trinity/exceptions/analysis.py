"""Analysis-related exceptions: file access, test suite execution."""

from pathlib import Path
from typing import Optional

from .base import TrinityError


class AnalysisError(TrinityError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class TestRunnerError(AnalysisError):
    """Raised when the external test command cannot be started."""

    __test__ = False  # not a pytest class

    def __init__(self, command: str, reason: str, returncode: Optional[int] = None):
        details = {"command": command, "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)
        super().__init__(f"Test suite execution failed: {command}", details=details)
        self.command = command
        self.reason = reason
        self.returncode = returncode


class TestRunnerTimeout(TestRunnerError):
    """Raised when the external test command exceeds its time limit."""

    __test__ = False

    def __init__(self, command: str, timeout: float):
        super().__init__(command, f"timed out after {timeout:g}s")
        self.message = f"Test suite timed out after {timeout:g}s: {command}"
        self.timeout = timeout
