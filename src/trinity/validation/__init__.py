"""Mode-driven validation: layers, synchronization, test runs and git."""

from .git import get_staged_files, install_hook
from .synchronization import SynchronizationAnalyzer, SynchronizationReport
from .test_runner import TestSuiteRunner, parse_test_output
from .validator import TrinityValidator

__all__ = [
    "TrinityValidator",
    "SynchronizationAnalyzer",
    "SynchronizationReport",
    "TestSuiteRunner",
    "parse_test_output",
    "get_staged_files",
    "install_hook",
]
