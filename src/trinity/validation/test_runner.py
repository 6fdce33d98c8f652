"""External test suite execution and summary parsing."""

import re
import shlex
import subprocess
from pathlib import Path
from typing import Tuple

from ..constants import DEFAULT_TEST_TIMEOUT
from ..exceptions import TestRunnerError, TestRunnerTimeout
from ..logging_config import get_logger
from ..models import TestRunResult

logger = get_logger(__name__)

# Jest/Vitest "5 passed", Mocha "5 passing", pytest "5 passed in 0.1s"
_PASSED = re.compile(r"(\d+)\s+(?:tests?\s+)?pass(?:ed|ing)\b", re.IGNORECASE)
_FAILED = re.compile(r"(\d+)\s+(?:tests?\s+)?fail(?:ed|ing)\b", re.IGNORECASE)


def parse_test_output(output: str) -> Tuple[int, int]:
    """Return ``(passed, failed)`` from a runner's textual summary.

    The last match wins, so Jest's per-test line beats its per-suite line.
    Unrecognised output gives ``(0, 0)``.
    """
    passed = _PASSED.findall(output)
    failed = _FAILED.findall(output)
    return (
        int(passed[-1]) if passed else 0,
        int(failed[-1]) if failed else 0,
    )


class TestSuiteRunner:
    """Runs a test command with a hard timeout.

    Args:
        command: Shell-style command line, split with ``shlex``
        cwd: Directory to run in
        timeout: Seconds before the run is killed
    """

    __test__ = False

    def __init__(self, command: str, cwd: Path, timeout: float = DEFAULT_TEST_TIMEOUT):
        self.command = command
        self.cwd = Path(cwd)
        self.timeout = timeout

    def run(self) -> TestRunResult:
        """Execute the suite.

        Raises:
            TestRunnerError: If the command is empty or cannot be started
            TestRunnerTimeout: If the command exceeds ``timeout``
        """
        try:
            args = shlex.split(self.command)
        except ValueError as e:
            raise TestRunnerError(self.command, f"cannot parse command: {e}")
        if not args:
            raise TestRunnerError(self.command, "empty test command")

        logger.info(f"Running test suite: {self.command} (timeout {self.timeout:g}s)")
        try:
            proc = subprocess.run(
                args,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise TestRunnerTimeout(self.command, self.timeout)
        except OSError as e:
            raise TestRunnerError(self.command, str(e))

        output = (proc.stdout or "") + (proc.stderr or "")
        passed, failed = parse_test_output(output)
        logger.debug(f"Test suite exited {proc.returncode}: {passed} passed, {failed} failed")
        return TestRunResult(passed=passed, failed=failed, returncode=proc.returncode, output=output)
