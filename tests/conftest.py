"""Shared fixtures: small on-disk projects built under tmp_path."""

from pathlib import Path
from typing import Dict, Optional

import pytest

from trinity.config import TrinityConfig, TrinityFullConfig
from trinity.models import TestRunResult


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def make_config(root: Path, overrides: Optional[dict] = None) -> TrinityFullConfig:
    """Configuration for ``root`` with defaults plus ``overrides``."""
    return TrinityConfig(root, overrides=overrides).get_config()


def fake_runner(passed: int = 0, failed: int = 0, returncode: int = 0, error: Exception = None):
    """Stand-in for the test suite runner that records its calls."""
    calls = []

    def run(command, cwd, timeout):
        calls.append((command, cwd, timeout))
        if error is not None:
            raise error
        return TestRunResult(passed=passed, failed=failed, returncode=returncode, output="")

    run.calls = calls
    return run


@pytest.fixture
def ts_project(tmp_path):
    """A small, fully synchronized TypeScript project."""
    return write_files(
        tmp_path,
        {
            "package.json": '{"name": "demo", "devDependencies": {"jest": "^29.0.0"}}',
            "tsconfig.json": "{}",
            "README.md": "# Demo\n\nSee [the guide](docs/guide.md).\n",
            "docs/guide.md": "# Guide\n",
            "src/math.ts": "export const add = (a: number, b: number) => a + b;\n",
            "src/format.ts": "import { add } from './math';\nexport const fmt = () => `${add(1, 2)}`;\n",
            "src/util/strings.ts": "export const upper = (s: string) => s.toUpperCase();\n",
            "src/index.ts": "export * from './math';\nexport * from './format';\n",
            "__tests__/math.test.ts": "import { add } from '../src/math';\ntest('add', () => add(1, 2));\n",
            "__tests__/format.test.ts": "import { fmt } from '../src/format';\ntest('fmt', () => fmt());\n",
            "__tests__/util/strings.test.ts": "import { upper } from '../../src/util/strings';\n",
        },
    )


@pytest.fixture
def untested_project(tmp_path):
    """Ten implementation files, no tests, a README."""
    files = {"README.md": "# Untested\n"}
    for i in range(10):
        files[f"src/module{i}.ts"] = f"export const value{i} = {i};\n"
    return write_files(tmp_path, files)


@pytest.fixture
def py_project(tmp_path):
    """A small Python project laid out with src/ and tests/."""
    return write_files(
        tmp_path,
        {
            "pyproject.toml": '[project]\nname = "pydemo"\ndependencies = ["flask>=2.0", "pytest"]\n',
            "README.md": "# pydemo\n",
            "src/pydemo/__init__.py": "",
            "src/pydemo/core.py": "def run():\n    return 1\n",
            "src/pydemo/extra.py": "def more():\n    return 2\n",
            "tests/pydemo/test_core.py": "from pydemo.core import run\n",
        },
    )
