"""Python adapter: ``test_*.py`` tests mirrored under ``tests/``."""

import re
from pathlib import Path
from typing import Dict, List, Optional

from ..constants import DEFAULT_SOURCE_DIRS
from ..exceptions import ConfigFileError
from ..logging_config import get_logger
from .base import LanguageAdapter

logger = get_logger(__name__)

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._\-]*)")

MANIFESTS = ("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt")

FRAMEWORKS = (
    ("django", ("django",)),
    ("fastapi", ("fastapi",)),
    ("flask", ("flask",)),
    ("starlette", ("starlette",)),
    ("tornado", ("tornado",)),
)


class PythonAdapter(LanguageAdapter):
    name = "python"
    source_extensions = (".py",)
    lint_files = (".flake8", "ruff.toml", ".ruff.toml", ".pylintrc", "mypy.ini")
    build_files = ("pyproject.toml", "setup.py", "setup.cfg")

    def detect(self, root: Path) -> bool:
        root = Path(root)
        if any((root / m).exists() for m in MANIFESTS):
            return True
        return self.has_files_with_suffix(root, DEFAULT_SOURCE_DIRS, self.source_extensions)

    def get_test_patterns(self) -> List[str]:
        return ["**/test_*.py", "**/*_test.py"]

    def get_file_patterns(self) -> List[str]:
        return [f"{d}/**/*.py" for d in DEFAULT_SOURCE_DIRS] + [
            "!**/test_*.py",
            "!**/*_test.py",
            "!**/conftest.py",
        ]

    def test_file_name(self, name: str) -> str:
        return f"test_{name}"

    def implementation_file_name(self, test_name: str) -> Optional[str]:
        if not test_name.endswith(".py"):
            return None
        stem = test_name[: -len(".py")]
        if stem.startswith("test_") and len(stem) > len("test_"):
            return stem[len("test_") :] + ".py"
        if stem.endswith("_test") and len(stem) > len("_test"):
            return stem[: -len("_test")] + ".py"
        return None

    def has_manifest(self, root: Path) -> bool:
        return any((Path(root) / m).exists() for m in MANIFESTS)

    def _read_pyproject(self, root: Path) -> dict:
        # Imported here: trinity.config imports this package
        from ..config import load_toml_file

        path = Path(root) / "pyproject.toml"
        if not path.exists():
            return {}
        try:
            return load_toml_file(path)
        except ConfigFileError as e:
            logger.warning(f"Could not parse {path.name}: {e.reason}")
            return {}

    def get_dependencies(self, root: Path) -> Dict[str, str]:
        root = Path(root)
        specs: List[str] = []

        pyproject = self._read_pyproject(root)
        project = pyproject.get("project") or {}
        specs.extend(project.get("dependencies") or [])
        for extra in (project.get("optional-dependencies") or {}).values():
            specs.extend(extra)
        poetry = (pyproject.get("tool") or {}).get("poetry") or {}
        for key in ("dependencies", "dev-dependencies"):
            specs.extend((poetry.get(key) or {}).keys())

        for req in sorted(root.glob("requirements*.txt")):
            try:
                lines = req.read_text(encoding="utf-8").splitlines()
            except OSError as e:
                logger.debug(f"Cannot read {req}: {e}")
                continue
            specs.extend(line for line in lines if line.strip() and not line.lstrip().startswith(("#", "-")))

        deps: Dict[str, str] = {}
        for spec in specs:
            m = _REQUIREMENT_NAME.match(str(spec))
            if m:
                name = m.group(1).lower().replace("_", "-")
                deps[name] = str(spec)[m.end() :].strip()
        return deps

    def detect_framework(self, root: Path) -> Optional[str]:
        deps = self.get_dependencies(root)
        for framework, names in FRAMEWORKS:
            if any(n in deps for n in names):
                return framework
        return None

    def detect_test_framework(self, root: Path) -> Optional[str]:
        root = Path(root)
        if "pytest" in self.get_dependencies(root):
            return "pytest"
        if (root / "pytest.ini").exists() or (root / "conftest.py").exists():
            return "pytest"
        if (root / "tests" / "conftest.py").exists():
            return "pytest"
        if "pytest" in (self._read_pyproject(root).get("tool") or {}):
            return "pytest"
        if (root / "tests").is_dir() or (root / "test").is_dir():
            return "unittest"
        return None

    def default_test_command(self, root: Path) -> str:
        if self.detect_test_framework(root) == "unittest":
            return "python -m unittest discover"
        return "pytest"
