"""Language adapter interface.

An adapter tells the engine which files count as source and tests in a
given ecosystem, where a file's test is expected to live, and how to run
the project's test suite. The validator picks one adapter per run.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence

from ..constants import SYNC_EXEMPT_STEMS
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ProjectStructure:
    """What an adapter found at the project root."""

    language: str
    has_manifest: bool = False
    has_test_framework: bool = False
    has_lint_config: bool = False
    has_build_config: bool = False
    framework: Optional[str] = None
    test_framework: Optional[str] = None


class LanguageAdapter(ABC):
    """Capability interface for one language ecosystem."""

    name: str = ""
    source_extensions: tuple = ()
    lint_files: tuple = ()
    build_files: tuple = ()

    @abstractmethod
    def detect(self, root: Path) -> bool:
        """Return True if the project at ``root`` belongs to this ecosystem."""

    @abstractmethod
    def get_test_patterns(self) -> List[str]:
        """Globs that identify test files."""

    @abstractmethod
    def get_file_patterns(self) -> List[str]:
        """Globs that identify implementation files (``!`` entries exclude)."""

    @abstractmethod
    def test_file_name(self, name: str) -> str:
        """Map an implementation file name to its test file name."""

    @abstractmethod
    def implementation_file_name(self, test_name: str) -> Optional[str]:
        """Inverse of ``test_file_name``; None if ``test_name`` is not a test name."""

    @abstractmethod
    def get_dependencies(self, root: Path) -> Dict[str, str]:
        """Declared dependencies, name -> version spec."""

    @abstractmethod
    def default_test_command(self, root: Path) -> str:
        """Shell-style command that runs the project's test suite."""

    def detect_framework(self, root: Path) -> Optional[str]:
        return None

    def detect_test_framework(self, root: Path) -> Optional[str]:
        return None

    def is_source_file(self, path: str) -> bool:
        return PurePosixPath(path).suffix in self.source_extensions

    def is_exempt(self, path: str) -> bool:
        """Files that never need a test of their own."""
        pure = PurePosixPath(path)
        if pure.name.endswith(".d.ts"):
            return True
        return pure.stem in SYNC_EXEMPT_STEMS

    def expected_test_path(
        self, impl_path: str, source_dirs: Sequence[str], test_dir: str
    ) -> str:
        """Where the test for ``impl_path`` is expected.

        The leading source directory is swapped for ``test_dir`` and the
        file name is turned into a test name:
        ``src/foo/bar.ts`` -> ``__tests__/foo/bar.test.ts``.
        """
        pure = PurePosixPath(impl_path)
        parts = pure.parts
        if len(parts) > 1 and parts[0] in source_dirs:
            parent = PurePosixPath(test_dir, *parts[1:-1])
        else:
            parent = PurePosixPath(test_dir, *parts[:-1])
        return str(parent / self.test_file_name(pure.name))

    def implementation_candidates(
        self, test_path: str, source_dirs: Sequence[str], test_dir: str
    ) -> List[str]:
        """Implementation paths a test under ``test_dir`` could belong to."""
        pure = PurePosixPath(test_path)
        parts = pure.parts
        if len(parts) < 2 or parts[0] != test_dir:
            return []
        impl_name = self.implementation_file_name(pure.name)
        if impl_name is None:
            return []
        middle = parts[1:-1]
        return [str(PurePosixPath(src, *middle, impl_name)) for src in source_dirs]

    def get_project_structure(self, root: Path) -> ProjectStructure:
        root = Path(root)
        test_framework = self.detect_test_framework(root)
        return ProjectStructure(
            language=self.name,
            has_manifest=self.has_manifest(root),
            has_test_framework=test_framework is not None,
            has_lint_config=any((root / f).exists() for f in self.lint_files),
            has_build_config=any((root / f).exists() for f in self.build_files),
            framework=self.detect_framework(root),
            test_framework=test_framework,
        )

    def has_manifest(self, root: Path) -> bool:
        return False

    @staticmethod
    def has_files_with_suffix(root: Path, dirs: Sequence[str], suffixes: Sequence[str]) -> bool:
        """True if any of ``dirs`` directly contains a file with one of ``suffixes``."""
        for d in dirs:
            directory = Path(root) / d
            if not directory.is_dir():
                continue
            try:
                if any(p.suffix in suffixes for p in directory.iterdir() if p.is_file()):
                    return True
            except OSError as e:
                logger.debug(f"Cannot list {directory}: {e}")
        return False

    @staticmethod
    def read_json(path: Path) -> dict:
        """Parse a JSON manifest; missing or malformed files give ``{}``."""
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not parse {path.name}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
