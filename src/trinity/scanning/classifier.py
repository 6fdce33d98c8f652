"""File discovery and classification.

Walks the project tree once per query, never descending into excluded or
hidden directories, and sorts files into the three Trinity layers.
"""

import os
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Sequence

from ..adapters import LanguageAdapter
from ..config import Directories, FilePatterns
from ..constants import (
    CONFIG_FILE_NAMES,
    DOC_EXTENSIONS,
    LANGUAGE_BY_EXTENSION,
    TOP_LEVEL_DOC_NAMES,
)
from ..logging_config import get_logger
from ..models import ProjectFile
from .imports import ImportAnalyzer
from .patterns import match_any, match_path

logger = get_logger(__name__)


class FileClassifier:
    """Finds and classifies files under ``project_root``.

    Args:
        project_root: Directory to scan
        directories: Test, source, docs and excluded directory names
        patterns: Globs for each layer plus exclusions
        adapter: Supplies test/implementation globs when ``patterns``
            leaves them empty
    """

    def __init__(
        self,
        project_root: Path,
        directories: Optional[Directories] = None,
        patterns: Optional[FilePatterns] = None,
        adapter: Optional[LanguageAdapter] = None,
    ):
        self.root = Path(project_root)
        self.directories = directories or Directories()
        self.patterns = patterns or FilePatterns()
        self.adapter = adapter
        self._exclude_dirs = frozenset(self.directories.exclude_dirs)

    @property
    def test_patterns(self) -> List[str]:
        if self.patterns.test or self.adapter is None:
            return self.patterns.test
        return self.adapter.get_test_patterns()

    @property
    def implementation_patterns(self) -> List[str]:
        if self.patterns.implementation or self.adapter is None:
            return self.patterns.implementation
        return self.adapter.get_file_patterns()

    # ── Traversal ───────────────────────────────────────────────

    def _skip_dir(self, name: str) -> bool:
        return name in self._exclude_dirs or name.startswith(".")

    def is_excluded(self, path: str) -> bool:
        parts = PurePosixPath(path).parts
        if any(self._skip_dir(p) for p in parts[:-1]):
            return True
        return any(match_path(path, p) for p in self.patterns.exclude)

    def walk(self, start: str = ".", max_depth: Optional[int] = None) -> Iterator[str]:
        """Yield project-relative POSIX paths of files under ``start``.

        ``max_depth`` 0 means files directly in ``start`` only.
        """
        top = (self.root / start).resolve() if start != "." else self.root.resolve()
        if not top.is_dir():
            return
        root = self.root.resolve()

        def on_error(err: OSError) -> None:
            logger.warning(f"Cannot read directory: {err.filename}")

        for dirpath, dirnames, filenames in os.walk(top, onerror=on_error):
            depth = 0 if dirpath == str(top) else len(Path(dirpath).relative_to(top).parts)
            if max_depth is not None and depth >= max_depth:
                dirnames[:] = []
            else:
                dirnames[:] = sorted(d for d in dirnames if not self._skip_dir(d))
            for name in sorted(filenames):
                rel = Path(dirpath, name).relative_to(root).as_posix()
                if not self.is_excluded(rel):
                    yield rel

    def _walk_dirs(self, dirs: Sequence[str]) -> Iterator[str]:
        for d in dirs:
            yield from self.walk(d)

    # ── Predicates ──────────────────────────────────────────────

    def _in_dirs(self, path: str, dirs: Sequence[str]) -> bool:
        parts = PurePosixPath(path).parts
        return len(parts) > 1 and parts[0] in dirs

    def is_test_file(self, path: str) -> bool:
        return match_any(path, self.test_patterns)

    def is_implementation_file(self, path: str) -> bool:
        return (
            self._in_dirs(path, self.directories.source_dirs)
            and match_any(path, self.implementation_patterns)
            and not self.is_test_file(path)
        )

    def is_documentation_file(self, path: str) -> bool:
        pure = PurePosixPath(path)
        if self._in_dirs(path, self.directories.docs_dirs) and pure.suffix in DOC_EXTENSIONS:
            return True
        if len(pure.parts) <= 2 and any(match_path(pure.name, p) for p in TOP_LEVEL_DOC_NAMES):
            return True
        return match_any(path, self.patterns.documentation)

    def is_config_file(self, path: str) -> bool:
        return PurePosixPath(path).name in CONFIG_FILE_NAMES

    def classify(self, path: str) -> str:
        """``test`` > ``implementation`` > ``documentation`` > ``config`` > ``other``."""
        if self.is_test_file(path):
            return "test"
        if self.is_implementation_file(path):
            return "implementation"
        if self.is_documentation_file(path):
            return "documentation"
        if self.is_config_file(path):
            return "config"
        return "other"

    # ── Discovery ───────────────────────────────────────────────

    def find_test_files(self) -> List[str]:
        dirs = list(self.directories.test_dirs) + list(self.directories.source_dirs)
        return sorted({p for p in self._walk_dirs(dirs) if self.is_test_file(p)})

    def find_implementation_files(self) -> List[str]:
        return sorted(
            {p for p in self._walk_dirs(self.directories.source_dirs) if self.is_implementation_file(p)}
        )

    def find_documentation_files(self) -> List[str]:
        found = {
            p
            for p in self._walk_dirs(self.directories.docs_dirs)
            if PurePosixPath(p).suffix in DOC_EXTENSIONS
        }
        for p in self.walk(".", max_depth=1):
            if any(match_path(PurePosixPath(p).name, n) for n in TOP_LEVEL_DOC_NAMES):
                found.add(p)
        return sorted(p for p in found if not self.is_test_file(p))

    def scan(self, analyzer: Optional[ImportAnalyzer] = None) -> List[ProjectFile]:
        """Every non-excluded file, classified, with imports for source files."""
        analyzer = analyzer or ImportAnalyzer(self.root)
        files: List[ProjectFile] = []
        for path in self.walk():
            kind = self.classify(path)
            suffix = PurePosixPath(path).suffix
            imports: List[str] = []
            if kind in ("test", "implementation") and suffix in analyzer.extensions:
                imports = analyzer.extract_imports(path)
            files.append(
                ProjectFile(
                    path=path,
                    type=kind,
                    language=LANGUAGE_BY_EXTENSION.get(suffix, "other"),
                    imports=imports,
                )
            )
        logger.debug(f"Scanned {len(files)} files under {self.root}")
        return files
