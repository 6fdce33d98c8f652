"""Cross-checks implementation files against their tests and the docs."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from ..adapters import LanguageAdapter
from ..constants import msg_missing_test
from ..logging_config import get_logger
from ..models import SynchronizationCoverage, SynchronizationResult, ValidationError
from ..scoring import round_half_up

logger = get_logger(__name__)


@dataclass
class SynchronizationReport:
    result: SynchronizationResult
    warnings: List[ValidationError] = field(default_factory=list)


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


class SynchronizationAnalyzer:
    """Maps each implementation file to its expected test and back.

    Args:
        root: Project root
        adapter: Decides test names and which files are exempt
        source_dirs: Leading directories swapped out when mapping to tests
        test_dir: Directory expected tests live under
    """

    def __init__(
        self,
        root: Path,
        adapter: LanguageAdapter,
        source_dirs: Sequence[str],
        test_dir: str,
    ):
        self.root = Path(root)
        self.adapter = adapter
        self.source_dirs = list(source_dirs)
        self.test_dir = test_dir

    def needs_test(self, impl_file: str) -> bool:
        return not self.adapter.is_exempt(impl_file)

    def expected_test_path(self, impl_file: str) -> str:
        return self.adapter.expected_test_path(impl_file, self.source_dirs, self.test_dir)

    def _exists(self, rel: str) -> bool:
        return (self.root / rel).exists()

    def find_missing_tests(self, impl_files: Sequence[str]) -> List[str]:
        return [
            f for f in impl_files if self.needs_test(f) and not self._exists(self.expected_test_path(f))
        ]

    def find_orphaned_tests(self, test_files: Sequence[str]) -> List[str]:
        """Tests under the test directory whose implementation is gone."""
        orphans: List[str] = []
        for test in test_files:
            candidates = self.adapter.implementation_candidates(test, self.source_dirs, self.test_dir)
            if candidates and not any(self._exists(c) for c in candidates):
                orphans.append(test)
        return orphans

    def find_empty_docs(self, doc_files: Sequence[str]) -> List[str]:
        empty: List[str] = []
        for doc in doc_files:
            try:
                if not (self.root / doc).read_text(encoding="utf-8", errors="replace").strip():
                    empty.append(doc)
            except OSError as e:
                logger.debug(f"Cannot read {doc}: {e}")
        return empty

    def analyze(
        self,
        impl_files: Sequence[str],
        test_files: Sequence[str],
        doc_files: Sequence[str],
        required_docs: Sequence[str],
    ) -> SynchronizationReport:
        missing_tests = self.find_missing_tests(impl_files)
        missing_docs = [d for d in required_docs if not self._exists(d)]
        needing_tests = [f for f in impl_files if self.needs_test(f)]

        warnings = [
            ValidationError(
                severity="warning",
                message=msg_missing_test(f),
                category="synchronization",
                file=f,
            )
            for f in missing_tests
        ]

        result = SynchronizationResult(
            synchronized=not warnings,
            missing_tests=missing_tests,
            missing_docs=missing_docs,
            orphaned_tests=self.find_orphaned_tests(test_files),
            orphaned_docs=self.find_empty_docs(doc_files),
            coverage=SynchronizationCoverage(
                test_coverage=_percent(len(needing_tests) - len(missing_tests), len(needing_tests)),
                documentation_coverage=_percent(
                    len(required_docs) - len(missing_docs), len(required_docs)
                )
                if required_docs
                else 100,
            ),
        )
        logger.debug(
            f"Synchronization: {len(missing_tests)} missing tests, "
            f"{len(result.orphaned_tests)} orphaned tests"
        )
        return SynchronizationReport(result=result, warnings=warnings)
