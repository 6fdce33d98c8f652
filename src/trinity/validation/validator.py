"""Mode-driven validation of a project's three layers.

``TrinityValidator.validate(mode)`` resets its findings, runs the fixed
sequence of checks for ``mode``, and builds a ``TrinityValidationResult``.
Failures inside a layer become a single error for that layer; failures
anywhere else become a single synchronization error. Nothing escapes.
"""

import re
import time
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Iterable, List, Optional
from urllib.parse import unquote

from ..adapters import ADAPTERS, LanguageAdapter, detect_adapter, get_adapter
from ..config import TrinityFullConfig
from ..constants import (
    LAYERS,
    RECOMMENDATION_THRESHOLD,
    TRINITY_VERSION,
    ValidationMode,
    msg_broken_import,
    msg_broken_link,
    msg_config_error,
    msg_critical_file_missing,
    msg_critical_files_modified,
    msg_file_not_found,
    msg_layer_failed,
    msg_missing_dependency,
    msg_missing_documentation,
    msg_missing_recommended_dir,
    msg_new_file_missing_test,
    msg_test_suite_failed,
    msg_test_suite_timeout,
    msg_tests_failing,
)
from ..exceptions import TestRunnerError, TestRunnerTimeout
from ..logging_config import get_logger
from ..models import (
    LayerDetails,
    LayerValidationResult,
    SynchronizationResult,
    TestRunResult,
    TrinityScore,
    TrinityValidationResult,
    ValidationError,
    ValidationMetadata,
)
from ..scanning import FileClassifier, ImportAnalyzer
from ..scoring import ScoreCalculator
from .git import get_staged_files
from .synchronization import SynchronizationAnalyzer
from .test_runner import TestSuiteRunner

logger = get_logger(__name__)

TestRunner = Callable[[str, Path, float], TestRunResult]

# [text](target) and ![alt](target), with an optional "title"
_MD_LINK = re.compile(r"\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^)]*[\"'])?\s*\)")
_EXTERNAL_LINK = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//|#)")
MARKDOWN_EXTENSIONS = (".md", ".mdx")


def _run_suite(command: str, cwd: Path, timeout: float) -> TestRunResult:
    return TestSuiteRunner(command, cwd, timeout).run()


class TrinityValidator:
    """Validates one project against its configuration.

    Args:
        config: Fully merged configuration; its project path is the root
        adapter: Language adapter; chosen from the config when omitted
        calculator: Score calculator; built from the configured penalties
        test_runner: ``(command, cwd, timeout) -> TestRunResult`` for pre-push
        changed_files_provider: Returns staged paths for pre-commit
        config_errors: Problems found while loading the config, reported
            as errors on every run
    """

    def __init__(
        self,
        config: TrinityFullConfig,
        *,
        adapter: Optional[LanguageAdapter] = None,
        calculator: Optional[ScoreCalculator] = None,
        test_runner: Optional[TestRunner] = None,
        changed_files_provider: Optional[Callable[[], List[str]]] = None,
        config_errors: Iterable[str] = (),
    ):
        self.config = config
        self.root = config.root
        self.adapter = adapter or self._pick_adapter()
        self.calculator = calculator or ScoreCalculator(config.scoring.penalties)
        self.classifier = FileClassifier(self.root, config.directories, config.patterns, self.adapter)
        self.analyzer = ImportAnalyzer(self.root)
        self.test_runner: TestRunner = test_runner or _run_suite
        self.changed_files_provider = changed_files_provider or (lambda: get_staged_files(self.root))
        self.config_errors = list(config_errors)

        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []
        self.score = TrinityScore()
        self._files: Dict[str, List[str]] = {}
        self._sync: Optional[SynchronizationResult] = None

    def _pick_adapter(self) -> LanguageAdapter:
        language = self.config.project.language
        if language in ADAPTERS:
            return get_adapter(language)
        return detect_adapter(self.root)

    # ── Accumulator ─────────────────────────────────────────────

    def _reset(self) -> None:
        self.errors = []
        self.warnings = []
        self.score = TrinityScore()
        self._files = {layer: [] for layer in LAYERS}
        self._sync = None

    def _error(self, message: str, category: str, file: Optional[str] = None) -> None:
        self.errors.append(ValidationError("error", message, category, file=file))

    def _warning(self, message: str, category: str, file: Optional[str] = None) -> None:
        self.warnings.append(ValidationError("warning", message, category, file=file))

    # ── Entry points ────────────────────────────────────────────

    def validate(self, mode: str = "all") -> TrinityValidationResult:
        """Run every check ``mode`` calls for and return the result."""
        start = time.perf_counter()
        self._reset()

        try:
            run_mode = ValidationMode(mode)
        except ValueError:
            logger.warning(f"Unknown validation mode {mode!r}, running 'all'")
            run_mode = ValidationMode.ALL

        logger.info(f"Starting Trinity validation ({run_mode.value}) in {self.root}")
        for problem in self.config_errors:
            self._error(msg_config_error(problem), "synchronization")

        steps = {
            ValidationMode.PRE_COMMIT: self._validate_pre_commit,
            ValidationMode.PRE_PUSH: self._validate_pre_push,
            ValidationMode.MID_DEV: self._validate_mid_dev,
            ValidationMode.ALL: self._validate_all,
        }
        try:
            steps[run_mode]()
        except Exception as e:
            logger.error(f"Trinity validation failed: {e}")
            self._error(f"Validation failed: {e}", "synchronization")

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        return self._build_result(elapsed_ms, run_mode)

    def validate_project(
        self, mode: Optional[str] = None, min_score: Optional[int] = None
    ) -> TrinityValidationResult:
        """Validate with an optional threshold override."""
        if min_score is not None:
            self.config.validation.min_trinity_score = min_score
        return self.validate(mode or ValidationMode.ALL.value)

    # ── Mode sequences ──────────────────────────────────────────

    def _validate_pre_commit(self) -> None:
        changed = self.changed_files_provider()
        logger.info(f"Analyzing {len(changed)} staged files")
        self._check_changed_files_exist(changed)
        self._check_changed_imports(changed)
        self._check_new_files_have_tests(changed)
        self._check_critical_files(changed)

    def _validate_pre_push(self) -> None:
        self._run_test_suite()
        self.validate_synchronization()
        self._calculate_overall()

    def _validate_mid_dev(self) -> None:
        self._run_layers()
        self._calculate_overall()

    def _validate_all(self) -> None:
        self._run_layers()
        self.validate_synchronization()
        self._calculate_overall()

    def _run_layers(self) -> None:
        self._guard_layer("test", self.validate_test_layer)
        self._guard_layer("implementation", self.validate_implementation_layer)
        self._guard_layer("documentation", self.validate_documentation_layer)

    def _guard_layer(self, layer: str, check: Callable[[], int]) -> None:
        try:
            check()
        except Exception as e:
            logger.error(f"{layer.capitalize()} layer validation failed: {e}")
            self._error(msg_layer_failed(layer.capitalize(), str(e)), layer)
            setattr(self.score, layer, 0)

    # ── Layers ──────────────────────────────────────────────────

    def _unresolved_imports(self, file: str) -> List[str]:
        return [
            imp
            for imp in self.analyzer.extract_imports(file)
            if not self.analyzer.validate_import_path(file, imp)
        ]

    def validate_test_layer(self) -> int:
        files = self.classifier.find_test_files()
        self._files["test"] = files
        logger.info(f"Found {len(files)} test files")

        dependency_errors = 0
        for file in files:
            for imp in self._unresolved_imports(file):
                self._error(msg_missing_dependency(imp, file), "test", file=file)
                dependency_errors += 1

        structure_valid = self._check_test_structure()
        self.score.test = self.calculator.calculate_test_score(
            len(files), dependency_errors, structure_valid
        )
        logger.info(f"Test layer: {self.score.test}%")
        return self.score.test

    def _check_test_structure(self) -> bool:
        valid = True
        for directory in self.config.validation.required_test_dirs:
            if not (self.root / directory).is_dir():
                self._warning(msg_missing_recommended_dir(directory), "test")
                valid = False
        return valid

    def validate_implementation_layer(self) -> int:
        files = self.classifier.find_implementation_files()
        self._files["implementation"] = files
        logger.info(f"Found {len(files)} implementation files")

        import_errors = 0
        for file in files:
            for imp in self._unresolved_imports(file):
                self._error(msg_missing_dependency(imp, file), "implementation", file=file)
                import_errors += 1

        missing = [f for f in self.config.validation.required_files if not (self.root / f).exists()]
        for f in missing:
            self._error(msg_critical_file_missing(f), "implementation", file=f)

        self.score.implementation = self.calculator.calculate_implementation_score(
            len(files), import_errors, len(missing)
        )
        logger.info(f"Implementation layer: {self.score.implementation}%")
        return self.score.implementation

    def validate_documentation_layer(self) -> int:
        files = self.classifier.find_documentation_files()
        self._files["documentation"] = files
        logger.info(f"Found {len(files)} documentation files")

        missing = [d for d in self.config.validation.required_docs if not (self.root / d).exists()]
        for doc in missing:
            self._warning(msg_missing_documentation(doc), "documentation", file=doc)
        completeness = self.calculator.calculate_completeness(len(missing))

        broken = 0
        for doc in files:
            for link in self.find_broken_links(doc):
                self._warning(msg_broken_link(link, doc), "documentation", file=doc)
                broken += 1

        self.score.documentation = self.calculator.calculate_documentation_score(
            completeness, broken
        )
        logger.info(f"Documentation layer: {self.score.documentation}%")
        return self.score.documentation

    def find_broken_links(self, doc: str) -> List[str]:
        """Relative Markdown link targets in ``doc`` that do not exist."""
        if PurePosixPath(doc).suffix not in MARKDOWN_EXTENSIONS:
            return []
        try:
            content = (self.root / doc).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Cannot read {doc}: {e}")
            return []

        broken: List[str] = []
        for match in _MD_LINK.finditer(content):
            target = match.group(1)
            if _EXTERNAL_LINK.match(target):
                continue
            path = unquote(target.split("#", 1)[0].split("?", 1)[0])
            if not path:
                continue
            if path.startswith("/"):
                resolved = self.root / path.lstrip("/")
            else:
                resolved = (self.root / doc).parent / path
            if not resolved.exists():
                broken.append(target)
        return broken

    # ── Synchronization ─────────────────────────────────────────

    def _sync_analyzer(self) -> SynchronizationAnalyzer:
        test_dirs = self.config.directories.test_dirs or ["__tests__"]
        return SynchronizationAnalyzer(
            self.root, self.adapter, self.config.directories.source_dirs, test_dirs[0]
        )

    def validate_synchronization(self) -> SynchronizationResult:
        """Warn about every implementation file without its expected test."""
        if not self._files.get("implementation"):
            self._files["implementation"] = self.classifier.find_implementation_files()
        if not self._files.get("test"):
            self._files["test"] = self.classifier.find_test_files()
        if not self._files.get("documentation"):
            self._files["documentation"] = self.classifier.find_documentation_files()

        report = self._sync_analyzer().analyze(
            self._files["implementation"],
            self._files["test"],
            self._files["documentation"],
            self.config.validation.required_docs,
        )
        self.warnings.extend(report.warnings)
        self._sync = report.result
        return report.result

    # ── Pre-commit checks ───────────────────────────────────────

    def _check_changed_files_exist(self, changed: List[str]) -> None:
        for file in changed:
            if not (self.root / file).exists():
                self._error(msg_file_not_found(file), "synchronization", file=file)

    def _check_changed_imports(self, changed: List[str]) -> None:
        for file in changed:
            if PurePosixPath(file).suffix not in self.analyzer.extensions:
                continue
            if not (self.root / file).exists():
                continue
            for imp in self._unresolved_imports(file):
                self._error(msg_broken_import(imp, file), "implementation", file=file)

    def _check_new_files_have_tests(self, changed: List[str]) -> None:
        staged = set(changed)
        sync = self._sync_analyzer()
        for file in changed:
            parts = PurePosixPath(file).parts
            if len(parts) < 2 or parts[0] not in self.config.directories.source_dirs:
                continue
            if not self.adapter.is_source_file(file) or self.classifier.is_test_file(file):
                continue
            if not sync.needs_test(file) or not (self.root / file).exists():
                continue
            expected = sync.expected_test_path(file)
            if expected not in staged and not (self.root / expected).exists():
                self._error(msg_new_file_missing_test(file), "test", file=file)

    def _check_critical_files(self, changed: List[str]) -> None:
        critical = set(self.config.validation.critical_files)
        modified = [f for f in changed if f in critical]
        if modified:
            logger.warning(f"Critical files modified: {', '.join(modified)}")
            self._warning(msg_critical_files_modified(modified), "synchronization")

    # ── Pre-push checks ─────────────────────────────────────────

    def _run_test_suite(self) -> None:
        validation = self.config.validation
        command = validation.test_command or self.adapter.default_test_command(self.root)
        try:
            result = self.test_runner(command, self.root, validation.test_timeout)
        except TestRunnerTimeout as e:
            self._error(msg_test_suite_timeout(e.timeout), "synchronization")
            return
        except TestRunnerError as e:
            self._error(msg_test_suite_failed(e.reason), "test")
            return

        if result.failed > 0:
            self._error(msg_tests_failing(result.failed), "test")
        elif result.returncode != 0:
            self._error(msg_test_suite_failed(f"exit code {result.returncode}"), "test")
        else:
            logger.info(f"All {result.total} tests passing")

    # ── Result ──────────────────────────────────────────────────

    def _calculate_overall(self) -> int:
        self.score.overall = self.calculator.calculate_overall_score(
            self.score, self.config.scoring.weights
        )
        logger.info(f"Overall Trinity score: {self.score.overall}%")
        return self.score.overall

    def _layer_result(self, layer: str) -> LayerValidationResult:
        files = list(self._files.get(layer, []))
        errors = [e for e in self.errors if e.category == layer]
        warnings = [w for w in self.warnings if w.category == layer]
        files_with_errors = {e.file for e in self.errors if e.file}
        return LayerValidationResult(
            layer=layer,
            score=self.score.layer(layer),
            files=files,
            errors=errors,
            warnings=warnings,
            details=LayerDetails(
                total_files=len(files),
                valid_files=sum(1 for f in files if f not in files_with_errors),
                error_count=len(errors),
                warning_count=len(warnings),
            ),
        )

    def _synchronization_result(self) -> SynchronizationResult:
        result = self._sync or SynchronizationResult()
        result.synchronized = not any(w.category == "synchronization" for w in self.warnings)
        return result

    def _recommendations(self, score: TrinityScore, sync: SynchronizationResult) -> List[str]:
        recs: List[str] = []
        if score.test < RECOMMENDATION_THRESHOLD:
            recs.append("Improve test coverage and fix test dependencies")
        if score.implementation < RECOMMENDATION_THRESHOLD:
            recs.append("Fix implementation layer import errors and missing utilities")
        if score.documentation < RECOMMENDATION_THRESHOLD:
            recs.append("Add missing documentation and fix broken links")
        if sync.missing_tests:
            recs.append(f"Add tests for {len(sync.missing_tests)} implementation file(s) without one")
        if self.errors:
            recs.append(f"Resolve {len(self.errors)} blocking error(s)")
        minimum = self.config.validation.min_trinity_score
        gap = self.calculator.get_score_improvement(score.overall or 0, minimum)
        if gap > 0:
            recs.append(f"Raise the overall score by {gap} point(s) to reach {minimum}")
        return recs

    def _build_result(self, elapsed_ms: int, mode: ValidationMode) -> TrinityValidationResult:
        overall = self.score.overall
        if overall is None:
            overall = self.calculator.calculate_overall_score(self.score, self.config.scoring.weights)
        score = TrinityScore(
            test=self.score.test,
            implementation=self.score.implementation,
            documentation=self.score.documentation,
            overall=overall,
        )
        sync = self._synchronization_result()

        all_files = set().union(*(set(v) for v in self._files.values())) if self._files else set()
        metadata = ValidationMetadata(
            total_files=len(all_files),
            test_files=len(self._files.get("test", [])),
            implementation_files=len(self._files.get("implementation", [])),
            documentation_files=len(self._files.get("documentation", [])),
            execution_time=elapsed_ms,
            timestamp=datetime.now(timezone.utc).isoformat(),
            trinity_version=TRINITY_VERSION,
            project_name=self.config.project.project_name or "unknown",
            mode=mode.value,
        )

        valid = not self.errors and overall >= self.config.validation.min_trinity_score
        logger.info(f"Validation {'passed' if valid else 'failed'}: {overall}% ({len(self.errors)} errors)")

        return TrinityValidationResult(
            valid=valid,
            score=score,
            errors=list(self.errors),
            warnings=list(self.warnings),
            metadata=metadata,
            layers={layer: self._layer_result(layer) for layer in LAYERS},
            synchronization=sync,
            recommendations=self._recommendations(score, sync),
        )
