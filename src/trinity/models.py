"""Data models for validation runs.

Every result type is a plain dataclass so a run can be serialised to JSON
with ``dataclasses.asdict`` and rebuilt with ``from_dict``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

FileType = Literal["test", "implementation", "documentation", "config", "other"]
Severity = Literal["error", "warning"]
Category = Literal["test", "implementation", "documentation", "synchronization"]
Layer = Literal["test", "implementation", "documentation"]
Trend = Literal["improving", "declining", "stable"]
LayerTrend = Literal["up", "down", "stable"]
ImportKind = Literal["relative", "absolute", "package"]


@dataclass(frozen=True)
class ProjectFile:
    """A classified file discovered during a scan."""

    path: str
    type: FileType
    language: str
    imports: List[str] = field(default_factory=list)


@dataclass
class ValidationError:
    """One finding accumulated during a run.

    This is a record, not an exception: ``severity`` decides whether it
    blocks validity (``error``) or only informs (``warning``).
    """

    severity: Severity
    message: str
    category: Category
    file: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationError":
        return cls(
            severity=data["severity"],
            message=data["message"],
            category=data["category"],
            file=data.get("file"),
            line=data.get("line"),
        )


@dataclass
class ImportDependency:
    """How a single import string resolved."""

    source: str
    target: str
    kind: ImportKind
    resolved: bool
    resolved_path: Optional[str] = None


@dataclass
class TrinityScore:
    """Per-layer scores plus the derived overall score, each in [0, 100]."""

    test: int = 0
    implementation: int = 0
    documentation: int = 0
    overall: Optional[int] = None

    def layer(self, name: str) -> int:
        return getattr(self, name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrinityScore":
        return cls(
            test=int(data.get("test", 0)),
            implementation=int(data.get("implementation", 0)),
            documentation=int(data.get("documentation", 0)),
            overall=data.get("overall"),
        )


@dataclass
class LayerDetails:
    total_files: int = 0
    valid_files: int = 0
    error_count: int = 0
    warning_count: int = 0


@dataclass
class LayerValidationResult:
    """Outcome of one layer, built from the run's accumulated findings."""

    layer: Layer
    score: int = 0
    files: List[str] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)
    details: LayerDetails = field(default_factory=LayerDetails)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayerValidationResult":
        return cls(
            layer=data["layer"],
            score=int(data.get("score", 0)),
            files=list(data.get("files", [])),
            errors=[ValidationError.from_dict(e) for e in data.get("errors", [])],
            warnings=[ValidationError.from_dict(w) for w in data.get("warnings", [])],
            details=LayerDetails(**data.get("details", {})),
        )


@dataclass
class SynchronizationCoverage:
    test_coverage: int = 0
    documentation_coverage: int = 0


@dataclass
class SynchronizationResult:
    """Cross-reference of implementation files against their tests and docs."""

    synchronized: bool = True
    missing_tests: List[str] = field(default_factory=list)
    missing_docs: List[str] = field(default_factory=list)
    orphaned_tests: List[str] = field(default_factory=list)
    orphaned_docs: List[str] = field(default_factory=list)
    coverage: SynchronizationCoverage = field(default_factory=SynchronizationCoverage)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SynchronizationResult":
        return cls(
            synchronized=bool(data.get("synchronized", True)),
            missing_tests=list(data.get("missing_tests", [])),
            missing_docs=list(data.get("missing_docs", [])),
            orphaned_tests=list(data.get("orphaned_tests", [])),
            orphaned_docs=list(data.get("orphaned_docs", [])),
            coverage=SynchronizationCoverage(**data.get("coverage", {})),
        )


@dataclass
class ValidationMetadata:
    total_files: int = 0
    test_files: int = 0
    implementation_files: int = 0
    documentation_files: int = 0
    execution_time: int = 0  # milliseconds
    timestamp: str = ""  # ISO-8601
    trinity_version: str = ""
    project_name: str = "unknown"
    mode: str = "all"


@dataclass
class TrinityValidationResult:
    """Top-level output of ``TrinityValidator.validate()``.

    ``valid`` is true only when there are no errors and the overall score
    meets the configured minimum.
    """

    valid: bool
    score: TrinityScore
    errors: List[ValidationError]
    warnings: List[ValidationError]
    metadata: ValidationMetadata
    layers: Dict[str, LayerValidationResult]
    synchronization: SynchronizationResult
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrinityValidationResult":
        return cls(
            valid=bool(data["valid"]),
            score=TrinityScore.from_dict(data["score"]),
            errors=[ValidationError.from_dict(e) for e in data.get("errors", [])],
            warnings=[ValidationError.from_dict(w) for w in data.get("warnings", [])],
            metadata=ValidationMetadata(**data.get("metadata", {})),
            layers={
                name: LayerValidationResult.from_dict(layer)
                for name, layer in data.get("layers", {}).items()
            },
            synchronization=SynchronizationResult.from_dict(data.get("synchronization", {})),
            recommendations=list(data.get("recommendations", [])),
        )


@dataclass
class TestRunResult:
    """Pass/fail counts parsed from an external test run."""

    __test__ = False

    passed: int = 0
    failed: int = 0
    returncode: int = 0
    output: str = ""

    @property
    def total(self) -> int:
        return self.passed + self.failed


@dataclass
class ScoreTrend:
    trend: Trend = "stable"
    difference: int = 0
    layer_trends: Dict[str, LayerTrend] = field(
        default_factory=lambda: {
            "test": "stable",
            "implementation": "stable",
            "documentation": "stable",
        }
    )
