"""Configuration loading and management for Trinity.

Configuration sources are merged in priority order:
    1. Defaults (defined in the section dataclasses below)
    2. Project config (``<root>/trinity.toml``) or an explicit config file
    3. Caller overrides (passed as a nested dict)

Sections are merged key by key; lists are replaced wholesale.

Example:
    >>> cfg = TrinityConfig("path/to/project", overrides={"validation": {"min_trinity_score": 80}})
    >>> cfg.get_config().validation.min_trinity_score
    80
"""

from __future__ import annotations

import copy
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import toml

from .adapters import ADAPTERS, JavaScriptAdapter, detect_adapter, get_adapter
from .constants import (
    DEFAULT_CRITICAL_FILES,
    DEFAULT_DOCS_DIRS,
    DEFAULT_DOCUMENTATION_PATTERNS,
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_IMPLEMENTATION_PATTERNS,
    DEFAULT_REQUIRED_DOCS,
    DEFAULT_REQUIRED_TEST_DIRS,
    DEFAULT_SOURCE_DIRS,
    DEFAULT_TEST_DIRS,
    DEFAULT_TEST_PATTERNS,
    DEFAULT_TEST_TIMEOUT,
    MIN_TRINITY_SCORE,
    TRINITY_VERSION,
)
from .exceptions import ConfigFileError, ConfigurationError, InvalidConfigError, InvalidPathError
from .logging_config import get_logger
from .scoring import Penalties

logger = get_logger(__name__)

CONFIG_FILE_NAME = "trinity.toml"
EXAMPLE_CONFIG_FILE_NAME = "trinity.example.toml"

LANGUAGES = ("auto", "javascript", "typescript", "python")
OUTPUT_FORMATS = ("console", "json", "html")


@dataclass
class ProjectSettings:
    project_name: str = ""
    project_path: str = "."
    language: str = "auto"
    framework: str = "auto-detect"
    version: str = TRINITY_VERSION


@dataclass
class ValidationSettings:
    """Thresholds and the files a project is required to carry.

    Attributes:
        min_trinity_score: Overall score a run must reach to be valid
        required_docs: Documents whose absence costs completeness
        required_test_dirs: Directories the test layer expects to exist
        required_files: Files whose absence is an implementation error
        critical_files: Files whose modification in a commit is flagged
        test_command: Command for the pre-push test run (empty = adapter default)
        test_timeout: Seconds before the test run is abandoned
    """

    min_trinity_score: int = MIN_TRINITY_SCORE
    require_all_layers: bool = True
    enforce_test_coverage: bool = True
    enforce_documentation: bool = True
    strict_mode: bool = False
    required_docs: list[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_DOCS))
    required_test_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_TEST_DIRS))
    required_files: list[str] = field(default_factory=list)
    critical_files: list[str] = field(default_factory=lambda: list(DEFAULT_CRITICAL_FILES))
    test_command: str = ""
    test_timeout: float = DEFAULT_TEST_TIMEOUT


@dataclass
class FilePatterns:
    test: list[str] = field(default_factory=lambda: list(DEFAULT_TEST_PATTERNS))
    implementation: list[str] = field(default_factory=lambda: list(DEFAULT_IMPLEMENTATION_PATTERNS))
    documentation: list[str] = field(default_factory=lambda: list(DEFAULT_DOCUMENTATION_PATTERNS))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))


@dataclass
class Directories:
    test_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_TEST_DIRS))
    source_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_DIRS))
    docs_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_DOCS_DIRS))
    exclude_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))


@dataclass
class ScoringSettings:
    test_weight: float = 1.0
    implementation_weight: float = 1.0
    documentation_weight: float = 1.0
    penalties: Penalties = field(default_factory=Penalties)

    @property
    def weights(self) -> tuple[float, float, float]:
        return (self.test_weight, self.implementation_weight, self.documentation_weight)


@dataclass
class GitSettings:
    pre_commit_validation: bool = True
    pre_push_validation: bool = True
    block_commit_on_failure: bool = True
    block_push_on_failure: bool = True


@dataclass
class ReportingSettings:
    output_format: str = "console"
    output_file: Optional[str] = None
    verbose_logging: bool = False
    include_warnings: bool = True
    generate_reports: bool = False
    report_directory: str = "trinity-reports"


@dataclass
class TrinityFullConfig:
    """Every configuration section, with defaults."""

    project: ProjectSettings = field(default_factory=ProjectSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    patterns: FilePatterns = field(default_factory=FilePatterns)
    directories: Directories = field(default_factory=Directories)
    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    git: GitSettings = field(default_factory=GitSettings)
    reporting: ReportingSettings = field(default_factory=ReportingSettings)

    @property
    def root(self) -> Path:
        return Path(self.project.project_path)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrinityFullConfig:
        """Build a config from a nested dict; unknown keys are logged and dropped."""
        sections: dict[str, Any] = {}
        for f in fields(cls):
            raw = data.get(f.name, {})
            if not isinstance(raw, dict):
                logger.warning(f"Ignoring config section [{f.name}]: expected a table")
                raw = {}
            sections[f.name] = _build_section(f.name, f.default_factory, raw)  # type: ignore[misc]
        for key in data:
            if key not in sections:
                logger.warning(f"Ignoring unknown config section: {key}")
        return cls(**sections)


@dataclass
class ConfigValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


def _compatible(default: Any, value: Any) -> bool:
    if default is None:
        return value is None or isinstance(value, str)
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(default, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, type(default))


def _build_section(name: str, factory: Any, raw: dict[str, Any]) -> Any:
    defaults = factory()
    values = {f.name: getattr(defaults, f.name) for f in fields(defaults)}
    for key, value in raw.items():
        if key not in values:
            logger.warning(f"Ignoring unknown config key: {name}.{key}")
            continue
        if name == "scoring" and key == "penalties":
            values[key] = _build_section(
                "scoring.penalties", Penalties, value if isinstance(value, dict) else {}
            )
            continue
        if not _compatible(values[key], value):
            logger.warning(f"Ignoring config key {name}.{key}: unexpected value {value!r}")
            continue
        values[key] = value
    return type(defaults)(**values)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested dicts merge, everything else replaces."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        ConfigFileError: If the file cannot be read or is not valid TOML
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))


def _strip_none(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _strip_none(v) for k, v in data.items() if v is not None}
    return data


# Templates only touch what differs from the defaults
TEMPLATES: dict[str, dict[str, Any]] = {
    "javascript": {
        "project": {"language": "javascript"},
        "patterns": {
            "test": ["**/__tests__/**/*.{test,spec}.{js,jsx,mjs,cjs}", "**/*.{test,spec}.{js,jsx,mjs,cjs}"],
            "implementation": [
                "src/**/*.{js,jsx,mjs,cjs}",
                "lib/**/*.{js,jsx,mjs,cjs}",
                "app/**/*.{js,jsx,mjs,cjs}",
                "!**/*.{test,spec}.{js,jsx,mjs,cjs}",
            ],
        },
    },
    "typescript": {
        "project": {"language": "typescript"},
        "patterns": {
            "test": ["**/__tests__/**/*.{test,spec}.{ts,tsx}", "**/*.{test,spec}.{ts,tsx}"],
            "implementation": [
                "src/**/*.{ts,tsx}",
                "lib/**/*.{ts,tsx}",
                "app/**/*.{ts,tsx}",
                "!**/*.{test,spec}.{ts,tsx}",
                "!**/*.d.ts",
            ],
        },
    },
    "react": {
        "project": {"language": "typescript", "framework": "react"},
        "patterns": {
            "test": ["**/*.{test,spec}.{ts,tsx,js,jsx}"],
            "implementation": [
                "src/**/*.{ts,tsx,js,jsx}",
                "!**/*.{test,spec}.{ts,tsx,js,jsx}",
                "!**/*.d.ts",
            ],
        },
    },
    "vue": {
        "project": {"language": "typescript", "framework": "vue"},
        "patterns": {
            "test": ["**/*.{test,spec}.{ts,js}"],
            "implementation": ["src/**/*.{ts,js,vue}", "!**/*.{test,spec}.{ts,js}", "!**/*.d.ts"],
        },
    },
    "node": {
        "project": {"language": "typescript", "framework": "express"},
        "patterns": {
            "test": ["**/*.{test,spec}.{ts,js}"],
            "implementation": ["src/**/*.{ts,js}", "!**/*.{test,spec}.{ts,js}", "!**/*.d.ts"],
        },
    },
    "python": {
        "project": {"language": "python"},
        "patterns": {
            "test": ["**/test_*.py", "**/*_test.py"],
            "implementation": [
                "src/**/*.py",
                "lib/**/*.py",
                "app/**/*.py",
                "!**/test_*.py",
                "!**/*_test.py",
                "!**/conftest.py",
            ],
            "exclude": ["**/__pycache__/**", ".venv/**", "venv/**", "build/**", "dist/**", "*.egg-info/**"],
        },
        "directories": {
            "test_dirs": ["tests", "test"],
            "exclude_dirs": ["__pycache__", "venv", "build", "dist", ".git"],
        },
        "validation": {"required_test_dirs": ["tests"], "critical_files": ["pyproject.toml", "setup.py", "setup.cfg"]},
    },
}

# Languages whose file layout differs from the JS/TS defaults
LANGUAGE_LAYOUTS: dict[str, dict[str, Any]] = {"python": TEMPLATES["python"]}


def _declared_language(data: dict[str, Any]) -> Optional[str]:
    project = data.get("project")
    if isinstance(project, dict) and isinstance(project.get("language"), str):
        return project["language"]
    return None


class TrinityConfig:
    """Loads, merges, validates and persists a project's configuration.

    Args:
        project_root: Directory of the project under validation
        config_file: Explicit TOML file; defaults to ``<root>/trinity.toml``
        overrides: Nested dict applied on top of the file

    Raises:
        InvalidPathError: If ``config_file`` is given but does not exist

    A config file that cannot be parsed does not raise: the problem is
    logged, kept in ``load_errors``, and defaults plus overrides apply.
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        config_file: Optional[str | Path] = None,
        overrides: Optional[dict[str, Any]] = None,
    ):
        self.project_root = Path(project_root).resolve()
        self.explicit_file = config_file is not None
        if config_file is not None:
            path = Path(config_file)
            self.config_path = path if path.is_absolute() else self.project_root / path
            if not self.config_path.exists():
                raise InvalidPathError(self.config_path, "config file not found")
        else:
            self.config_path = self.project_root / CONFIG_FILE_NAME
        self.load_errors: list[str] = []
        self._overrides = overrides or {}
        self._config = self._load()

    # ── Loading ─────────────────────────────────────────────────

    def _read_file(self) -> dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            data = load_toml_file(self.config_path)
        except ConfigFileError as e:
            message = f"Invalid config file '{self.config_path.name}': {e.reason}"
            logger.error(message)
            self.load_errors.append(message)
            return {}
        logger.debug(f"Loaded configuration from {self.config_path}")
        return data

    def _load(self) -> TrinityFullConfig:
        merged = TrinityFullConfig().to_dict()
        file_data = self._read_file()
        language = _declared_language(deep_merge(file_data, self._overrides))
        if language in LANGUAGE_LAYOUTS:
            # The language's layout sits under anything the project sets itself
            merged = deep_merge(merged, LANGUAGE_LAYOUTS[language])
        merged = deep_merge(merged, file_data)
        merged = deep_merge(merged, self._overrides)
        return self._finalise(merged)

    def _finalise(self, data: dict[str, Any]) -> TrinityFullConfig:
        try:
            cfg = TrinityFullConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
        path = Path(cfg.project.project_path or ".")
        if not path.is_absolute():
            path = (self.project_root / path).resolve()
        cfg.project.project_path = str(path)
        if not cfg.project.project_name:
            cfg.project.project_name = path.name or "unknown"
        return cfg

    # ── Access ──────────────────────────────────────────────────

    def get_config(self) -> TrinityFullConfig:
        return self._config

    def update_config(self, partial: dict[str, Any]) -> TrinityFullConfig:
        self._config = self._finalise(deep_merge(self._config.to_dict(), partial))
        return self._config

    def _value_errors(self) -> list[str]:
        cfg = self._config
        errors: list[str] = []

        if cfg.project.language not in LANGUAGES:
            errors.append(
                f"Unknown project language {cfg.project.language!r} "
                f"(expected one of: {', '.join(LANGUAGES)})"
            )
        if not cfg.project.project_path:
            errors.append("Project path is required")
        if not 0 <= cfg.validation.min_trinity_score <= 100:
            errors.append("Minimum Trinity score must be between 0 and 100")

        weights = cfg.scoring.weights
        if any(w < 0 for w in weights):
            errors.append("Scoring weights must be non-negative")
        elif sum(weights) == 0:
            errors.append("At least one scoring weight must be positive")
        for name, value in cfg.scoring.penalties.as_dict().items():
            if value < 0:
                errors.append(f"Penalty {name} must be non-negative")

        if cfg.validation.test_timeout <= 0:
            errors.append("Test timeout must be positive")
        if cfg.reporting.output_format not in OUTPUT_FORMATS:
            errors.append(
                f"Unknown output format {cfg.reporting.output_format!r} "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )

        return errors

    def validate_config(self) -> ConfigValidation:
        errors = self._value_errors() + self.load_errors
        return ConfigValidation(valid=not errors, errors=errors)

    def require_valid(self) -> TrinityFullConfig:
        """Return the config, raising if any setting has an unusable value.

        Load errors are not checked here; they are reported by each run.

        Raises:
            InvalidConfigError: If a value is out of range or unknown
        """
        errors = self._value_errors()
        if errors:
            raise InvalidConfigError(str(self.config_path.name), "; ".join(errors), "validation failed")
        return self._config

    # ── Detection and templates ─────────────────────────────────

    def auto_detect_project(self) -> TrinityFullConfig:
        """Fill in ``auto`` language and ``auto-detect`` framework from the tree."""
        cfg = self._config
        root = cfg.root
        if cfg.project.language == "auto":
            adapter = detect_adapter(root)
            cfg.project.language = adapter.name
            if adapter.name in LANGUAGE_LAYOUTS and cfg.patterns == FilePatterns():
                cfg = self.update_config(LANGUAGE_LAYOUTS[adapter.name])
        if cfg.project.framework == "auto-detect" and cfg.project.language in ADAPTERS:
            adapter = get_adapter(cfg.project.language)
            cfg.project.framework = adapter.detect_framework(root) or "vanilla"
        logger.info(
            f"Detected {cfg.project.language} project (framework: {cfg.project.framework})"
        )
        return cfg

    def apply_template(self, name: str) -> TrinityFullConfig:
        template = TEMPLATES.get(name)
        if template is None:
            logger.warning(f"Unknown template {name!r}, using javascript")
            template = TEMPLATES["javascript"]
        return self.update_config(template)

    def get_adapter(self):
        """Adapter for the configured language, detecting it when ``auto``."""
        language = self._config.project.language
        if language in ADAPTERS:
            return get_adapter(language)
        return detect_adapter(self._config.root)

    def get_project_info(self) -> dict[str, Any]:
        cfg = self._config
        return {
            "name": cfg.project.project_name,
            "path": cfg.project.project_path,
            "type": detect_project_type(cfg.root),
            "language": cfg.project.language,
            "framework": cfg.project.framework,
            "version": cfg.project.version,
        }

    # ── Persistence ─────────────────────────────────────────────

    def _serialisable(self) -> dict[str, Any]:
        data = self._config.to_dict()
        # The file lives in the project root; keep it portable
        data["project"]["project_path"] = "."
        return _strip_none(data)

    def save_config(self, path: Optional[str | Path] = None) -> Path:
        target = Path(path) if path is not None else self.config_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            toml.dump(self._serialisable(), f)
        logger.info(f"Saved configuration to {target}")
        return target

    def create_example_config(self, root: Optional[str | Path] = None) -> Path:
        """Write ``trinity.example.toml`` with every default spelled out."""
        target = Path(root or self.project_root) / EXAMPLE_CONFIG_FILE_NAME
        data = _strip_none(TrinityFullConfig().to_dict())
        data["project"]["project_name"] = "my-project"
        header = (
            "# Trinity configuration\n"
            f"# Copy this file to {CONFIG_FILE_NAME} and customize as needed.\n"
            f"# language: {' | '.join(LANGUAGES)}\n"
            f"# reporting.output_format: {' | '.join(OUTPUT_FORMATS)}\n\n"
        )
        target.write_text(header + toml.dumps(data), encoding="utf-8")
        logger.info(f"Example configuration created at {target}")
        return target

    def initialize(self, template: Optional[str] = None) -> Path:
        """Detect the project, apply a template, and write both config files."""
        self.auto_detect_project()
        self.apply_template(template or self._config.project.language)
        path = self.save_config()
        self.create_example_config()
        return path

    def exists(self) -> bool:
        return self.config_path.exists()

    def to_json(self) -> str:
        return json.dumps(self._config.to_dict(), indent=2)


def detect_project_type(root: Path) -> str:
    """Rough project kind from manifests at ``root``."""
    root = Path(root)
    if (root / "package.json").exists():
        pkg = JavaScriptAdapter.read_json(root / "package.json")
        if pkg.get("main") and pkg.get("name") and pkg.get("version"):
            return "library"
        deps = JavaScriptAdapter().get_dependencies(root)
        if "react" in deps and ("react-dom" in deps or "next" in deps):
            return "web-app"
        if any(d in deps for d in ("express", "koa", "fastify")):
            return "api-server"
        if "electron" in deps:
            return "desktop-app"
        if "react-native" in deps:
            return "mobile-app"
        return "node-app"
    if (root / "Cargo.toml").exists():
        return "rust-app"
    if (root / "go.mod").exists():
        return "go-app"
    if any((root / f).exists() for f in ("requirements.txt", "pyproject.toml", "setup.py")):
        return "python-app"
    return "unknown"
