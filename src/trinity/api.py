"""Public API for Trinity.

Example:
    >>> from trinity import validate_project
    >>>
    >>> result = validate_project("/path/to/project", mode="mid-dev")
    >>> result.valid, result.score.overall
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config import TrinityConfig
from .logging_config import get_logger
from .models import TrinityValidationResult
from .validation import TrinityValidator

logger = get_logger(__name__)


def validate_project(
    path: str | Path = ".",
    mode: Optional[str] = None,
    min_score: Optional[int] = None,
    config_file: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> TrinityValidationResult:
    """Load the project's configuration and run one validation.

    Args:
        path: Project root (default: current directory)
        mode: ``all``, ``pre-commit``, ``pre-push`` or ``mid-dev``
        min_score: Override of ``validation.min_trinity_score``
        config_file: Explicit TOML file instead of ``<path>/trinity.toml``
        overrides: Nested dict applied on top of the file

    Raises:
        InvalidPathError: If ``config_file`` does not exist
        InvalidConfigError: If a setting has an unusable value
    """
    trinity_config = TrinityConfig(path, config_file=config_file, overrides=overrides)
    if trinity_config.get_config().project.language == "auto":
        trinity_config.auto_detect_project()
    cfg = trinity_config.require_valid()
    validator = TrinityValidator(cfg, config_errors=trinity_config.load_errors)
    return validator.validate_project(mode=mode, min_score=min_score)


def quick_validate(path: str | Path = ".") -> bool:
    """True when a ``mid-dev`` run of the project is valid."""
    return validate_project(path, mode="mid-dev").valid
