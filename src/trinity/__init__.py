"""
Trinity - test, implementation and documentation validator

Checks that a project's three layers exist and agree with each other:
every implementation file has a test, every import resolves, and the
key documentation is present and links to real files. The result is
a score per layer and an overall Trinity score.
"""

from .constants import TRINITY_VERSION

__version__ = TRINITY_VERSION

from .api import quick_validate, validate_project  # noqa: E402
from .config import TrinityConfig, TrinityFullConfig  # noqa: E402
from .models import TrinityScore, TrinityValidationResult, ValidationError  # noqa: E402
from .reporter import TrinityReporter  # noqa: E402
from .scoring import ScoreCalculator  # noqa: E402
from .validation import TrinityValidator  # noqa: E402

__all__ = [
    "validate_project",  # Main entry point
    "quick_validate",
    "TrinityValidator",
    "TrinityConfig",
    "TrinityFullConfig",
    "TrinityReporter",
    "ScoreCalculator",
    "TrinityScore",
    "TrinityValidationResult",
    "ValidationError",
]
