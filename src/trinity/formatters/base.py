"""Base formatter interface for Trinity validation reports."""

from abc import ABC, abstractmethod
from typing import Any

from ..models import TrinityValidationResult

NO_RESULT_MESSAGE = "No validation result provided"


def is_result(result: Any) -> bool:
    return isinstance(result, TrinityValidationResult)


class BaseFormatter(ABC):
    """Abstract base class for report formatters.

    Formatters only read the result. Anything that is not a
    ``TrinityValidationResult`` renders as a short "no result" report.
    """

    @abstractmethod
    def render(self, result: TrinityValidationResult) -> None:
        """Write the report to the terminal."""

    @abstractmethod
    def format(self, result: TrinityValidationResult) -> str:
        """Return the report as a string."""
