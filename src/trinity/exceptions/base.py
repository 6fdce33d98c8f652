"""Base exception for Trinity."""

from typing import Dict, Optional


class TrinityError(Exception):
    """Base exception for all Trinity errors.

    These are raised by components and handled at two boundaries: the
    validator turns them into findings, and the CLI prints them and exits
    with ``exit_code``.
    """

    exit_code = 2

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
