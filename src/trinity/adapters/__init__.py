"""Language adapters."""

from pathlib import Path

from .base import LanguageAdapter, ProjectStructure
from .javascript import JavaScriptAdapter
from .python import PythonAdapter
from .typescript import TypeScriptAdapter
from ..logging_config import get_logger

logger = get_logger(__name__)

# Detection order matters: a TypeScript project also looks like a JavaScript one
ADAPTERS = {
    "typescript": TypeScriptAdapter,
    "javascript": JavaScriptAdapter,
    "python": PythonAdapter,
}


def get_adapter(name: str) -> LanguageAdapter:
    """Get an adapter instance by language name.

    Raises:
        ValueError: If name is not recognized
    """
    cls = ADAPTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown language: {name!r}. Choose from: {', '.join(ADAPTERS)}")
    return cls()


def detect_adapter(root: Path) -> LanguageAdapter:
    """Pick the first adapter that recognises ``root``; TypeScript otherwise."""
    for name, cls in ADAPTERS.items():
        adapter = cls()
        if adapter.detect(Path(root)):
            logger.debug(f"Detected {name} project at {root}")
            return adapter
    logger.debug(f"No language detected at {root}, falling back to typescript")
    return TypeScriptAdapter()


__all__ = [
    "ADAPTERS",
    "LanguageAdapter",
    "ProjectStructure",
    "JavaScriptAdapter",
    "TypeScriptAdapter",
    "PythonAdapter",
    "get_adapter",
    "detect_adapter",
]
