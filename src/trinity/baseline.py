"""Baseline management for score trends between runs."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Union

from .exceptions import FileAccessError
from .logging_config import get_logger
from .models import TrinityScore, TrinityValidationResult

logger = get_logger(__name__)


def save_baseline(result: TrinityValidationResult, path: Union[str, Path]) -> None:
    """Save the run's scores as a JSON baseline file.

    Raises:
        FileAccessError: If the file cannot be written
    """
    data = {
        "score": asdict(result.score),
        "valid": result.valid,
        "timestamp": result.metadata.timestamp,
        "project_name": result.metadata.project_name,
    }
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        raise FileAccessError(p, str(e))
    logger.info(f"Saved baseline (overall {result.score.overall}) to {path}")


def load_baseline(path: Union[str, Path]) -> Optional[TrinityScore]:
    """Load baseline scores from a JSON file.

    Returns:
        The saved score, or None if the file does not exist or is unreadable.
    """
    p = Path(path)
    if not p.exists():
        logger.info(f"No baseline file at {path}")
        return None

    try:
        with open(p, encoding="utf-8") as f:
            raw = json.load(f)
        # Accept a bare score object as well as the saved wrapper
        score = TrinityScore.from_dict(raw.get("score", raw))
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Ignoring unreadable baseline {path}: {e}")
        return None

    logger.info(f"Loaded baseline (overall {score.overall}) from {path}")
    return score
