"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import TrinityConfig

console = Console()
err_console = Console(stderr=True)


def load_config(path: Optional[Path] = None, config: Optional[Path] = None) -> TrinityConfig:
    """Build the project's configuration, detecting the language when unset."""
    root = Path(path) if path else Path.cwd()
    trinity_config = TrinityConfig(root, config_file=config)
    cfg = trinity_config.get_config()
    if cfg.project.language == "auto" or cfg.project.framework == "auto-detect":
        trinity_config.auto_detect_project()
    return trinity_config
