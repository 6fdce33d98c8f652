"""Git integration via subprocess: staged files and hook installation."""

import shlex
import stat
import subprocess
from pathlib import Path
from typing import List, Optional

from ..exceptions import InvalidPathError
from ..logging_config import get_logger

logger = get_logger(__name__)

HOOK_MARKER = "# installed by trinity"

HOOK_TEMPLATE = """#!/bin/sh
{marker}
{command}
"""

HOOK_MODES = {
    "pre-commit": "pre-commit",
    "pre-push": "pre-push",
}


def _run_git(repo: Path, *args: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ["git", "-C", str(repo), *args],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning(f"git {args[0]} failed: {e}")
        return None
    if result.returncode != 0:
        logger.debug(f"git {' '.join(args)} exited {result.returncode}: {result.stderr.strip()}")
        return None
    return result.stdout


def get_staged_files(repo: Path) -> List[str]:
    """Staged paths under ``repo``, relative to it.

    Empty when git is unavailable or ``repo`` is not inside a repository.
    ``--relative`` keeps a project nested in a larger repository to its own
    subtree.
    """
    out = _run_git(Path(repo), "diff", "--cached", "--name-only", "--relative")
    if out is None:
        return []
    return [line.strip() for line in out.splitlines() if line.strip()]


def find_git_dir(repo: Path) -> Optional[Path]:
    out = _run_git(Path(repo), "rev-parse", "--git-dir")
    if out is None:
        fallback = Path(repo) / ".git"
        return fallback if fallback.is_dir() else None
    git_dir = Path(out.strip())
    return git_dir if git_dir.is_absolute() else (Path(repo) / git_dir).resolve()


def install_hook(repo: Path, hook: str, force: bool = False, block: bool = True) -> Path:
    """Write an executable git hook that runs ``trinity validate``.

    With ``block`` False the hook reports but always lets git proceed.

    Raises:
        InvalidPathError: If ``repo`` is not a git repository, or a hook not
            written by trinity already exists and ``force`` is False
    """
    if hook not in HOOK_MODES:
        raise ValueError(f"Unknown hook: {hook!r}. Choose from: {', '.join(HOOK_MODES)}")

    git_dir = find_git_dir(repo)
    if git_dir is None:
        raise InvalidPathError(Path(repo), "not a git repository")

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    path = hooks_dir / hook

    if path.exists() and not force:
        existing = path.read_text(encoding="utf-8", errors="replace")
        if HOOK_MARKER not in existing:
            raise InvalidPathError(path, "hook already exists (use --force to overwrite)")

    # Hooks run from the repository top level, which need not be the project root
    project = shlex.quote(str(Path(repo).resolve()))
    command = f"trinity validate -C {project} --mode {HOOK_MODES[hook]} --fail-on errors"
    command = f"exec {command}" if block else f"{command} || true"
    path.write_text(HOOK_TEMPLATE.format(marker=HOOK_MARKER, command=command), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(f"Installed {hook} hook at {path}")
    return path
