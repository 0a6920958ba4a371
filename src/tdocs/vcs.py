# src/tdocs/vcs.py
"""
Git time oracle (deterministic).

Purpose:
- Answer "when was this file last committed?" for staleness checks.
- Committed time (not filesystem mtime) is the source of truth, so a fresh
  checkout or a `touch` never triggers a re-translation.

Design goals:
- No shell: arguments are passed as a list, paths may contain spaces.
- Actionable errors: GitError includes stdout/stderr and cwd for debugging.
- A path with no history is an error (NoHistoryError), never "now".
"""
from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Union

from tdocs.errors import GitError, NoHistoryError

logger = logging.getLogger("tdocs.vcs")

# Signature shared by last_commit_time and the fakes used in tests.
CommitTimeFn = Callable[[Union[str, Path]], datetime]


def _run_git(args: List[str], cwd: Optional[Path] = None, check: bool = True) -> subprocess.CompletedProcess:
    """
    Run git command in cwd and return CompletedProcess. Raises GitError on failure if check=True.
    """
    cmd = ["git"] + args
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitError("git is not installed or not available in PATH.") from e

    if check and proc.returncode != 0:
        raise GitError(
            f"Git command failed: {' '.join(cmd)}\n"
            f"cwd={cwd}\n"
            f"stdout:\n{proc.stdout}\n"
            f"stderr:\n{proc.stderr}"
        )
    return proc


def last_commit_time(path: Union[str, Path], cwd: Optional[Path] = None) -> datetime:
    """
    Return the author time of the last commit touching `path`, as an aware UTC datetime.
    """
    proc = _run_git(["log", "-1", "--format=%at", "--", str(path)], cwd=cwd)
    raw = proc.stdout.strip()
    if not raw:
        logger.error("File %s has no git history", path)
        raise NoHistoryError(f"File {path} has no git history")
    return datetime.fromtimestamp(int(raw), tz=timezone.utc)
