# src/tdocs/files.py
"""
Filesystem helpers: atomic writes, doc discovery and path patterns.

Doc paths are POSIX paths relative to the docs root, without the `.md`
extension (e.g. `framework/react/overview`).
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from wcmatch import glob

logger = logging.getLogger("tdocs.files")

MD_SUFFIX = ".md"
GLOB_FLAGS = glob.GLOBSTAR


def write_text_atomic(path: Path, text: str) -> None:
    """Write the full content or nothing: temp file in the same directory, then rename."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def strip_md(path: str) -> str:
    return path[: -len(MD_SUFFIX)] if path.endswith(MD_SUFFIX) else path


def normalize_pattern(pattern: str, docs_root: str) -> str:
    """
    Make a pattern relative to the docs root. Accepts patterns prefixed with the
    full docs root (`website/docs/guide/*`) or its basename (`docs/guide/*`).
    """
    root = docs_root.replace("\\", "/").strip("/")
    root_name = root.rsplit("/", 1)[-1]
    for prefix in (f"{root}/", f"{root_name}/"):
        if root and pattern.startswith(prefix):
            processed = pattern[len(prefix):]
            logger.debug("Normalized pattern from %s to %s", pattern, processed)
            return processed
    return pattern


def normalize_patterns(patterns: Union[str, Sequence[str], None], docs_root: str) -> List[str]:
    """Comma-separated string or list -> list of non-empty, root-relative patterns."""
    if not patterns:
        return []
    items = patterns.split(",") if isinstance(patterns, str) else list(patterns)
    out = [normalize_pattern(p.strip(), docs_root) for p in items]
    return [p for p in out if p]


def to_doc_path(to: str, docs_root: str) -> str:
    """Config `to` value (`/docs/guide/intro`) -> doc path (`guide/intro`)."""
    return strip_md(normalize_pattern(to.strip().lstrip("/"), docs_root))


def matches_any(doc_path: str, patterns: Iterable[str]) -> bool:
    """
    Glob match against doc paths: `*` stays within one path segment, `**` spans
    segments (and may match none, so `**/*` also matches top-level paths).
    A trailing `.md` in the pattern is ignored.
    """
    return any(glob.globmatch(doc_path, strip_md(pattern), flags=GLOB_FLAGS) for pattern in patterns)


def filter_paths(doc_paths: Iterable[str], patterns: Sequence[str]) -> List[str]:
    return [p for p in doc_paths if matches_any(p, patterns)]


def find_doc_files(docs_root: Union[str, Path], patterns: Sequence[str]) -> List[str]:
    """Glob markdown files under docs_root and return their doc paths (sorted, unique)."""
    root = Path(docs_root)
    found = set()
    for pattern in patterns:
        file_pattern = pattern if pattern.endswith(MD_SUFFIX) else f"{pattern}{MD_SUFFIX}"
        try:
            matches = list(root.glob(file_pattern))
        except ValueError as e:
            logger.error("Error finding files for pattern %s: %s", pattern, e)
            continue
        for match in matches:
            if match.is_file():
                found.add(strip_md(match.relative_to(root).as_posix()))
    return sorted(found)
