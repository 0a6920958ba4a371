# src/tdocs/refdocs.py
"""
Reference document resolution.

A reference document has no body of its own; its frontmatter points at another
file through `ref`:

    ---
    ref: docs/framework/react/guides/queries.md
    replace:
      useQuery: createQuery
      "@tanstack/react-query": "@tanstack/solid-query"
    ---
    [//]: # 'Example'
    ...framework specific example...
    [//]: # 'Example'

Resolution follows `ref` until a terminal document (no `ref`) is found, then
applies the overrides declared by the hop right before it:
- `replace`: regex pattern -> literal replacement, applied globally
- sections: marker-delimited regions of the referencing body replace the
  same-named regions of the terminal content

Only the immediately preceding hop contributes overrides, and chains that do
not terminate within MAX_REF_DEPTH resolve to None (this also stops cycles).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from tdocs.errors import (
    ChainTooDeepError,
    MalformedMetadataError,
    MissingReferenceTargetError,
    MissingSourceError,
    ReferenceResolutionError,
)
from tdocs.frontmatter import Document, parse

logger = logging.getLogger("tdocs.refdocs")

MAX_REF_DEPTH = 4
WARN_REF_DEPTH = 2

# [//]: # '<Section Token>'
SECTION_MARKER_RE = re.compile(r"\[//\]: # '([a-zA-Z\d]*)'")
SECTION_RE = re.compile(
    r"\[//\]: # '(?P<open>[a-zA-Z\d]*)'[\S\s]*?\[//\]: # '(?P<close>[a-zA-Z\d]*)'"
)


@dataclass(frozen=True)
class Section:
    name: str
    start: int
    end: int
    text: str


def replace_content(text: str, replace: Optional[Mapping[str, object]]) -> str:
    """
    Global substitution for each key/value of a `replace` map.
    Keys are regular expressions; values are inserted literally (no backrefs).
    """
    if not replace:
        return text
    result = text
    for pattern, value in replace.items():
        literal = "" if value is None else str(value)
        result = re.sub(str(pattern), lambda _m, v=literal: v, result)
    return result


def find_sections(text: str, role: str = "Target") -> Dict[str, Section]:
    """
    Single forward scan over paired markers. A later section with the same name wins.
    """
    sections: Dict[str, Section] = {}
    for m in SECTION_RE.finditer(text):
        name = m.group("open")
        if name != m.group("close"):
            logger.error(
                "%s section '%s' does not have matching closing token (found '%s'). "
                "Please make sure that each section has corresponding closing token "
                "and that sections are not nested.",
                role,
                name,
                m.group("close"),
            )
        sections[name] = Section(name=name, start=m.start(), end=m.end(), text=m.group(0))
    return sections


def splice_sections(text: str, override_source: str) -> str:
    """
    Replace every section of `text` that also exists in `override_source` with the
    override's section, then strip all markers.

    Splices are applied by descending start offset: replacing a later region never
    moves the offsets of an earlier one.
    """
    overrides = find_sections(override_source, role="Origin")
    targets = find_sections(text, role="Target")

    matched: List[Section] = [targets[name] for name in overrides if name in targets]
    matched.sort(key=lambda s: s.start, reverse=True)

    result = text
    for target in matched:
        result = result[: target.start] + overrides[target.name].text + result[target.end:]

    return SECTION_MARKER_RE.sub("", result)


def apply_overrides(text: str, origin: Document) -> str:
    text = replace_content(text, origin.metadata.get("replace"))
    return splice_sections(text, origin.body)


def resolve_reference(path: Union[str, Path]) -> str:
    """
    Return the effective content (frontmatter included) of the document at `path`.

    - no `ref`: the file text unchanged
    - `ref` chain: the terminal document's text with the last hop's overrides applied

    Raises MissingSourceError / MissingReferenceTargetError when a file in the chain
    cannot be read, ChainTooDeepError when no terminal document is reached.
    """
    current = Path(path)
    depth = 1
    origin: Optional[Document] = None

    while depth < MAX_REF_DEPTH:
        if depth > WARN_REF_DEPTH:
            logger.warning(
                "Referenced file %s is nested too deeply. Max depth is %d. Current depth is %d.",
                current,
                MAX_REF_DEPTH,
                depth,
            )
        try:
            text = current.read_text(encoding="utf-8")
        except OSError as e:
            if origin is None:
                raise MissingSourceError(f"Cannot read {current}: {e}") from e
            raise MissingReferenceTargetError(f"Referenced file {current} cannot be read: {e}") from e

        try:
            doc = parse(text)
        except MalformedMetadataError as e:
            logger.warning("Malformed frontmatter in %s, using raw content: %s", current, e)
            return text

        if doc.ref is None:
            if origin is not None:
                text = apply_overrides(text, origin)
            return text

        current = Path(doc.ref)
        origin = doc
        depth += 1

    raise ChainTooDeepError(f"Reference chain starting at {path} exceeds max depth {MAX_REF_DEPTH}")


def resolve_ref_content(path: Union[str, Path]) -> Optional[str]:
    """Same as resolve_reference, but failures are logged and give None."""
    try:
        return resolve_reference(path)
    except (MissingSourceError, ReferenceResolutionError) as e:
        logger.error("%s", e)
        return None
