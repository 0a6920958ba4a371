# src/tdocs/frontmatter.py
"""
Markdown frontmatter model.

A document is an optional YAML block delimited by `---` lines, followed by the
markdown body:

    ---
    title: Overview
    ref: docs/framework/react/overview.md
    ---
    # Body

Round-trip contract: parse(serialize(body, metadata)) gives back the same body
and metadata for any JSON-representable metadata.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from tdocs.errors import MalformedMetadataError

DELIMITER = "---"


@dataclass
class Document:
    metadata: Dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def ref(self) -> Optional[str]:
        ref = self.metadata.get("ref")
        return str(ref) if ref else None


def _split_block(text: str) -> Optional[Tuple[str, str]]:
    """
    Return (yaml_text, body) or None if the text has no closed frontmatter block.
    The body starts right after the newline that ends the closing delimiter.
    """
    first_nl = text.find("\n")
    if first_nl == -1 or text[:first_nl].rstrip("\r") != DELIMITER:
        return None

    pos = first_nl + 1
    while pos <= len(text):
        nl = text.find("\n", pos)
        line_end = len(text) if nl == -1 else nl
        if text[pos:line_end].rstrip("\r") == DELIMITER:
            body_start = len(text) if nl == -1 else nl + 1
            return text[first_nl + 1:pos], text[body_start:]
        if nl == -1:
            break
        pos = nl + 1
    return None


def parse(text: str) -> Document:
    block = _split_block(text)
    if block is None:
        return Document(metadata={}, body=text)

    raw, body = block
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise MalformedMetadataError(f"Invalid frontmatter YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedMetadataError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )
    return Document(metadata=data, body=body)


def serialize(body: str, metadata: Dict[str, Any]) -> str:
    dumped = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    return f"{DELIMITER}\n{dumped}{DELIMITER}\n{body}"


def read_document(path: Path) -> Document:
    return parse(Path(path).read_text(encoding="utf-8"))
