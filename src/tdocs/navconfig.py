# src/tdocs/navconfig.py
"""
Navigation config helpers (config.json).

The config is an arbitrary JSON tree. Any object may carry:
- `to`: a documentation page path
- `label`: the translatable display text
Children can live under any key holding objects or arrays.

Pages whose path contains `/examples/` are never collected, but their children
are still visited.
"""
from __future__ import annotations

import copy
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger("tdocs.navconfig")

EXAMPLES_SEGMENT = "/examples/"

KeyPath = Tuple[Any, ...]


@dataclass(frozen=True)
class LabelField:
    path: KeyPath  # keys/indices leading to the object owning the label
    value: str
    context: Optional[str] = None  # sibling `to`, helps the translator


def _walk(node: Any, path: KeyPath = ()) -> Iterator[Tuple[Dict[str, Any], KeyPath]]:
    """Pre-order traversal yielding (object, key_path) for every JSON object."""
    if isinstance(node, list):
        for i, item in enumerate(node):
            yield from _walk(item, path + (i,))
    elif isinstance(node, dict):
        yield node, path
        for key, value in node.items():
            if isinstance(value, (dict, list)):
                yield from _walk(value, path + (key,))


def _is_example(to: str) -> bool:
    return EXAMPLES_SEGMENT in to


def extract_doc_paths(config: Any) -> List[str]:
    """All `to` values in document order, without example pages or duplicates."""
    paths: List[str] = []
    seen = set()
    for node, _path in _walk(config):
        to = node.get("to")
        if isinstance(to, str) and to and not _is_example(to) and to not in seen:
            seen.add(to)
            paths.append(to)
    return paths


def extract_path_to_label_map(config: Any) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for node, _path in _walk(config):
        to = node.get("to")
        label = node.get("label")
        if isinstance(to, str) and to and label and not _is_example(to):
            mapping[to] = str(label)
    return mapping


def strip_labels(node: Any) -> None:
    """Remove every `label` key in place, at any depth."""
    for obj, _path in _walk(node):
        obj.pop("label", None)


def structure_hash(config: Any) -> str:
    """md5 of the config with all labels removed; key order is significant."""
    stripped = copy.deepcopy(config)
    strip_labels(stripped)
    canonical = json.dumps(stripped, separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


def should_translate_config(source: Any, target: Any) -> bool:
    """
    True when the config changed structurally since it was last translated.
    Label text changes alone never trigger a new translation.
    """
    source_hash = structure_hash(source)
    target_hash = structure_hash(target)
    logger.debug("Source config structure hash: %s", source_hash)
    logger.debug("Target config structure hash: %s", target_hash)
    return source_hash != target_hash


def find_label_fields(config: Any) -> List[LabelField]:
    fields: List[LabelField] = []
    for node, path in _walk(config):
        label = node.get("label")
        if isinstance(label, str):
            to = node.get("to")
            fields.append(LabelField(path=path, value=label, context=to if isinstance(to, str) else None))
    return fields


def set_label(config: Any, path: KeyPath, value: str) -> None:
    node = config
    for key in path:
        node = node[key]
    if not isinstance(node, dict):
        raise TypeError(f"Label path {path!r} does not point at an object")
    node["label"] = value
