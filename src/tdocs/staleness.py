# src/tdocs/staleness.py
"""
Staleness oracle.

Decides, per document, whether the translated copy must be refreshed
(should_update) and whether refreshing means a full LLM translation or a plain
copy (should_translate).

Signals:
- source time: last git commit of the source, or of its `ref` target if later
- target time: `translation-updated-at` written into the translated file
- content: empty bodies and reference documents usually only need a copy
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from tdocs.frontmatter import Document, parse
from tdocs.vcs import CommitTimeFn, last_commit_time

logger = logging.getLogger("tdocs.staleness")

SOURCE_UPDATED_AT = "source-updated-at"
TRANSLATION_UPDATED_AT = "translation-updated-at"
NEEDS_TRANSLATION = "needs-translation"


@dataclass(frozen=True)
class UpdateStatus:
    should_update: bool
    should_translate: bool
    reason: str

    def __iter__(self):
        return iter((self.should_update, self.should_translate, self.reason))


def to_utc(value: Any) -> Optional[datetime]:
    """
    Normalize a frontmatter timestamp. YAML may already hand back a datetime for
    unquoted ISO values; strings are parsed as ISO-8601 (a trailing Z is accepted).
    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """ISO-8601, UTC, millisecond precision: 2024-05-01T12:00:00.000Z"""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def effective_source_time(
    source_path: Union[str, Path],
    source: Document,
    commit_time: CommitTimeFn = last_commit_time,
) -> datetime:
    """Later of the source's and its ref target's last commit."""
    modified_at = commit_time(source_path)
    if source.ref:
        ref_modified_at = commit_time(source.ref)
        if ref_modified_at > modified_at:
            modified_at = ref_modified_at
    return modified_at


def should_translate_doc(doc: Document) -> Tuple[bool, str]:
    """
    Check if a document needs translation based on its own frontmatter and body.
    """
    if not doc.ref:
        if doc.body:
            return True, "Document has content, needs translation"
        return False, "Document has no content, no translation needed"

    needs_translation = doc.metadata.get(NEEDS_TRANSLATION)
    if needs_translation is True:
        return True, "Ref-document has needs-translation=true metadata, needs translation"
    if needs_translation is False:
        return False, "Ref-document has needs-translation=false metadata, no translation needed"

    # multi-word keys are phrase substitutions
    replace = doc.metadata.get("replace")
    if isinstance(replace, dict) and any(" " in str(key) for key in replace):
        return True, "Ref-document has replace metadata, needs translation"

    if doc.body:
        return True, "Ref-document has content, needs translation"

    return False, "Ref-document has no replace metadata, no content, no translation needed"


def get_doc_update_status(
    source_path: Union[str, Path],
    target_path: Union[str, Path],
    commit_time: CommitTimeFn = last_commit_time,
) -> UpdateStatus:
    """
    Compare the effective source time with the target's translation-updated-at.

    Raises:
    - MalformedMetadataError if either file has broken frontmatter
    - NoHistoryError if the source (or its ref) was never committed
    """
    source_path = Path(source_path)
    target_path = Path(target_path)

    if not source_path.exists():
        logger.error("Source file not found: %s, don't need updating, consider removing it", source_path)
        return UpdateStatus(False, False, "Source file not found, don't need updating, consider REMOVING it")

    source = parse(source_path.read_text(encoding="utf-8"))

    if source.ref and not Path(source.ref).exists():
        logger.error("Referenced file not found: %s, don't need updating, consider REMOVING it", source.ref)
        return UpdateStatus(False, False, "Referenced file not found, don't need updating, consider REMOVING it")

    source_modified_at = effective_source_time(source_path, source, commit_time)

    should_translate, reason = should_translate_doc(source)

    if not target_path.exists():
        logger.debug("Target file not found: %s, needs updating", target_path)
        return UpdateStatus(True, should_translate, f"Target file not found, needs updating. {reason}")

    target = parse(target_path.read_text(encoding="utf-8"))

    translated_at = to_utc(target.metadata.get(TRANSLATION_UPDATED_AT))
    if translated_at is not None:
        if source_modified_at > translated_at:
            logger.debug("Source file %s has been updated since last translation, needs updating", source_path)
            return UpdateStatus(
                True,
                should_translate,
                f"Source file has been updated since last translation, needs updating. {reason}",
            )
        return UpdateStatus(False, False, f"Source file has not been updated since last translation. {reason}")

    logger.debug("Target file %s has no %s metadata, needs updating", target_path, TRANSLATION_UPDATED_AT)
    return UpdateStatus(
        True,
        should_translate,
        f"Target file has no {TRANSLATION_UPDATED_AT} metadata, needs updating. {reason}",
    )
