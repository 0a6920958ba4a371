# src/tdocs/schema.py
"""
LLM output contract for label translation.

The navigation labels are sent as one numbered list; the model must answer
with exactly one translation per input, in order. The pydantic model rejects
anything that is not a list of strings; the count itself is checked by the
caller so the mismatch can be reported with both numbers.
"""
from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, Field, field_validator

_CONTEXT_SUFFIX_RE = re.compile(r"^(.*?)(\s*\[context:.*\])$")
_NUMBERING_RE = re.compile(r"^\d+\.\s*(.*)$")


class LabelTranslations(BaseModel):
    translations: List[str] = Field(..., description="One translated label per input label, same order.")

    @field_validator("translations")
    @classmethod
    def _clean(cls, values: List[str]) -> List[str]:
        cleaned: List[str] = []
        for raw in values:
            t = raw.strip()
            # models sometimes echo the context hint or a list number
            m = _CONTEXT_SUFFIX_RE.match(t)
            if m:
                t = m.group(1).strip()
            m = _NUMBERING_RE.match(t)
            if m:
                t = m.group(1).strip()
            cleaned.append(t)
        return cleaned
