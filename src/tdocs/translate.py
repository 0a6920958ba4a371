# src/tdocs/translate.py
"""
Translation service (LLM-assisted).

Purpose:
- Translate documentation markdown into a target language.
- Translate navigation labels of config.json while leaving its structure alone.

Translation guardrails:
- Markdown structure, code blocks, inline code, URLs and paths stay unchanged.
- Labels come back as JSON validated by LabelTranslations, exactly one per input.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from tdocs.errors import TranslationCountMismatchError, TranslationError
from tdocs.llm import LLMClient
from tdocs.navconfig import find_label_fields, set_label
from tdocs.schema import LabelTranslations
from tdocs.settings import LangConfig

logger = logging.getLogger("tdocs.translate")

SYSTEM_PROMPT = (
    "You are a professional technical translator specializing in software documentation. "
    "You are particularly skilled at translating React, web development, and programming "
    "terminology, keeping the translations consistent and readable."
)

DOCUMENT_PROMPT = """Translate the following documentation from English to {language}.
Keep all code blocks, markdown formatting, HTML tags, and variables unchanged.
Do not translate text within ``` code blocks or inline `code`.
Do not translate URLs or file paths.
Maintain the original paragraph structure and heading levels.
Provide only the translated content without any introduction, prefixes, or meta-explanations about the translation. Output just the translation itself.

{context}

HERE IS THE TEXT TO TRANSLATE:
"""

LABELS_PROMPT = """Translate these navigation labels from English to {language}.
Rules:
- Translate ONLY the labels listed below, keep framework names (react, solid, vue, ...) as they are.
- Use the [context: ...] path only to understand the label; never include it in the output.
- If a translation is unclear, keep the original English text.
- Return EXACTLY {count} translations, in the same order.
Return ONLY a JSON object: {{"translations": ["<label 1>", "<label 2>", ...]}}.

{context}

LABELS:
{labels}
"""

# (label text, optional path context)
LabelInput = Tuple[str, Optional[str]]


def build_translation_context(lang: LangConfig, docs_context: str = "") -> str:
    parts: List[str] = []
    if docs_context:
        parts.append(f"CONTEXT FOR DOCUMENTATION:\n{docs_context}\n\n")
    if lang.guide:
        parts.append(f"TRANSLATION GUIDELINES:\n{lang.guide}\n\n")
    if lang.terms:
        parts.append("COMMON TERM TRANSLATIONS:\n")
        for english, translated in lang.terms.items():
            parts.append(f'- "{english}" → "{translated}"\n')
        parts.append("\n")
    return "".join(parts)


class TranslationService:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    def require_credentials(self) -> None:
        self.llm.require_credentials()

    async def translate_text(self, text: str, lang: LangConfig, context: str = "") -> str:
        prompt = DOCUMENT_PROMPT.format(language=lang.name, context=context)
        logger.debug(
            "Sending translation request, text length: %d characters, prompt total length: %d characters",
            len(text),
            len(prompt) + len(text),
        )
        return await self.llm.chat_text(SYSTEM_PROMPT, prompt + text, operation="translate_document")

    async def translate_labels(
        self,
        labels: Sequence[LabelInput],
        lang: LangConfig,
        context: str = "",
    ) -> List[str]:
        if not labels:
            return []

        lines = "\n".join(
            f"{i}. {value} [context: {ctx}]" if ctx else f"{i}. {value}"
            for i, (value, ctx) in enumerate(labels, start=1)
        )
        prompt = LABELS_PROMPT.format(language=lang.name, count=len(labels), context=context, labels=lines)
        raw = await self.llm.chat_json(SYSTEM_PROMPT, prompt, operation="translate_labels")

        try:
            parsed = LabelTranslations.model_validate(raw)
        except ValidationError as e:
            raise TranslationError(f"Unexpected label translation payload: {e}") from e

        if len(parsed.translations) != len(labels):
            raise TranslationCountMismatchError(len(labels), len(parsed.translations))
        return parsed.translations

    async def translate_config(self, config: Any, lang: LangConfig, docs_context: str = "") -> Any:
        """Return a deep copy of `config` with every label translated."""
        translated = copy.deepcopy(config)
        fields = find_label_fields(translated)
        logger.debug("Found %d labels to translate", len(fields))

        translations = await self.translate_labels(
            [(f.value, f.context) for f in fields],
            lang,
            build_translation_context(lang, docs_context),
        )
        for field, value in zip(fields, translations):
            set_label(translated, field.path, value)
        return translated
