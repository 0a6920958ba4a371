# src/tdocs/pipeline.py
"""
Document pipeline orchestrator.

Per target language (sequentially):
1) ConfigCheck       translate config.json when its structure changed
2) DocDiscovery      doc paths from config.json or from --docs-path globs
3) Pattern filtering include pattern, then copy-only pattern
4) StatusEvaluation  staleness oracle per document, printed as a table
5) Dispatch          translate or copy each stale document (skipped in list-only mode)

The translated tree lives next to the sources: <docsRoot>/<lang>/...
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from tdocs.batch import execute_in_batches
from tdocs.errors import CredentialMissingError, MalformedMetadataError, TranslationError
from tdocs.files import (
    filter_paths,
    find_doc_files,
    matches_any,
    normalize_patterns,
    to_doc_path,
    write_text_atomic,
)
from tdocs.frontmatter import Document, parse, read_document, serialize
from tdocs.logging_utils import log_divider
from tdocs.navconfig import extract_doc_paths, extract_path_to_label_map, should_translate_config
from tdocs.refdocs import resolve_reference
from tdocs.settings import LangConfig, ProjectConfig
from tdocs.staleness import (
    SOURCE_UPDATED_AT,
    TRANSLATION_UPDATED_AT,
    UpdateStatus,
    effective_source_time,
    format_timestamp,
    get_doc_update_status,
)
from tdocs.translate import TranslationService, build_translation_context
from tdocs.vcs import CommitTimeFn, last_commit_time

logger = logging.getLogger("tdocs.pipeline")

CONFIG_FILE = "config.json"


@dataclass
class DocTask:
    doc_path: str
    source_path: Path
    target_path: Path
    should_translate: bool


@dataclass
class StatusRow:
    source: str
    target: str
    status: UpdateStatus
    failed: bool = False


@dataclass
class LanguageSummary:
    lang: str
    up_to_date: int = 0
    updated: int = 0
    skipped: int = 0
    pending: int = 0  # stale documents left alone because of list-only mode
    config_translated: bool = False
    aborted: Optional[str] = None


@dataclass
class RunSummary:
    languages: List[LanguageSummary] = field(default_factory=list)

    @property
    def up_to_date(self) -> int:
        return sum(s.up_to_date for s in self.languages)

    @property
    def updated(self) -> int:
        return sum(s.updated for s in self.languages)

    @property
    def skipped(self) -> int:
        return sum(s.skipped for s in self.languages)


def _now() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def load_translated_config(path: Path) -> Dict[str, Any]:
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
        logger.debug("Found existing config %s", path)
        return config
    except (OSError, json.JSONDecodeError):
        logger.info("No existing config %s", path)
        return {}


def write_config(path: Path, config: Any) -> None:
    write_text_atomic(path, json.dumps(config, indent=2, ensure_ascii=False))


def rewrite_ref(ref: str, docs_root: str, translated_root: str) -> str:
    """docs/framework/react/overview.md -> docs/fr/framework/react/overview.md"""
    root = Path(docs_root).as_posix().rstrip("/")
    ref_posix = Path(ref).as_posix()
    relative = ref_posix[len(root) + 1:] if ref_posix.startswith(f"{root}/") else ref_posix
    return f"{Path(translated_root).as_posix().rstrip('/')}/{relative}"


def _build_copy(
    source_path: Path,
    docs_root: str,
    translated_root: str,
    commit_time: CommitTimeFn,
) -> str:
    source = read_document(source_path)

    metadata = dict(source.metadata)
    if source.ref:
        metadata["ref"] = rewrite_ref(source.ref, docs_root, translated_root)
    metadata[SOURCE_UPDATED_AT] = format_timestamp(effective_source_time(source_path, source, commit_time))
    metadata[TRANSLATION_UPDATED_AT] = _now()
    return serialize(source.body, metadata)


async def copy_doc(
    source_path: Path,
    target_path: Path,
    docs_root: str,
    translated_root: str,
    commit_time: CommitTimeFn = last_commit_time,
) -> bool:
    """Copy a document verbatim (body untouched), pointing its `ref` into the translated tree."""
    logger.debug("Copying document from %s to %s", source_path, target_path)
    loop = asyncio.get_running_loop()
    # blocking git and disk work
    text = await loop.run_in_executor(
        None, partial(_build_copy, source_path, docs_root, translated_root, commit_time)
    )
    await loop.run_in_executor(None, write_text_atomic, target_path, text)
    logger.debug("Document copied and updated successfully")
    return True


def _load_for_translation(source_path: Path, commit_time: CommitTimeFn) -> Tuple[Document, str]:
    """Effective document (refs resolved) and its formatted source-updated-at."""
    source = read_document(source_path)
    doc = parse(resolve_reference(source_path)) if source.ref else source
    source_time = format_timestamp(effective_source_time(source_path, source, commit_time))
    return doc, source_time


async def translate_doc(
    source_path: Path,
    target_path: Path,
    lang: LangConfig,
    service: TranslationService,
    docs_context: str = "",
    title: Optional[str] = None,
    commit_time: CommitTimeFn = last_commit_time,
) -> bool:
    """
    Translate a document body. Reference documents are resolved first, so the
    translated file is self-contained.
    """
    logger.debug("Translating %s to %s", source_path, target_path)
    loop = asyncio.get_running_loop()
    doc, source_time = await loop.run_in_executor(None, _load_for_translation, source_path, commit_time)

    context = (
        f"This is a complete document, title: {doc.metadata.get('title')} "
        "(don't include this in the translation)\n"
        + build_translation_context(lang, docs_context)
    )
    translated = await service.translate_text(doc.body, lang, context)

    metadata = dict(doc.metadata)
    if title:
        metadata["title"] = title
    metadata[SOURCE_UPDATED_AT] = source_time
    metadata[TRANSLATION_UPDATED_AT] = _now()

    await loop.run_in_executor(None, write_text_atomic, target_path, serialize(translated, metadata))
    logger.debug("Completed translation of %s", source_path.name)
    return True


def print_status_table(rows: List[StatusRow], console: Console) -> None:
    table = Table(title="Document Status", show_lines=False)
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Needs Update")
    table.add_column("Needs Translation")
    table.add_column("Reason")

    def yes_no(flag: bool) -> str:
        return "[green]Yes[/green]" if flag else "[red]No[/red]"

    for row in rows:
        table.add_row(
            row.source,
            row.target,
            "[yellow]Error[/yellow]" if row.failed else yes_no(row.status.should_update),
            "[yellow]Error[/yellow]" if row.failed else yes_no(row.status.should_translate),
            row.status.reason or "No changes needed",
        )
    console.print(table)


def select_languages(config: ProjectConfig) -> Dict[str, LangConfig]:
    if not config.target_language:
        return dict(config.langs)
    wanted = config.target_language.lower()
    return {code: lang for code, lang in config.langs.items() if code.lower() == wanted}


def discover_doc_paths(config: ProjectConfig, docs_config: Any) -> List[str]:
    docs_path = normalize_patterns(config.docs_path, config.docs_root)
    if docs_path:
        candidates = find_doc_files(config.docs_root, docs_path)
    else:
        candidates = [to_doc_path(to, config.docs_root) for to in extract_doc_paths(docs_config)]

    # never re-process a previous run's output
    lang_dirs = {code.lower() for code in config.langs}
    paths: List[str] = []
    seen = set()
    for doc_path in candidates:
        if doc_path.split("/", 1)[0].lower() in lang_dirs or doc_path in seen:
            continue
        seen.add(doc_path)
        paths.append(doc_path)
    return paths


async def process_language(
    config: ProjectConfig,
    code: str,
    lang: LangConfig,
    docs_config: Any,
    service: TranslationService,
    commit_time: CommitTimeFn = last_commit_time,
    console: Optional[Console] = None,
) -> LanguageSummary:
    console = console or Console()
    summary = LanguageSummary(lang=code)
    docs_root = Path(config.docs_root)

    log_divider(logger)
    logger.info("language: %s (%s)", code, lang.name)

    translated_root = docs_root / code.lower()
    translated_config_path = translated_root / CONFIG_FILE
    logger.debug("Target root: %s", translated_root)
    logger.debug("Target config: %s", translated_config_path)

    translated_root.mkdir(parents=True, exist_ok=True)

    # --- ConfigCheck ---
    translated_config = load_translated_config(translated_config_path)
    config_stale = should_translate_config(docs_config, translated_config)
    if config_stale and not config.list_only:
        logger.info("Config needs translation, updating translation...")
        service.require_credentials()
        translated_config = await service.translate_config(docs_config, lang, config.docs_context)
        write_config(translated_config_path, translated_config)
        summary.config_translated = True
        logger.info("Successfully translated config")
    elif not config_stale:
        logger.info("Config structure unchanged, no translation needed.")

    if config.update_config_only:
        return summary

    # --- DocDiscovery + pattern filtering ---
    doc_paths = discover_doc_paths(config, docs_config)
    include = normalize_patterns(config.pattern, config.docs_root)
    if include:
        doc_paths = filter_paths(doc_paths, include)
    copy_only = normalize_patterns(config.copy_path, config.docs_root)

    path_to_label = {
        to_doc_path(to, config.docs_root): label
        for to, label in extract_path_to_label_map(translated_config).items()
    }

    # --- StatusEvaluation ---
    rows: List[StatusRow] = [
        StatusRow(
            source=str(docs_root / CONFIG_FILE),
            target=str(translated_config_path),
            status=UpdateStatus(
                config_stale,
                config_stale,
                "Config structure changed" if config_stale else "Config structure unchanged",
            ),
        )
    ]
    tasks: List[DocTask] = []
    for doc_path in doc_paths:
        source_path = docs_root / f"{doc_path}.md"
        target_path = translated_root / f"{doc_path}.md"
        try:
            status = get_doc_update_status(source_path, target_path, commit_time)
        except MalformedMetadataError as e:
            logger.error("Skipping %s: %s", source_path, e)
            rows.append(StatusRow(str(source_path), str(target_path), UpdateStatus(False, False, str(e)), failed=True))
            summary.skipped += 1
            continue

        if status.should_translate and copy_only and matches_any(doc_path, copy_only):
            status = UpdateStatus(status.should_update, False, f"{status.reason} Copy-only path, copying.")
        rows.append(StatusRow(str(source_path), str(target_path), status))

        if status.should_update:
            tasks.append(DocTask(doc_path, source_path, target_path, status.should_translate))
        else:
            summary.up_to_date += 1

    print_status_table(rows, console)
    logger.info("Found %d/%d documents to translate", len(tasks), len(doc_paths))

    # --- Dispatch ---
    if config.list_only:
        summary.pending = len(tasks)
        return summary

    if any(t.should_translate for t in tasks):
        service.require_credentials()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        bar = progress.add_task(f"Updating documents ({code})", total=len(tasks))

        async def run_task(task: DocTask) -> bool:
            try:
                if task.should_translate:
                    await translate_doc(
                        task.source_path,
                        task.target_path,
                        lang,
                        service,
                        docs_context=config.docs_context,
                        title=path_to_label.get(task.doc_path),
                        commit_time=commit_time,
                    )
                else:
                    await copy_doc(
                        task.source_path,
                        task.target_path,
                        config.docs_root,
                        str(translated_root),
                        commit_time=commit_time,
                    )
            finally:
                progress.advance(bar)
            logger.debug("Updated %s", task.doc_path)
            return True

        results = await execute_in_batches(tasks, run_task, config.concurrency)

    summary.updated = len(results)
    summary.skipped += len(tasks) - len(results)

    logger.info("Completed processing for language: %s", code)
    return summary


async def run_project(
    config: ProjectConfig,
    service: TranslationService,
    commit_time: CommitTimeFn = last_commit_time,
    console: Optional[Console] = None,
) -> RunSummary:
    summary = RunSummary()
    langs = select_languages(config)

    if config.target_language and not langs:
        logger.warning(
            'Target language "%s" not found in configuration. Available languages: %s',
            config.target_language,
            ", ".join(config.langs),
        )
        return summary

    log_divider(logger)
    logger.info("Translation for %s in languages: %s started!", config.docs_root, ", ".join(langs))

    docs_config_path = Path(config.docs_root) / CONFIG_FILE
    logger.debug("Source documentation root: %s", config.docs_root)
    logger.debug("Source config path: %s", docs_config_path)
    docs_config = json.loads(docs_config_path.read_text(encoding="utf-8"))

    for code, lang in langs.items():
        try:
            lang_summary = await process_language(config, code, lang, docs_config, service, commit_time, console)
        except CredentialMissingError:
            raise
        except TranslationError as e:
            logger.error("Aborting language %s: %s", code, e)
            lang_summary = LanguageSummary(lang=code, aborted=str(e))
        summary.languages.append(lang_summary)

    log_divider(logger)
    return summary


def print_summary(summary: RunSummary, console: Console) -> None:
    table = Table(title="Summary")
    table.add_column("Language")
    table.add_column("Up to date", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Skipped/Errored", justify="right")
    table.add_column("Notes")
    for s in summary.languages:
        notes = []
        if s.config_translated:
            notes.append("config translated")
        if s.pending:
            notes.append(f"{s.pending} pending (list only)")
        if s.aborted:
            notes.append(f"aborted: {s.aborted}")
        table.add_row(s.lang, str(s.up_to_date), str(s.updated), str(s.skipped), ", ".join(notes))
    console.print(table)
