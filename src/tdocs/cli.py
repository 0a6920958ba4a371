# src/tdocs/cli.py
"""
Command line entry point: translate-docs.

Flow:
1) load .env (OPENAI_API_KEY, OPENAI_BASE_URL, TRANSLATE_MODEL, TRANSLATE_LOG_FILE)
2) load the project config file(s)
3) apply CLI overrides to every project
4) run the pipeline for each project, print a summary
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console

from tdocs.errors import ConfigError, CredentialMissingError, GitError
from tdocs.llm import LLMClient, LLMSettings
from tdocs.logging_utils import setup_logging
from tdocs.pipeline import RunSummary, print_summary, run_project
from tdocs.settings import ProjectConfig, load_projects
from tdocs.translate import TranslationService

logger = logging.getLogger("tdocs.cli")


def _version() -> str:
    try:
        return version("translate-docs")
    except PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="translate-docs",
        description="Translate markdown documentation trees with an LLM, re-translating only stale files.",
    )
    p.add_argument("-v", "--version", action="version", version=_version(), help="Show version number")
    p.add_argument("-c", "--config", type=Path, help="Path to configuration file")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "-p",
        "--pattern",
        help='File pattern to match for updating (e.g., "*.md" or "guide/**/*.md"). The .md extension is optional.',
    )
    p.add_argument(
        "-y",
        "--copy-path",
        dest="copy_path",
        help="Comma-separated patterns of documents to copy without translation",
    )
    p.add_argument(
        "-d",
        "--docs-path",
        dest="docs_path",
        help="Comma-separated glob patterns to discover documents instead of reading config.json",
    )
    p.add_argument("-l", "--list-only", dest="list_only", action="store_true", help="Only list file status without updating docs")
    p.add_argument(
        "-u",
        "--update-config-only",
        dest="update_config_only",
        action="store_true",
        help="Only update config without processing docs",
    )
    p.add_argument(
        "-t",
        "--target-language",
        dest="target_language",
        help='Specify the target language code for translation (e.g., "zh-CN", "fr", "es")',
    )
    return p


def apply_cli_overrides(project: ProjectConfig, args: argparse.Namespace) -> ProjectConfig:
    """CLI values win over config file values; unset flags leave the file untouched."""
    update: Dict[str, Any] = {}
    for name in ("pattern", "copy_path", "docs_path", "target_language"):
        value = getattr(args, name, None)
        if value is not None:
            update[name] = value
    for name in ("list_only", "update_config_only"):
        if getattr(args, name, False):
            update[name] = True
    return project.model_copy(update=update)


async def run_all(projects: List[ProjectConfig], service: TranslationService, console: Console) -> List[RunSummary]:
    summaries: List[RunSummary] = []
    for project in projects:
        summary = await run_project(project, service, console=console)
        print_summary(summary, console)
        summaries.append(summary)
    return summaries


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    log_file = os.environ.get("TRANSLATE_LOG_FILE")
    setup_logging(level="DEBUG" if args.verbose else "INFO", log_file=Path(log_file) if log_file else None)

    try:
        projects = [apply_cli_overrides(p, args) for p in load_projects(args.config)]
        settings = LLMSettings.from_env()
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    service = TranslationService(LLMClient(settings))
    console = Console()

    try:
        asyncio.run(run_all(projects, service, console))
    except (CredentialMissingError, GitError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Process completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
