# src/tdocs/logging_utils.py
"""
Application-wide logging utilities.

- Console output on stdout, optional log file (TRANSLATE_LOG_FILE).
- Configured once by the CLI; library modules only call logging.getLogger("tdocs.<module>").
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DIVIDER = "=" * 80


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure application logging.
    - Logs to stdout (console)
    - Optionally also logs to a file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    handlers.append(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        format=LOG_FORMAT,
        force=True,
    )
    # openai/httpx request lines are noise at INFO
    for name in ("httpx", "openai"):
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def log_divider(logger: logging.Logger) -> None:
    logger.info(DIVIDER)
