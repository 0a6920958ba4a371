# src/tdocs/settings.py
"""
Project configuration.

A translation config file describes one documentation project, or a list of
them:

    docsRoot: docs
    docsContext: TanStack Query documentation
    copyPath: reference/**
    langs:
      zh-hans:
        name: Simplified Chinese
        guide: Keep a neutral, technical tone.
        terms:
          query: 查询

Keys are accepted in camelCase (as above) or snake_case. Secrets never live
here: the API key and endpoint come from the environment (.env supported).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from tdocs.errors import ConfigError

logger = logging.getLogger("tdocs.settings")

CONFIG_SEARCH_NAMES = (
    "translation.config.json",
    "translation.config.yaml",
    "translation.config.yml",
    ".translationrc",
    ".translationrc.json",
    ".translationrc.yaml",
    ".translationrc.yml",
)

Patterns = Union[str, List[str], None]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LangConfig(_Model):
    name: str
    guide: Optional[str] = None
    terms: Dict[str, str] = Field(default_factory=dict)


class ProjectConfig(_Model):
    langs: Dict[str, LangConfig]
    docs_root: str
    docs_context: str = ""
    pattern: Patterns = None
    copy_path: Patterns = None
    docs_path: Patterns = None
    list_only: bool = False
    update_config_only: bool = False
    target_language: Optional[str] = None
    concurrency: int = Field(10, ge=1)


def _parse_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        if path.suffix == ".json":
            return json.loads(text)
        # YAML is a superset of JSON, so extensionless rc files accept both
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def find_config_file(search_dir: Optional[Path] = None) -> Optional[Path]:
    base = Path(search_dir) if search_dir is not None else Path.cwd()
    for name in CONFIG_SEARCH_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_projects(config_path: Optional[Path] = None, search_dir: Optional[Path] = None) -> List[ProjectConfig]:
    """
    Load an explicit config file, or search the working directory for one.
    Always returns a list (a single project mapping becomes a one-item list).
    """
    path = Path(config_path) if config_path is not None else find_config_file(search_dir)
    if path is None:
        raise ConfigError(
            "No translation config found. Create one of: " + ", ".join(CONFIG_SEARCH_NAMES)
        )
    logger.debug("Loading config from %s", path)

    raw = _parse_file(path)
    if raw is None:
        raise ConfigError(f"Config file {path} is empty")
    items = raw if isinstance(raw, list) else [raw]

    projects: List[ProjectConfig] = []
    for i, item in enumerate(items):
        try:
            projects.append(ProjectConfig.model_validate(item))
        except ValidationError as e:
            raise ConfigError(f"Invalid project #{i} in {path}:\n{e}") from e
    return projects
