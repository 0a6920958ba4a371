"""
Tests for project config loading.
"""

import json

import pytest

from tdocs.errors import ConfigError
from tdocs.settings import ProjectConfig, find_config_file, load_projects

from conftest import write

YAML_CONFIG = """\
docsRoot: docs
docsContext: TanStack Query documentation
copyPath: reference/**
langs:
  zh-hans:
    name: Simplified Chinese
    guide: Keep a neutral, technical tone.
    terms:
      query: 查询
"""


class TestLoadProjects:
    def test_yaml_rc_camel_case(self, tmp_path):
        write(tmp_path / ".translationrc", YAML_CONFIG)

        (project,) = load_projects(search_dir=tmp_path)

        assert project.docs_root == "docs"
        assert project.copy_path == "reference/**"
        assert project.langs["zh-hans"].terms == {"query": "查询"}
        assert project.concurrency == 10
        assert project.list_only is False

    def test_snake_case_keys(self, tmp_path):
        path = write(
            tmp_path / "translation.config.json",
            json.dumps({"docs_root": "docs", "docs_path": ["guide/*"], "langs": {"fr": {"name": "French"}}}),
        )

        (project,) = load_projects(config_path=path)

        assert project.docs_path == ["guide/*"]

    def test_list_of_projects(self, tmp_path):
        path = write(
            tmp_path / "translation.config.json",
            json.dumps(
                [
                    {"docsRoot": "docs", "langs": {"fr": {"name": "French"}}},
                    {"docsRoot": "website/docs", "langs": {"es": {"name": "Spanish"}}},
                ]
            ),
        )

        projects = load_projects(config_path=path)

        assert [p.docs_root for p in projects] == ["docs", "website/docs"]

    def test_search_order(self, tmp_path):
        write(tmp_path / ".translationrc.yaml", YAML_CONFIG)
        write(tmp_path / "translation.config.yml", YAML_CONFIG)

        assert find_config_file(tmp_path).name == "translation.config.yml"

    def test_not_found(self, tmp_path):
        assert find_config_file(tmp_path) is None
        with pytest.raises(ConfigError, match="No translation config found"):
            load_projects(search_dir=tmp_path)

    def test_empty_file(self, tmp_path):
        path = write(tmp_path / ".translationrc.yml", "")
        with pytest.raises(ConfigError, match="empty"):
            load_projects(config_path=path)

    def test_invalid_json(self, tmp_path):
        path = write(tmp_path / "translation.config.json", "{not json")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_projects(config_path=path)

    def test_missing_required_field(self, tmp_path):
        path = write(tmp_path / "translation.config.json", json.dumps({"docsRoot": "docs"}))
        with pytest.raises(ConfigError, match="Invalid project #0"):
            load_projects(config_path=path)

    def test_unknown_keys_ignored(self, tmp_path):
        path = write(
            tmp_path / "translation.config.json",
            json.dumps({"docsRoot": "docs", "langs": {}, "somethingElse": 1}),
        )
        (project,) = load_projects(config_path=path)
        assert project.langs == {}


def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        ProjectConfig.model_validate({"docsRoot": "docs", "langs": {}, "concurrency": 0})
