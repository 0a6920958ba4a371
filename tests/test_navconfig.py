"""
Tests for navigation config helpers: structural diff and path/label extraction.
"""

import copy

import pytest

from tdocs.navconfig import (
    extract_doc_paths,
    extract_path_to_label_map,
    find_label_fields,
    set_label,
    should_translate_config,
)

CONFIG = {
    "docSearch": {"appId": "X", "indexName": "tanstack"},
    "sections": [
        {
            "label": "Getting Started",
            "children": [
                {"label": "Overview", "to": "framework/react/overview"},
                {"label": "Installation", "to": "framework/react/installation"},
            ],
        },
        {
            "label": "Examples",
            "children": [
                {"label": "Basic", "to": "framework/react/examples/basic", "children": [{"label": "Nested", "to": "nested/page"}]},
                {"label": "Simple", "to": "framework/react/simple"},
            ],
        },
    ],
    "frameworks": [{"label": "react", "menuItems": [{"label": "Guides", "children": [{"label": "Queries", "to": "guides/queries"}]}]}],
}


# =============================================================================
# Structural differ
# =============================================================================


class TestShouldTranslateConfig:
    def test_identical(self):
        assert should_translate_config(CONFIG, copy.deepcopy(CONFIG)) is False

    def test_label_changes_are_ignored(self):
        target = copy.deepcopy(CONFIG)
        target["sections"][0]["label"] = "Premiers pas"
        target["sections"][1]["children"][0]["children"][0]["label"] = "Imbriqué"
        target["frameworks"][0]["menuItems"][0]["label"] = "Guides (fr)"

        assert should_translate_config(CONFIG, target) is False

    def test_does_not_mutate_inputs(self):
        source = copy.deepcopy(CONFIG)
        should_translate_config(source, {})
        assert source == CONFIG

    def test_empty_target(self):
        assert should_translate_config(CONFIG, {}) is True

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda c: c["sections"][0]["children"].append({"label": "New", "to": "new/page"}),
            lambda c: c["sections"][0]["children"].pop(),
            lambda c: c["sections"][0]["children"].reverse(),
            lambda c: c["sections"][0]["children"][0].__setitem__("to", "framework/react/moved"),
            lambda c: c["docSearch"].__setitem__("apiKey", "k"),
            lambda c: c.__setitem__("docSearch", {"indexName": "tanstack", "appId": "X"}),
        ],
        ids=["add", "remove", "reorder", "path", "new-key", "key-order"],
    )
    def test_structural_changes(self, mutate):
        target = copy.deepcopy(CONFIG)
        mutate(target)
        assert should_translate_config(CONFIG, target) is True


# =============================================================================
# Path / label extraction
# =============================================================================


class TestExtraction:
    def test_doc_paths(self):
        paths = extract_doc_paths(CONFIG)

        assert paths == [
            "framework/react/overview",
            "framework/react/installation",
            "nested/page",
            "framework/react/simple",
            "guides/queries",
        ]
        assert not any("/examples/" in p for p in paths)

    def test_doc_paths_are_unique(self):
        config = {"a": [{"to": "x"}, {"to": "x"}]}
        assert extract_doc_paths(config) == ["x"]

    def test_top_level_list(self):
        assert extract_doc_paths([{"to": "a"}, {"children": [{"to": "b"}]}]) == ["a", "b"]

    def test_path_to_label_map(self):
        mapping = extract_path_to_label_map(CONFIG)

        assert mapping["framework/react/overview"] == "Overview"
        assert mapping["nested/page"] == "Nested"
        assert "framework/react/examples/basic" not in mapping
        assert len(mapping) == 5

    def test_nodes_without_label_are_skipped(self):
        assert extract_path_to_label_map({"items": [{"to": "a"}, {"to": "b", "label": "B"}]}) == {"b": "B"}


class TestLabelFields:
    def test_find_and_set(self):
        config = copy.deepcopy(CONFIG)
        fields = find_label_fields(config)

        assert [f.value for f in fields][:3] == ["Getting Started", "Overview", "Installation"]
        overview = fields[1]
        assert overview.context == "framework/react/overview"
        assert fields[0].context is None

        for f in fields:
            set_label(config, f.path, f.value.upper())

        assert config["sections"][0]["children"][0] == {"label": "OVERVIEW", "to": "framework/react/overview"}
        assert config["frameworks"][0]["menuItems"][0]["children"][0]["label"] == "QUERIES"
        assert should_translate_config(CONFIG, config) is False
