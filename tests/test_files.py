"""
Tests for filesystem helpers: atomic writes, patterns, discovery.
"""

import pytest

from tdocs.files import (
    filter_paths,
    find_doc_files,
    matches_any,
    normalize_patterns,
    to_doc_path,
    write_text_atomic,
)

from conftest import write


class TestWriteAtomic:
    def test_creates_parents_and_writes(self, tmp_path):
        target = tmp_path / "a" / "b" / "c.md"
        write_text_atomic(target, "hello\n")

        assert target.read_text(encoding="utf-8") == "hello\n"
        assert [p.name for p in target.parent.iterdir()] == ["c.md"]

    def test_overwrites(self, tmp_path):
        target = write(tmp_path / "c.md", "old")
        write_text_atomic(target, "new")
        assert target.read_text(encoding="utf-8") == "new"


class TestPatterns:
    def test_normalize_comma_separated(self):
        assert normalize_patterns("guide/*, reference/** ,", "docs") == ["guide/*", "reference/**"]

    def test_normalize_strips_docs_root(self):
        assert normalize_patterns(["docs/guide/*", "website/docs/api/*"], "website/docs") == ["guide/*", "api/*"]

    def test_normalize_empty(self):
        assert normalize_patterns(None, "docs") == []
        assert normalize_patterns("", "docs") == []

    @pytest.mark.parametrize(
        "to, expected",
        [
            ("/docs/a", "a"),
            ("docs/guide/intro", "guide/intro"),
            ("framework/react/overview", "framework/react/overview"),
            ("/guide/intro.md", "guide/intro"),
        ],
    )
    def test_to_doc_path(self, to, expected):
        assert to_doc_path(to, "docs") == expected

    @pytest.mark.parametrize(
        "path, pattern, expected",
        [
            ("reference/api", "reference/**", True),
            ("guide/intro", "reference/**", False),
            ("intro", "**/*.md", True),
            ("guide/intro", "**/*.md", True),
            ("guide/tutorial-1", "*tutorial*", False),
            ("guide/tutorial-1", "**/*tutorial*", True),
            ("guide/deep/b", "guide/*", False),
            ("guide/deep/b", "guide/**", True),
            ("reference/deep/api", "reference/*", False),
            ("guide/intro", "guide/intro.md", True),
            ("guide/a", "guide/[!b]*", True),
            ("guide/b", "guide/[!b]*", False),
        ],
    )
    def test_matches_any(self, path, pattern, expected):
        assert matches_any(path, [pattern]) is expected

    def test_star_stays_in_one_segment(self):
        assert filter_paths(["guide/a", "guide/deep/b"], ["guide/*"]) == ["guide/a"]

    def test_filter_paths_keeps_order(self):
        paths = ["b/x", "a/y", "b/z"]
        assert filter_paths(paths, ["b/*"]) == ["b/x", "b/z"]


class TestFindDocFiles:
    def test_glob_discovery(self, tmp_path):
        root = tmp_path / "docs"
        write(root / "intro.md", "x")
        write(root / "guide" / "a.md", "x")
        write(root / "guide" / "notes.txt", "x")
        write(root / "fr" / "intro.md", "x")

        assert find_doc_files(root, ["**/*.md"]) == ["fr/intro", "guide/a", "intro"]
        assert find_doc_files(root, ["guide/*"]) == ["guide/a"]

    def test_no_matches(self, tmp_path):
        assert find_doc_files(tmp_path, ["nothing/*"]) == []
