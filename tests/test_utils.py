"""Unit tests for utility functions (docforge.utils).

Tests cover:
- format_elapsed
- Artifact tree rendering (build_rich_tree / tree_to_text)
- Rich output helpers (print_artifact_tree, print_summary_table, etc.)
"""

from __future__ import annotations

import pytest

from docforge.scaffolder.tree import DirectoryNode
from docforge.utils import (
    build_rich_tree,
    format_elapsed,
    print_artifact_tree,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    tree_to_text,
)


# ---------------------------------------------------------------------------
# format_elapsed
# ---------------------------------------------------------------------------


class TestFormatElapsed:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0.35, "350ms"),
            (2.44, "2.4s"),
            (59.9, "59.9s"),
            (75.0, "1m 15s"),
            (3605.2, "60m 05s"),
            (0, "0ms"),
            (-5, "0ms"),
        ],
    )
    def test_format(self, seconds: float, expected: str):
        assert format_elapsed(seconds) == expected


# ---------------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------------


class TestTreeRendering:
    @pytest.fixture
    def tree(self) -> DirectoryNode:
        return DirectoryNode.from_mapping(
            {
                "README.md": "# Demo",
                "src": {"components": {}, "index.ts": "x"},
                "[docs]": {},
            }
        )

    @pytest.mark.unit
    def test_directories_listed_first(self, tree: DirectoryNode):
        lines = tree_to_text(tree).splitlines()
        assert lines[0] == "."
        readme = next(i for i, line in enumerate(lines) if "README.md" in line)
        src = next(i for i, line in enumerate(lines) if "src/" in line)
        assert src < readme

    @pytest.mark.unit
    def test_file_sizes_shown(self, tree: DirectoryNode):
        text = tree_to_text(tree)
        assert "README.md (6 chars)" in text
        assert "index.ts (1 chars)" in text

    @pytest.mark.unit
    def test_markup_in_names_is_escaped(self, tree: DirectoryNode):
        assert "[docs]/" in tree_to_text(tree)

    @pytest.mark.unit
    def test_plain_text_has_no_ansi(self, tree: DirectoryNode):
        assert "\x1b[" not in tree_to_text(tree)

    @pytest.mark.unit
    def test_custom_label(self, tree: DirectoryNode):
        assert tree_to_text(tree, label="/tmp/out").splitlines()[0] == "/tmp/out"

    @pytest.mark.unit
    def test_build_rich_tree_children(self, tree: DirectoryNode):
        rich_tree = build_rich_tree(tree)
        assert len(rich_tree.children) == 3

    @pytest.mark.unit
    def test_empty_tree(self):
        assert tree_to_text(DirectoryNode()) == "."


# ---------------------------------------------------------------------------
# Rich output helpers (smoke tests - verify they don't raise)
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_artifact_tree(self):
        print_artifact_tree(DirectoryNode.from_mapping({"src": {}}), label="out")

    @pytest.mark.unit
    def test_print_summary_table(self):
        print_summary_table(
            {"Key1": "Value1", "Key2": "Value2"},
            title="Test Summary",
        )

    @pytest.mark.unit
    def test_print_success(self):
        print_success("All tests passed")

    @pytest.mark.unit
    def test_print_error(self):
        print_error("Something failed")

    @pytest.mark.unit
    def test_print_warning(self):
        print_warning("Check your config")
