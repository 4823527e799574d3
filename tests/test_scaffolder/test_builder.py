"""Tests for scaffold planning (docforge.scaffolder.builder).

Covers:
- The default source/test/docs skeleton
- Custom and nested role directories, including shared ones
- Rejection of absolute and escaping directories
- Remote analyses whose structure becomes the tree
- Report contents
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from docforge.errors import ValidationError
from docforge.knowledge.models import (
    ProjectKind,
    ProjectSpec,
    ProjectStructure,
    ResolvedConfiguration,
)
from docforge.knowledge.presets import lookup_preset
from docforge.scaffolder.builder import build_scaffold, build_schematic_tree
from docforge.scaffolder.tree import DirectoryNode

pytestmark = pytest.mark.unit

DEFAULT_LAYOUT = {
    "src": {"components": {}, "services": {}, "utils": {}},
    "test": {"unit": {}, "integration": {}},
    "docs": {"api": {}, "guides": {}},
}


class TestSchematicTree:
    def test_default_layout(self, react_spec: ProjectSpec):
        assert build_schematic_tree(react_spec).to_mapping() == DEFAULT_LAYOUT

    def test_custom_directories(self, backend_spec: ProjectSpec):
        tree = build_schematic_tree(backend_spec).to_mapping()
        assert tree == {
            "lib": {"components": {}, "services": {}, "utils": {}},
            "spec": {"unit": {}, "integration": {}},
            "docs": {"api": {}, "guides": {}},
        }

    def test_nested_directory(self):
        spec = ProjectSpec(type="frontend", framework="React", structure={"src": "app/src"})
        tree = build_schematic_tree(spec).to_mapping()
        assert tree["app"] == {"src": {"components": {}, "services": {}, "utils": {}}}
        assert "src" not in tree

    def test_shared_directory_is_merged(self):
        spec = ProjectSpec(
            type="backend", framework="Express", structure={"src": "code", "test": "code"}
        )
        tree = build_schematic_tree(spec).to_mapping()
        assert set(tree["code"]) == {"components", "services", "utils", "unit", "integration"}

    def test_dot_segments_ignored(self):
        spec = ProjectSpec(type="frontend", framework="React", structure={"docs": "./manual"})
        assert "manual" in build_schematic_tree(spec).children

    @pytest.mark.parametrize("path", ["/abs/src", "../outside", "a/../../b", ".", "./"])
    def test_rejected_before_planning(self, path: str):
        with pytest.raises(PydanticValidationError):
            ProjectSpec(type="frontend", framework="React", structure={"src": path})

    @pytest.mark.parametrize("path", ["/abs/src", "../outside", "."])
    def test_unvalidated_structure_still_rejected(self, path: str):
        spec = ProjectSpec.model_construct(
            kind=ProjectKind.FRONTEND,
            framework="React",
            structure=ProjectStructure.model_construct(src=path),
            conventions=[],
        )
        with pytest.raises(ValidationError):
            build_schematic_tree(spec)


class TestBuildScaffold:
    def test_preset_plan(self, react_spec: ProjectSpec):
        preset = lookup_preset("react")
        plan = build_scaffold("# Login page", preset, react_spec)

        assert isinstance(plan.tree, DirectoryNode)
        assert plan.tree.to_mapping() == DEFAULT_LAYOUT
        assert plan.report.project_type is ProjectKind.FRONTEND
        assert plan.report.framework == "React"
        assert plan.report.conventions == list(preset.conventions)
        assert plan.report.naming == preset.naming
        assert plan.report.templates == ["component", "hook"]
        assert plan.report.document == "# Login page"
        assert plan.report.analysis is None

    def test_project_conventions_reported(
        self, backend_spec: ProjectSpec, sample_configuration: ResolvedConfiguration
    ):
        plan = build_scaffold("", sample_configuration, backend_spec)
        assert plan.report.project_conventions == ["Use ESM modules"]
        assert plan.report.conventions == ["Use TypeScript", "Use CSS Modules for styling"]

    def test_configuration_not_modified(
        self, react_spec: ProjectSpec, sample_configuration: ResolvedConfiguration
    ):
        snapshot = sample_configuration.model_dump()
        plan = build_scaffold("doc", sample_configuration, react_spec)
        plan.report.naming["components"] = "changed"
        assert sample_configuration.model_dump() == snapshot

    def test_analysis_structure_becomes_tree(self, react_spec: ProjectSpec, analysis_document):
        configuration = ResolvedConfiguration.model_validate(analysis_document)
        plan = build_scaffold("doc", configuration, react_spec)

        assert plan.tree.to_mapping() == analysis_document["structure"]
        assert plan.report.analysis == analysis_document["analysis"]
        assert plan.report.conventions == ["Remote convention"]

    def test_analysis_with_unsafe_name_rejected(self, react_spec: ProjectSpec):
        configuration = ResolvedConfiguration.model_validate(
            {"analysis": {}, "structure": {"..": {"x": "y"}}, "code": {}}
        )
        with pytest.raises(ValidationError):
            build_scaffold("doc", configuration, react_spec)
