"""Scaffold planning.

Combines a resolved configuration, the analysed document and the project
specification into a :class:`ScaffoldPlan`: the artifact tree to
materialize plus a report that keeps the inputs traceable.  The tree is
schematic -- it says *where* generated code goes, not what it contains.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field

from docforge.errors import ValidationError
from docforge.knowledge.models import (
    ProjectKind,
    ProjectSpec,
    ResolvedConfiguration,
    relative_parts,
)

from .tree import DirectoryNode


# ---------------------------------------------------------------------------
# Schematic layout
# ---------------------------------------------------------------------------

SOURCE_DIRECTORIES: tuple[str, ...] = ("components", "services", "utils")
TEST_DIRECTORIES: tuple[str, ...] = ("unit", "integration")
DOCS_DIRECTORIES: tuple[str, ...] = ("api", "guides")

# (role, default directory, pre-created subdirectories)
ROLE_LAYOUT: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("src", "src", SOURCE_DIRECTORIES),
    ("test", "test", TEST_DIRECTORIES),
    ("docs", "docs", DOCS_DIRECTORIES),
)


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------

class AnalysisReport(BaseModel):
    """Everything that went into a scaffold plan, for traceability.

    The report travels with the result but is never materialized with the
    tree.
    """
    project_type: ProjectKind = Field(..., description="Kind of project")
    framework: str = Field(..., description="Framework the project uses")
    conventions: list[str] = Field(
        default_factory=list, description="Conventions from the resolved configuration"
    )
    project_conventions: list[str] = Field(
        default_factory=list, description="Conventions supplied with the project spec"
    )
    naming: dict[str, str] = Field(default_factory=dict, description="Naming conventions")
    structure: dict[str, str] = Field(default_factory=dict, description="Directory layout")
    templates: list[str] = Field(default_factory=list, description="Available template names")
    analysis: Optional[dict[str, Any]] = Field(
        default=None, description="Analysis supplied by a remote analysis endpoint"
    )
    document: str = Field(default="", description="The analysed document content")


@dataclass(frozen=True)
class ScaffoldPlan:
    """An artifact tree together with its report."""

    tree: DirectoryNode
    report: AnalysisReport


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def build_scaffold(
    document: str,
    configuration: ResolvedConfiguration,
    project_spec: ProjectSpec,
) -> ScaffoldPlan:
    """Plan the artifact tree for *project_spec*.

    When *configuration* is a finished remote analysis its own structure is
    used as the tree; otherwise the schematic source/test/docs layout is
    built.  *configuration* is only read.

    Raises:
        ValidationError: If a directory in the project structure is absolute,
            escapes the output directory, or is otherwise unusable.
    """
    if configuration.is_analysis:
        tree = DirectoryNode.from_mapping(configuration.artifact_structure or {})
    else:
        tree = build_schematic_tree(project_spec)

    report = AnalysisReport(
        project_type=project_spec.kind,
        framework=project_spec.framework,
        conventions=list(configuration.conventions),
        project_conventions=list(project_spec.conventions),
        naming=dict(configuration.naming),
        structure=dict(configuration.structure),
        templates=sorted(configuration.templates),
        analysis=configuration.analysis,
        document=document,
    )
    return ScaffoldPlan(tree=tree, report=report)


def build_schematic_tree(project_spec: ProjectSpec) -> DirectoryNode:
    """Build the source/test/docs skeleton for *project_spec*.

    Each role uses the directory named in ``project_spec.structure`` (which
    may be nested, e.g. ``app/src``) or its default name.  Roles that share
    a directory have their subdirectories merged.
    """
    layout: dict[str, Any] = {}
    for role, default, subdirectories in ROLE_LAYOUT:
        parts = _relative_parts(project_spec.structure.path_for(role) or default, role)
        node = layout
        for part in parts:
            node = node.setdefault(part, {})
        for subdirectory in subdirectories:
            node.setdefault(subdirectory, {})
    return DirectoryNode.from_mapping(layout)


def _relative_parts(path: str, role: str) -> tuple[str, ...]:
    try:
        return relative_parts(path)
    except ValueError as exc:
        raise ValidationError(f"Invalid {role!r} {exc}") from exc
