"""docforge scaffolder -- plans and writes project skeletons.

Takes a resolved configuration plus the analysed document, plans an artifact
tree of directories and files, and optionally writes it to disk.

Quick usage::

    from docforge.scaffolder import build_scaffold, materialize

    plan = build_scaffold(document_text, configuration, project_spec)
    await materialize(plan.tree, "/tmp/output")
"""

from docforge.scaffolder.builder import AnalysisReport, ScaffoldPlan, build_scaffold
from docforge.scaffolder.materializer import materialize
from docforge.scaffolder.templates import REPORT_TEMPLATE, TemplateRenderer, apply_naming
from docforge.scaffolder.tree import DirectoryNode, FileNode, Node

__all__ = [
    "AnalysisReport",
    "ScaffoldPlan",
    "build_scaffold",
    "materialize",
    "DirectoryNode",
    "FileNode",
    "Node",
    "TemplateRenderer",
    "REPORT_TEMPLATE",
    "apply_naming",
]
