"""docforge knowledge-base resolution.

Decides which code-generation configuration applies to a project: a local
JSON file, a remote analysis endpoint, a built-in framework preset adjusted
by conversation overrides, or a raw remote knowledge base.

Usage::

    from docforge.knowledge import KnowledgeBaseResolver, ProjectSpec, RemoteSource

    resolver = KnowledgeBaseResolver()
    config = await resolver.resolve(
        RemoteSource(url="https://kb.example.com/react.json"),
        ProjectSpec(type="frontend", framework="React"),
        conversation="使用下划线命名",
    )
    print(config.naming)
"""

from docforge.knowledge.models import (
    KnowledgeBaseSource,
    LocalSource,
    ProjectKind,
    ProjectSpec,
    ProjectStructure,
    RemoteSource,
    ResolvedConfiguration,
    Template,
    parse_source,
)
from docforge.knowledge.overrides import DEFAULT_RULES, OverrideRule, apply_overrides
from docforge.knowledge.presets import PRESETS, available_presets, lookup_preset
from docforge.knowledge.resolver import KnowledgeBaseResolver

__all__ = [
    "KnowledgeBaseResolver",
    "KnowledgeBaseSource",
    "LocalSource",
    "RemoteSource",
    "parse_source",
    "ProjectKind",
    "ProjectSpec",
    "ProjectStructure",
    "ResolvedConfiguration",
    "Template",
    "OverrideRule",
    "DEFAULT_RULES",
    "apply_overrides",
    "PRESETS",
    "available_presets",
    "lookup_preset",
]
