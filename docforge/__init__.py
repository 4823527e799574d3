"""docforge -- resolve a project's code-generation configuration and scaffold it.

Subpackages:
    knowledge   - knowledge-base sources, presets, overrides and resolution
    scaffolder  - artifact tree planning, materialization and reports
"""

__version__ = "0.1.0"
