"""Conversation-driven overrides applied on top of a preset.

Each rule pairs a trigger phrase with a transform.  Rules run in declaration
order against one working value, so a later rule sees what earlier rules
produced.  Transforms never modify their input: every level they touch
(naming, structure, conventions) is replaced by a fresh copy, and untouched
members are shared with the input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from .models import ResolvedConfiguration

logger = logging.getLogger(__name__)

Transform = Callable[[ResolvedConfiguration], ResolvedConfiguration]


# ---------------------------------------------------------------------------
# Trigger phrases and the values they introduce
# ---------------------------------------------------------------------------

SNAKE_CASE_MARKER = "使用下划线命名"
FEATURES_DIR_MARKER = "使用 features 目录"
REDUX_MARKER = "使用 Redux"
CSS_IN_JS_MARKER = "使用 CSS-in-JS"

SNAKE_CASE = "snake_case"
FEATURES_DIR = "src/features"
REDUX_CONVENTION = "使用 Redux 进行状态管理"
CSS_MODULES = "CSS Modules"
CSS_IN_JS_CONVENTION = "使用 styled-components 或 emotion"


@dataclass(frozen=True)
class OverrideRule:
    """A conversation-triggered transform of a resolved configuration."""

    name: str
    trigger: str
    transform: Transform

    def matches(self, conversation: str) -> bool:
        """Case-sensitive substring test; never a regular expression."""
        return self.trigger in conversation


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

def use_snake_case_naming(config: ResolvedConfiguration) -> ResolvedConfiguration:
    """Switch component and file naming to ``snake_case``."""
    naming = {**config.naming, "components": SNAKE_CASE, "files": SNAKE_CASE}
    return config.model_copy(update={"naming": naming})


def add_features_directory(config: ResolvedConfiguration) -> ResolvedConfiguration:
    """Add a ``features`` entry to the directory layout."""
    structure = {**config.structure, "features": FEATURES_DIR}
    return config.model_copy(update={"structure": structure})


def add_redux_convention(config: ResolvedConfiguration) -> ResolvedConfiguration:
    """Append the Redux state-management convention."""
    return config.model_copy(update={"conventions": (*config.conventions, REDUX_CONVENTION)})


def prefer_css_in_js(config: ResolvedConfiguration) -> ResolvedConfiguration:
    """Rewrite CSS Modules conventions to the CSS-in-JS convention."""
    conventions = tuple(
        CSS_IN_JS_CONVENTION if CSS_MODULES in convention else convention
        for convention in config.conventions
    )
    return config.model_copy(update={"conventions": conventions})


DEFAULT_RULES: tuple[OverrideRule, ...] = (
    OverrideRule("snake-case-naming", SNAKE_CASE_MARKER, use_snake_case_naming),
    OverrideRule("features-directory", FEATURES_DIR_MARKER, add_features_directory),
    OverrideRule("redux", REDUX_MARKER, add_redux_convention),
    OverrideRule("css-in-js", CSS_IN_JS_MARKER, prefer_css_in_js),
)


def apply_overrides(
    base: ResolvedConfiguration,
    conversation: str,
    rules: Sequence[OverrideRule] = DEFAULT_RULES,
) -> ResolvedConfiguration:
    """Apply every rule whose trigger occurs in *conversation*.

    Args:
        base: Configuration to start from.  It is never modified.
        conversation: Free-form conversational text.  Empty text applies no
            rule.
        rules: Rules to evaluate, in order.

    Returns:
        A new configuration; equal to *base* when no rule fired.
    """
    result = base.model_copy()
    if not conversation:
        return result

    for rule in rules:
        if rule.matches(conversation):
            logger.debug("Applying override rule %s", rule.name)
            result = rule.transform(result)
    return result
