"""Jinja2 rendering of scaffold reports.

The bundled templates live in ``docforge/scaffolder/templates/``.  Besides
rendering, this module knows the casing conventions a knowledge base can
declare for its naming entries (``PascalCase``, ``snake_case``,
``kebab-case``, ...) and exposes them as Jinja2 filters.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any, Callable

from jinja2 import Environment, FileSystemLoader, select_autoescape

_BUNDLED_TEMPLATES = Path(__file__).parent / "templates"

REPORT_TEMPLATE = "report.md.j2"


# ---------------------------------------------------------------------------
# Casing conventions
# ---------------------------------------------------------------------------

_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[-_\s]+")


def _words(value: str) -> list[str]:
    """``userProfile``, ``user-profile``, ``User Profile`` -> ``["user", "profile"]``."""
    spaced = _BOUNDARY.sub(" ", value)
    return [word.lower() for word in _SEPARATORS.split(spaced) if word]


def to_pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in _words(value))


def to_camel_case(value: str) -> str:
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(value: str) -> str:
    return "_".join(_words(value))


def to_kebab_case(value: str) -> str:
    return "-".join(_words(value))


# Keys are lower-cased convention identifiers as they appear in presets.
NAMING_CONVENTIONS: dict[str, Callable[[str], str]] = {
    "pascalcase": to_pascal_case,
    "camelcase": to_camel_case,
    "usecamelcase": lambda value: "use" + to_pascal_case(value),
    "snake_case": to_snake_case,
    "kebab-case": to_kebab_case,
    "upper_case": lambda value: to_snake_case(value).upper(),
}


def apply_naming(value: str, convention: str) -> str:
    """Format *value* according to a casing *convention* identifier.

    Unknown conventions leave *value* unchanged.

    Examples::

        apply_naming("user profile", "PascalCase")   -> "UserProfile"
        apply_naming("user profile", "kebab-case")   -> "user-profile"
        apply_naming("user profile", "useCamelCase") -> "useUserProfile"
    """
    formatter = NAMING_CONVENTIONS.get(convention.strip().lower())
    return formatter(value) if formatter else value


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Loads templates from one directory and renders them to text or files."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir else _BUNDLED_TEMPLATES
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(
            pascal_case=to_pascal_case,
            camel_case=to_camel_case,
            snake_case=to_snake_case,
            kebab_case=to_kebab_case,
            apply_naming=apply_naming,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render *template_name* (relative to ``template_dir``) with *context*."""
        return self.env.get_template(template_name).render(**context)

    async def render_to_file(
        self,
        template_name: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render *template_name* into *output_path*, creating parent directories.

        Returns:
            The path that was written.
        """
        text = self.render(template_name, context)
        target = Path(output_path)
        await asyncio.to_thread(_write_text, target, text)
        return target


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
