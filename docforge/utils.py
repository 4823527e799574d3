"""Shared console helpers for docforge.

Everything the CLI shows a person goes through the module-level Rich
``console``: artifact trees, the result table and status lines.  Library
modules log instead of printing.
"""

from __future__ import annotations

import io
from typing import Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from docforge.scaffolder.tree import DirectoryNode

console = Console()


def format_elapsed(seconds: float) -> str:
    """Format a short wall-clock duration.

    Examples::

        format_elapsed(0.35)  -> "350ms"
        format_elapsed(2.44)  -> "2.4s"
        format_elapsed(75.0)  -> "1m 15s"
    """
    if seconds <= 0:
        return "0ms"
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs:02d}s"


# ---------------------------------------------------------------------------
# Artifact tree rendering
# ---------------------------------------------------------------------------


def build_rich_tree(tree: DirectoryNode, label: str = ".") -> Tree:
    """Return a Rich ``Tree`` mirroring *tree*, directories sorted first."""
    root = Tree(f"[bold blue]{escape(label)}[/bold blue]")
    _add_branches(root, tree)
    return root


def _add_branches(branch: Tree, node: DirectoryNode) -> None:
    entries = sorted(
        node.children.items(),
        key=lambda item: (not isinstance(item[1], DirectoryNode), item[0]),
    )
    for name, child in entries:
        if isinstance(child, DirectoryNode):
            _add_branches(branch.add(f"[bold blue]{escape(name)}/[/bold blue]"), child)
        else:
            branch.add(f"{escape(name)} [dim]({len(child.content)} chars)[/dim]")


def tree_to_text(tree: DirectoryNode, label: str = ".") -> str:
    """Render *tree* as plain text (no colour codes) for reports."""
    buffer = io.StringIO()
    plain = Console(file=buffer, width=120, color_system=None, highlight=False)
    plain.print(build_rich_tree(tree, label))
    return buffer.getvalue().rstrip()


def print_artifact_tree(tree: DirectoryNode, label: str = ".") -> None:
    """Print *tree* to the console."""
    console.print(build_rich_tree(tree, label))
    console.print()


# ---------------------------------------------------------------------------
# Status output
# ---------------------------------------------------------------------------


def print_summary_table(rows: Mapping[str, object], title: str = "Result") -> None:
    """Print *rows* as a two-column field/value table."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Field", style="dim", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for field, value in rows.items():
        table.add_row(escape(field), escape(str(value)))
    console.print(table)
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
