"""Artifact tree: a planned layout of directories and files.

A node is either a :class:`DirectoryNode` (named children) or a
:class:`FileNode` (text content), never both.  Child names are single path
segments, so a tree can never point outside the directory it is
materialized into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Iterator, Mapping, Union

from docforge.errors import ValidationError

_FORBIDDEN_NAMES = {"", ".", ".."}


def validate_node_name(name: Any) -> str:
    """Return *name* if it is a usable single path segment.

    Raises:
        ValidationError: For non-strings, empty names, ``.``/``..``, and
            names containing a path separator or NUL.
    """
    if not isinstance(name, str) or name in _FORBIDDEN_NAMES:
        raise ValidationError(f"Invalid artifact name: {name!r}")
    if "/" in name or "\\" in name or "\x00" in name:
        raise ValidationError(f"Artifact name must be a single path segment: {name!r}")
    return name


@dataclass(frozen=True)
class FileNode:
    """A file leaf holding its text content."""

    content: str = ""


@dataclass(frozen=True)
class DirectoryNode:
    """A directory holding named child nodes."""

    children: dict[str, "Node"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name, child in self.children.items():
            validate_node_name(name)
            if not isinstance(child, (DirectoryNode, FileNode)):
                raise ValidationError(
                    f"Artifact {name!r} must be a DirectoryNode or FileNode, "
                    f"got {type(child).__name__}"
                )

    # -- Conversion --------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DirectoryNode":
        """Build a tree from nested mappings whose leaves are strings.

        ``{"src": {"components": {}}, "readme": "hello"}`` becomes a
        directory ``src`` containing an empty directory ``components`` and a
        file ``readme``.
        """
        children: dict[str, Node] = {}
        for name, value in data.items():
            validate_node_name(name)
            if isinstance(value, Mapping):
                children[name] = cls.from_mapping(value)
            elif isinstance(value, str):
                children[name] = FileNode(value)
            else:
                raise ValidationError(
                    f"Artifact {name!r} must be a mapping or a string, got {type(value).__name__}"
                )
        return cls(children)

    def to_mapping(self) -> dict[str, Any]:
        """Inverse of :meth:`from_mapping`."""
        return {
            name: child.to_mapping() if isinstance(child, DirectoryNode) else child.content
            for name, child in self.children.items()
        }

    # -- Inspection --------------------------------------------------------

    def walk(self, prefix: PurePosixPath = PurePosixPath()) -> Iterator[tuple[PurePosixPath, "Node"]]:
        """Yield ``(relative_path, node)`` pairs, each directory before its contents."""
        for name, child in self.children.items():
            path = prefix / name
            yield path, child
            if isinstance(child, DirectoryNode):
                yield from child.walk(path)

    def count(self) -> tuple[int, int]:
        """Return ``(directories, files)`` below this node."""
        directories = files = 0
        for _, node in self.walk():
            if isinstance(node, DirectoryNode):
                directories += 1
            else:
                files += 1
        return directories, files


Node = Union[DirectoryNode, FileNode]
