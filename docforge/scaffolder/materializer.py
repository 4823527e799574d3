"""Writes an artifact tree to disk.

The walk is single-pass and depth-first: a directory is created before any
of its children are touched, and every file is written (overwriting) as it
is reached.  The operation is not transactional -- on the first failure the
walk stops and whatever was already written stays on disk.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from docforge.errors import FilesystemError

from .tree import DirectoryNode

logger = logging.getLogger(__name__)


async def materialize(tree: DirectoryNode, base_path: str | Path) -> None:
    """Create the directories and files of *tree* under *base_path*.

    Running it twice with the same tree leaves the same result on disk.

    Raises:
        FilesystemError: On the first I/O failure (permission denied, disk
            full, a file where a directory is expected, ...).
    """
    base = Path(base_path)
    await _make_directory(base)
    await _write_children(tree, base)
    directories, files = tree.count()
    logger.info("Materialized %d directories and %d files under %s", directories, files, base)


async def _write_children(node: DirectoryNode, current: Path) -> None:
    for name, child in node.children.items():
        target = current / name
        if isinstance(child, DirectoryNode):
            await _make_directory(target)
            await _write_children(child, target)
        else:
            await _write_file(target, child.content)


async def _make_directory(path: Path) -> None:
    try:
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Cannot create directory {path}: {exc}", path=path) from exc
    logger.debug("Created directory %s", path)


async def _write_file(path: Path, content: str) -> None:
    try:
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Cannot write file {path}: {exc}", path=path) from exc
    logger.debug("Wrote file %s", path)
