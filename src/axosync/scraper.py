"""Directory scraping for the file path listing."""

from __future__ import annotations

import os
from pathlib import Path, PurePath

from .errors import FileSystemError


def scrape_file_paths(directory: Path, relative_to: Path | None = None) -> list[str]:
    """
    List every file and directory under ``directory``, including itself.

    Entries are produced depth-first with siblings sorted by name, so the
    result depends only on the directory contents and not on the order the
    filesystem enumerates them. Symlinked directories are listed but not
    descended into.

    Args:
        directory: Root directory to scrape
        relative_to: Optional ancestor to express paths against. By default
            paths are absolute.

    Returns:
        Paths as strings using ``/`` separators

    Raises:
        FileSystemError: If the root or any directory below it can't be read
    """
    try:
        root = directory.resolve(strict=True)
    except OSError as e:
        raise FileSystemError(f"cannot access directory ({e.strerror or e})", directory) from e
    if not root.is_dir():
        raise FileSystemError("not a directory", directory)

    base = relative_to.resolve() if relative_to is not None else None

    entries: list[Path] = [root]
    _walk(root, entries)
    return [_format_path(entry, base) for entry in entries]


def _walk(directory: Path, entries: list[Path]) -> None:
    """Recursively collect entries below ``directory`` in name order."""
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise FileSystemError(f"cannot list directory ({e.strerror or e})", directory) from e

    for child in children:
        path = directory / child.name
        entries.append(path)
        try:
            descend = child.is_dir(follow_symlinks=False)
        except OSError as e:
            raise FileSystemError(f"cannot stat entry ({e.strerror or e})", path) from e
        if descend:
            _walk(path, entries)


def _format_path(path: Path, base: Path | None) -> str:
    if base is None:
        return path.as_posix()
    try:
        return PurePath(os.path.relpath(path, base)).as_posix()
    except ValueError as e:
        # Windows: no relative path between different drives
        raise FileSystemError(f"not relative to {base}", path) from e
