"""
scan_files.py - Tree Walking Module

Provides the deterministic top-down walk over a source tree
"""

from pathlib import Path, PurePath
from typing import AbstractSet, Callable, Iterator, List, Optional, Tuple
import os

from .errors import InvalidSourceError, SymlinkLoopError
from .models_fs import DEFAULT_IGNORES, NodeKind, TraversalNode


def walk_tree(
    root: Path,
    ignore_names: AbstractSet[str] = DEFAULT_IGNORES,
    follow_links: bool = True,
    progress_callback: Optional[Callable[[str], None]] = None
) -> Iterator[TraversalNode]:
    """
    Walk a directory tree depth-first, top-down

    A directory node is always yielded before any of its descendants.
    Entries of a directory are visited in sorted name order. Ignored
    entries are yielded as IGNORED nodes and never descended into.

    Args:
        root: Root directory
        ignore_names: Base names to skip (applied below the root)
        follow_links: Whether to resolve symbolic links
        progress_callback: Progress callback function

    Returns:
        Iterator of traversal nodes, the root first

    Raises:
        InvalidSourceError: root is not a directory
        SymlinkLoopError: followed links lead back to an ancestor
    """
    root = Path(root)
    if not root.is_dir():
        raise InvalidSourceError(f"invalid source: {root}", root)

    yield from _walk_dir(root, PurePath(), ignore_names, follow_links, (), progress_callback)


def _dir_key(path: Path) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def _walk_dir(
    directory: Path,
    relative: PurePath,
    ignore_names: AbstractSet[str],
    follow_links: bool,
    ancestors: Tuple[Tuple[int, int], ...],
    progress_callback: Optional[Callable[[str], None]]
) -> Iterator[TraversalNode]:
    key = _dir_key(directory)
    if key in ancestors:
        raise SymlinkLoopError(f"symbolic link loop: {directory}", directory)
    ancestors = ancestors + (key,)

    if progress_callback:
        progress_callback(str(directory))
    yield TraversalNode(path=directory, relative=relative, kind=NodeKind.DIRECTORY)

    for entry in sorted_entries(directory):
        path = Path(entry.path)
        rel = relative / entry.name

        if entry.name in ignore_names:
            yield TraversalNode(path=path, relative=rel, kind=NodeKind.IGNORED)
            continue

        if not follow_links and entry.is_symlink():
            yield TraversalNode(path=path, relative=rel, kind=NodeKind.SYMLINK)
            continue

        if entry.is_dir(follow_symlinks=follow_links):
            yield from _walk_dir(path, rel, ignore_names, follow_links, ancestors, progress_callback)
        else:
            if progress_callback:
                progress_callback(str(path))
            yield TraversalNode(path=path, relative=rel, kind=NodeKind.FILE)


def sorted_entries(directory: Path) -> List[os.DirEntry]:
    """
    List directory entries sorted by name

    Args:
        directory: Directory to list

    Returns:
        Entries (the scandir handle is already closed)
    """
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)
