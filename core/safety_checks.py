"""
safety_checks.py - Safety Check Module

Provides various safety checks before and during a copy
"""

from pathlib import Path
from typing import Tuple, Optional
import os


def check_source(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if path can be used as copy source

    Args:
        path: Source directory

    Returns:
        (is_valid, error_reason)
    """
    if not path.exists():
        return False, f"Source does not exist: {path}"
    if not path.is_dir():
        return False, f"Source is not a directory: {path}"
    if not os.access(path, os.R_OK | os.X_OK):
        return False, f"Source is not readable: {path}"
    return True, None


def check_writable(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if a new entry can be created at path

    Args:
        path: Path to check (must not exist yet)

    Returns:
        (is_writable, error_reason)
    """
    parent = path.parent
    if not parent.exists():
        return False, f"Parent directory does not exist: {parent}"
    if not parent.is_dir():
        return False, f"Parent is not a directory: {parent}"
    if not os.access(parent, os.W_OK):
        return False, f"Directory is not writable: {parent}"
    return True, None


def is_within(path: Path, root: Path) -> bool:
    """Check if path is root or lies below it (both resolved)"""
    path = path.resolve()
    root = root.resolve()
    return path == root or root in path.parents


def check_destination(path: Path, source: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if path can be used as copy destination

    Args:
        path: Destination directory (must not exist)
        source: Source directory

    Returns:
        (is_valid, error_reason)
    """
    if os.path.lexists(path):
        return False, f"Existing destination: {path}"

    if is_within(path, source):
        return False, f"Destination lies inside the source: {path}"

    return check_writable(path)


def check_target_free(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check that nothing (not even a dangling link) exists at path

    Args:
        path: Target path

    Returns:
        (is_free, error_reason)
    """
    if os.path.lexists(path):
        return False, f"Target already exists: {path}"
    return True, None


def check_target_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a renamed path segment is still a single valid name

    Args:
        name: Segment after substitution

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Name cannot be empty"
    if name in (".", ".."):
        return False, f"Name cannot be {name!r}"
    if "\0" in name:
        return False, "Name contains a NUL character"
    for sep in (os.sep, os.altsep):
        if sep and sep in name:
            return False, f"Name contains path separator {sep!r}: {name}"
    return True, None
