"""
plan_copy.py - Copy Plan Generation Module

Responsibilities:
- Walk the source tree
- Compute renamed destination paths
- Collision detection (existing targets, targets produced twice)
- Output CopyPlan
"""

from pathlib import Path, PurePath
from typing import Callable, Mapping, Optional, Set, Union
import logging
import os

from .errors import CopyError, DestinationCollisionError
from .models_fs import CopyOptions, CopyPlan, NodeKind, RenameTable
from .safety_checks import check_target_free, check_target_name
from .scan_files import walk_tree

logger = logging.getLogger(__name__)


def as_table(table: Union[RenameTable, Mapping[str, str], None]) -> RenameTable:
    """Wrap a plain mapping into a RenameTable"""
    if isinstance(table, RenameTable):
        return table
    return RenameTable(table or {})


def target_path(destination: Path, relative: PurePath, table: RenameTable) -> Path:
    """
    Compute the destination path of a source-relative path

    Substitution is applied to each path segment on its own, so the
    renamed tree keeps the shape of the source tree.

    Args:
        destination: Destination root
        relative: Path relative to the source root
        table: Rename table

    Returns:
        Destination path

    Raises:
        CopyError: a segment renames to an invalid name
    """
    target = destination
    for part in relative.parts:
        new_part = table.sed(part)
        valid, error = check_target_name(new_part)
        if not valid:
            raise CopyError(f"invalid target name for {relative}: {error}", relative)
        target = target / new_part
    return target


def plan_copy(
    source: Path,
    destination: Path,
    table: Union[RenameTable, Mapping[str, str], None],
    options: Optional[CopyOptions] = None,
    progress_callback: Optional[Callable[[str], None]] = None
) -> CopyPlan:
    """
    Generate a copy plan

    Args:
        source: Source root directory
        destination: Destination root (maps to the source root itself)
        table: Rename table
        options: Copy options
        progress_callback: Progress callback function

    Returns:
        Copy plan with operations in walk order

    Raises:
        InvalidSourceError: source is not a directory
        DestinationCollisionError: a target exists or is planned twice
        SymlinkLoopError: followed links form a cycle
        CopyError: a renamed segment is not a valid name
    """
    options = options or CopyOptions()
    table = as_table(table)
    source = Path(source)
    destination = Path(destination)

    for old in table.mapping:
        if any(sep and sep in old for sep in (os.sep, os.altsep)):
            logger.warning("map: %r contains a path separator; it rewrites file contents only, never names", old)

    plan = CopyPlan(source=source, destination=destination, table=table, options=options)
    planned: Set[Path] = set()

    for node in walk_tree(
        source,
        ignore_names=options.ignore_names,
        follow_links=options.follow_links,
        progress_callback=progress_callback,
    ):
        if node.kind == NodeKind.IGNORED:
            logger.debug("skip %s", node.path)
            plan.skipped.append(node.path)
            continue

        dst = target_path(destination, node.relative, table)

        if dst in planned:
            raise DestinationCollisionError(f"target produced twice: {dst} (from {node.path})", dst)
        free, error = check_target_free(dst)
        if not free:
            raise DestinationCollisionError(error, dst)
        planned.add(dst)

        renamed = not node.is_root and dst.name != node.relative.name
        plan.add_op(node.kind, node.path, dst, note="renamed" if renamed else "")
        logger.debug("plan %s(%s, %s)", node.kind.value, node.path, dst)

    logger.info("planned %d directories, %d files, %d ignored",
                plan.dir_count, plan.file_count, len(plan.skipped))
    return plan
