"""
exec_copy.py - Copy Execution Module

Responsibilities:
- Create directories and stream-copy files with substitution, in plan order
- Abort on the first failure (no rollback)
- dry_run support
- Execution logs
- copy(): validate, plan and execute in one call
"""

from pathlib import Path
from typing import Callable, List, Mapping, Optional, Union
from dataclasses import dataclass, field
from datetime import datetime
import json
import logging
import os
import shutil

from .errors import CopyError, DestinationCollisionError, InvalidDestinationError, InvalidSourceError
from .models_fs import CopyOp, CopyOptions, CopyPlan, NodeKind, RenameTable
from .plan_copy import as_table, plan_copy
from .safety_checks import check_destination, check_source, check_target_free

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class CopyResult:
    """Copy execution result"""
    completed: List[CopyOp] = field(default_factory=list)
    failed: Optional[CopyOp] = None
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def completed_count(self) -> int:
        return len(self.completed)

    def summary(self) -> str:
        """Generate summary"""
        title = "Dry Run Result:" if self.dry_run else "Execution Result:"
        lines = [
            title,
            f"  - Completed: {self.completed_count}",
            f"  - Status: {'ok' if self.ok else 'failed'}",
        ]
        if not self.ok:
            where = f"{self.failed.src} -> {self.failed.dst}: " if self.failed else ""
            lines.append(f"  - Error: {where}{self.error}")
        return "\n".join(lines)


def copy_file_sed(
    source: Path,
    target: Path,
    table: RenameTable,
    encoding: str = "utf-8"
) -> None:
    """
    Copy a text file line by line, applying the rename table to each line

    Line terminators are kept as they are, including a missing final
    newline. With an empty table the bytes are copied verbatim.

    Args:
        source: Source file
        target: Target file (must not exist)
        table: Rename table
        encoding: Text encoding

    Raises:
        FileExistsError: target exists
        UnicodeDecodeError: source is not text in the given encoding
    """
    if not table:
        with open(source, "rb") as reader, open(target, "xb") as writer:
            shutil.copyfileobj(reader, writer)
        return

    with open(source, "r", encoding=encoding, newline="") as reader:
        with open(target, "x", encoding=encoding, newline="") as writer:
            for line in reader:
                writer.write(table.sed(line))


def copy_symlink(source: Path, target: Path, table: RenameTable) -> None:
    """Recreate a symbolic link, applying the rename table to its target"""
    link = os.readlink(source)
    os.symlink(table.sed(link), target)


def _execute_op(op: CopyOp, plan: CopyPlan) -> None:
    free, error = check_target_free(op.dst)
    if not free:
        raise DestinationCollisionError(error, op.dst)

    if op.kind == NodeKind.DIRECTORY:
        os.mkdir(op.dst)
    elif op.kind == NodeKind.FILE:
        copy_file_sed(op.src, op.dst, plan.table, plan.options.encoding)
        if plan.options.preserve_mode:
            shutil.copymode(op.src, op.dst)
    elif op.kind == NodeKind.SYMLINK:
        copy_symlink(op.src, op.dst, plan.table)
    else:
        raise CopyError(f"Unknown operation: {op.kind}", op.src)


def execute_copy(
    plan: CopyPlan,
    dry_run: Optional[bool] = None,
    progress_callback: Optional[ProgressCallback] = None,
    log_dir: Optional[Path] = None
) -> CopyResult:
    """
    Execute copy plan

    Operations run in plan order, so every directory exists before its
    children are written. The first failure stops the copy; whatever was
    written so far is left in place.

    Args:
        plan: Copy plan
        dry_run: Whether to preview only (defaults to plan.options.dry_run)
        progress_callback: Progress callback (current, total, message)
        log_dir: Log directory (defaults to plan.options.log_dir)

    Returns:
        Execution result
    """
    if dry_run is None:
        dry_run = plan.options.dry_run
    if log_dir is None:
        log_dir = plan.options.log_dir

    result = CopyResult(dry_run=dry_run)
    total = plan.total_count

    if dry_run:
        for i, op in enumerate(plan.ops):
            msg = f"[Preview] {op.describe(plan.source, plan.destination)}"
            logger.debug(msg)
            if progress_callback:
                progress_callback(i + 1, total, msg)
            result.completed.append(op)
        return result

    if log_dir:
        save_plan_log(plan, log_dir)

    for i, op in enumerate(plan.ops):
        try:
            if progress_callback:
                progress_callback(i + 1, total, op.describe(plan.source, plan.destination))
            _execute_op(op, plan)
        except (CopyError, OSError, UnicodeError) as e:
            result.failed = op
            result.error = f"{type(e).__name__}: {e}"
            logger.error("copy failed at %s -> %s: %s", op.src, op.dst, result.error)
            break
        logger.debug("%s(%s, %s)", op.kind.value, op.src, op.dst)
        result.completed.append(op)

    if log_dir:
        save_result_log(result, log_dir)

    return result


def save_plan_log(plan: CopyPlan, log_dir: Path) -> Path:
    """Save execution plan log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"copy_plan_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "source": str(plan.source),
        "destination": str(plan.destination),
        "map": dict(plan.table.mapping),
        "total_ops": plan.total_count,
        "operations": [
            {
                "kind": op.kind.value,
                "src": str(op.src),
                "dst": str(op.dst),
                "note": op.note
            }
            for op in plan.ops
        ],
        "skipped": [str(p) for p in plan.skipped]
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file


def save_result_log(result: CopyResult, log_dir: Path) -> Path:
    """Save execution result log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"copy_result_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "ok": result.ok,
        "completed_count": result.completed_count,
        "completed": [
            {"kind": op.kind.value, "src": str(op.src), "dst": str(op.dst)}
            for op in result.completed
        ],
        "failed": None if result.failed is None else {
            "kind": result.failed.kind.value,
            "src": str(result.failed.src),
            "dst": str(result.failed.dst),
            "error": result.error
        }
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file


def validate_paths(source: Path, destination: Path) -> None:
    """
    Validate source and destination before any traversal

    Raises:
        InvalidSourceError: source missing, not a directory, or unreadable
        InvalidDestinationError: destination exists, has no parent, or lies in source
    """
    valid, error = check_source(source)
    if not valid:
        raise InvalidSourceError(error, source)
    valid, error = check_destination(destination, source)
    if not valid:
        raise InvalidDestinationError(error, destination)


def copy(
    source: Union[str, Path],
    destination: Union[str, Path],
    table: Union[RenameTable, Mapping[str, str], None],
    options: Optional[CopyOptions] = None,
    progress_callback: Optional[ProgressCallback] = None
) -> bool:
    """
    Copy a project tree, renaming symbols in names and contents

    Args:
        source: Source project directory
        destination: Destination project directory (must not exist)
        table: Rename table (RenameTable or plain old -> new mapping)
        options: Copy options
        progress_callback: Progress callback (current, total, message)

    Returns:
        True if the whole tree was copied, False on any error
    """
    source = Path(source)
    destination = Path(destination)
    options = options or CopyOptions()

    try:
        validate_paths(source, destination)
        plan = plan_copy(source, destination, as_table(table), options)
        logger.info("%s", plan.summary())
        result = execute_copy(plan, progress_callback=progress_callback)
    except (CopyError, OSError, UnicodeError) as e:
        logger.error("%s", e)
        return False
    except Exception:
        logger.exception("copy aborted: %s -> %s", source, destination)
        return False

    return result.ok
