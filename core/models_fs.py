"""
models_fs.py - Core Data Structure Definitions

Contains:
- RenameTable: Symbol rename table with its compiled pattern
- TraversalNode: Entry produced by the tree walk
- CopyOptions: Copy options configuration
- CopyOp: Single copy operation
- CopyPlan: Planned copy of a whole tree
"""

from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Pattern
from enum import Enum

from .text_match import compile_symbol_pattern, make_table, sed


# Base names that are never copied (VCS metadata, IDE metadata, build output)
DEFAULT_IGNORES: FrozenSet[str] = frozenset({".git", ".idea", ".gitignore", "target"})


class NodeKind(Enum):
    """Traversal node kind"""
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"      # Only when links are not followed
    IGNORED = "ignored"


@dataclass(frozen=True, eq=False)
class RenameTable:
    """Immutable old symbol -> new symbol table"""
    mapping: Mapping[str, str] = field(default_factory=dict)
    pattern: Optional[Pattern[str]] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "mapping", MappingProxyType(dict(self.mapping)))
        object.__setattr__(self, "pattern", compile_symbol_pattern(self.mapping))

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> "RenameTable":
        """Create RenameTable from OLD=NEW strings (malformed ones are dropped)"""
        return cls(make_table(pairs))

    def sed(self, text: str) -> str:
        """Apply the table to text"""
        return sed(text, self.pattern, self.mapping)

    def __len__(self) -> int:
        return len(self.mapping)

    def __bool__(self) -> bool:
        return bool(self.mapping)


@dataclass(frozen=True)
class TraversalNode:
    """Filesystem entry met during the walk"""
    path: Path                      # Full source path
    relative: PurePath              # Path relative to the source root
    kind: NodeKind

    @property
    def is_root(self) -> bool:
        return not self.relative.parts


@dataclass(frozen=True)
class CopyOptions:
    """Copy options configuration"""
    ignore_names: FrozenSet[str] = DEFAULT_IGNORES
    follow_links: bool = True       # Resolve symlinks instead of recreating them
    dry_run: bool = False           # Plan and report only, write nothing
    preserve_mode: bool = True      # Copy permission bits of files
    encoding: str = "utf-8"         # Text encoding for content rewriting
    log_dir: Optional[Path] = None  # Where to save JSON plan/result logs

    def with_ignores(self, names: Iterable[str]) -> "CopyOptions":
        """Return options with extra ignored base names"""
        return replace(self, ignore_names=self.ignore_names | frozenset(names))


@dataclass
class CopyOp:
    """Single copy operation"""
    kind: NodeKind
    src: Path                       # Source path
    dst: Path                       # Destination path
    note: str = ""                  # e.g. "renamed"

    def describe(self, source_root: Optional[Path] = None, dest_root: Optional[Path] = None) -> str:
        """Short human readable form, relative to the roots when given"""
        src = relative_str(self.src, source_root)
        dst = relative_str(self.dst, dest_root)
        return f"{self.kind.value}: {src} -> {dst}"


@dataclass
class CopyPlan:
    """Planned copy of a source tree"""
    source: Path
    destination: Path
    table: RenameTable
    options: CopyOptions = field(default_factory=CopyOptions)
    ops: List[CopyOp] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    @property
    def dir_count(self) -> int:
        return sum(1 for op in self.ops if op.kind == NodeKind.DIRECTORY)

    @property
    def file_count(self) -> int:
        return sum(1 for op in self.ops if op.kind == NodeKind.FILE)

    @property
    def link_count(self) -> int:
        return sum(1 for op in self.ops if op.kind == NodeKind.SYMLINK)

    @property
    def renamed_count(self) -> int:
        """Number of operations whose name was rewritten"""
        return sum(1 for op in self.ops if op.note == "renamed")

    @property
    def total_count(self) -> int:
        return len(self.ops)

    def add_op(self, kind: NodeKind, src: Path, dst: Path, note: str = "") -> None:
        """Add operation"""
        self.ops.append(CopyOp(kind=kind, src=src, dst=dst, note=note))

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Copy Plan Summary:",
            f"  - Source: {self.source}",
            f"  - Destination: {self.destination}",
            f"  - Directories: {self.dir_count}",
            f"  - Files: {self.file_count}",
        ]
        if self.link_count:
            lines.append(f"  - Symlinks: {self.link_count}")
        lines.append(f"  - Renamed: {self.renamed_count}")
        lines.append(f"  - Ignored: {len(self.skipped)}")
        return "\n".join(lines)


def relative_str(path: Path, root: Optional[Path]) -> str:
    """Path relative to root as a string ('.' for root itself, unchanged when outside)"""
    if root is None:
        return str(path)
    try:
        rel = path.relative_to(root)
    except ValueError:
        return str(path)
    return str(rel) if rel.parts else "."
