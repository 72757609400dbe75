"""
core - Project Fork Core Module

Provides core functionalities such as rename tables, tree walking, copy plan generation, execution, etc.
"""

from .errors import (
    CopyError,
    InvalidSourceError,
    InvalidDestinationError,
    DestinationCollisionError,
    SymlinkLoopError,
)

from .models_fs import (
    DEFAULT_IGNORES,
    NodeKind,
    RenameTable,
    TraversalNode,
    CopyOptions,
    CopyOp,
    CopyPlan,
)

from .text_match import (
    parse_pair,
    make_table,
    compile_symbol_pattern,
    sed,
)

from .scan_files import (
    walk_tree,
    sorted_entries,
)

from .plan_copy import (
    as_table,
    target_path,
    plan_copy,
)

from .exec_copy import (
    copy,
    copy_file_sed,
    execute_copy,
    validate_paths,
    CopyResult,
)

from .safety_checks import (
    check_source,
    check_destination,
    check_target_free,
    check_target_name,
)

__all__ = [
    # Errors
    "CopyError",
    "InvalidSourceError",
    "InvalidDestinationError",
    "DestinationCollisionError",
    "SymlinkLoopError",

    # Data models
    "DEFAULT_IGNORES",
    "NodeKind",
    "RenameTable",
    "TraversalNode",
    "CopyOptions",
    "CopyOp",
    "CopyPlan",
    "CopyResult",

    # Text processing
    "parse_pair",
    "make_table",
    "compile_symbol_pattern",
    "sed",

    # Walking
    "walk_tree",
    "sorted_entries",

    # Planning
    "as_table",
    "target_path",
    "plan_copy",

    # Execution
    "copy",
    "copy_file_sed",
    "execute_copy",
    "validate_paths",

    # Safety checks
    "check_source",
    "check_destination",
    "check_target_free",
    "check_target_name",
]
