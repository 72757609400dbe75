"""
cli_entry.py - CLI Entry Point

Copies a project from a source to a destination directory,
renaming the project as well.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = ArgumentParser(
        prog="project-fork",
        description="Copies a project from a source to a destination directory,\n"
                    "renaming the project as well.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fork a Maven project, renaming artifact and package
  project-fork --from ./oldproject --to ./newproject --map oldproject=newproject --map acme=initech

  # Show what would be written
  project-fork --from ./oldproject --to ./newproject --map oldproject=newproject --noop
"""
    )

    parser.add_argument("--from", dest="source", metavar="SOURCE", required=True,
                        help="Source project directory")
    parser.add_argument("--to", dest="destination", metavar="DESTINATION", required=True,
                        help="Destination project directory")
    parser.add_argument("--map", dest="map", metavar="OLD=NEW", action="append", default=[],
                        help="Symbol replacement table (repeatable)")
    parser.add_argument("--noop", action="store_true",
                        help="Do not execute, dry run only")
    parser.add_argument("--ignore", metavar="NAME", action="append", default=[],
                        help="Additional file or directory name to skip (repeatable)")
    parser.add_argument("--no-follow-links", dest="follow_links", action="store_false",
                        help="Copy symbolic links as links instead of following them")
    parser.add_argument("--log-dir", type=Path, default=None,
                        help="Save JSON plan and result logs to this directory")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Run verbosely")

    return parser


def configure_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr"""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def cmd_copy(args) -> int:
    """Handle copy"""
    from core import (
        CopyError, CopyOptions, RenameTable,
        execute_copy, plan_copy, validate_paths,
    )

    source = Path(args.source)
    destination = Path(args.destination)

    try:
        validate_paths(source, destination)
    except CopyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    table = RenameTable.from_pairs(args.map)
    options = CopyOptions(
        follow_links=args.follow_links,
        dry_run=args.noop,
        log_dir=args.log_dir,
    ).with_ignores(args.ignore)

    print(f"Source: {source}")
    print(f"Destination: {destination}")
    if table:
        print("Map:")
        for old, new in table.mapping.items():
            print(f"  {old} -> {new}")
    else:
        print("Map: (empty, plain copy)")
    print()

    try:
        plan = plan_copy(source, destination, table, options)
    except (CopyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(plan.summary())

    if options.dry_run:
        print()
        print(f"Would perform {plan.total_count} operations:")
        print("-" * 80)
        for op in plan.ops:
            note = f" ({op.note})" if op.note else ""
            print(f"  {op.describe(source, destination)}{note}")
        print("-" * 80)
        print("\n[Preview mode] Will not actually execute")
        return 0

    print("\nCopying...")
    try:
        result = execute_copy(plan)
    except (CopyError, OSError, UnicodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(result.summary())

    return 0 if result.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return cmd_copy(args)


if __name__ == "__main__":
    sys.exit(main())
