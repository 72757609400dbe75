"""
text_match.py - Symbol Matching Tools

Provides rename-table parsing, combined pattern compilation and the
single-pass substitution applied to path segments and file lines
"""

from typing import Dict, Iterable, Mapping, Optional, Pattern, Tuple
import logging
import re

logger = logging.getLogger(__name__)


def parse_pair(text: str) -> Optional[Tuple[str, str]]:
    """
    Parse an OLD=NEW pair

    Args:
        text: Pair string

    Returns:
        (old, new), or None when the string is not exactly two
        non-empty parts separated by '='
    """
    parts = text.split("=")
    if len(parts) != 2:
        return None
    old, new = parts
    if not old or not new:
        return None
    return old, new


def make_table(pairs: Iterable[str]) -> Dict[str, str]:
    """
    Build an old -> new mapping from OLD=NEW strings

    Malformed pairs are dropped without error. A repeated old symbol
    keeps the last value given.

    Args:
        pairs: Pair strings

    Returns:
        Mapping (may be empty)
    """
    table: Dict[str, str] = {}
    for kv in pairs:
        pair = parse_pair(kv)
        if pair is None:
            logger.debug("map: ignoring malformed entry %r", kv)
            continue
        old, new = pair
        logger.debug("map: %s -> %s", old, new)
        table[old] = new
    return table


def compile_symbol_pattern(symbols: Iterable[str]) -> Optional[Pattern[str]]:
    """
    Compile one whole-word matcher for all symbols

    Symbols are matched literally. Longer symbols are tried first so the
    result does not depend on the order the table was built in.

    Args:
        symbols: Symbols to match

    Returns:
        Compiled pattern, or None for an empty symbol set (matches nothing)
    """
    keys = sorted(set(symbols), key=lambda s: (-len(s), s))
    if not keys:
        return None
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keys) + r")\b")
    logger.debug("Pattern: %s", pattern.pattern)
    return pattern


def sed(text: str, pattern: Optional[Pattern[str]], mapping: Mapping[str, str]) -> str:
    """
    Replace every symbol occurrence in text in a single pass

    Replacement values are not scanned again, so a table that swaps two
    symbols swaps them instead of looping.

    Args:
        text: Text (a path segment or a file line)
        pattern: Pattern from compile_symbol_pattern
        mapping: Symbol -> replacement

    Returns:
        Replaced text
    """
    if pattern is None:
        return text
    return pattern.sub(lambda m: mapping[m.group(0)], text)

