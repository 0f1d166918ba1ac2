"""
Line Canonicalizer Module

Re-splits lines that hold more than one statement so every statement ends
up on its own line. Splitting is purely textual: a terminator inside
parentheses, such as in a for-loop header, is still a split point.
"""

from typing import Iterable, List
import logging

logger = logging.getLogger(__name__)

TERMINATOR = ';'


def split_statements(line: str, terminator: str = TERMINATOR) -> List[str]:
    """
    Split one line on every terminator.

    Every fragment except the final one gets the terminator back, so a
    line ending in the terminator keeps it on all of its statements. A
    line made only of terminators is kept as it is.
    """
    if terminator not in line:
        return [line]

    parts = line.split(terminator)
    last = len(parts) - 1
    statements = []

    for i, part in enumerate(parts):
        stmt = part.strip()
        if stmt:
            statements.append(stmt + terminator if i < last else stmt)

    return statements or [line]


def canonicalize(lines: Iterable[str], terminator: str = TERMINATOR) -> List[str]:
    """
    Produce one statement per line, preserving source order.

    Args:
        lines: Trimmed, non-empty lines from the scrubber
        terminator: Statement terminator to split on

    Returns:
        Ordered list of statements
    """
    statements: List[str] = []
    line_count = 0

    for line in lines:
        line_count += 1
        statements.extend(split_statements(line, terminator))

    if len(statements) > line_count:
        logger.debug(f"Split {line_count} lines into {len(statements)} statements")

    return statements
