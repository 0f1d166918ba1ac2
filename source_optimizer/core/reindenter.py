"""
Brace Reindenter Module

Re-emits statements with indentation derived from brace depth. Each
language family maps to one strategy; indentation-significant languages
pass through unchanged.
"""

from typing import Dict, List, Sequence, Union
import logging

from .language import LanguageKind

logger = logging.getLogger(__name__)

INDENT_UNIT = "    "


class PassthroughReindenter:
    """Identity strategy for indentation-significant languages."""

    def reindent(self, statements: Sequence[str]) -> str:
        return '\n'.join(statements)


class BraceReindenter:
    """
    Single forward scan over statements tracking brace depth.

    Depth drops before a statement starting with a closing brace and rises
    after one ending with an opening brace. Braces elsewhere in a line are
    ignored. Depth is clamped at zero for unbalanced input.
    """

    def __init__(self, indent_unit: str = INDENT_UNIT):
        self.indent_unit = indent_unit

    def reindent(self, statements: Sequence[str]) -> str:
        depth = 0
        formatted: List[str] = []

        for stmt in statements:
            if stmt.startswith('}'):
                if depth == 0:
                    logger.debug(f"Closing brace at depth 0, clamping: {stmt!r}")
                depth = max(0, depth - 1)

            formatted.append(self.indent_unit * depth + stmt)

            if stmt.endswith('{'):
                depth += 1

        return '\n'.join(formatted).strip()


Reindenter = Union[BraceReindenter, PassthroughReindenter]

REINDENTERS: Dict[LanguageKind, Reindenter] = {
    LanguageKind.C_FAMILY: BraceReindenter(),
    LanguageKind.JAVA: BraceReindenter(),
    LanguageKind.PYTHON: PassthroughReindenter(),
}


def reindent(statements: Sequence[str], language: LanguageKind) -> str:
    """
    Format statements for the given language family.

    Args:
        statements: Canonicalized statements in source order
        language: Language family selecting the strategy

    Returns:
        Formatted text without leading or trailing whitespace for brace languages
    """
    return REINDENTERS[language].reindent(statements)
