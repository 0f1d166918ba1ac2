"""
Heuristic Simplifier Module

This module rewrites redundant boolean comparisons such as
`if (done == true)` and records a suggestion for every rewrite applied.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimplificationRule:
    """A rewrite rule: pattern capturing one identifier, replacement template."""
    name: str
    pattern: Pattern
    replacement: str
    description: str

    def render(self, identifier: str) -> str:
        return self.replacement.format(name=identifier)


@dataclass(frozen=True)
class Suggestion:
    """A single applied simplification."""
    matched_text: str
    rule: str
    description: str

    def __str__(self):
        return f'{self.description} at: "{self.matched_text}"'


class BooleanSimplifier:
    """
    Applies a fixed, ordered table of boolean-comparison rewrites.

    Rules run in table order and each one rewrites every non-overlapping
    match in the current text.
    """

    def __init__(self):
        """Initialize the simplifier with its rule table."""
        self.rules = self._load_rules()

    def _load_rules(self) -> List[SimplificationRule]:
        """Load the rewrite rule table."""
        return [
            SimplificationRule(
                name='IF_EQUALS_TRUE',
                pattern=re.compile(r'\bif\s*\(\s*(\w+)\s*==\s*true\s*\)'),
                replacement='if ({name})',
                description='Simplify `if (x == true)` to `if (x)`',
            ),
            SimplificationRule(
                name='IF_EQUALS_FALSE',
                pattern=re.compile(r'\bif\s*\(\s*(\w+)\s*==\s*false\s*\)'),
                replacement='if (!{name})',
                description='Simplify `if (x == false)` to `if (!x)`',
            ),
            SimplificationRule(
                name='WHILE_EQUALS_TRUE',
                pattern=re.compile(r'\bwhile\s*\(\s*(\w+)\s*==\s*true\s*\)'),
                replacement='while ({name})',
                description='Simplify `while (x == true)` to `while (x)`',
            ),
            SimplificationRule(
                name='WHILE_EQUALS_FALSE',
                pattern=re.compile(r'\bwhile\s*\(\s*(\w+)\s*==\s*false\s*\)'),
                replacement='while (!{name})',
                description='Simplify `while (x == false)` to `while (!x)`',
            ),
        ]

    def simplify(self, code: str) -> Tuple[str, List[Suggestion]]:
        """
        Rewrite every redundant comparison in the text.

        Args:
            code: Formatted source text

        Returns:
            Tuple of (rewritten_text, suggestions in match order)
        """
        suggestions: List[Suggestion] = []

        for rule in self.rules:
            def apply(match, rule=rule):
                suggestions.append(Suggestion(match.group(0), rule.name, rule.description))
                return rule.render(match.group(1))

            code = rule.pattern.sub(apply, code)

        if suggestions:
            logger.debug(f"Applied {len(suggestions)} simplifications")

        return code, suggestions


def simplify(code: str) -> Tuple[str, List[Suggestion]]:
    """Simplify with the default rule table."""
    return BooleanSimplifier().simplify(code)
