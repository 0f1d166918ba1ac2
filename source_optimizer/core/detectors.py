"""
Unused-Symbol Detectors

Two independent textual heuristics run on the simplified source:

- unused local variables of a fixed set of primitive types
- unused standard headers, checked against a small usage table

Neither is scope-aware. A name reused in another scope hides a real
finding, and unmapped headers are always reported.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Pattern
import logging

logger = logging.getLogger(__name__)

DECLARATION_PATTERN = re.compile(r'\b(int|float|double|char|bool)\s+(\w+)\s*(=[^;]*)?;')
INCLUDE_PATTERN = re.compile(r'#include\s*<([^>]+)>')

HEADER_USAGE: Dict[str, Pattern] = {
    'stdio': re.compile(r'printf|scanf'),
    'stdlib': re.compile(r'malloc|free|exit'),
    'string': re.compile(r'strlen|strcpy|strcmp'),
    'math': re.compile(r'sqrt|pow|sin|cos'),
}


@dataclass(frozen=True)
class Declaration:
    """A fixed-type variable declaration."""
    type_keyword: str
    identifier: str


def find_declarations(code: str) -> List[Declaration]:
    """Return every declaration in source order."""
    return [
        Declaration(match.group(1), match.group(2))
        for match in DECLARATION_PATTERN.finditer(code)
    ]


def _strip_own_occurrences(code: str, name: str) -> str:
    """Remove the declarations of name and every `name = ...;` assignment."""
    without_decls = DECLARATION_PATTERN.sub(
        lambda m: '' if m.group(2) == name else m.group(0), code
    )
    assignment = re.compile(rf'\b{re.escape(name)}\b\s*=.*?;')
    return assignment.sub('', without_decls)


def detect_unused_variables(code: str) -> List[str]:
    """
    Report declared identifiers that are never read.

    Args:
        code: Source text

    Returns:
        Unused identifiers in order of first declaration, each at most once
    """
    unused: List[str] = []
    checked = set()

    for declaration in find_declarations(code):
        name = declaration.identifier
        if name in checked:
            continue
        checked.add(name)

        remaining = _strip_own_occurrences(code, name)
        if not re.search(rf'\b{re.escape(name)}\b', remaining):
            unused.append(name)

    if unused:
        logger.debug(f"Unused variables: {', '.join(unused)}")

    return unused


def find_includes(code: str) -> List[str]:
    """Return every angle-bracket include target in source order."""
    return INCLUDE_PATTERN.findall(code)


def header_key(header: str) -> str:
    """Usage table key for a header: the name without its first `.h`."""
    return header.replace('.h', '', 1)


def detect_unused_includes(code: str) -> List[str]:
    """
    Report included headers none of whose known symbols appear in the text.

    Headers missing from the usage table are always reported.

    Args:
        code: Source text

    Returns:
        Header names as written between the angle brackets
    """
    unused = []

    for header in find_includes(code):
        usage = HEADER_USAGE.get(header_key(header))
        if usage is None or not usage.search(code):
            unused.append(header)

    if unused:
        logger.debug(f"Unused includes: {', '.join(unused)}")

    return unused
