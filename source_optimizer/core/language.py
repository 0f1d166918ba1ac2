"""
Language Registry Module

This module defines the closed set of supported language families and the
per-family profile the pipeline stages dispatch on: comment syntax,
statement terminator and whether nesting is expressed with braces.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging

from .errors import UnsupportedLanguage

logger = logging.getLogger(__name__)


class LanguageKind(Enum):
    """Supported language families."""
    C_FAMILY = "c-family"
    JAVA = "java"
    PYTHON = "python"


@dataclass(frozen=True)
class LanguageProfile:
    """Lexical description of a language family."""
    kind: LanguageKind
    display_name: str
    extensions: Tuple[str, ...]
    line_comment_token: str
    line_comment_pattern: str
    # (opener, closer, pattern) triples, applied in this order
    block_comments: Tuple[Tuple[str, str, str], ...]
    terminator: str
    brace_structured: bool


_C_STYLE_BLOCK = (('/*', '*/', r'/\*[\s\S]*?\*/'),)

PROFILES: Dict[LanguageKind, LanguageProfile] = {
    LanguageKind.C_FAMILY: LanguageProfile(
        kind=LanguageKind.C_FAMILY,
        display_name="C / C++",
        extensions=('.c', '.cpp'),
        line_comment_token='//',
        line_comment_pattern=r'//.*',
        block_comments=_C_STYLE_BLOCK,
        terminator=';',
        brace_structured=True,
    ),
    LanguageKind.JAVA: LanguageProfile(
        kind=LanguageKind.JAVA,
        display_name="Java",
        extensions=('.java',),
        line_comment_token='//',
        line_comment_pattern=r'//.*',
        block_comments=_C_STYLE_BLOCK,
        terminator=';',
        brace_structured=True,
    ),
    LanguageKind.PYTHON: LanguageProfile(
        kind=LanguageKind.PYTHON,
        display_name="Python",
        extensions=('.py',),
        line_comment_token='#',
        line_comment_pattern=r'#.*',
        block_comments=(
            ("'''", "'''", r"'''[\s\S]*?'''"),
            ('"""', '"""', r'"""[\s\S]*?"""'),
        ),
        terminator=';',
        brace_structured=False,
    ),
}

# Names accepted as an explicit language override
LANGUAGE_NAMES: Dict[str, LanguageKind] = {
    'c': LanguageKind.C_FAMILY,
    'cpp': LanguageKind.C_FAMILY,
    'java': LanguageKind.JAVA,
    'python': LanguageKind.PYTHON,
}


def get_profile(language: LanguageKind) -> LanguageProfile:
    """Return the profile for a language family."""
    return PROFILES[language]


def supported_extensions() -> List[str]:
    """All file extensions the pipeline accepts, in registry order."""
    extensions = []
    for profile in PROFILES.values():
        extensions.extend(profile.extensions)
    return extensions


def detect_language(filepath: str) -> Optional[LanguageKind]:
    """
    Identify the language family of a file from its extension.

    Args:
        filepath: Path of the source file

    Returns:
        The matching LanguageKind, or None for unrecognized extensions
    """
    suffix = Path(filepath).suffix
    for profile in PROFILES.values():
        if suffix in profile.extensions:
            return profile.kind
    return None


def language_from_name(name: str) -> LanguageKind:
    """
    Resolve an override name such as 'cpp' or 'python'.

    Raises:
        UnsupportedLanguage: If the name is not recognized
    """
    key = name.strip().lower()
    if key in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[key]
    for kind in LanguageKind:
        if kind.value == key:
            return kind
    raise UnsupportedLanguage(name)


def resolve_language(filepath: str, override: Optional[str] = None) -> LanguageKind:
    """
    Determine the language for a run, preferring an explicit override.

    Raises:
        UnsupportedLanguage: If neither the override nor the extension resolves
    """
    if override:
        return language_from_name(override)

    language = detect_language(filepath)
    if language is None:
        logger.warning(f"Unsupported file extension: {filepath}")
        raise UnsupportedLanguage(Path(filepath).suffix, path=filepath)
    return language
