"""
Lexical Scrubber Module

This module removes comments from source text before any structural
processing. Two implementations share the Scrubber interface:

- PatternScrubber deletes comment delimiters by regular expression and does
  not see string literals. This is the default behavior.
- LiteralAwareScrubber scans the text once, skipping over ordinary string
  and character literals so comment-like sequences inside them survive.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple
import logging

from .language import LanguageKind, LanguageProfile, get_profile

logger = logging.getLogger(__name__)


class CommentKind(Enum):
    """Classification of a removed comment span."""
    LINE = "line"
    BLOCK = "block"


@dataclass
class ScrubResult:
    """Cleaned lines plus the number of comments removed."""
    cleaned_lines: List[str] = field(default_factory=list)
    single_line_count: int = 0
    block_count: int = 0

    @property
    def total_comments(self) -> int:
        return self.single_line_count + self.block_count


class Scrubber(ABC):
    """Removes comments from source text for a given language family."""

    def scrub(self, text: str, language: LanguageKind) -> ScrubResult:
        """
        Strip comments, then split into trimmed non-empty lines.

        Args:
            text: Raw source text
            language: Language family of the text

        Returns:
            ScrubResult with cleaned lines and comment counts
        """
        profile = get_profile(language)
        code, single_line_count, block_count = self.strip_comments(text, profile)
        cleaned_lines = self._split_lines(code)

        logger.debug(
            f"Scrubbed {language.value} source: {single_line_count} line comments, "
            f"{block_count} block comments, {len(cleaned_lines)} lines kept"
        )
        return ScrubResult(cleaned_lines, single_line_count, block_count)

    @abstractmethod
    def strip_comments(self, text: str, profile: LanguageProfile) -> Tuple[str, int, int]:
        """Return (text without comments, line comment count, block comment count)."""

    @staticmethod
    def _split_lines(code: str) -> List[str]:
        lines = (line.strip() for line in code.split('\n'))
        return [line for line in lines if line]


class PatternScrubber(Scrubber):
    """
    Delimiter matching by regular expression.

    Line comments are removed first, then each block comment style in
    profile order. Each pass counts one per match. Unterminated block
    delimiters match nothing and stay in the text.
    """

    def strip_comments(self, text: str, profile: LanguageProfile) -> Tuple[str, int, int]:
        code, single_line_count = re.subn(profile.line_comment_pattern, '', text)

        block_count = 0
        for _opener, _closer, pattern in profile.block_comments:
            code, count = re.subn(pattern, '', code)
            block_count += count

        return code, single_line_count, block_count


class LiteralAwareScrubber(Scrubber):
    """
    Single-pass scanner that respects string and character literals.

    A literal runs from a quote to the matching unescaped quote or to the
    end of its line. An unterminated block comment swallows the rest of
    the text and counts as one block.

    On text without string literals its output and counts equal
    PatternScrubber's, except where one comment delimiter sits inside
    another comment. Here whichever comment opens first wins, so
    `/* a // b */` is one block comment, while PatternScrubber removes
    the line comment first and leaves `/* a` behind.
    """

    QUOTES = ('"', "'")

    def strip_comments(self, text: str, profile: LanguageProfile) -> Tuple[str, int, int]:
        out: List[str] = []
        counts = {CommentKind.LINE: 0, CommentKind.BLOCK: 0}
        i = 0
        n = len(text)

        while i < n:
            block = self._match_block_opener(text, i, profile)
            if block is not None:
                opener, closer = block
                end = text.find(closer, i + len(opener))
                counts[CommentKind.BLOCK] += 1
                if end == -1:
                    logger.debug(f"Unterminated {opener} comment at offset {i}")
                    break
                i = end + len(closer)
                continue

            if text.startswith(profile.line_comment_token, i):
                counts[CommentKind.LINE] += 1
                end = text.find('\n', i)
                i = n if end == -1 else end
                continue

            ch = text[i]
            if ch in self.QUOTES:
                i = self._copy_literal(text, i, out)
                continue

            out.append(ch)
            i += 1

        return ''.join(out), counts[CommentKind.LINE], counts[CommentKind.BLOCK]

    @staticmethod
    def _match_block_opener(text: str, i: int, profile: LanguageProfile):
        for opener, closer, _pattern in profile.block_comments:
            if text.startswith(opener, i):
                return opener, closer
        return None

    @staticmethod
    def _copy_literal(text: str, start: int, out: List[str]) -> int:
        """Copy a quoted literal into out and return the index after it."""
        quote = text[start]
        out.append(quote)
        i = start + 1
        n = len(text)

        while i < n:
            ch = text[i]
            if ch == '\\' and i + 1 < n:
                out.append(text[i:i + 2])
                i += 2
                continue
            out.append(ch)
            i += 1
            if ch == quote or ch == '\n':
                break

        return i


def scrub(text: str, language: LanguageKind) -> ScrubResult:
    """Scrub with the default pattern scrubber."""
    return PatternScrubber().scrub(text, language)
