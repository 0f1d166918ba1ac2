"""
Optimization Pipeline Module

This module runs the full normalization pipeline over one source document:

    raw text -> scrubber -> canonicalizer -> reindenter -> simplifier -> detectors

and handles reading the input and writing the output file. A run either
produces a complete output and report or raises; the output file is
replaced atomically so a failed write never leaves a truncated file.
"""

import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .canonicalizer import canonicalize
from .detectors import detect_unused_includes, detect_unused_variables
from .errors import ReadFailure, WriteFailure
from .language import LanguageKind, get_profile, resolve_language
from .reindenter import reindent
from .scrubber import LiteralAwareScrubber, PatternScrubber, Scrubber
from .simplifier import BooleanSimplifier, Suggestion

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 300
DEFAULT_OUTPUT_STEM = "optimized_output"


def default_output_path(input_path: str) -> str:
    """Output path used when none is configured: optimized_output<suffix> beside the input."""
    path = Path(input_path)
    return str(path.with_name(f"{DEFAULT_OUTPUT_STEM}{path.suffix}"))


def _target_mode(filepath: str) -> int:
    """Permission bits for a written file: the existing target's, else 0o666 minus the umask."""
    try:
        return stat.S_IMODE(os.stat(filepath).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


@dataclass
class PipelineConfig:
    """Explicit configuration for a single pipeline run."""
    input_path: str
    output_path: Optional[str] = None
    language: Optional[str] = None
    encoding: str = "utf-8"
    string_aware: bool = False
    preview_length: int = PREVIEW_LENGTH

    def resolved_output_path(self) -> str:
        return self.output_path or default_output_path(self.input_path)


@dataclass(frozen=True)
class SourceDocument:
    """Raw input text with its language family."""
    text: str
    language: LanguageKind
    path: Optional[str] = None


@dataclass
class OptimizationResult:
    """Output text and report of one pipeline run."""
    language: LanguageKind
    output: str
    original_lines: int
    optimized_lines: int
    single_line_comments: int
    block_comments: int
    statements: int
    unused_variables: List[str] = field(default_factory=list)
    unused_includes: List[str] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    preview_length: int = PREVIEW_LENGTH
    input_path: Optional[str] = None
    output_path: Optional[str] = None

    @property
    def lines_saved(self) -> int:
        return self.original_lines - self.optimized_lines

    @property
    def preview(self) -> str:
        return self.output[:self.preview_length]

    @property
    def include_directives(self) -> List[str]:
        return [f"#include <{header}>" for header in self.unused_includes]

    @property
    def suggestion_messages(self) -> List[str]:
        return [str(suggestion) for suggestion in self.suggestions]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable report."""
        return {
            'input_path': self.input_path,
            'output_path': self.output_path,
            'language': self.language.value,
            'original_lines': self.original_lines,
            'optimized_lines': self.optimized_lines,
            'lines_saved': self.lines_saved,
            'statements': self.statements,
            'comments_removed': {
                'single_line': self.single_line_comments,
                'block': self.block_comments,
            },
            'unused_variables': list(self.unused_variables),
            'unused_includes': self.include_directives,
            'simplifications': [
                {
                    'rule': suggestion.rule,
                    'matched_text': suggestion.matched_text,
                    'description': suggestion.description,
                    'message': str(suggestion),
                }
                for suggestion in self.suggestions
            ],
            'preview': self.preview,
        }

    def __repr__(self):
        return (f"OptimizationResult(language='{self.language.value}', "
                f"lines={self.original_lines}->{self.optimized_lines}, "
                f"suggestions={len(self.suggestions)})")


class CodeOptimizer:
    """
    Runs the normalization pipeline on documents and files.

    This class provides:
    - The pure text pipeline (optimize_text)
    - File runs with atomic output (optimize_file)
    - Previews that never touch the filesystem beyond the read (preview_file)
    """

    def __init__(self, scrubber: Optional[Scrubber] = None,
                 simplifier: Optional[BooleanSimplifier] = None,
                 preview_length: int = PREVIEW_LENGTH):
        """
        Initialize the optimizer.

        Args:
            scrubber: Comment scrubber, PatternScrubber by default
            simplifier: Boolean simplifier, default rule table when omitted
            preview_length: Number of leading output characters in the preview
        """
        self.scrubber = scrubber or PatternScrubber()
        self.simplifier = simplifier or BooleanSimplifier()
        self.preview_length = preview_length

    @classmethod
    def from_config(cls, config: PipelineConfig) -> 'CodeOptimizer':
        scrubber = LiteralAwareScrubber() if config.string_aware else PatternScrubber()
        return cls(scrubber=scrubber, preview_length=config.preview_length)

    def _read_file(self, filepath: str, encoding: str) -> str:
        """Read the whole input file."""
        try:
            with open(filepath, 'r', encoding=encoding) as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read file {filepath}: {e}")
            raise ReadFailure(filepath, str(e)) from e

    def _write_file(self, filepath: str, content: str, encoding: str):
        """Write content through a temporary file, then replace the target."""
        target_dir = os.path.dirname(os.path.abspath(filepath))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile('w', encoding=encoding, dir=target_dir,
                                             prefix='.optimizer-', suffix='.tmp',
                                             delete=False) as f:
                tmp_path = f.name
                f.write(content)
            os.chmod(tmp_path, _target_mode(filepath))
            os.replace(tmp_path, filepath)
        except (OSError, UnicodeEncodeError) as e:
            logger.error(f"Failed to write file {filepath}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise WriteFailure(filepath, str(e)) from e

        logger.info(f"Wrote optimized output: {filepath}")

    def load_document(self, config: PipelineConfig) -> SourceDocument:
        """
        Resolve the language and read the input file.

        Raises:
            UnsupportedLanguage: Before any read, for unrecognized extensions
            ReadFailure: If the file cannot be read
        """
        language = resolve_language(config.input_path, config.language)
        text = self._read_file(config.input_path, config.encoding)
        return SourceDocument(text=text, language=language, path=config.input_path)

    def optimize_text(self, text: str, language: LanguageKind) -> OptimizationResult:
        """
        Run every pipeline stage over in-memory text.

        Args:
            text: Raw source text
            language: Language family of the text

        Returns:
            OptimizationResult with the processed output and report
        """
        profile = get_profile(language)

        scrubbed = self.scrubber.scrub(text, language)
        statements = canonicalize(scrubbed.cleaned_lines, profile.terminator)
        formatted = reindent(statements, language)
        simplified, suggestions = self.simplifier.simplify(formatted)

        return OptimizationResult(
            language=language,
            output=simplified,
            original_lines=len(text.split('\n')),
            optimized_lines=len(simplified.split('\n')),
            single_line_comments=scrubbed.single_line_count,
            block_comments=scrubbed.block_count,
            statements=len(statements),
            unused_variables=detect_unused_variables(simplified),
            unused_includes=detect_unused_includes(simplified),
            suggestions=suggestions,
            preview_length=self.preview_length,
        )

    def optimize_document(self, document: SourceDocument) -> OptimizationResult:
        result = self.optimize_text(document.text, document.language)
        result.input_path = document.path
        return result

    def preview_file(self, config: PipelineConfig) -> OptimizationResult:
        """Run the pipeline on a file without writing any output."""
        return self.optimize_document(self.load_document(config))

    def optimize_file(self, config: PipelineConfig) -> OptimizationResult:
        """
        Run the pipeline on a file and write the output.

        Args:
            config: Run configuration

        Returns:
            OptimizationResult with output_path set

        Raises:
            UnsupportedLanguage, ReadFailure, WriteFailure
        """
        logger.info(f"Optimizing file: {config.input_path}")
        result = self.preview_file(config)

        output_path = config.resolved_output_path()
        self._write_file(output_path, result.output, config.encoding)
        result.output_path = output_path
        return result


def run(config: PipelineConfig) -> OptimizationResult:
    """Pipeline entry point: optimize config.input_path into its output path."""
    return CodeOptimizer.from_config(config).optimize_file(config)
