"""
Property-based tests for the optimization pipeline using Hypothesis.

These tests generate source text from a comment-free alphabet, sprinkle
known comments into it and verify that every stage behaves consistently
across all generated inputs.
"""

import pytest
from hypothesis import given, strategies as st
from hypothesis.stateful import RuleBasedStateMachine, rule, invariant

from source_optimizer.core.aggregator import BatchAggregator, FileStatus
from source_optimizer.core.canonicalizer import canonicalize
from source_optimizer.core.language import LanguageKind
from source_optimizer.core.pipeline import CodeOptimizer, OptimizationResult
from source_optimizer.core.reindenter import reindent
from source_optimizer.core.scrubber import LiteralAwareScrubber, PatternScrubber


# Strategies for generating test data
CODE_ALPHABET = "abcdefgxyz0123456789 ;{}()="
FLAT_ALPHABET = "abcdefgxyz0123456789 ;{}="

code_text = st.text(alphabet=CODE_ALPHABET, max_size=40)
comment_text = st.text(alphabet="abcxyz019 ", max_size=20)

stripped_lines = st.lists(
    st.text(alphabet=CODE_ALPHABET, min_size=1, max_size=30)
    .map(str.strip)
    .filter(bool),
    max_size=30,
)


@st.composite
def commented_source(draw, line_token, block_open, block_close):
    """Generate source text with a known number of comments."""
    lines = []
    line_comments = 0
    block_comments = 0

    for _ in range(draw(st.integers(min_value=0, max_value=15))):
        line = draw(code_text)
        if draw(st.booleans()):
            line += f" {block_open}{draw(comment_text)}{block_close} "
            block_comments += 1
        if draw(st.booleans()):
            line += f" {line_token}{draw(comment_text)}"
            line_comments += 1
        lines.append(line)

    return "\n".join(lines), line_comments, block_comments


class TestScrubberProperties:
    """Property-based tests for the scrubbers."""

    @given(commented_source("//", "/*", "*/"))
    def test_c_comment_counts(self, source):
        """Property: every generated C comment is counted exactly once."""
        text, line_comments, block_comments = source

        result = PatternScrubber().scrub(text, LanguageKind.C_FAMILY)

        assert result.single_line_count == line_comments
        assert result.block_count == block_comments

    @given(commented_source("#", "'''", "'''"))
    def test_python_comment_counts(self, source):
        """Property: every generated Python comment is counted exactly once."""
        text, line_comments, block_comments = source

        result = PatternScrubber().scrub(text, LanguageKind.PYTHON)

        assert result.single_line_count == line_comments
        assert result.block_count == block_comments

    @given(commented_source("//", "/*", "*/"))
    def test_scrubbers_agree_without_literals(self, source):
        """Property: both scrubbers agree on literal-free text."""
        text, _, _ = source

        expected = PatternScrubber().scrub(text, LanguageKind.C_FAMILY)

        assert LiteralAwareScrubber().scrub(text, LanguageKind.C_FAMILY) == expected

    @given(commented_source("//", "/*", "*/"))
    def test_cleaned_lines_trimmed_and_non_empty(self, source):
        """Property: cleaned lines are never empty and never padded."""
        text, _, _ = source

        result = PatternScrubber().scrub(text, LanguageKind.C_FAMILY)

        for line in result.cleaned_lines:
            assert line
            assert line == line.strip()


class TestCanonicalizerProperties:
    """Property-based tests for the canonicalizer."""

    @given(stripped_lines)
    def test_never_merges_lines(self, lines):
        """Property: canonicalization yields at least one statement per line."""
        assert len(canonicalize(lines)) >= len(lines)

    @given(stripped_lines)
    def test_terminator_only_at_end(self, lines):
        """Property: a terminator only ends a statement, unless the line held nothing else."""
        for stmt in canonicalize(lines):
            assert ';' not in stmt[:-1] or set(stmt) <= {';', ' '}

    @given(stripped_lines)
    def test_statements_are_trimmed(self, lines):
        """Property: every statement is non-empty and trimmed."""
        for stmt in canonicalize(lines):
            assert stmt
            assert stmt == stmt.strip()


class TestReindenterProperties:
    """Property-based tests for the brace reindenter."""

    @given(stripped_lines)
    def test_one_line_per_statement(self, statements):
        """Property: brace reindentation keeps one line per statement."""
        output = reindent(statements, LanguageKind.C_FAMILY)

        lines = output.split('\n') if output else []
        assert len(lines) == len(statements)

    @given(stripped_lines)
    def test_indentation_bounded_by_openers(self, statements):
        """Property: indentation is whole units and never deeper than the open braces."""
        output = reindent(statements, LanguageKind.C_FAMILY)
        lines = output.split('\n') if output else []
        openers_seen = 0

        for line, stmt in zip(lines, statements):
            indent = len(line) - len(line.lstrip(' '))
            assert indent % 4 == 0
            assert indent // 4 <= openers_seen
            assert line[indent:] == stmt
            if stmt.endswith('{'):
                openers_seen += 1

    @given(stripped_lines)
    def test_python_passthrough(self, statements):
        """Property: Python statements are joined unchanged."""
        assert reindent(statements, LanguageKind.PYTHON) == '\n'.join(statements)


class TestPipelineProperties:
    """Property-based tests for whole pipeline runs."""

    def setup_method(self):
        """Set up test fixtures."""
        self.optimizer = CodeOptimizer()

    @given(commented_source("//", "/*", "*/"))
    def test_output_has_no_comments(self, source):
        """Property: the output of a run contains no comments to remove."""
        text, _, _ = source

        result = self.optimizer.optimize_text(text, LanguageKind.C_FAMILY)
        rerun = self.optimizer.optimize_text(result.output, LanguageKind.C_FAMILY)

        assert rerun.single_line_comments == 0
        assert rerun.block_comments == 0

    @given(st.text(alphabet=FLAT_ALPHABET + "\n", max_size=200))
    def test_second_run_is_stable(self, text):
        """Property: a second run keeps the statement count and output."""
        first = self.optimizer.optimize_text(text, LanguageKind.C_FAMILY)
        second = self.optimizer.optimize_text(first.output, LanguageKind.C_FAMILY)

        assert second.statements == first.statements
        assert second.output == first.output

    @given(commented_source("//", "/*", "*/"))
    def test_report_consistency(self, source):
        """Property: report figures agree with the output text."""
        text, _, _ = source

        result = self.optimizer.optimize_text(text, LanguageKind.C_FAMILY)

        assert result.original_lines == len(text.split('\n'))
        assert result.optimized_lines == len(result.output.split('\n'))
        assert result.lines_saved == result.original_lines - result.optimized_lines
        assert len(result.preview) <= 300
        assert result.output.startswith(result.preview)


# Strategies for the stateful aggregator test
filepaths = st.sampled_from(["a.c", "b.cpp", "src/c.java", "tool.py", "notes.txt"])
languages = st.sampled_from(list(LanguageKind))


@st.composite
def optimization_result(draw):
    """Generate a report with arbitrary line counts."""
    return OptimizationResult(
        language=draw(languages),
        output="",
        original_lines=draw(st.integers(min_value=1, max_value=500)),
        optimized_lines=draw(st.integers(min_value=1, max_value=500)),
        single_line_comments=draw(st.integers(min_value=0, max_value=20)),
        block_comments=draw(st.integers(min_value=0, max_value=20)),
        statements=draw(st.integers(min_value=0, max_value=500)),
    )


class BatchAggregatorStateMachine(RuleBasedStateMachine):
    """Stateful testing for BatchAggregator using Hypothesis."""

    def __init__(self):
        super().__init__()
        self.aggregator = BatchAggregator()
        self.expected = {}

    @rule(filepath=filepaths, result=optimization_result())
    def add_result(self, filepath, result):
        """Record an optimized file."""
        self.aggregator.add_result(filepath, result)
        self.expected[filepath] = FileStatus.OPTIMIZED

    @rule(filepath=filepaths)
    def add_skipped(self, filepath):
        """Record a skipped file."""
        self.aggregator.add_skipped(filepath, "Unsupported file format")
        self.expected[filepath] = FileStatus.SKIPPED

    @rule(filepath=filepaths)
    def add_failure(self, filepath):
        """Record a failed file."""
        self.aggregator.add_failure(filepath, OSError("boom"))
        self.expected[filepath] = FileStatus.FAILED

    @rule()
    def export_report(self):
        """Export the current report."""
        report = self.aggregator.export_report()
        assert len(report['files']) == len(self.expected)
        assert report['summary']['total_files'] == len(self.expected)

    @invariant()
    def one_outcome_per_file(self):
        """Invariant: each file has exactly its latest status."""
        statuses = {f.filepath: f.status for f in self.aggregator.files}
        assert statuses == self.expected

    @invariant()
    def summary_counts_add_up(self):
        """Invariant: status counts sum to the number of files."""
        summary = self.aggregator.generate_summary()
        assert summary.total_files == len(self.aggregator.files)
        assert (summary.optimized_files + summary.skipped_files
                + summary.failed_files) == summary.total_files
        assert 0 <= summary.success_rate <= 100
        assert summary.lines_saved == summary.original_lines - summary.optimized_lines
        assert sum(summary.language_distribution.values()) == summary.optimized_files


# Test the state machine
TestBatchAggregatorStateMachine = BatchAggregatorStateMachine.TestCase


if __name__ == '__main__':
    pytest.main([__file__])
