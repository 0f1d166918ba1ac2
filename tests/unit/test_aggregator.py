"""
Unit tests for result aggregation.

These tests cover:
- Running totals kept by long-lived processes
- Batch summaries and their dictionary form
- Re-recording a file replaces its earlier outcome
"""

from source_optimizer.core.aggregator import (
    BatchAggregator, BatchSummary, FileStatus, RunningTotals
)
from source_optimizer.core.language import LanguageKind
from source_optimizer.core.pipeline import CodeOptimizer


GREETING_SOURCE = (
    "int main() {\n"
    "  // greet\n"
    "  printf(\"hi\");\n"
    "  if (done == true) { return 0; }\n"
    "}"
)


class TestRunningTotals:
    """Test constant-size running totals."""

    def setup_method(self):
        """Set up test fixtures."""
        self.optimizer = CodeOptimizer()
        self.totals = RunningTotals()

    def test_empty_summary(self):
        """Test the summary before any run."""
        summary = self.totals.summary()

        assert summary.total_files == 0
        assert summary.lines_saved == 0
        assert summary.success_rate == 0.0
        assert summary.language_distribution == {}

    def test_totals_match_batch_summary(self):
        """Test that totals agree with a batch over the same results."""
        results = [
            self.optimizer.optimize_text(GREETING_SOURCE, LanguageKind.C_FAMILY),
            self.optimizer.optimize_text("x = 1 # one\n\n", LanguageKind.PYTHON),
            self.optimizer.optimize_text("int unused;\nreturn 0;", LanguageKind.JAVA),
        ]
        aggregator = BatchAggregator()
        for index, result in enumerate(results):
            self.totals.add(result)
            aggregator.add_result(f"file{index}", result)

        assert self.totals.summary() == aggregator.generate_summary()

    def test_summary_is_a_snapshot(self):
        """Test that later runs do not change an earlier summary."""
        self.totals.add(self.optimizer.optimize_text(GREETING_SOURCE, LanguageKind.C_FAMILY))
        summary = self.totals.summary()

        self.totals.add(self.optimizer.optimize_text(GREETING_SOURCE, LanguageKind.C_FAMILY))

        assert summary.total_files == 1
        assert summary.simplification_distribution == {'IF_EQUALS_TRUE': 1}
        assert self.totals.summary().simplification_distribution == {'IF_EQUALS_TRUE': 2}


class TestBatchAggregator:
    """Test per-file outcome tracking."""

    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = BatchAggregator()
        self.result = CodeOptimizer().optimize_text("int a;", LanguageKind.C_FAMILY)

    def test_rerecorded_file_replaces_outcome_in_place(self):
        """Test that a second outcome for a path replaces the first."""
        self.aggregator.add_failure("a.c", OSError("boom"))
        self.aggregator.add_skipped("b.txt", "Unsupported file format")
        self.aggregator.add_result("a.c", self.result)

        assert [f.filepath for f in self.aggregator.files] == ["a.c", "b.txt"]
        assert self.aggregator.files[0].status == FileStatus.OPTIMIZED

    def test_summary_to_dict(self):
        """Test the dictionary form of a summary."""
        self.aggregator.add_result("a.c", self.result)

        data = self.aggregator.generate_summary().to_dict()

        assert data['total_files'] == 1
        assert data['success_rate'] == 100.0
        assert data['language_distribution'] == {'c-family': 1}
        assert set(data) == set(BatchSummary.__dataclass_fields__)
