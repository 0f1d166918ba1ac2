"""
Batch Aggregator Module

This module runs the pipeline over every supported file in a directory and
aggregates the per-file reports into project-wide statistics. Each file is
processed independently; one failure never affects the other files.
"""

from typing import List, Dict, Optional, Any
from dataclasses import asdict, dataclass, field
from enum import Enum
import logging
from pathlib import Path

from .errors import OptimizerError
from .language import detect_language
from .pipeline import CodeOptimizer, OptimizationResult, PipelineConfig

logger = logging.getLogger(__name__)


class FileStatus(Enum):
    """Outcome of a single file in a batch run."""
    OPTIMIZED = "Optimized"
    SKIPPED = "Skipped"
    FAILED = "Failed"


@dataclass
class FileOutcome:
    """Per-file entry of a batch run."""
    filepath: str
    filename: str
    status: FileStatus
    message: str = ""
    output_path: Optional[str] = None
    result: Optional[OptimizationResult] = None

    @property
    def lines_saved(self) -> int:
        return self.result.lines_saved if self.result else 0


@dataclass
class BatchSummary:
    """Summary statistics for a batch run."""
    total_files: int
    optimized_files: int
    skipped_files: int
    failed_files: int
    original_lines: int
    optimized_lines: int
    lines_saved: int
    single_line_comments: int
    block_comments: int
    unused_variables: int
    unused_includes: int
    success_rate: float
    simplification_distribution: Dict[str, int] = field(default_factory=dict)
    language_distribution: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BatchAggregator:
    """
    Aggregator for per-file pipeline results.

    This class provides:
    - Outcome tracking per file (optimized, skipped, failed)
    - Project-wide summary statistics
    - JSON-ready report export
    """

    def __init__(self):
        """Initialize the aggregator."""
        self.files: List[FileOutcome] = []
        self._positions: Dict[str, int] = {}

    def _add(self, outcome: FileOutcome):
        position = self._positions.get(outcome.filepath)
        if position is not None:
            self.files[position] = outcome
            return
        self._positions[outcome.filepath] = len(self.files)
        self.files.append(outcome)

    def add_result(self, filepath: str, result: OptimizationResult):
        """Record a successful run."""
        self._add(FileOutcome(
            filepath=filepath,
            filename=Path(filepath).name,
            status=FileStatus.OPTIMIZED,
            message=f"{result.lines_saved} lines saved",
            output_path=result.output_path,
            result=result,
        ))

    def add_skipped(self, filepath: str, reason: str):
        """Record a file the pipeline did not run on."""
        self._add(FileOutcome(filepath, Path(filepath).name, FileStatus.SKIPPED, reason))

    def add_failure(self, filepath: str, error: Exception):
        """Record a failed run."""
        self._add(FileOutcome(filepath, Path(filepath).name, FileStatus.FAILED, str(error)))

    def get_files_by_status(self) -> Dict[FileStatus, List[FileOutcome]]:
        """Group outcomes by status."""
        groups = {status: [] for status in FileStatus}
        for outcome in self.files:
            groups[outcome.status].append(outcome)
        return groups

    def results(self) -> List[OptimizationResult]:
        return [f.result for f in self.files if f.result is not None]

    def generate_summary(self) -> BatchSummary:
        """Generate summary statistics over all recorded files."""
        groups = self.get_files_by_status()
        results = self.results()
        total_files = len(self.files)

        simplifications: Dict[str, int] = {}
        languages: Dict[str, int] = {}
        for result in results:
            languages[result.language.value] = languages.get(result.language.value, 0) + 1
            for suggestion in result.suggestions:
                simplifications[suggestion.rule] = simplifications.get(suggestion.rule, 0) + 1

        optimized = len(groups[FileStatus.OPTIMIZED])
        original_lines = sum(r.original_lines for r in results)
        optimized_lines = sum(r.optimized_lines for r in results)

        return BatchSummary(
            total_files=total_files,
            optimized_files=optimized,
            skipped_files=len(groups[FileStatus.SKIPPED]),
            failed_files=len(groups[FileStatus.FAILED]),
            original_lines=original_lines,
            optimized_lines=optimized_lines,
            lines_saved=original_lines - optimized_lines,
            single_line_comments=sum(r.single_line_comments for r in results),
            block_comments=sum(r.block_comments for r in results),
            unused_variables=sum(len(r.unused_variables) for r in results),
            unused_includes=sum(len(r.unused_includes) for r in results),
            success_rate=(optimized / total_files * 100) if total_files > 0 else 0.0,
            simplification_distribution=simplifications,
            language_distribution=languages,
        )

    def most_reduced_files(self, limit: int = 5) -> List[FileOutcome]:
        """Files with the most lines saved."""
        optimized = [f for f in self.files if f.status == FileStatus.OPTIMIZED]
        return sorted(optimized, key=lambda f: f.lines_saved, reverse=True)[:limit]

    def export_report(self) -> Dict[str, Any]:
        """Export the batch as a JSON-serializable dictionary."""
        summary = self.generate_summary()

        return {
            'summary': summary.to_dict(),
            'files': [
                {
                    'filepath': f.filepath,
                    'filename': f.filename,
                    'status': f.status.value,
                    'message': f.message,
                    'output_path': f.output_path,
                    'report': f.result.to_dict() if f.result else None,
                }
                for f in self.files
            ],
        }


class RunningTotals:
    """
    Constant-size totals over a stream of successful runs.

    Only counters are kept, never the results themselves, so a long-lived
    process can record any number of runs.
    """

    def __init__(self):
        """Initialize empty totals."""
        self.runs = 0
        self.original_lines = 0
        self.optimized_lines = 0
        self.single_line_comments = 0
        self.block_comments = 0
        self.unused_variables = 0
        self.unused_includes = 0
        self.simplification_distribution: Dict[str, int] = {}
        self.language_distribution: Dict[str, int] = {}

    def add(self, result: OptimizationResult):
        """Fold one result into the totals."""
        self.runs += 1
        self.original_lines += result.original_lines
        self.optimized_lines += result.optimized_lines
        self.single_line_comments += result.single_line_comments
        self.block_comments += result.block_comments
        self.unused_variables += len(result.unused_variables)
        self.unused_includes += len(result.unused_includes)

        language = result.language.value
        self.language_distribution[language] = self.language_distribution.get(language, 0) + 1
        for suggestion in result.suggestions:
            rule = suggestion.rule
            self.simplification_distribution[rule] = self.simplification_distribution.get(rule, 0) + 1

    def summary(self) -> BatchSummary:
        """Totals in the same shape as a batch summary."""
        return BatchSummary(
            total_files=self.runs,
            optimized_files=self.runs,
            skipped_files=0,
            failed_files=0,
            original_lines=self.original_lines,
            optimized_lines=self.optimized_lines,
            lines_saved=self.original_lines - self.optimized_lines,
            single_line_comments=self.single_line_comments,
            block_comments=self.block_comments,
            unused_variables=self.unused_variables,
            unused_includes=self.unused_includes,
            success_rate=100.0 if self.runs else 0.0,
            simplification_distribution=dict(self.simplification_distribution),
            language_distribution=dict(self.language_distribution),
        )


def optimize_directory(source_dir: str, output_dir: str, recursive: bool = True,
                       string_aware: bool = False,
                       optimizer: Optional[CodeOptimizer] = None) -> BatchAggregator:
    """
    Optimize every supported file under source_dir into output_dir.

    Relative paths are mirrored under output_dir.

    Returns:
        BatchAggregator holding one outcome per file
    """
    aggregator = BatchAggregator()
    source_root = Path(source_dir)
    output_root = Path(output_dir)

    pattern = "**/*" if recursive else "*"
    candidates = sorted(p for p in source_root.glob(pattern) if p.is_file())

    for path in candidates:
        if output_root.resolve() in path.resolve().parents:
            continue
        if detect_language(str(path)) is None:
            aggregator.add_skipped(str(path), f"Unsupported file format: {path.suffix or path.name}")
            continue

        target = output_root / path.relative_to(source_root)
        config = PipelineConfig(
            input_path=str(path),
            output_path=str(target),
            string_aware=string_aware,
        )
        file_optimizer = optimizer or CodeOptimizer.from_config(config)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            result = file_optimizer.optimize_file(config)
            aggregator.add_result(str(path), result)
        except (OptimizerError, OSError) as e:
            logger.error(f"Failed to optimize {path}: {e}")
            aggregator.add_failure(str(path), e)

    return aggregator
