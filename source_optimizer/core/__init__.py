"""
Core modules for comment scrubbing, statement canonicalization,
reindentation, simplification and unused-symbol detection.
"""

from .language import LanguageKind, LanguageProfile, resolve_language
from .scrubber import Scrubber, PatternScrubber, LiteralAwareScrubber, ScrubResult
from .canonicalizer import canonicalize
from .reindenter import reindent
from .simplifier import BooleanSimplifier, Suggestion
from .detectors import detect_unused_variables, detect_unused_includes
from .pipeline import CodeOptimizer, PipelineConfig, OptimizationResult, run
from .aggregator import BatchAggregator, RunningTotals, optimize_directory
from .errors import OptimizerError, UnsupportedLanguage, ReadFailure, WriteFailure

__all__ = [
    'LanguageKind',
    'LanguageProfile',
    'resolve_language',
    'Scrubber',
    'PatternScrubber',
    'LiteralAwareScrubber',
    'ScrubResult',
    'canonicalize',
    'reindent',
    'BooleanSimplifier',
    'Suggestion',
    'detect_unused_variables',
    'detect_unused_includes',
    'CodeOptimizer',
    'PipelineConfig',
    'OptimizationResult',
    'run',
    'BatchAggregator',
    'RunningTotals',
    'optimize_directory',
    'OptimizerError',
    'UnsupportedLanguage',
    'ReadFailure',
    'WriteFailure',
]
