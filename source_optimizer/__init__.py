"""
Source Optimizer

A source-code normalizer and heuristic advisor for C, C++, Java and Python files.
"""

__version__ = "1.0.0"

from .core.pipeline import CodeOptimizer, PipelineConfig, OptimizationResult, run
from .core.language import LanguageKind
from .core.aggregator import BatchAggregator

__all__ = [
    'CodeOptimizer',
    'PipelineConfig',
    'OptimizationResult',
    'LanguageKind',
    'BatchAggregator',
    'run',
]
