"""
Error Types Module

Exceptions raised by the optimization pipeline. Malformed comments and
negative indentation are tolerated by the pipeline and have no exception.
"""

from typing import Optional


class OptimizerError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedLanguage(OptimizerError):
    """Raised when a file extension or language name is not recognized."""

    def __init__(self, name: str, path: Optional[str] = None):
        self.name = name
        self.path = path
        if path:
            message = f"Unsupported file format: {path}. Use .c, .cpp, .java, or .py files."
        else:
            message = f"Unsupported language: {name}"
        super().__init__(message)


class ReadFailure(OptimizerError):
    """Raised when the input file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read file {path}: {reason}")


class WriteFailure(OptimizerError):
    """Raised when the output file cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write file {path}: {reason}")
