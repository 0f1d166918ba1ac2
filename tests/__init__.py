"""
Test package for the source optimizer.

This package contains:
- Unit tests for each pipeline stage
- Integration tests for file, batch, CLI and API workflows
- Property-based tests using Hypothesis
"""
