"""Command-line interface for the source optimizer."""
