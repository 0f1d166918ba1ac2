"""
Main entry point for the source-optimizer package.

This allows the package to be run as a module:
python -m source_optimizer
"""

from .cli.commands import main

if __name__ == '__main__':
    main()
