"""
Command-line interface for landscaper.

This package contains CLI implementations using Click.
Uses only the public API: from landscaper import ...
"""

from landscaper.cli.commands import cli, main

__all__ = ["cli", "main"]
