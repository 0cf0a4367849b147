"""
Utility functions for the CLI.

This module contains helper functions used by CLI commands,
such as path generation, option parsing and exit code constants.
"""

from datetime import datetime

import click

from landscaper.core.models import Replacement

# Exit codes
EXIT_SUCCESS = 0
EXIT_API_OR_NETWORK = 1
EXIT_VALIDATION_OR_CONFIG = 2


def default_output_path(prefix: str, ext: str) -> str:
    """Return default output path: <prefix>_<YYYYMMDD>_<HHMMSS>.<ext> in current directory."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{ext or 'png'}"


def parse_replacement(value: str) -> Replacement:
    """Parse a FROM=TO option value into a Replacement."""
    source, sep, target = value.partition("=")
    if not sep or not source.strip() or not target.strip():
        raise click.BadParameter(f"expected FROM=TO, got {value!r}", param_hint="--replace")
    return Replacement(source=source.strip(), target=target.strip())


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_API_OR_NETWORK",
    "EXIT_VALIDATION_OR_CONFIG",
    "default_output_path",
    "parse_replacement",
]
