"""
Logging for landscaper.

Everything logs under the ``landscaper`` logger. Nothing is attached until
set_verbosity or configure_logging runs, so an embedding application that
configures logging itself sees only what it asks for.

What each verbosity adds:

    0  model, request timing, catalog parse warnings
    1  the composed redesign/refinement/element prompt text
    2  DEBUG records, plus every Gemini request and response body with
       inline image data replaced by a size placeholder

The CLI maps -v/-vv to 1/2. Without flags, LANDSCAPER_VERBOSITY (0/1/2) is used.
Per-client payload dumps can also be forced with ``Config.debug_api``.
"""

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "landscaper"
VERBOSITY_ENV = "LANDSCAPER_VERBOSITY"

_log_prompts: bool = False
_log_payloads: bool = False
_configured: bool = False


def _ensure_handler() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    _configured = True


def _apply(level: int, prompts: bool, payloads: bool) -> None:
    global _log_prompts, _log_payloads
    _ensure_handler()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    _log_prompts = prompts
    _log_payloads = payloads


def set_verbosity(level: int) -> None:
    """Set verbosity 0, 1 or 2. Values below 0 act as 0 and above 2 as 2."""
    if level <= 0:
        _apply(logging.INFO, prompts=False, payloads=False)
    elif level == 1:
        _apply(logging.INFO, prompts=True, payloads=False)
    else:
        _apply(logging.DEBUG, prompts=True, payloads=True)


def log_prompts() -> bool:
    """True when composed prompt text should be logged (verbosity 1 or 2)."""
    return _log_prompts


def log_payloads() -> bool:
    """True when Gemini request/response bodies should be logged (verbosity 2)."""
    return _log_payloads


def get_verbosity_from_env() -> int:
    """Read LANDSCAPER_VERBOSITY; anything other than 0, 1 or 2 counts as 0."""
    raw = os.environ.get(VERBOSITY_ENV, "").strip()
    return {"1": 1, "2": 2}.get(raw, 0)


def configure_logging(verbose_level: int | None = None, quiet: bool = False) -> None:
    """
    Configure logging for a CLI run or an embedding application.

    Args:
        verbose_level: 0, 1 or 2. None falls back to LANDSCAPER_VERBOSITY.
        quiet: Only warnings and errors; overrides verbose_level and the env.
    """
    if quiet:
        _apply(logging.WARNING, prompts=False, payloads=False)
        return
    if verbose_level is None:
        verbose_level = get_verbosity_from_env()
    set_verbosity(verbose_level)


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` as a child of the landscaper logger (e.g. landscaper.core.gemini)."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_payloads",
    "log_prompts",
    "set_verbosity",
]
