"""
Recover the design catalog embedded in a model's text reply.

The model is asked for a bare JSON object but may wrap it in a ```json fence
or surround it with prose. Extraction never raises: anything unusable yields
None, which callers treat as "no catalog" rather than as a failure.
"""

import json
import re
from typing import Any

from landscaper.logging_config import get_logger

logger = get_logger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")

# Received text is logged on parse failure; keep the log line bounded.
_TEXT_LOG_MAX = 2000


def _candidate_json(text: str) -> str | None:
    """Return the substring most likely to hold the catalog, or None."""
    fenced = _FENCED_JSON.search(text)
    if fenced and fenced.group(1):
        return fenced.group(1)

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1]
    return None


def parse_design_catalog(text: str) -> Any | None:
    """
    Parse the catalog JSON out of free-form reply text.

    Strategies, first match wins:
      1. the inner content of a ```json fenced block
      2. everything from the first '{' to the last '}' inclusive

    Only syntax is checked; the parsed value is returned as-is.

    Args:
        text: Concatenated text parts of the reply

    Returns:
        The parsed JSON value, or None if no JSON was found or it was malformed
    """
    if not text:
        return None
    candidate = _candidate_json(text)
    if candidate is None:
        logger.debug("No catalog JSON found in reply text (%d chars)", len(text))
        return None
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError) as e:
        shown = text if len(text) <= _TEXT_LOG_MAX else text[:_TEXT_LOG_MAX] + "..."
        logger.warning("Failed to parse catalog JSON from model response: %s", e)
        logger.warning("Received text: %s", shown)
        return None
