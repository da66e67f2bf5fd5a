"""Normalization of user-supplied query parameters."""

import math
import re
from typing import Any

MAX_SEARCH_TERM_LENGTH = 100

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def _to_int(value: Any) -> int | None:
    """Leading-integer parse: ``"12abc"`` -> 12, ``"abc"`` -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def sanitize_search_term(term: Any) -> str:
    """Strip markup characters from a search term.

    Non-string input yields ``""``. Otherwise the term is trimmed, ``<`` and
    ``>`` are removed and the result is truncated to 100 characters.
    """
    if not term or not isinstance(term, str):
        return ""
    cleaned = term.strip().replace("<", "").replace(">", "")
    return cleaned[:MAX_SEARCH_TERM_LENGTH]


def validate_pagination(page: Any, limit: Any) -> tuple[int, int]:
    """Coerce ``page``/``limit`` to a safe ``(page, limit)`` pair.

    Missing or non-numeric values fall back to page 1 and limit 50;
    page is clamped to at least 1 and limit to ``[1, 100]``.
    """
    parsed_page = _to_int(page)
    parsed_limit = _to_int(limit)
    if parsed_page is None:
        parsed_page = DEFAULT_PAGE
    if parsed_limit is None:
        parsed_limit = DEFAULT_LIMIT
    return max(1, parsed_page), min(MAX_LIMIT, max(1, parsed_limit))


def clamp_search_limit(limit: Any, default: int = 10, maximum: int = 50) -> int:
    """Coerce a search result limit to ``[1, maximum]``."""
    parsed = _to_int(limit)
    return min(maximum, max(1, default if parsed is None else parsed))
