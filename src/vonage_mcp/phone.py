from __future__ import annotations

from typing import Any, Protocol

from .log import get_logger

logger = get_logger(__name__)

# Number Insight status for a successful lookup
STATUS_SUCCESS = 0


class NumberLookup(Protocol):
    def basic_lookup(self, number: str) -> dict[str, Any] | None: ...


def normalize_number(lookup: NumberLookup, raw_number: str) -> str | None:
    """
    Canonical international form of `raw_number`, or None if the lookup
    could not resolve it.

    Exactly one lookup call is made. Provider/network failures propagate.
    """
    result = lookup.basic_lookup(raw_number)
    if not result or result.get("status") != STATUS_SUCCESS:
        return None

    formatted = result.get("international_format_number")
    if not formatted:
        logger.warning("phone.lookup_without_format: number=%s", raw_number)
        return None
    return str(formatted)
