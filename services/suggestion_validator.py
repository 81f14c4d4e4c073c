from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from services.errors import InvalidSuggestionStructureError

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5


@dataclass(frozen=True)
class Suggestion:
    handle: str
    rationale: str


@dataclass(frozen=True)
class RejectedItem:
    index: int
    reason: str


def check_item(index: int, item: Any) -> Suggestion | RejectedItem:
    """Validate one raw entry of the ``suggestions`` array.

    Returns a trimmed ``Suggestion`` or a ``RejectedItem`` naming why the
    entry cannot be used. Never raises.
    """
    if not isinstance(item, dict):
        return RejectedItem(index, f"expected an object, got {type(item).__name__}")

    handle = item.get("handle")
    rationale = item.get("rationale")
    if not isinstance(handle, str):
        return RejectedItem(index, "handle is missing or not a string")
    if not isinstance(rationale, str):
        return RejectedItem(index, "rationale is missing or not a string")

    handle = handle.strip()
    rationale = rationale.strip()
    if not handle:
        return RejectedItem(index, "handle is empty")
    if not rationale:
        return RejectedItem(index, "rationale is empty")

    return Suggestion(handle=handle, rationale=rationale)


def validate_suggestions(payload: Any, limit: int = MAX_SUGGESTIONS) -> list[Suggestion]:
    """Turn decoded model output into at most ``limit`` suggestions.

    A missing or non-array ``suggestions`` field aborts with
    ``InvalidSuggestionStructureError``. Individual malformed entries are
    dropped; survivors keep their original order.
    """
    if not isinstance(payload, dict) or "suggestions" not in payload:
        raise InvalidSuggestionStructureError("Missing suggestions in response.")

    raw = payload["suggestions"]
    if not isinstance(raw, list):
        raise InvalidSuggestionStructureError("Suggestions should be an array.")

    suggestions: list[Suggestion] = []
    for index, item in enumerate(raw):
        result = check_item(index, item)
        if isinstance(result, RejectedItem):
            logger.debug("Dropping suggestion #%s: %s", result.index, result.reason)
            continue
        suggestions.append(result)

    return suggestions[:limit]
