"""Hidden-record detection for upstream company rows.

Upstream marks a hidden listing in several ways (plan values, a ``hidden``
flag, ``status``/``visible``/``show`` columns) with strings, numbers or
booleans. Every known signal is listed here; rows are never rewritten.
"""

import logging
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

HIDDEN_PLANS = {"hidden", "hide", "h"}
HIDDEN_FLAG_VALUES = {"true", "yes", "1", "hidden", "hide"}


def _norm(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def plan_of(row: Dict[str, Any]) -> str:
    """Normalised plan, reading ``plan`` first and then any other casing of it."""
    plan = _norm(row.get("plan"))
    if plan:
        return plan
    for key, value in row.items():
        if isinstance(key, str) and key != "plan" and key.lower() == "plan":
            plan = _norm(value)
            if plan:
                return plan
    return ""


def _flag_set(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 1
    return isinstance(value, str) and _norm(value) in HIDDEN_FLAG_VALUES


def _explicitly_false(value: Any) -> bool:
    if value is False:
        return True
    return isinstance(value, str) and _norm(value) == "false"


def is_hidden(row: Dict[str, Any], include_status_fields: bool = True) -> bool:
    """True when any known hidden signal is present on ``row``.

    ``include_status_fields`` adds the ``status``/``visible``/``show`` checks
    applied at ingestion; page rendering only looks at plan and ``hidden``.
    """
    if plan_of(row) in HIDDEN_PLANS:
        return True
    if _flag_set(row.get("hidden")):
        return True
    if not include_status_fields:
        return False
    if _norm(row.get("status")) == "hidden":
        return True
    return _explicitly_false(row.get("visible")) or _explicitly_false(row.get("show"))


def filter_visible(rows: Iterable[Dict[str, Any]], include_status_fields: bool = True) -> List[Dict[str, Any]]:
    kept = [row for row in rows if not is_hidden(row, include_status_fields=include_status_fields)]
    logger.debug("Visibility filter kept %d rows", len(kept))
    return kept
