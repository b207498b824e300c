"""Shape stored company rows into the directory page view model."""

import re
from typing import Any, Dict, List, Optional, Tuple

from directory.etl.visibility import is_hidden, plan_of

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_WORD_START_RE = re.compile(r"\b[A-Za-z]")


def slugify(value: Optional[str]) -> str:
    return _SLUG_RE.sub("-", (value or "").lower()).strip("-")


def initials(name: Optional[str]) -> str:
    letters = _WORD_START_RE.findall(name or "")
    return "".join(letter.upper() for letter in letters[:2])


def normalize_phone(raw: Any) -> Tuple[Optional[str], str]:
    """Return ``(tel, display)`` for US numbers, ``(None, raw)`` otherwise."""
    text = "" if raw is None else str(raw)
    digits = "".join(ch for ch in text if ch.isdigit())
    if len(digits) == 11 and digits[0] == "1":
        digits = digits[1:]
    if len(digits) != 10:
        return None, text
    return f"+1{digits}", f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def _name_key(row: Dict[str, Any]) -> str:
    return str(row.get("name") or "").lower()


def _present(row: Dict[str, Any]) -> Dict[str, Any]:
    tel, display = normalize_phone(row.get("contact_phone"))
    return {
        **row,
        "is_premium": plan_of(row) == "premium",
        "initials": initials(str(row.get("name") or "")),
        "tel": tel,
        "display_phone": display,
    }


def group_companies(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Group visible, named rows by category in first-seen order.

    Each category holds ``premium`` and ``free`` buckets sorted by name;
    a blank category becomes ``Other`` and any plan other than premium is free.
    """
    groups: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
    for row in rows:
        if not isinstance(row, dict) or not str(row.get("name") or "").strip():
            continue
        if is_hidden(row, include_status_fields=False):
            continue
        category = str(row.get("category") or "").strip() or "Other"
        bucket = "premium" if plan_of(row) == "premium" else "free"
        groups.setdefault(category, {"premium": [], "free": []})[bucket].append(row)

    categories = []
    for name, buckets in groups.items():
        categories.append(
            {
                "name": name,
                "slug": slugify(name),
                "premium": [_present(row) for row in sorted(buckets["premium"], key=_name_key)],
                "free": [_present(row) for row in sorted(buckets["free"], key=_name_key)],
            }
        )
    return categories
