"""Change markers for company snapshots."""

import json
from typing import Any, Dict, List, Optional

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK = 0xFFFFFFFFFFFFFFFF


def quick_hash(companies: List[Dict[str, Any]]) -> str:
    """64-bit FNV-1a over the compact JSON form; order-sensitive, not cryptographic."""
    encoded = json.dumps(companies, ensure_ascii=False, separators=(",", ":"), default=str).encode("utf-8")
    digest = _FNV_OFFSET
    for byte in encoded:
        digest ^= byte
        digest = (digest * _FNV_PRIME) & _MASK
    return f"{digest:016x}"


def choose_etag(upstream_etag: Optional[Any], companies: List[Dict[str, Any]]) -> str:
    if upstream_etag not in (None, ""):
        return str(upstream_etag)
    return quick_hash(companies)
