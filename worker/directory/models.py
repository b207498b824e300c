"""Core data models shared by the refresh pipeline and the read-side views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class SiteKeys:
    """Store keys holding one site's snapshot generation and bookkeeping."""

    data: str
    etag: str
    updated: str
    last_error: str

    @classmethod
    def for_host(cls, host: str) -> "SiteKeys":
        prefix = f"site:{host}"
        return cls(
            data=f"{prefix}:data",
            etag=f"{prefix}:etag",
            updated=f"{prefix}:updated",
            last_error=f"{prefix}:lastError",
        )


@dataclass(slots=True)
class SiteConfig:
    """Registry entry for one directory site."""

    host: str
    feed_url: str
    page_title: str = ""
    serving_line: str = ""
    return_url: str = ""
    directory_intro: str = ""
    seo: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(slots=True)
class SiteSnapshot:
    """Everything stored for a host, as read back from the store."""

    companies: Optional[List[Dict[str, Any]]] = None
    etag: Optional[str] = None
    updated_at: Optional[str] = None
    last_error: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.companies or [])


@dataclass(slots=True)
class RefreshResult:
    """Outcome of a refresh call, serialised as the endpoint response."""

    status: str
    count: int
    etag: str
    updated_at: Optional[str]
    duration_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "status": self.status,
            "count": self.count,
            "etag": self.etag,
            "updated_at": self.updated_at,
        }
        if self.duration_ms is not None:
            payload["duration_ms"] = self.duration_ms
        return payload


@dataclass(slots=True)
class CountyDirectory:
    """A county-specific directory site listed on the county index."""

    host: str
    name: str
    state: str
    url: str
