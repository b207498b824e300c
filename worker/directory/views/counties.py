"""County index built from the site registry."""

import logging
from typing import Any, Dict, Iterable, List

from directory.models import CountyDirectory

logger = logging.getLogger(__name__)

EXCLUDED_HOST_MARKERS = ("mineral-services-directory", "permian-basin")
DEFAULT_STATE = "TX"
STATE_NAMES = {
    "TX": "Texas",
    "OK": "Oklahoma",
    "NM": "New Mexico",
    "LA": "Louisiana",
    "AR": "Arkansas",
    "CO": "Colorado",
    "WY": "Wyoming",
    "ND": "North Dakota",
    "MT": "Montana",
    "UT": "Utah",
    "KS": "Kansas",
}


def is_county_host(host: str, domain_suffix: str) -> bool:
    if any(marker in host for marker in EXCLUDED_HOST_MARKERS):
        return False
    return "-county-" in host and domain_suffix in host


def to_county(host: str, config: Dict[str, Any], domain_suffix: str) -> CountyDirectory:
    """Derive the county name and state from a host like ``reeves-county-texas.<suffix>``."""
    parts = host.replace(domain_suffix, "").split("-")
    url = f"https://{host}/"
    if "county" not in parts:
        title = str(config.get("page_title") or config.get("serving_line") or host)
        return CountyDirectory(host=host, name=title.split(",")[0].strip(), state=DEFAULT_STATE, url=url)

    index = parts.index("county")
    name = " ".join(part[:1].upper() + part[1:] for part in parts[:index]) + " County"
    state = parts[index + 1].upper() if index + 1 < len(parts) and parts[index + 1] else DEFAULT_STATE
    return CountyDirectory(host=host, name=name, state=state, url=url)


def list_counties(sites: Dict[str, Dict[str, Any]], domain_suffix: str) -> List[CountyDirectory]:
    counties = [to_county(host, config, domain_suffix) for host, config in sites.items() if is_county_host(host, domain_suffix)]
    counties.sort(key=lambda county: county.name.lower())
    logger.debug("County index holds %d directories", len(counties))
    return counties


def group_by_state(counties: Iterable[CountyDirectory]) -> List[Dict[str, Any]]:
    by_state: Dict[str, List[CountyDirectory]] = {}
    for county in counties:
        by_state.setdefault(county.state, []).append(county)

    return [
        {
            "state": state,
            "state_name": STATE_NAMES.get(state, state),
            "count": len(by_state[state]),
            "counties": [
                {"host": c.host, "name": c.name, "url": c.url} for c in by_state[state]
            ],
        }
        for state in sorted(by_state)
    ]
