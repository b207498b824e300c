import pytest

from directory.core import registry
from directory.core.errors import ConfigurationError

SITE_HOST = "reeves-county-texas.mineralrightsforum.com"
FEED_URL = "https://script.google.com/macros/s/feed/exec"


def test_load_sites_registry_reads_configured_path(site_env):
    sites = registry.load_sites_registry()
    assert SITE_HOST in sites
    assert registry.load_sites_registry() is sites


def test_get_site_config_normalises_host(sites):
    site = registry.get_site_config(sites, "Reeves-County-Texas.MineralRightsForum.com:443")

    assert site.host == SITE_HOST
    assert site.feed_url == FEED_URL
    assert site.page_title.startswith("Reeves County")
    assert site.seo == {"title": "Reeves County Directory"}


def test_get_site_config_unknown_host(sites):
    with pytest.raises(ConfigurationError) as excinfo:
        registry.get_site_config(sites, "unknown.example.com")
    assert excinfo.value.status_code == 400


def test_get_site_config_requires_feed_url():
    with pytest.raises(ConfigurationError):
        registry.get_site_config({"a.example.com": {"sheet": {}}}, "a.example.com")
    with pytest.raises(ConfigurationError):
        registry.get_site_config({"a.example.com": {}}, "")


def test_missing_or_invalid_registry_file(tmp_path):
    registry._read_registry.cache_clear()
    with pytest.raises(ConfigurationError):
        registry.load_sites_registry(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        registry.load_sites_registry(str(broken))

    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        registry.load_sites_registry(str(listing))
    registry._read_registry.cache_clear()
