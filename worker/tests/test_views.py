from datetime import date, datetime, timezone

from directory.store.snapshots import SiteSnapshotRepository
from directory.views import counties, health, sitemap

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_is_stale():
    assert health.is_stale("2024-01-01T11:00:00Z", 120, now=NOW) is False
    assert health.is_stale("2024-01-01T09:59:00.000Z", 120, now=NOW) is True
    assert health.is_stale("2024-01-01T11:30:00+00:00", 120, now=NOW) is False
    assert health.is_stale(None, 120, now=NOW) is True
    assert health.is_stale("yesterday", 120, now=NOW) is True


def test_health_report_ok(store_factory):
    store = store_factory(
        {
            "site:a.example.com:data": '[{"name": "Acme"}]',
            "site:a.example.com:etag": "abc",
            "site:a.example.com:updated": "2024-01-01T11:00:00Z",
        }
    )

    body, status = health.build_health_report(SiteSnapshotRepository(store, "a.example.com"), 120, now=NOW)

    assert status == 200
    assert body == {
        "ok": True,
        "host": "a.example.com",
        "updated_at": "2024-01-01T11:00:00Z",
        "etag": "abc",
        "count": 1,
        "stale": False,
    }


def test_health_report_degraded_on_error_or_no_data(store_factory):
    store = store_factory(
        {
            "site:a.example.com:data": '[{"name": "Acme"}]',
            "site:a.example.com:updated": "2023-12-31T00:00:00Z",
            "site:a.example.com:lastError": "upstream 500: boom",
        }
    )
    body, status = health.build_health_report(SiteSnapshotRepository(store, "a.example.com"), 120, now=NOW)
    assert status == 503
    assert body["last_error"] == "upstream 500: boom"
    assert body["stale"] is True

    body, status = health.build_health_report(SiteSnapshotRepository(store_factory(), "a.example.com"), 120, now=NOW)
    assert status == 503
    assert body["count"] == 0


def test_build_sitemap():
    xml = sitemap.build_sitemap("a.example.com", today=date(2024, 3, 5))

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://a.example.com/</loc>" in xml
    assert "<lastmod>2024-03-05</lastmod>" in xml
    assert "<changefreq>daily</changefreq>" in xml


def test_list_counties_filters_and_sorts(sites):
    sites = {
        **sites,
        "permian-basin.mineralrightsforum.com": {},
        "ector-county-tx.mineralrightsforum.com": {},
        "grady-county-ok.mineralrightsforum.com": {},
        "la-salle-county-tx.mineralrightsforum.com": {},
        "reeves-county.example.com": {},
    }

    result = counties.list_counties(sites, ".mineralrightsforum.com")

    assert [c.name for c in result] == [
        "Ector County",
        "Grady County",
        "La Salle County",
        "Loving County",
        "Reeves County",
    ]
    assert result[0].state == "TX"
    assert result[0].url == "https://ector-county-tx.mineralrightsforum.com/"
    assert result[1].state == "OK"


def test_to_county_defaults_state_and_falls_back_to_title():
    suffix = ".mineralrightsforum.com"
    assert counties.to_county("ward-county.mineralrightsforum.com", {}, suffix).state == "TX"

    odd = counties.to_county("big-counties-x.mineralrightsforum.com", {"page_title": "Big Bend, TX"}, suffix)
    assert odd.name == "Big Bend"
    assert odd.state == "TX"


def test_group_by_state_sorts_states():
    listed = [
        counties.CountyDirectory(host="a", name="Ector County", state="TX", url="https://a/"),
        counties.CountyDirectory(host="b", name="Grady County", state="OK", url="https://b/"),
        counties.CountyDirectory(host="c", name="Lea County", state="ZZ", url="https://c/"),
    ]

    grouped = counties.group_by_state(listed)

    assert [g["state"] for g in grouped] == ["OK", "TX", "ZZ"]
    assert grouped[0]["state_name"] == "Oklahoma"
    assert grouped[2]["state_name"] == "ZZ"
    assert grouped[1]["counties"] == [{"host": "a", "name": "Ector County", "url": "https://a/"}]
