import asyncio

import pytest

import link_scout.engine as engine
from link_scout.config import SiteRecord
from link_scout.crawler.models import CrawlReport
from link_scout.engine import InMemorySiteStore, scan_all, scan_site

SITES = [
    SiteRecord(id="1", url="https://ok.example/", name="OK"),
    SiteRecord(id="2", url="https://broken.example/", name="Broken"),
    SiteRecord(id="3", url="https://down.example/", name="Down"),
]


@pytest.fixture()
def three_sites(fake_client, sitemap_xml):
    fake_client.add("https://ok.example/sitemap.xml", body=sitemap_xml(["https://ok.example/a"]))
    fake_client.add("https://ok.example/a")
    fake_client.add(
        "https://broken.example/sitemap.xml",
        body=sitemap_xml(["https://broken.example/a", "https://broken.example/gone"]),
    )
    fake_client.add("https://broken.example/a")
    fake_client.add("https://down.example/", error="Connection refused")
    return fake_client


@pytest.mark.asyncio()
async def test_scan_all_records_every_site(three_sites, fast_config, observer):
    store = InMemorySiteStore(SITES)
    results = await scan_all(store.list_sites(), fast_config, client=three_sites, observer=observer, store=store)

    assert [r.url_id for r in results] == ["1", "2", "3"]
    assert [(r.success, r.message) for r in results] == [
        (True, "No broken pages found"),
        (True, "Found 1 broken pages"),
        (False, "Error: Failed to fetch base page https://down.example/: Connection refused"),
    ]
    assert results[1].broken_pages[0].as_dict() == {"url": "https://broken.example/gone", "status": 404}
    assert results[1].total_pages == 2
    assert len(store.results) == 3
    assert store.latest("2") is results[1]


@pytest.mark.asyncio()
async def test_scan_all_respects_site_cap(monkeypatch, make_config):
    active = 0
    peak = 0

    async def fake_crawl_site(url, config, *, client=None, observer=None):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.05)
        active -= 1
        return CrawlReport.completed(url, [], total_pages=1)

    monkeypatch.setattr(engine, "crawl_site", fake_crawl_site)
    sites = [SiteRecord(id=str(i), url=f"https://s{i}.example/") for i in range(7)]
    results = await scan_all(sites, make_config(max_concurrent_sites=2))

    assert len(results) == 7
    assert peak == 2


@pytest.mark.asyncio()
async def test_unexpected_error_becomes_failed_result(monkeypatch, fast_config, observer):
    async def exploding(url, config, *, client=None, observer=None):
        raise RuntimeError("session closed")

    monkeypatch.setattr(engine, "crawl_site", exploding)
    result = await scan_site(SITES[0], fast_config, observer=observer)

    assert not result.success
    assert result.message == "Error: session closed"
    assert observer.of_kind("site_scan_failed")
