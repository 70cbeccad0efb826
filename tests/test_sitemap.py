import pytest

from link_scout.crawler.sitemap import SitemapResolver, sitemap_locations


def test_locations_for_site_root():
    assert sitemap_locations("https://example.com/") == [
        "https://example.com/sitemap.xml",
        "https://example.com/sitemap_index.xml",
    ]


@pytest.mark.parametrize("base", ["https://example.com/en/", "https://example.com/en"])
def test_locations_for_locale_root(base):
    assert sitemap_locations(base) == [
        "https://example.com/en/sitemap.xml",
        "https://example.com/en/sitemap_index.xml",
        "https://example.com/sitemap.xml",
    ]


def test_sitemap_url_is_its_own_location():
    assert sitemap_locations("https://example.com/en/Sitemap_Index.xml") == [
        "https://example.com/en/Sitemap_Index.xml"
    ]


@pytest.mark.asyncio()
async def test_locale_filter(fake_client, fast_config, observer, sitemap_xml):
    fake_client.add(
        "https://example.com/sitemap.xml",
        body=sitemap_xml(
            ["https://example.com/en/a", "https://example.com/fr/a", "https://example.com/en/b"]
        ),
    )
    resolver = SitemapResolver(fake_client, fast_config, observer)
    urls = await resolver.resolve("https://example.com/en/")
    assert urls == ["https://example.com/en/a", "https://example.com/en/b"]
    assert observer.of_kind("locale_filtered")[0].data["locale"] == "en"


@pytest.mark.asyncio()
async def test_locale_filter_is_exact_segment_match(fake_client, fast_config, sitemap_xml):
    fake_client.add(
        "https://example.com/sitemap.xml",
        body=sitemap_xml(
            ["https://example.com/en/a", "https://example.com/en-gb/a", "https://example.com/EN/a", "https://example.com/"]
        ),
    )
    urls = await SitemapResolver(fake_client, fast_config).resolve("https://example.com/en/")
    assert urls == ["https://example.com/en/a"]


@pytest.mark.asyncio()
async def test_locale_filter_can_be_disabled(fake_client, make_config, sitemap_xml):
    fake_client.add(
        "https://example.com/sitemap.xml",
        body=sitemap_xml(["https://example.com/en/a", "https://example.com/fr/a"]),
    )
    resolver = SitemapResolver(fake_client, make_config(locale_filter=False))
    assert len(await resolver.resolve("https://example.com/en/")) == 2


@pytest.mark.asyncio()
async def test_locale_taken_from_sitemap_base_url(fake_client, fast_config, sitemap_xml):
    fake_client.add(
        "https://example.com/fr/sitemap.xml",
        body=sitemap_xml(["https://example.com/en/a", "https://example.com/fr/a"]),
    )
    urls = await SitemapResolver(fake_client, fast_config).resolve("https://example.com/fr/sitemap.xml")
    assert urls == ["https://example.com/fr/a"]
    assert fake_client.urls_requested() == ["https://example.com/fr/sitemap.xml"]


@pytest.mark.asyncio()
async def test_index_recursion(fake_client, fast_config, sitemap_xml, sitemap_index_xml):
    fake_client.add(
        "https://example.com/sitemap_index.xml",
        body=sitemap_index_xml(["https://example.com/pages.xml", "https://example.com/posts.xml"]),
    )
    fake_client.add("https://example.com/pages.xml", body=sitemap_xml(["https://example.com/a", "https://example.com/b"]))
    fake_client.add("https://example.com/posts.xml", body=sitemap_xml(["https://example.com/c", "https://example.com/d"]))

    urls = await SitemapResolver(fake_client, fast_config).resolve("https://example.com/")
    assert sorted(urls) == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c",
        "https://example.com/d",
    ]


@pytest.mark.asyncio()
async def test_nested_depth_is_capped(fake_client, make_config, observer, sitemap_xml, sitemap_index_xml):
    fake_client.add("https://example.com/sitemap.xml", body=sitemap_index_xml(["https://example.com/level1.xml"]))
    fake_client.add("https://example.com/level1.xml", body=sitemap_index_xml(["https://example.com/pages.xml"]))
    fake_client.add("https://example.com/pages.xml", body=sitemap_xml(["https://example.com/a"]))

    shallow = SitemapResolver(fake_client, make_config(max_sitemap_depth=1), observer)
    assert await shallow.resolve("https://example.com/") == []
    assert observer.of_kind("sitemap_depth_exceeded")

    deep = SitemapResolver(fake_client, make_config(max_sitemap_depth=2))
    assert await deep.resolve("https://example.com/") == ["https://example.com/a"]


@pytest.mark.asyncio()
async def test_self_referencing_index_terminates(fake_client, fast_config, sitemap_xml, sitemap_index_xml):
    fake_client.add(
        "https://example.com/sitemap.xml",
        body=sitemap_index_xml(["https://example.com/sitemap.xml", "https://example.com/pages.xml"]),
    )
    fake_client.add("https://example.com/pages.xml", body=sitemap_xml(["https://example.com/a"]))
    assert await SitemapResolver(fake_client, fast_config).resolve("https://example.com/") == ["https://example.com/a"]


@pytest.mark.asyncio()
async def test_failed_probes_are_skipped(fake_client, fast_config, observer, sitemap_xml):
    fake_client.add("https://example.com/en/sitemap.xml", error="Connection reset by peer")
    fake_client.add("https://example.com/en/sitemap_index.xml", status=500, body="oops")
    fake_client.add("https://example.com/sitemap.xml", body=sitemap_xml(["https://example.com/en/a"]))

    urls = await SitemapResolver(fake_client, fast_config, observer).resolve("https://example.com/en/")
    assert urls == ["https://example.com/en/a"]
    assert observer.of_kind("sitemap_error")[0].url == "https://example.com/en/sitemap.xml"


@pytest.mark.asyncio()
async def test_malformed_document_yields_nothing(fake_client, fast_config):
    fake_client.add("https://example.com/sitemap.xml", body="<html><body>Soft 404</body></html>")
    fake_client.add("https://example.com/sitemap_index.xml", body="<<<not xml")
    assert await SitemapResolver(fake_client, fast_config).resolve("https://example.com/") == []


@pytest.mark.asyncio()
async def test_results_deduplicated_across_locations(fake_client, fast_config, sitemap_xml, sitemap_index_xml):
    fake_client.add(
        "https://example.com/sitemap.xml",
        body=sitemap_xml(["https://example.com/a?y=1&x=2", "https://example.com/b"]),
    )
    fake_client.add(
        "https://example.com/sitemap_index.xml",
        body=sitemap_index_xml(["https://example.com/more.xml"]),
    )
    fake_client.add(
        "https://example.com/more.xml",
        body=sitemap_xml(["https://EXAMPLE.com/a?x=2&y=1", "https://example.com/c"]),
    )
    urls = await SitemapResolver(fake_client, fast_config).resolve("https://example.com/")
    assert urls == ["https://example.com/a?y=1&x=2", "https://example.com/b", "https://example.com/c"]
