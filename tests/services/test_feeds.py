import xml.etree.ElementTree as ET

from app.services.feeds import DEFAULT_ITEM_DESCRIPTION, build_rss, build_sitemap
from tests.conftest import make_post

SITE = "https://example.com/"


def test_build_rss_lists_items_with_links_and_dates():
    posts = [
        make_post("posts/b.md", title="B", createdAt="2024-02-01T10:00:00Z"),
        make_post("posts/a.md", title="A", description="About A", createdAt="2024-01-01"),
    ]

    body = build_rss(posts, site_url=SITE, title="My Blog", description="Posts")

    assert body.startswith("<?xml")
    channel = ET.fromstring(body).find("channel")
    assert channel.findtext("title") == "My Blog"
    assert channel.findtext("link") == "https://example.com/blog"
    items = channel.findall("item")
    assert [i.findtext("title") for i in items] == ["B", "A"]
    assert items[0].findtext("link") == "https://example.com/blog/b"
    assert items[0].findtext("guid") == "https://example.com/blog/b"
    assert items[0].findtext("pubDate") == "Thu, 01 Feb 2024 10:00:00 +0000"
    assert items[0].findtext("description") == DEFAULT_ITEM_DESCRIPTION
    assert items[1].findtext("description") == "About A"


def test_build_rss_keeps_unparseable_dates_verbatim():
    body = build_rss(
        [make_post(createdAt="sometime")], site_url=SITE, title="t", description="d"
    )

    assert ET.fromstring(body).find("channel/item").findtext("pubDate") == "sometime"


def test_build_rss_escapes_markup_in_titles():
    body = build_rss(
        [make_post(title="<b>&</b>")], site_url=SITE, title="t", description="d"
    )

    assert ET.fromstring(body).find("channel/item").findtext("title") == "<b>&</b>"


def test_build_sitemap_lists_home_blog_posts_and_tags():
    body = build_sitemap(
        [make_post("posts/a.md"), make_post("posts/b.md")],
        ["python", "web dev"],
        site_url="https://example.com",
    )

    assert body.split("\n") == [
        "https://example.com/",
        "https://example.com/blog",
        "https://example.com/blog/a",
        "https://example.com/blog/b",
        "https://example.com/blog/tags/python",
        "https://example.com/blog/tags/web%20dev",
    ]
