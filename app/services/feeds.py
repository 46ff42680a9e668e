"""RSS feed and plain-text sitemap built from published posts."""

import datetime
import email.utils
import xml.etree.ElementTree as ET
from typing import Iterable, List
from urllib.parse import quote

from app.schemas.blog import PostRecord

DEFAULT_ITEM_DESCRIPTION = "A new post on the blog."


def blog_url(site_url: str) -> str:
    return f"{site_url.rstrip('/')}/blog"


def post_url(site_url: str, slug: str) -> str:
    return f"{blog_url(site_url)}/{quote(slug)}"


def tag_url(site_url: str, tag: str) -> str:
    return f"{blog_url(site_url)}/tags/{quote(tag)}"


def _pub_date(created_at: str) -> str:
    try:
        dt = datetime.datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except ValueError:
        return created_at
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return email.utils.format_datetime(dt)


def build_rss(
    posts: Iterable[PostRecord], *, site_url: str, title: str, description: str
) -> str:
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = title
    ET.SubElement(channel, "link").text = blog_url(site_url)
    ET.SubElement(channel, "description").text = description
    ET.SubElement(channel, "language").text = "en-gb"
    ET.SubElement(channel, "ttl").text = "40"

    for post in posts:
        link = post_url(site_url, post.slug)
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "description").text = (
            post.description or DEFAULT_ITEM_DESCRIPTION
        )
        ET.SubElement(item, "pubDate").text = _pub_date(post.createdAt)
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid").text = link

    return ET.tostring(rss, encoding="unicode", xml_declaration=True)


def build_sitemap(
    posts: Iterable[PostRecord], tags: Iterable[str], *, site_url: str
) -> str:
    urls: List[str] = [f"{site_url.rstrip('/')}/", blog_url(site_url)]
    urls.extend(post_url(site_url, post.slug) for post in posts)
    urls.extend(tag_url(site_url, tag) for tag in tags)
    return "\n".join(urls)
