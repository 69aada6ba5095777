from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Protocol

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("", SITEMAP_NS)
ET.register_namespace("xhtml", XHTML_NS)
ET.register_namespace("image", IMAGE_NS)
ET.register_namespace("xsi", XSI_NS)

ALTERNATE_LANGUAGES = ("en", "fr", "nl")
SITEMAP_CACHE_CONTROL = "public, max-age=3600, s-maxage=3600"

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class SitemapPage(Protocol):
    path: str
    change_frequency: str
    priority: float


@dataclass(frozen=True)
class SitemapImage:
    path: str
    caption: str
    title: str
    geo_location: str | None = None


@dataclass(frozen=True)
class ImagePage:
    path: str
    images: tuple[SitemapImage, ...]


def _lastmod(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat(timespec="seconds")


def _serialize(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    return _XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def _sub(
    parent: ET.Element, ns: str, tag: str, text: str | None = None, **attrib: str
) -> ET.Element:
    element = ET.SubElement(parent, f"{{{ns}}}{tag}", attrib)
    if text is not None:
        element.text = text
    return element


def generate_sitemap(
    base_url: str,
    pages: Iterable[SitemapPage],
    now: datetime | None = None,
) -> str:
    """Page sitemap with an ``hreflang`` alternate per site language."""
    base_url = base_url.rstrip("/")
    lastmod = _lastmod(now)
    root = ET.Element(
        f"{{{SITEMAP_NS}}}urlset",
        {f"{{{XSI_NS}}}schemaLocation": f"{SITEMAP_NS} {SITEMAP_NS}/sitemap.xsd"},
    )
    for page in pages:
        path = "" if page.path == "/" else page.path
        url = _sub(root, SITEMAP_NS, "url")
        _sub(url, SITEMAP_NS, "loc", f"{base_url}{path}")
        _sub(url, SITEMAP_NS, "lastmod", lastmod)
        _sub(url, SITEMAP_NS, "changefreq", page.change_frequency)
        _sub(url, SITEMAP_NS, "priority", f"{page.priority:.1f}")
        for lang in ALTERNATE_LANGUAGES:
            prefix = "" if lang == "en" else f"/{lang}"
            _sub(
                url, XHTML_NS, "link",
                rel="alternate", hreflang=lang, href=f"{base_url}{prefix}{path}",
            )
    return _serialize(root)


def generate_image_sitemap(
    base_url: str,
    image_pages: Iterable[ImagePage],
    now: datetime | None = None,
) -> str:
    base_url = base_url.rstrip("/")
    lastmod = _lastmod(now)
    root = ET.Element(f"{{{SITEMAP_NS}}}urlset")
    for page in image_pages:
        url = _sub(root, SITEMAP_NS, "url")
        _sub(url, SITEMAP_NS, "loc", f"{base_url}{page.path}")
        _sub(url, SITEMAP_NS, "lastmod", lastmod)
        for image in page.images:
            node = _sub(url, IMAGE_NS, "image")
            _sub(node, IMAGE_NS, "loc", f"{base_url}{image.path}")
            _sub(node, IMAGE_NS, "caption", image.caption)
            _sub(node, IMAGE_NS, "title", image.title)
            if image.geo_location:
                _sub(node, IMAGE_NS, "geo_location", image.geo_location)
    return _serialize(root)
