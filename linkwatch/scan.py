"""Resolve every hyperlink of an HTML document against a root URL.

The document is parsed with BeautifulSoup and each ``<a href>`` goes through
the same resolution a click on it would.

Example usage::

    from linkwatch.scan import scan_html

    scan = scan_html(html, "https://docs.example.com/guide/")
    for info in scan.local_links():
        print(info.relative_path)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from .pathinfo import ClickContext, PathInfo, get_path_info
from .urls import resolve_url

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PageScan:
    """Links found on a page, resolved against a root URL."""

    url: str
    root: str
    links: List[PathInfo] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    def local_links(self) -> List[PathInfo]:
        return [info for info in self.links if info.is_local_link]

    def stats(self) -> Dict[str, Any]:
        local = sum(1 for info in self.links if info.is_local_link)
        return {
            "total_links": len(self.links),
            "local_links": local,
            "external_links": len(self.links) - local,
            "error_count": len(self.errors),
        }


def scan_html(html: str, page_url: str, *, root_href: Optional[str] = None) -> PageScan:
    """Resolve the ``<a href>`` links of ``html`` served from ``page_url``.

    Links are resolved against the page's ``<base href>`` when present, else
    against ``page_url``. ``root_href`` defaults to ``page_url``. Links the
    normalizer rejects are reported in ``errors`` instead of ``links``.
    """
    soup = BeautifulSoup(html, "html.parser")

    base = resolve_url(page_url).href
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base = resolve_url(base_tag["href"], base).href

    root = resolve_url(root_href or page_url, base)
    scan = PageScan(url=page_url, root=root.href)

    seen = set()
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        try:
            target = resolve_url(href, base)
        except ValueError as exc:
            LOGGER.warning("Skipping link %r on %s: %s", href, page_url, exc)
            scan.errors.append({"href": href, "error": str(exc)})
            continue

        # a target attribute sends the click to another browsing context
        ctx = ClickContext(has_explicit_target=bool(anchor.get("target")))
        key = (target.href, ctx.has_explicit_target)
        if key in seen:
            continue
        seen.add(key)

        scan.links.append(get_path_info(target, root, ctx, anchor=anchor))

    LOGGER.debug(
        "Scanned %s: %d links, %d local",
        page_url,
        len(scan.links),
        len(scan.local_links()),
    )
    return scan
