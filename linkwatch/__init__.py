"""Detect clicks on links that stay inside a site section.

Given a root URL (usually the page hosting an application) and a clicked
link, linkwatch decides whether the link lives under the root and, if so,
returns its path relative to the root. A plain left click on such a link is
a *local link* that the application can handle itself.

Example usage:

    from linkwatch import ClickContext, resolve_click

    info = resolve_click("/docs/guide//intro", "https://example.org/docs")
    info.is_relative     # True
    info.relative_path   # 'guide//intro'

    info = resolve_click(
        "https://example.org/docs/faq",
        "https://example.org/docs/",
        ClickContext(ctrl_key=True),
    )
    info.is_local_link   # False, the user asked for a new tab

    # Watching an element tree
    from linkwatch import ListenerBinding, on_link_clicked

    listener = on_link_clicked(
        ListenerBinding(container),
        handle_click,
        root_href="https://example.org/app/",
    )

    # Resolving every link of an HTML document
    from linkwatch import scan_html

    scan = scan_html(html, "https://example.org/docs/")
    for info in scan.local_links():
        print(info.relative_path)
"""

from __future__ import annotations

from .binding import (
    ClickBinding,
    DelegateBinding,
    ListenerBinding,
    get_listener,
    on_link_clicked,
)
from .config import Settings, load_settings
from .dom import ClickEvent, Document, Element, find_anchor
from .pathinfo import (
    ClickContext,
    PathInfo,
    get_path_info,
    is_local_link,
    is_relative_to,
    relative_path,
    resolve_click,
)
from .urls import InvalidURLError, URLParts, UrlNormalizer, resolve_url

__all__ = [
    # URL normalization
    "InvalidURLError",
    "URLParts",
    "UrlNormalizer",
    "resolve_url",
    # Resolution
    "ClickContext",
    "PathInfo",
    "get_path_info",
    "is_local_link",
    "is_relative_to",
    "relative_path",
    "resolve_click",
    # Element trees and bindings
    "ClickBinding",
    "ClickEvent",
    "DelegateBinding",
    "Document",
    "Element",
    "ListenerBinding",
    "find_anchor",
    "get_listener",
    "on_link_clicked",
    # Config
    "Settings",
    "load_settings",
    # Page scan
    "PageScan",
    "scan_html",
]

_SCAN_EXPORTS = {"PageScan", "scan_html"}


# Lazy import for the page scan to avoid loading bs4 if not used
def __getattr__(name):
    if name in _SCAN_EXPORTS:
        from . import scan

        return getattr(scan, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
