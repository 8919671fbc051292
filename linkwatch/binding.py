"""Attach link-click listeners to element trees.

The caller picks how the listener is attached by choosing a binding:

    from linkwatch.binding import ListenerBinding, on_link_clicked

    def handle(event, info):
        if info.is_local_link:
            event.prevent_default()
            router.navigate(info.relative_path)

    listener = on_link_clicked(ListenerBinding(container), handle)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .config import load_settings
from .dom import find_anchor
from .pathinfo import ClickContext, PathInfo, get_path_info
from .urls import UrlNormalizer, resolve_url

LOGGER = logging.getLogger(__name__)

LinkCallback = Callable[[Any, PathInfo], Any]
ClickListener = Callable[[Any], None]


class ClickBinding(ABC):
    """Attaches and detaches click listeners on a container element."""

    def __init__(self, element: Any):
        self.element = element

    @abstractmethod
    def bind(self, listener: ClickListener) -> None:
        """Start delivering clicks on the container to ``listener``."""

    @abstractmethod
    def unbind(self, listener: ClickListener) -> None:
        """Stop delivering clicks to ``listener``."""

    def document_location(self) -> Optional[str]:
        document = getattr(self.element, "owner_document", None)
        return getattr(document, "location", None) or None


class ListenerBinding(ClickBinding):
    """Binds through ``add_event_listener`` / ``remove_event_listener``."""

    def bind(self, listener: ClickListener) -> None:
        self.element.add_event_listener("click", listener)

    def unbind(self, listener: ClickListener) -> None:
        self.element.remove_event_listener("click", listener)


class DelegateBinding(ClickBinding):
    """Binds through jQuery-style ``on`` / ``off`` methods."""

    def bind(self, listener: ClickListener) -> None:
        self.element.on("click", listener)

    def unbind(self, listener: ClickListener) -> None:
        self.element.off("click", listener)


def get_listener(
    root_href: str,
    callback: LinkCallback,
    *,
    base_href: Optional[str] = None,
    normalizer: Optional[UrlNormalizer] = None,
) -> ClickListener:
    """Return a click listener reporting link clicks to ``callback``.

    The root URL is parsed once, up front. Clicks outside any anchor and
    anchors without an ``href`` attribute are ignored.
    """
    resolve = normalizer.resolve if normalizer is not None else resolve_url
    base = base_href or root_href
    root_info = resolve(root_href, base)

    def listen(event: Any) -> None:
        anchor = find_anchor(event.target, event.current_target)
        href = anchor.get("href") if anchor is not None else None
        if not isinstance(href, str):
            LOGGER.debug("Ignoring click outside of a hyperlink")
            return

        ctx = ClickContext.from_event(event, anchor)
        info = get_path_info(resolve(href, base), root_info, ctx, anchor=anchor)
        LOGGER.debug(
            "Link clicked: %s (relative=%s, local=%s)",
            info.href,
            info.is_relative,
            info.is_local_link,
        )
        callback(event, info)

    return listen


def on_link_clicked(
    binding: ClickBinding,
    callback: LinkCallback,
    *,
    root_href: Optional[str] = None,
    base_href: Optional[str] = None,
    normalizer: Optional[UrlNormalizer] = None,
) -> ClickListener:
    """Watch link clicks inside ``binding.element``.

    ``root_href`` defaults to the element's document location, then to the
    configured ``LINKWATCH_ROOT_HREF``. Link hrefs resolve against
    ``base_href``, else the document location, else the root.

    Returns:
        The bound listener, so it can be passed to ``binding.unbind``.

    Raises:
        ValueError: If no root URL was given or could be determined.
    """
    location = binding.document_location()
    root = root_href or location or load_settings().root_href
    if not root:
        raise ValueError(
            "No root URL given and none could be determined from the document "
            "or LINKWATCH_ROOT_HREF"
        )

    listener = get_listener(
        root, callback, base_href=base_href or location, normalizer=normalizer
    )
    binding.bind(listener)
    return listener
