"""Decide whether a link lives under a root URL and compute its relative path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .urls import URLParts, UrlNormalizer, resolve_url


@dataclass(frozen=True, slots=True)
class ClickContext:
    """Modifier state of the interaction that triggered a navigation."""

    ctrl_key: bool = False
    meta_key: bool = False
    middle_button: bool = False
    default_prevented: bool = False
    has_explicit_target: bool = False

    @classmethod
    def from_event(cls, event: Any, anchor: Any = None) -> "ClickContext":
        """Build a context from a DOM-like click event and its anchor element.

        jQuery-style events expose ``is_default_prevented()`` instead of a
        ``default_prevented`` attribute; both are supported.
        """
        is_default_prevented = getattr(event, "is_default_prevented", None)
        if callable(is_default_prevented):
            default_prevented = bool(is_default_prevented())
        else:
            default_prevented = bool(getattr(event, "default_prevented", False))

        target = anchor.get("target") if anchor is not None else None

        return cls(
            ctrl_key=bool(getattr(event, "ctrl_key", False)),
            meta_key=bool(getattr(event, "meta_key", False)),
            middle_button=getattr(event, "which", None) == 2,
            default_prevented=default_prevented,
            has_explicit_target=bool(target),
        )


@dataclass(frozen=True, slots=True)
class PathInfo:
    """Outcome of resolving a link against a root URL."""

    url: URLParts
    is_relative: bool
    relative_path: Optional[str]
    is_local_link: bool
    anchor: Any = None

    @property
    def href(self) -> str:
        return self.url.href


def is_relative_to(root: URLParts, target: URLParts) -> bool:
    """Return True if ``target`` is ``root`` or lives below it.

    Paths are compared on segment boundaries, so ``/fo`` does not contain
    ``/foo`` while ``/foo`` and ``/foo/`` both contain ``/foo/bar``.
    """
    if target.scheme != root.scheme or target.host != root.host:
        return False

    root_path = root.path
    target_path = target.path
    if not target_path.startswith(root_path):
        return False

    boundary = len(root_path)
    return (
        len(target_path) == boundary
        or target_path[boundary : boundary + 1] == "/"
        or root_path.endswith("/")
    )


def relative_path(root: URLParts, target: URLParts) -> str:
    """Return the path of ``target`` relative to ``root``.

    Only meaningful when :func:`is_relative_to` holds. Appending the result to
    the root (with a single ``/`` when the root has no trailing slash) yields
    the target path again. A result that would start with an empty segment
    gets a leading ``.`` segment so it cannot be read as an absolute path.
    """
    rel = target.path[len(root.path) :]
    if not rel.startswith("/"):
        return rel

    if root.path.endswith("/"):
        # root "foo/" and target "foo//bar" leave "/bar"; the root's trailing
        # slash already closed a segment, so the empty segment is real
        rel = "/" + rel
    elif rel[1:2] != "/":
        # root "foo" and target "foo/bar": the slash is the separator
        rel = rel[1:]

    if rel.startswith("/"):
        rel = "." + rel
    return rel


def is_local_link(is_relative: bool, ctx: Optional[ClickContext] = None) -> bool:
    """Return True if a click on a relative link should be handled in-page."""
    if not is_relative:
        return False
    if ctx is None:
        return True
    return not (
        ctx.default_prevented
        or ctx.ctrl_key
        or ctx.meta_key
        or ctx.middle_button
        or ctx.has_explicit_target
    )


def get_path_info(
    target: URLParts,
    root: URLParts,
    ctx: Optional[ClickContext] = None,
    *,
    anchor: Any = None,
) -> PathInfo:
    """Resolve already-normalized ``target`` parts against ``root``."""
    relative = is_relative_to(root, target)
    return PathInfo(
        url=target,
        is_relative=relative,
        relative_path=relative_path(root, target) if relative else None,
        is_local_link=is_local_link(relative, ctx),
        anchor=anchor,
    )


def resolve_click(
    anchor_href: str,
    root_href: str,
    ctx: Optional[ClickContext] = None,
    *,
    base_href: Optional[str] = None,
    normalizer: Optional[UrlNormalizer] = None,
) -> PathInfo:
    """Normalize both URLs against a shared base and resolve the click.

    ``base_href`` defaults to ``root_href``. Normalization errors are not
    caught.
    """
    base = base_href or root_href
    resolve = normalizer.resolve if normalizer is not None else resolve_url
    root = resolve(root_href, base)
    target = resolve(anchor_href, base)
    return get_path_info(target, root, ctx)
