"""RFC 3986 style URL normalization.

``resolve_url`` resolves a (possibly relative) URL against an optional base and
returns its normalized components. The normalization follows what browsers do
when an ``href`` is assigned to an anchor element:

- scheme and host are lower-cased (RFC 3986, 6.2.2.1)
- percent-escapes are upper-cased and unreserved characters decoded
  (RFC 3986, 6.2.2.1 and 6.2.2.2)
- ``.`` and ``..`` segments are removed (RFC 3986, 6.2.2.3)
- an empty or default port is dropped and an empty path becomes ``/``
  (RFC 3986, 6.2.3 and RFC 7230, 2.7.3)
- for schemes with a default port, backslashes before the query count as
  slashes and percent-encoded host characters are decoded

URLs without an authority (``mailto:``, ``javascript:``) get a ``/``-prefixed
``path`` for comparison while their ``href`` keeps the path as written.

Example::

    from linkwatch.urls import resolve_url

    parts = resolve_url("HTTP://Example.ORG:80/./%41/b/..?q=1")
    parts.host  # 'example.org'
    parts.path  # '/A/'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import quote, unquote, urlsplit

DEFAULT_PORTS: Dict[str, int] = {
    "ftp": 21,
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}

_PERCENT_ESCAPE = re.compile(r"%([0-9A-Fa-f]{2})")
_UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
)
# pchar minus the unreserved set, which quote() never escapes
_PATH_SAFE = "/%:@!$&'()*+,;="
_PORT = re.compile(r"^[0-9]*$")
_FORBIDDEN_HOST_CHARS = frozenset(" #%/:<>?@[\\]^|")


class InvalidURLError(ValueError):
    """Raised when a URL cannot be normalized."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class URLParts:
    """Normalized components of an absolute URL."""

    scheme: str
    host: str  # hostname[:port], port only when not the scheme default
    path: str  # always starts with "/"
    query: str = ""
    fragment: str = ""
    href: str = ""
    hostname: str = ""
    port: str = ""

    @property
    def is_directory(self) -> bool:
        return self.path.endswith("/")


class UrlNormalizer:
    """Parse and normalize URLs.

    Instances only hold the default-port table, so a single normalizer can be
    shared freely between threads and listeners.
    """

    __slots__ = ("default_ports",)

    def __init__(self, default_ports: Optional[Mapping[str, int]] = None):
        ports = DEFAULT_PORTS if default_ports is None else default_ports
        self.default_ports = {
            scheme.lower(): int(port) for scheme, port in ports.items()
        }

    def resolve(self, url: str, base: Optional[str] = None) -> URLParts:
        """Resolve ``url`` against ``base`` and return its normalized parts.

        Raises:
            InvalidURLError: If the URL has no scheme (and no base was given),
                carries a malformed port, or lacks a host where the scheme
                requires one.
        """
        raw = (url or "").strip()
        base = base.strip() if base else None
        absolute = join_url(base, raw) if base else raw
        if "\\" in absolute and urlsplit(absolute).scheme.lower() in self.default_ports:
            # special schemes read a backslash as a path separator
            raw = _forward_slashes(raw)
            absolute = join_url(_forward_slashes(base), raw) if base else raw

        split = urlsplit(absolute)
        scheme = split.scheme.lower()
        if not scheme:
            raise InvalidURLError(
                f"Cannot resolve relative URL {url!r} without a base URL", url=url
            )

        userinfo, hostname, port_text = _split_netloc(split.netloc, url)
        if scheme in self.default_ports:
            if not hostname:
                raise InvalidURLError(f"URL {url!r} has no host", url=url)
            hostname = _decode_host(hostname, url)

        port = self._normalize_port(scheme, port_text, url)
        host = f"{hostname}:{port}" if port else hostname
        path = normalize_path(split.path)

        if absolute[len(split.scheme) + 1 :].startswith("//"):
            netloc = f"{userinfo}@{host}" if userinfo else host
            href = _assemble(scheme, netloc, path, split.query, split.fragment)
        else:
            # mailto:, javascript: and friends keep their path as written
            opaque = _PERCENT_ESCAPE.sub(_normalize_escape, split.path)
            href = _assemble(scheme, None, opaque, split.query, split.fragment)

        return URLParts(
            scheme=scheme,
            host=host,
            path=path,
            query=split.query,
            fragment=split.fragment,
            href=href,
            hostname=hostname,
            port=port,
        )

    def _normalize_port(self, scheme: str, port_text: str, url: str) -> str:
        if not _PORT.match(port_text):
            raise InvalidURLError(f"Invalid port {port_text!r} in {url!r}", url=url)
        if not port_text:
            return ""
        port = int(port_text)
        if port > 65535:
            raise InvalidURLError(f"Port {port} out of range in {url!r}", url=url)
        if port == self.default_ports.get(scheme):
            return ""
        return str(port)


def _assemble(
    scheme: str, netloc: Optional[str], path: str, query: str, fragment: str
) -> str:
    url = f"{scheme}:"
    if netloc is not None:
        url += f"//{netloc}"
    url += path
    if query:
        url += f"?{query}"
    if fragment:
        url += f"#{fragment}"
    return url


def join_url(base: str, ref: str) -> str:
    """Resolve reference ``ref`` against ``base`` (RFC 3986, 5.2.2).

    Unlike ``urllib.parse.urljoin`` this keeps empty path segments, so
    ``api//v2`` against ``http://h/docs/`` gives ``http://h/docs/api//v2``.
    Dot segments are left in place for :func:`normalize_path`.
    """
    reference = urlsplit(ref)
    parsed = urlsplit(base)
    if reference.scheme or not parsed.scheme:
        return ref
    if ref.startswith("//"):
        return f"{parsed.scheme}:{ref}"

    has_query = "?" in ref.partition("#")[0]
    query = reference.query
    if not reference.path:
        path = parsed.path
        if not has_query:
            query = parsed.query
    elif reference.path.startswith("/"):
        path = reference.path
    elif parsed.netloc and not parsed.path:
        path = "/" + reference.path
    else:
        path = parsed.path[: parsed.path.rfind("/") + 1] + reference.path

    netloc: Optional[str] = parsed.netloc
    if not netloc and not base.lower().startswith(f"{parsed.scheme}://"):
        netloc = None
    return _assemble(parsed.scheme, netloc, path, query, reference.fragment)


def _split_netloc(netloc: str, url: str) -> Tuple[str, str, str]:
    """Split ``[userinfo@]host[:port]`` into its three parts."""
    userinfo, _, hostport = netloc.rpartition("@")
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            raise InvalidURLError(f"Invalid IPv6 host in {url!r}", url=url)
        hostname, rest = hostport[: end + 1], hostport[end + 1 :]
        if rest and not rest.startswith(":"):
            raise InvalidURLError(f"Invalid host in {url!r}", url=url)
        port_text = rest[1:]
    else:
        hostname, _, port_text = hostport.partition(":")
    return userinfo, hostname.lower(), port_text


def _forward_slashes(url: str) -> str:
    """Turn backslashes into slashes before the query or fragment."""
    end = len(url)
    for delimiter in "?#":
        index = url.find(delimiter)
        if index != -1:
            end = min(end, index)
    return url[:end].replace("\\", "/") + url[end:]


def _decode_host(hostname: str, url: str) -> str:
    if "%" not in hostname or hostname.startswith("["):
        return hostname
    decoded = unquote(hostname).lower()
    if _FORBIDDEN_HOST_CHARS.intersection(decoded):
        raise InvalidURLError(f"Invalid host in {url!r}", url=url)
    return decoded


def _normalize_escape(match: "re.Match[str]") -> str:
    char = chr(int(match.group(1), 16))
    if char in _UNRESERVED:
        return char
    return "%" + match.group(1).upper()


def remove_dot_segments(path: str) -> str:
    """Remove ``.`` and ``..`` segments from an absolute path.

    Empty segments are kept, so ``/a//b`` stays as it is. A trailing dot
    segment leaves a trailing slash (``/a/b/..`` becomes ``/a/``).
    """
    segments = path.split("/")[1:]
    output = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == ".":
            if index == last:
                output.append("")
            continue
        if segment == "..":
            if output:
                output.pop()
            if index == last:
                output.append("")
            continue
        output.append(segment)
    return "/" + "/".join(output)


def normalize_path(path: str) -> str:
    """Normalize the path component of a URL. Never returns an empty string."""
    if not path:
        return "/"
    encoded = quote(path, safe=_PATH_SAFE)
    decoded = _PERCENT_ESCAPE.sub(_normalize_escape, encoded)
    if not decoded.startswith("/"):
        decoded = "/" + decoded
    return remove_dot_segments(decoded)


_DEFAULT_NORMALIZER = UrlNormalizer()


def resolve_url(url: str, base: Optional[str] = None) -> URLParts:
    """Normalize ``url`` (resolved against ``base``) with the default ports."""
    return _DEFAULT_NORMALIZER.resolve(url, base)
