from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

from markshelf.errors import InvalidURL

HIERARCHICAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")
_WHITESPACE_RE = re.compile(r"\s")


def _lower_host(netloc: str) -> str:
    userinfo, at, hostport = netloc.rpartition("@")
    return f"{userinfo}{at}{hostport.lower()}"


def normalize_url(raw: str) -> str:
    """Return the canonical form of ``raw`` used as a de-duplication key.

    Only the hostname is lower-cased; path and query keep their case. The
    fragment is dropped and trailing slashes are removed from any path other
    than the root. Raises ``InvalidURL`` when ``raw`` is not an absolute URL.
    """
    candidate = (raw or "").strip()
    if not candidate or _WHITESPACE_RE.search(candidate):
        raise InvalidURL(raw)

    try:
        parts = urlsplit(candidate)
        parts.port
    except ValueError as exc:
        raise InvalidURL(raw) from exc

    scheme = parts.scheme.lower()
    if not scheme or not _SCHEME_RE.match(scheme):
        raise InvalidURL(raw)

    path = parts.path
    if scheme in HIERARCHICAL_SCHEMES:
        if not parts.hostname:
            raise InvalidURL(raw)
        path = path or "/"

    # Stripping every trailing slash keeps the function idempotent.
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/") or "/"

    # Without an authority, a leading "//" would read back as a host.
    if not parts.netloc and path.startswith("//"):
        path = "/" + path.lstrip("/")

    return urlunsplit((scheme, _lower_host(parts.netloc), path, parts.query, ""))
