"""URL checks for redirects and outbound requests."""

from __future__ import annotations

import ipaddress
from typing import Iterable
from urllib.parse import urlsplit

_BLOCKED_HOSTNAMES = frozenset({"localhost", "localhost.localdomain"})


def is_valid_redirect_url(url: str, allowed_hosts: Iterable[str]) -> bool:
    """Return ``True`` for relative paths and URLs on an allowed host."""

    if not isinstance(url, str) or not url:
        return False
    if url.startswith("/") and not url.startswith("//") and "\\" not in url:
        return True

    try:
        parsed = urlsplit(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return False

    for host in allowed_hosts:
        host = host.strip().lower()
        if host and (hostname == host or hostname.endswith(f".{host}")):
            return True
    return False


def is_blocked_url(url: str) -> bool:
    """Return ``True`` when *url* targets a loopback, private or link-local host.

    Unparseable URLs are treated as blocked.
    """

    try:
        parsed = urlsplit(url)
    except ValueError:
        return True
    hostname = (parsed.hostname or "").lower()
    if not hostname or hostname in _BLOCKED_HOSTNAMES:
        return True

    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return False

    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
    )


__all__ = ["is_blocked_url", "is_valid_redirect_url"]
