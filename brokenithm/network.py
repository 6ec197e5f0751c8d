"""Local network helpers."""

from __future__ import annotations

import socket


def get_ip_addresses() -> list[str]:
    """Return the IPv4 addresses of this host, or an empty list on failure."""
    try:
        hostname = socket.gethostname()
        _, _, addresses = socket.gethostbyname_ex(hostname)
    except OSError:
        return []
    return list(addresses)