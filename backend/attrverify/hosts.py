"""
Host name resolution.

The ACL check and path preparation need the canonical (fully qualified)
name of a host. Resolution goes through the system resolver; callers
that must not touch DNS inject their own resolver via the environment.
"""

from __future__ import annotations

import socket
from typing import Callable

from .errors import HostResolutionError

HostResolver = Callable[[str], str]


def resolve_canonical_hostname(host: str) -> str:
    """
    Return the canonical name of ``host``.

    Raises:
        HostResolutionError: If the name cannot be resolved.
    """
    if not host:
        raise HostResolutionError("empty host name")
    try:
        infos = socket.getaddrinfo(host, None, 0, 0, 0, socket.AI_CANONNAME)
    except (socket.gaierror, UnicodeError) as e:
        raise HostResolutionError(f"cannot resolve {host}: {e}") from e
    for info in infos:
        canonical = info[3]
        if canonical:
            return canonical
    return host


def local_hostname(resolver: HostResolver = resolve_canonical_hostname) -> str:
    """Canonical name of the machine we run on, or its short name if unresolvable."""
    name = socket.gethostname()
    try:
        return resolver(name)
    except HostResolutionError:
        return name
