"""
Output/error path preparation.

Turns ``[host:]path`` into the fully qualified ``host:/absolute/path``
form stored on the job.
"""

from __future__ import annotations

import os
import posixpath
from typing import Optional

from ..errors import SpecParseError

MAXPATHLEN = 1024


def prepare_path(text: str, hostname: Optional[str] = None, cwd: Optional[str] = None) -> str:
    """
    Normalize an output or error path.

    Args:
        text: Path as submitted, optionally prefixed with ``host:``.
        hostname: Host used when the path names none.
        cwd: Directory a relative path is resolved against.

    Returns:
        Normalized ``host:/path``.

    Raises:
        SpecParseError: If the path is empty, malformed or too long.
    """
    if not text or not text.strip():
        raise SpecParseError("empty path")
    text = text.strip()

    host = ""
    path = text
    colon = text.find(":")
    slash = text.find("/")
    if colon != -1 and (slash == -1 or colon < slash):
        host, path = text[:colon], text[colon + 1:]
        if not host or any(c.isspace() for c in host):
            raise SpecParseError(f"invalid host in path '{text}'")

    if not path:
        raise SpecParseError(f"no file name in path '{text}'")

    if not path.startswith("/"):
        base = cwd if cwd is not None else os.getcwd()
        path = posixpath.join(base, path)
    trailing = path.endswith("/")
    path = posixpath.normpath(path)
    if trailing and path != "/":
        path += "/"

    if not host:
        host = hostname or ""
    prepared = f"{host}:{path}" if host else path
    if len(prepared) > MAXPATHLEN:
        raise SpecParseError("path too long")
    return prepared
