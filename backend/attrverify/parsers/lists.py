"""
User/host and staging list parsers.
"""

from __future__ import annotations

from typing import List, Optional, Set

from ..errors import SpecParseError


def _entries(text: str) -> List[str]:
    entries = [entry.strip() for entry in text.split(",")]
    if any(not entry for entry in entries):
        raise SpecParseError("empty entry in list")
    return entries


def parse_at_list(text: str, use_count: bool, abs_path: bool) -> None:
    """
    Check a comma separated ``name[@host]`` list.

    Args:
        text: The list text.
        use_count: Allow at most one entry per host, and one without a host.
        abs_path: Names must be absolute paths (shell path lists).

    Raises:
        SpecParseError: If the list is malformed.
    """
    if not text or not text.strip():
        raise SpecParseError("empty list")

    seen_hosts: Set[Optional[str]] = set()
    for entry in _entries(text):
        name, sep, host = entry.partition("@")
        name = name.strip()
        if not name:
            raise SpecParseError(f"missing name in '{entry}'")
        if any(c.isspace() for c in name):
            raise SpecParseError(f"white space in name '{name}'")
        if abs_path and not name.startswith("/"):
            raise SpecParseError(f"'{name}' is not an absolute path")

        host_key: Optional[str] = None
        if sep:
            host = host.strip()
            if not host or "@" in host or any(c.isspace() for c in host):
                raise SpecParseError(f"invalid host in '{entry}'")
            host_key = host.lower()

        if use_count:
            if host_key in seen_hosts:
                raise SpecParseError(f"host repeated in '{text}'")
            seen_hosts.add(host_key)


def parse_stage_list(text: str) -> None:
    """
    Check a comma separated ``local_file@host:remote_file`` list.

    Raises:
        SpecParseError: If any entry is malformed.
    """
    if not text or not text.strip():
        raise SpecParseError("empty stage list")

    for entry in _entries(text):
        local, sep, remote_spec = entry.partition("@")
        if not sep or not local.strip():
            raise SpecParseError(f"stage entry '{entry}' needs local_file@host:remote_file")
        host, sep, remote = remote_spec.partition(":")
        if not sep or not host.strip() or not remote.strip():
            raise SpecParseError(f"stage entry '{entry}' needs host:remote_file")
