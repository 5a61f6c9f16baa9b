"""
Job dependency list parser.

A dependency list is a comma separated sequence of ``type:arg[:arg...]``
groups, e.g. ``afterok:123:124,before:130.svr``. Job identifiers without
a server suffix are expanded with the default server so the stored value
is unambiguous once the job moves between servers.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..errors import SpecParseError

DEPEND_LEN = 2040

JOB_DEPEND_TYPES = {
    "after",
    "afterok",
    "afternotok",
    "afterany",
    "before",
    "beforeok",
    "beforenotok",
    "beforeany",
    "runone",
}
COUNT_DEPEND_TYPES = {"on"}

_JOB_ID = re.compile(r"[0-9]+(\[[0-9]*\])?(\.[A-Za-z0-9][A-Za-z0-9._-]*)?(@[A-Za-z0-9][A-Za-z0-9._-]*)?")
_COUNT = re.compile(r"[0-9]+")


def _expand_job_id(job_id: str, default_server: Optional[str]) -> str:
    if not _JOB_ID.fullmatch(job_id):
        raise SpecParseError(f"invalid job id '{job_id}' in dependency")
    sequence, sep, remote = job_id.partition("@")
    if "." not in sequence and default_server:
        sequence = f"{sequence}.{default_server}"
    return f"{sequence}{sep}{remote}"


def parse_depend_list(
    text: str,
    capacity: int = DEPEND_LEN,
    default_server: Optional[str] = None,
) -> str:
    """
    Parse and expand a dependency list.

    Args:
        text: Dependency list as submitted.
        capacity: Maximum length of the expanded text.
        default_server: Server name appended to bare job identifiers.

    Returns:
        The expanded dependency list.

    Raises:
        SpecParseError: If the list is malformed or does not fit ``capacity``.
    """
    if not text or not text.strip():
        raise SpecParseError("empty dependency list")

    groups: List[str] = []
    for group in text.split(","):
        dep_type, sep, rest = group.strip().partition(":")
        dep_type = dep_type.strip().lower()
        if not sep or not rest:
            raise SpecParseError(f"dependency '{group}' has no arguments")

        if dep_type in COUNT_DEPEND_TYPES:
            if not _COUNT.fullmatch(rest):
                raise SpecParseError(f"dependency count '{rest}' is not a number")
            groups.append(f"{dep_type}:{int(rest)}")
        elif dep_type in JOB_DEPEND_TYPES:
            job_ids = [_expand_job_id(j.strip(), default_server) for j in rest.split(":")]
            groups.append(":".join([dep_type, *job_ids]))
        else:
            raise SpecParseError(f"unknown dependency type '{dep_type}'")

    expanded = ",".join(groups)
    if len(expanded) >= capacity:
        raise SpecParseError("expanded dependency list too long")
    return expanded
