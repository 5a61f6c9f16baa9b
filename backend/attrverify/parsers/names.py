"""
Job name and job array range checks.
"""

from __future__ import annotations

import re
from enum import Enum

MAX_JOB_NAME = 236

_RANGE = re.compile(r"([0-9]+)-([0-9]+)(?::([0-9]+))?")


class NameCheck(str, Enum):
    OK = "ok"
    MALFORMED = "malformed"
    TOO_LONG = "too_long"


class RangeCheck(str, Enum):
    OK = "ok"
    MALFORMED = "malformed"
    OUT_OF_RANGE = "out_of_range"


def check_job_name(name: str, check_alpha: bool) -> NameCheck:
    """
    Check a job or reservation name.

    Args:
        name: Name to check.
        check_alpha: Reject a leading digit.
    """
    if not name:
        return NameCheck.MALFORMED
    if len(name) > MAX_JOB_NAME:
        return NameCheck.TOO_LONG
    if check_alpha and "0" <= name[0] <= "9":
        return NameCheck.MALFORMED
    for char in name:
        if not char.isprintable() or char.isspace():
            return NameCheck.MALFORMED
    return NameCheck.OK


def check_job_array_range(text: str) -> RangeCheck:
    """Check an ``X-Y[:Z]`` array range: X < Y and a step of at least 1."""
    match = _RANGE.fullmatch(text.strip())
    if not match:
        return RangeCheck.MALFORMED
    start, end, step = match.groups()
    if int(start) >= int(end):
        return RangeCheck.OUT_OF_RANGE
    if step is not None and int(step) < 1:
        return RangeCheck.OUT_OF_RANGE
    return RangeCheck.OK
