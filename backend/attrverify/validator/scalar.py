"""
Scalar validators.

Numbers, names and small enumerations. Every check here is a pure
function of the request context and the value text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..errors import ErrorKind
from ..models import AttributeValue, BatchRequest, Operator
from ..outcome import ValidationOutcome
from ..parsers import NameCheck, RangeCheck, check_job_array_range, check_job_name

if TYPE_CHECKING:
    from ..context import ValidationContext

PRIORITY_MIN = -1024
PRIORITY_MAX = 1023

CHECKPOINT_SHORTHANDS = frozenset("nscwu")
JOB_STATES = frozenset("EHQRTWSUBXFM")
QUEUE_TYPES = ("Execution", "Route")
SANDBOX_VALUES = frozenset({"HOME", "O_WORKDIR", "PRIVATE"})
CREDENTIAL_NAMES = ("aes", "dce/krb5", "krb5", "grid_proxy")

_INTEGER = re.compile(r"[+-]?[0-9]+")
_CHECKPOINT_INTERVAL = re.compile(r"[cw]=[0-9]+")

_NAME_EMPTY_OK = {BatchRequest.STATUS_JOB, BatchRequest.SELECT_JOBS}
_NAME_DIGIT_OK = {
    BatchRequest.QUEUE_JOB,
    BatchRequest.MODIFY_JOB,
    BatchRequest.SUBMIT_RESV,
    BatchRequest.SELECT_JOBS,
}
_PRIORITY_MATCH_NONE_OK = {BatchRequest.SELECT_JOBS, BatchRequest.STATUS_JOB}


def _bad() -> ValidationOutcome:
    return ValidationOutcome.failure(ErrorKind.BAD_VALUE)


def _integer(attr: AttributeValue) -> Optional[int]:
    """Value as an integer, or None when it is not one."""
    if attr.value is None:
        return None
    text = attr.value.strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def verify_job_name(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.value is None:
        return _bad()
    if attr.value == "":
        if context.batch_request in _NAME_EMPTY_OK:
            return ValidationOutcome.success()
        return _bad()

    check_alpha = context.batch_request not in _NAME_DIGIT_OK
    result = check_job_name(attr.value, check_alpha)
    if result is NameCheck.MALFORMED:
        return _bad()
    if result is NameCheck.TOO_LONG:
        return ValidationOutcome.failure(ErrorKind.NAME_TOO_LONG)
    return ValidationOutcome.success()


def verify_job_array_range(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.is_empty:
        return _bad()
    result = check_job_array_range(attr.value)
    if result is RangeCheck.MALFORMED:
        return _bad()
    if result is RangeCheck.OUT_OF_RANGE:
        return ValidationOutcome.failure(ErrorKind.OUT_OF_RANGE)
    return ValidationOutcome.success()


def verify_checkpoint(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """
    Checkpoint: one of n, s, c, w, u, or ``c=<minutes>`` / ``w=<minutes>``.

    ``u`` (unset) may only be compared with EQ or NE when selecting jobs.
    """
    if attr.is_empty:
        return _bad()
    value = attr.value

    if len(value) == 1:
        if value not in CHECKPOINT_SHORTHANDS:
            return _bad()
    elif not _CHECKPOINT_INTERVAL.fullmatch(value):
        return _bad()

    if context.is_select and value == "u":
        if attr.op not in (Operator.EQ, Operator.NE):
            return _bad()
    return ValidationOutcome.success()


def verify_priority(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Priority in [-1024, 1023]; when selecting, out of range just matches nothing."""
    if attr.is_empty:
        return _bad()
    priority = _integer(attr)
    if priority is None:
        return _bad()
    if not PRIORITY_MIN <= priority <= PRIORITY_MAX:
        if context.batch_request in _PRIORITY_MATCH_NONE_OK:
            return ValidationOutcome.success()
        return _bad()
    return ValidationOutcome.success()


def verify_sandbox(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.is_empty or attr.value.upper() not in SANDBOX_VALUES:
        return _bad()
    return ValidationOutcome.success()


def verify_credential_name(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.is_empty or attr.value not in CREDENTIAL_NAMES:
        return _bad()
    return ValidationOutcome.success()


def verify_zero_or_positive(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    number = _integer(attr)
    if number is None or number < 0:
        return _bad()
    return ValidationOutcome.success()


def verify_non_zero_positive(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    number = _integer(attr)
    if number is None or number <= 0:
        return _bad()
    return ValidationOutcome.success()


def _license_count(context: "ValidationContext", attr: AttributeValue, code: ErrorKind) -> ValidationOutcome:
    if attr.is_empty:
        return _bad()
    count = _integer(attr)
    if count is None:
        return _bad()
    if count < 0 or count > context.environment.max_licenses:
        return ValidationOutcome.failure(code)
    return ValidationOutcome.success()


def verify_license_min(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _license_count(context, attr, ErrorKind.LICENSE_MIN)


def verify_license_max(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _license_count(context, attr, ErrorKind.LICENSE_MAX)


def verify_license_linger(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.is_empty:
        return _bad()
    seconds = _integer(attr)
    if seconds is None:
        return _bad()
    if seconds <= 0:
        return ValidationOutcome.failure(ErrorKind.LICENSE_LINGER)
    return ValidationOutcome.success()


def verify_queue_type(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Any case-insensitive prefix of Execution or Route, e.g. ``e`` or ``ROUTE``."""
    if attr.is_empty:
        return _bad()
    value = attr.value.lower()
    for queue_type in QUEUE_TYPES:
        if queue_type.lower().startswith(value):
            return ValidationOutcome.success()
    return _bad()


def verify_job_state(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.value is None:
        return _bad()
    if attr.value == "" and context.batch_request is not BatchRequest.STATUS_JOB:
        return _bad()
    if not set(attr.value) <= JOB_STATES:
        return _bad()
    return ValidationOutcome.success()
