"""
List and flag-set validators.

User lists, mail points, hold types, join/keep flags, staging lists, and
the two rewriting validators (dependency list and output/error path)
whose outcome carries the normalized value for the caller to adopt.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet

from ..errors import ErrorKind, SpecParseError
from ..models import AttributeValue, BatchRequest
from ..outcome import ValidationOutcome
from ..parsers import DEPEND_LEN, parse_at_list, parse_depend_list, parse_stage_list, prepare_path

if TYPE_CHECKING:
    from ..context import ValidationContext

HOLD_TYPES = frozenset("uospn")
JOIN_PATH_VALUES = frozenset({"oe", "eo", "n"})
KEEP_FILES_VALUES = frozenset({"o", "e", "oe", "eo", "n"})
MAIL_POINTS = frozenset("abe")
RESV_MAIL_POINTS = frozenset("abec")


def _bad() -> ValidationOutcome:
    return ValidationOutcome.failure(ErrorKind.BAD_VALUE)


def _at_list(attr: AttributeValue, use_count: bool, abs_path: bool) -> ValidationOutcome:
    if attr.is_empty:
        return _bad()
    try:
        parse_at_list(attr.value, use_count, abs_path)
    except SpecParseError:
        return _bad()
    return ValidationOutcome.success()


def verify_user_list(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """User_List / group_list; hosts may repeat in a select request."""
    return _at_list(attr, use_count=not context.is_select, abs_path=False)


def verify_authorized_users(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _at_list(attr, use_count=False, abs_path=False)


def verify_mail_users(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _at_list(attr, use_count=False, abs_path=False)


def verify_shell_path_list(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _at_list(attr, use_count=True, abs_path=True)


def verify_stage_list(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    if attr.is_empty:
        return _bad()
    try:
        parse_stage_list(attr.value)
    except SpecParseError:
        return _bad()
    return ValidationOutcome.success()


def verify_depend_list(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Expand a dependency list; the expanded text replaces the submitted one."""
    if attr.is_empty:
        return _bad()
    try:
        expanded = parse_depend_list(
            attr.value, DEPEND_LEN, context.environment.default_server
        )
    except SpecParseError:
        return _bad()
    return ValidationOutcome.replaced(expanded)


def verify_path(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Normalize an output/error path to ``host:/absolute/path``."""
    if attr.is_empty:
        return _bad()
    env = context.environment
    try:
        prepared = prepare_path(attr.value, env.local_host, env.working_directory)
    except SpecParseError:
        return _bad()
    return ValidationOutcome.replaced(prepared)


def verify_hold(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """
    Hold types: any of u, o, s; or p alone; or n alone.
    """
    if attr.is_empty:
        return _bad()
    flags = set(attr.value)
    if not flags <= HOLD_TYPES:
        return _bad()
    if "n" in flags and flags & set("uosp"):
        return _bad()
    if "p" in flags and flags & set("uosn"):
        return _bad()
    return ValidationOutcome.success()


def _one_of(attr: AttributeValue, allowed: FrozenSet[str]) -> ValidationOutcome:
    if attr.is_empty or attr.value not in allowed:
        return _bad()
    return ValidationOutcome.success()


def verify_join_path(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _one_of(attr, JOIN_PATH_VALUES)


def verify_keep_files(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    return _one_of(attr, KEEP_FILES_VALUES)


def verify_mail_points(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """
    Mail points: ``n`` alone, or any combination of a, b, e.

    Reservations also accept ``c``. Leading white space is dropped, and
    the trimmed value replaces the submitted one.
    """
    if attr.is_empty:
        return _bad()
    value = attr.value.lstrip()
    if not value:
        return _bad()

    if value != "n":
        allowed = RESV_MAIL_POINTS if context.batch_request is BatchRequest.SUBMIT_RESV else MAIL_POINTS
        if not set(value) <= allowed:
            return _bad()

    if value != attr.value:
        return ValidationOutcome.replaced(value)
    return ValidationOutcome.success()
