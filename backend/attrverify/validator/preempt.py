"""
Preemption targets validator.

A preempt_targets value names the jobs a job may preempt, as comma
separated conditions such as ``queue=workq,Resource_List.arch=linux``,
or the single word ``NONE``. Each condition whose attribute is known is
verified through that attribute's definition; conditions on custom
resources are accepted since their type is only known to the server.

Scanning never modifies the text. The key search for ``queue`` runs over
a copy with only ASCII letters lower-cased, so offsets in the copy match
the original. Names and values are always sliced from the original so
their case is preserved.
"""

from __future__ import annotations

import string
from typing import TYPE_CHECKING, Tuple

from ..errors import ErrorKind, error_text
from ..models import AttributeValue
from ..outcome import ValidationOutcome
from ..resources import ResourceTable
from .resource import verify_resource_value

if TYPE_CHECKING:
    from ..context import ValidationContext

TARGET_NONE = "NONE"
RESOURCE_LIST = "Resource_List"
QUEUE = "queue"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _scan_keys(context: "ValidationContext") -> Tuple[Tuple[str, ResourceTable], ...]:
    env = context.environment
    return (
        (RESOURCE_LIST, env.resources),
        (QUEUE, env.reservation_attributes),
    )


def verify_preempt_targets(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """
    Verify a preempt_targets expression.

    Returns:
        BAD_VALUE when the value is malformed or names no recognized
        attribute, the failing condition's outcome when a known attribute
        rejects its value, success otherwise.
    """
    if attr.is_empty:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)

    text = attr.value.lstrip()
    if text[:len(TARGET_NONE)].upper() == TARGET_NONE:
        if text != TARGET_NONE:
            return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
        return ValidationOutcome.success()

    attrib_found = False
    for key, table in _scan_keys(context):
        haystack = text.translate(_ASCII_LOWER) if key == QUEUE else text
        pos = haystack.find(key)

        while pos != -1:
            attrib_found = True
            if key == RESOURCE_LIST:
                start = pos + len(key)
                if haystack[start:start + 1] != ".":
                    return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
                start += 1
            else:
                start = pos

            equals = text.find("=", start)
            if equals == -1:
                return ValidationOutcome.failure(ErrorKind.BAD_VALUE)

            name = text[start:equals]
            definition = table.lookup(name)
            if definition is None:
                # custom resource, type unknown here
                pos = haystack.find(key, pos + len(key))
                continue

            comma = text.find(",", equals + 1)
            value = text[equals + 1:] if comma == -1 else text[equals + 1:comma]

            outcome = verify_resource_value(context, definition, name, value, attr)
            if not outcome.ok:
                return outcome.with_default_message(error_text(outcome.code))

            pos = haystack.find(key, equals)

    if not attrib_found:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
    return ValidationOutcome.success()
