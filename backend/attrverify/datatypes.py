"""
Resource datatype checks.

Each check looks only at the text of a resource value and decides whether
it parses as the resource's declared type. Range and semantic checks are
the job of the value check attached to the resource definition.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict

from .errors import ErrorKind
from .models import AttributeValue
from .outcome import ValidationOutcome


class DataType(str, Enum):
    """Declared type of a resource."""

    LONG = "long"
    SIZE = "size"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIME = "time"
    STRING = "string"


DatatypeCheck = Callable[[AttributeValue], ValidationOutcome]

_LONG = re.compile(r"[+-]?[0-9]+")
_SIZE = re.compile(r"[0-9]+([kmgtp]?[bw]?)", re.IGNORECASE | re.ASCII)
_FLOAT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_TIME = re.compile(r"([0-9]+:){0,2}[0-9]+(\.[0-9]+)?")
_BOOLEAN_WORDS = {"true", "false", "t", "f", "y", "n", "yes", "no", "1", "0"}


def _matches(pattern: re.Pattern) -> DatatypeCheck:
    def check(attr: AttributeValue) -> ValidationOutcome:
        if attr.value is None or not pattern.fullmatch(attr.value.strip()):
            return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
        return ValidationOutcome.success()

    return check


def verify_datatype_time(attr: AttributeValue) -> ValidationOutcome:
    """[[HH:]MM:]SS[.ms]; minutes and seconds after a colon stay below 60."""
    text = (attr.value or "").strip()
    if not _TIME.fullmatch(text):
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
    fields = text.split(":")
    for part in fields[1:]:
        if float(part) >= 60:
            return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
    return ValidationOutcome.success()


def verify_datatype_boolean(attr: AttributeValue) -> ValidationOutcome:
    if attr.value is None or attr.value.strip().lower() not in _BOOLEAN_WORDS:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
    return ValidationOutcome.success()


def verify_datatype_string(attr: AttributeValue) -> ValidationOutcome:
    if attr.value is None:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)
    return ValidationOutcome.success()


DATATYPE_CHECKS: Dict[DataType, DatatypeCheck] = {
    DataType.LONG: _matches(_LONG),
    DataType.SIZE: _matches(_SIZE),
    DataType.FLOAT: _matches(_FLOAT),
    DataType.BOOLEAN: verify_datatype_boolean,
    DataType.TIME: verify_datatype_time,
    DataType.STRING: verify_datatype_string,
}
