"""
Select specification validator.

Each resource named in any chunk of the specification is verified
through the generic resource validator, chunks left to right, and the
first failing resource decides the outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ErrorKind, SpecParseError
from ..models import AttributeValue
from ..outcome import ValidationOutcome
from ..parsers import parse_chunk, split_plus_spec
from .resource import verify_value_resc

if TYPE_CHECKING:
    from ..context import ValidationContext


def verify_select(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Verify a ``count:res=val[:res=val]*[+...]`` select specification."""
    if attr.is_empty:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)

    chunks = split_plus_spec(attr.value)
    while True:
        try:
            chunk_text = next(chunks, None)
        except SpecParseError as e:
            return ValidationOutcome.failure(e.code)
        if chunk_text is None:
            break

        try:
            chunk = parse_chunk(chunk_text)
        except SpecParseError:
            return ValidationOutcome.failure(ErrorKind.BAD_VALUE)

        for name, value in chunk.resources:
            resc_attr = AttributeValue(name=attr.name, value=value, resource=name, op=attr.op)
            outcome = verify_value_resc(context, resc_attr)
            if not outcome.ok:
                return outcome

    return ValidationOutcome.success()
