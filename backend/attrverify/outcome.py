"""
Validation outcome.

A validator answers with a code, an optional message, and optionally a
replacement value. The replacement is the only way a validator can change
what the caller submitted; the caller decides whether to adopt it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ErrorKind, error_text
from .models import AttributeValue


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of verifying one attribute value."""

    code: ErrorKind = ErrorKind.NONE
    message: Optional[str] = None
    replacement: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.code.is_error and self.message is not None:
            raise ValueError("a successful outcome cannot carry a message")
        if self.code.is_error and self.replacement is not None:
            raise ValueError("a failed outcome cannot carry a replacement value")

    @classmethod
    def success(cls) -> "ValidationOutcome":
        return _SUCCESS

    @classmethod
    def failure(cls, code: ErrorKind, message: Optional[str] = None) -> "ValidationOutcome":
        return cls(code=code, message=message)

    @classmethod
    def replaced(cls, value: str) -> "ValidationOutcome":
        return cls(replacement=value)

    @property
    def ok(self) -> bool:
        return not self.code.is_error

    @property
    def is_replaced(self) -> bool:
        return self.replacement is not None

    def with_default_message(self, message: str) -> "ValidationOutcome":
        """Fill in ``message`` on a failure that did not produce one."""
        if self.ok or self.message is not None:
            return self
        return ValidationOutcome(code=self.code, message=message)

    def describe(self, attr: Optional[AttributeValue]) -> str:
        """Message shown to the client, synthesized when none was produced."""
        if self.message is not None:
            return self.message
        if self.ok:
            return ""
        if attr is None:
            return error_text(self.code)
        return f"{error_text(self.code)} {attr.qualified_name}"

    def apply(self, attr: AttributeValue) -> AttributeValue:
        """Return the attribute the caller should keep after this outcome."""
        if self.replacement is None:
            return attr
        return attr.with_value(self.replacement)


_SUCCESS = ValidationOutcome()
