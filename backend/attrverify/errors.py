"""
Error taxonomy for attribute value verification.

Every validator reports one of these kinds. The canonical text is what a
batch client shows when the server rejects a request, so it reads as the
start of a sentence that the attribute name is appended to.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    """Outcome codes returned by validators."""

    NONE = "none"
    BAD_VALUE = "bad_value"
    OUT_OF_RANGE = "out_of_range"
    NAME_TOO_LONG = "name_too_long"
    LICENSE_MIN = "license_min"
    LICENSE_MAX = "license_max"
    LICENSE_LINGER = "license_linger"
    BAD_HOST = "bad_host"
    SYSTEM = "system"
    INTERNAL = "internal"

    @property
    def is_error(self) -> bool:
        return self is not ErrorKind.NONE


_ERROR_TEXT: Dict[ErrorKind, str] = {
    ErrorKind.NONE: "",
    ErrorKind.BAD_VALUE: "Illegal attribute or resource value for",
    ErrorKind.OUT_OF_RANGE: "Attribute value out of range for",
    ErrorKind.NAME_TOO_LONG: "Job or reservation name is too long for",
    ErrorKind.LICENSE_MIN: "pbs_license_min is < 0, or > pbs_license_max, or > max licenses for",
    ErrorKind.LICENSE_MAX: "pbs_license_max is < 0, or < pbs_license_min, or > max licenses for",
    ErrorKind.LICENSE_LINGER: "pbs_license_linger_time must be > 0 for",
    ErrorKind.BAD_HOST: "Access from host not allowed, or unknown host for",
    ErrorKind.SYSTEM: "System error occurred while verifying",
    ErrorKind.INTERNAL: "Internal server error occurred while verifying",
}


def error_text(kind: ErrorKind) -> str:
    """Return the canonical text for an error kind."""
    return _ERROR_TEXT[kind]


class SpecParseError(ValueError):
    """Raised by the collaborator parsers when text is malformed."""

    def __init__(self, message: str, code: ErrorKind = ErrorKind.BAD_VALUE):
        super().__init__(message)
        self.code = code


class HostResolutionError(OSError):
    """Raised when a host name cannot be resolved to a canonical name."""


class ConfigError(Exception):
    """Raised when a configuration or resource file cannot be loaded."""
