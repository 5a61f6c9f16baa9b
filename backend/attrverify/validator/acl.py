"""
Manager/operator ACL validator.

Entries are ``user@host``. A host starting with ``*`` is a wildcard and
cannot be checked; any other host must already be written in its
canonical, fully qualified form.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ErrorKind, HostResolutionError
from ..models import AttributeValue
from ..outcome import ValidationOutcome

if TYPE_CHECKING:
    from ..context import ValidationContext


def verify_mgr_opr_acl(context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
    """Verify a comma separated ``user@host`` list; the first bad entry fails it."""
    env = context.environment
    # host validity cannot be checked under Kerberos
    if env.kerberos:
        return ValidationOutcome.success()

    if attr.is_empty:
        return ValidationOutcome.failure(ErrorKind.BAD_VALUE)

    for token in attr.value.split(","):
        entry = token.strip(" ")
        _, sep, host = entry.partition("@")
        if not sep:
            return ValidationOutcome.failure(ErrorKind.BAD_HOST)
        if host.startswith("*"):
            continue

        try:
            canonical = env.resolver(host)
        except HostResolutionError:
            return ValidationOutcome.failure(ErrorKind.BAD_HOST)
        if host.lower() != canonical.lower():
            return ValidationOutcome.failure(ErrorKind.BAD_HOST)

    return ValidationOutcome.success()
