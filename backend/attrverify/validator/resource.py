"""
Generic resource validator.

Verifies a ``name.resource=value`` attribute against the resource's
definition. Resources missing from the table pass: custom resources are
only known to the server, which verifies them later.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import ErrorKind, error_text
from ..models import AttributeValue
from ..outcome import ValidationOutcome
from ..resources import ResourceDefinition

if TYPE_CHECKING:
    from ..context import ValidationContext


def verify_resource_value(
    context: "ValidationContext",
    definition: ResourceDefinition,
    name: str,
    value: Optional[str],
    attr: AttributeValue,
) -> ValidationOutcome:
    """Run a definition's checks on one resource value."""
    resc_attr = AttributeValue(name=name, value=value, op=attr.op)
    return definition.verify(context, resc_attr)


def verify_value_resc(context: "ValidationContext", attr: Optional[AttributeValue]) -> ValidationOutcome:
    """
    Verify a resource-qualified attribute.

    Args:
        context: Request context.
        attr: Attribute with ``resource`` set; no resource means nothing to check.

    Returns:
        Outcome of the resource's datatype and value checks. A failure without
        a message gets ``"<canonical text> <name>.<resource>"``.
    """
    if attr is None:
        return ValidationOutcome.failure(ErrorKind.INTERNAL)
    if attr.resource is None:
        return ValidationOutcome.success()

    definition = context.environment.resources.lookup(attr.resource)
    if definition is None:
        return ValidationOutcome.success()

    outcome = verify_resource_value(context, definition, attr.resource, attr.value, attr)
    return outcome.with_default_message(
        f"{error_text(outcome.code)} {attr.name}.{attr.resource}"
    )
