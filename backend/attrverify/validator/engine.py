"""
Verification Engine.

Verifies every attribute of a batch request in order, adopting rewritten
values, and rejects the request at the first attribute that fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from ..context import ValidationContext, VerifyEnvironment, default_environment
from ..errors import ConfigError, ErrorKind
from ..models import AttributeValue, BatchRequest, ManagerCommand, Operator, ParentObject
from ..outcome import ValidationOutcome
from .registry import verify_attribute

logger = logging.getLogger(__name__)

MISSING_ATTRIBUTE = "<missing>"


@dataclass
class AttributeFailure:
    """The attribute that caused a request to be rejected."""

    attribute: Optional[AttributeValue]
    code: ErrorKind
    message: str

    @property
    def qualified_name(self) -> str:
        if self.attribute is None:
            return MISSING_ATTRIBUTE
        return self.attribute.qualified_name

    @property
    def value(self) -> Optional[str]:
        return None if self.attribute is None else self.attribute.value

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.qualified_name}: {self.message}"


@dataclass
class VerificationResult:
    """
    Result of verifying a batch request's attribute list.

    ``attributes`` holds the list the request should carry forward, with
    any rewritten values already substituted.
    """

    valid: bool
    attributes: List[AttributeValue] = field(default_factory=list)
    failure: Optional[AttributeFailure] = None
    checked: int = 0
    rewritten: List[str] = field(default_factory=list)
    batch_request: Optional[BatchRequest] = None
    parent_object: Optional[ParentObject] = None

    def summary(self) -> str:
        """Generate a summary of the verification."""
        lines = []
        status = "ACCEPTED" if self.valid else "REJECTED"
        lines.append(f"Verification {status}")
        lines.append(f"  Attributes checked: {self.checked}")
        if self.rewritten:
            lines.append(f"  Rewritten: {', '.join(self.rewritten)}")
        if self.failure:
            lines.append(f"  Rejected by: {self.failure}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "valid": self.valid,
            "checked": self.checked,
            "rewritten": self.rewritten,
            "attributes": [
                {
                    "name": a.name,
                    "resource": a.resource,
                    "value": a.value,
                    "op": a.op.value,
                }
                for a in self.attributes
            ],
            "failure": {
                "attribute": self.failure.qualified_name,
                "code": self.failure.code.value,
                "message": self.failure.message,
            } if self.failure else None,
        }


class VerifyEngine:
    """
    Runs the registered validators over a request's attributes.
    """

    def __init__(self, environment: Optional[VerifyEnvironment] = None):
        """
        Initialize the engine.

        Args:
            environment: Resource tables and site settings; the packaged
                defaults are used when omitted.
        """
        self.environment = environment or default_environment()

    def context(
        self,
        batch_request: BatchRequest,
        parent_object: ParentObject = ParentObject.JOB,
        command: ManagerCommand = ManagerCommand.NONE,
    ) -> ValidationContext:
        return ValidationContext(
            batch_request=batch_request,
            parent_object=parent_object,
            command=command,
            environment=self.environment,
        )

    def verify_one(self, context: ValidationContext, attr: Optional[AttributeValue]) -> ValidationOutcome:
        """Verify a single attribute."""
        return verify_attribute(context, attr)

    def verify(
        self,
        batch_request: BatchRequest,
        attributes: Iterable[Optional[AttributeValue]],
        parent_object: ParentObject = ParentObject.JOB,
        command: ManagerCommand = ManagerCommand.NONE,
    ) -> VerificationResult:
        """
        Verify a request's attributes in order.

        Args:
            batch_request: Kind of request.
            attributes: Attributes as submitted. The input is not modified.
            parent_object: Object the attributes belong to.
            command: Manager command, for manager requests.

        Returns:
            VerificationResult; ``valid`` is False at the first failing attribute.
        """
        context = self.context(batch_request, parent_object, command)
        result = VerificationResult(
            valid=True, batch_request=batch_request, parent_object=parent_object
        )

        for attr in attributes:
            outcome = self.verify_one(context, attr)
            result.checked += 1
            if not outcome.ok:
                result.valid = False
                result.failure = AttributeFailure(
                    attribute=attr,
                    code=outcome.code,
                    message=outcome.describe(attr),
                )
                logger.debug(f"{batch_request.value}: {result.failure.qualified_name} rejected ({outcome.code.value})")
                return result

            if outcome.is_replaced:
                result.rewritten.append(attr.qualified_name)
            result.attributes.append(outcome.apply(attr))

        logger.debug(f"{batch_request.value}: {result.checked} attributes accepted")
        return result

    def verify_file(self, path: Path) -> VerificationResult:
        """
        Verify a request described in a YAML file.

        The file holds ``request``, optional ``parent`` and ``command``, and
        an ``attributes`` list of ``{name, resource, value, op}`` mappings.

        Raises:
            ConfigError: If the file cannot be read or is malformed.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read request file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Request file must contain a mapping")

        try:
            batch_request = BatchRequest(data.get("request", BatchRequest.QUEUE_JOB.value))
            parent_object = ParentObject(data.get("parent", ParentObject.JOB.value))
            command = ManagerCommand(data.get("command", ManagerCommand.NONE.value))
            attributes = [
                AttributeValue(
                    name=item["name"],
                    value=None if item.get("value") is None else str(item["value"]),
                    resource=item.get("resource"),
                    op=Operator(item.get("op", Operator.SET.value)),
                )
                for item in data.get("attributes") or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid request file {path}: {e}") from e

        return self.verify(batch_request, attributes, parent_object, command)


def verify_request(
    batch_request: BatchRequest,
    attributes: Iterable[AttributeValue],
    parent_object: ParentObject = ParentObject.JOB,
    environment: Optional[VerifyEnvironment] = None,
) -> VerificationResult:
    """
    Convenience function to verify a request's attributes.

    Args:
        batch_request: Kind of request.
        attributes: Attributes as submitted.
        parent_object: Object the attributes belong to.
        environment: Optional environment; packaged defaults otherwise.

    Returns:
        VerificationResult.
    """
    engine = VerifyEngine(environment)
    return engine.verify(batch_request, attributes, parent_object)
