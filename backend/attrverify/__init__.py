"""
attrverify: attribute value verification for batch requests.

Checks the textual values of job, queue, reservation, server and
resource attributes before a workload manager accepts a request, and
normalizes the values that have a canonical form.
"""

__version__ = "1.0.0"

from .config import ResourceSpec, SecurityMode, VerifyConfig
from .context import ValidationContext, VerifyEnvironment, default_environment
from .errors import ConfigError, ErrorKind, HostResolutionError, SpecParseError, error_text
from .models import AttributeValue, BatchRequest, ManagerCommand, Operator, ParentObject
from .outcome import ValidationOutcome
from .resources import ResourceDefinition, ResourceTable
from .validator import (
    AttributeFamily,
    VerificationResult,
    VerifyEngine,
    verify_attribute,
    verify_request,
)

__all__ = [
    "__version__",
    "AttributeValue",
    "BatchRequest",
    "ManagerCommand",
    "Operator",
    "ParentObject",
    "ValidationOutcome",
    "ValidationContext",
    "VerifyEnvironment",
    "default_environment",
    "ErrorKind",
    "error_text",
    "ConfigError",
    "HostResolutionError",
    "SpecParseError",
    "ResourceDefinition",
    "ResourceTable",
    "ResourceSpec",
    "SecurityMode",
    "VerifyConfig",
    "AttributeFamily",
    "VerificationResult",
    "VerifyEngine",
    "verify_attribute",
    "verify_request",
]
