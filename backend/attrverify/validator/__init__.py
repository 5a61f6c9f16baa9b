"""
Attribute value validators.

- Generic resource validator (resource definitions' datatype and value checks)
- Select specification and preemption target expressions
- Manager/operator ACLs
- Scalar and list validators for job, queue, reservation and server attributes
- Registry mapping attribute names to validators, and the request engine
"""

from .acl import verify_mgr_opr_acl
from .engine import AttributeFailure, VerificationResult, VerifyEngine, verify_request
from .preempt import verify_preempt_targets
from .registry import (
    ATTRIBUTE_FAMILIES,
    FAMILY_VALIDATORS,
    VALUE_CHECKS,
    AttributeFamily,
    family_for,
    verify_attribute,
)
from .resource import verify_value_resc
from .select import verify_select

__all__ = [
    # Resources
    "verify_value_resc",
    "verify_select",
    "verify_preempt_targets",
    # ACL
    "verify_mgr_opr_acl",
    # Registry
    "AttributeFamily",
    "ATTRIBUTE_FAMILIES",
    "FAMILY_VALIDATORS",
    "VALUE_CHECKS",
    "family_for",
    "verify_attribute",
    # Engine
    "VerifyEngine",
    "VerificationResult",
    "AttributeFailure",
    "verify_request",
]
