"""
Request-scoped data model.

An AttributeValue is created when a batch request's attribute list is
parsed and is consumed once by verification. It is immutable: validators
that normalize a value hand back a new string in their outcome and the
caller builds the replacement attribute with ``with_value``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class BatchRequest(str, Enum):
    """Kind of batch request the attribute arrived in."""

    QUEUE_JOB = "queue_job"
    MODIFY_JOB = "modify_job"
    STATUS_JOB = "status_job"
    SELECT_JOBS = "select_jobs"
    SUBMIT_RESV = "submit_resv"
    MODIFY_RESV = "modify_resv"
    MANAGER = "manager"
    STATUS_QUEUE = "status_queue"
    STATUS_SERVER = "status_server"
    STATUS_RESV = "status_resv"


class ParentObject(str, Enum):
    """Object type the attribute belongs to."""

    JOB = "job"
    QUEUE = "queue"
    SERVER = "server"
    RESERVATION = "reservation"
    NODE = "node"
    SCHEDULER = "scheduler"


class ManagerCommand(str, Enum):
    """Manager (qmgr) command, or NONE for non-manager requests."""

    NONE = "none"
    CREATE = "create"
    DELETE = "delete"
    SET = "set"
    UNSET = "unset"
    LIST = "list"
    PRINT = "print"


class Operator(str, Enum):
    """Comparison or assignment operator attached to an attribute."""

    SET = "set"
    UNSET = "unset"
    INCR = "incr"
    DECR = "decr"
    EQ = "eq"
    NE = "ne"
    GE = "ge"
    GT = "gt"
    LE = "le"
    LT = "lt"
    DFLT = "dflt"


@dataclass(frozen=True)
class AttributeValue:
    """One attribute (optionally resource-qualified) and its textual value."""

    name: str
    value: Optional[str]
    resource: Optional[str] = None
    op: Operator = Operator.SET

    @property
    def qualified_name(self) -> str:
        if self.resource:
            return f"{self.name}.{self.resource}"
        return self.name

    @property
    def is_empty(self) -> bool:
        """True for a missing or zero-length value."""
        return not self.value

    def with_value(self, value: str) -> "AttributeValue":
        return replace(self, value=value)
