"""
Attribute family registry.

The set of attribute families is fixed, so dispatch is two static
tables: attribute name to family, and family to validator. Resource
definitions refer to families by value (``value_check: select``) to pick
up the same validators.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ..errors import ErrorKind
from ..models import AttributeValue
from ..outcome import ValidationOutcome
from . import lists, scalar
from .acl import verify_mgr_opr_acl
from .preempt import verify_preempt_targets
from .resource import verify_value_resc
from .select import verify_select

if TYPE_CHECKING:
    from ..context import ValidationContext

Validator = Callable[["ValidationContext", AttributeValue], ValidationOutcome]


class AttributeFamily(str, Enum):
    """Kinds of attribute value, each with one validator."""

    RESOURCE = "resource"
    SELECT = "select"
    PREEMPT_TARGETS = "preempt_targets"
    USER_LIST = "user_list"
    AUTHORIZED_USERS = "authorized_users"
    MAIL_USERS = "mail_users"
    SHELL_PATH_LIST = "shell_path_list"
    STAGE_LIST = "stage_list"
    DEPEND_LIST = "depend_list"
    PATH = "path"
    JOB_ARRAY_RANGE = "job_array_range"
    JOB_NAME = "job_name"
    CHECKPOINT = "checkpoint"
    HOLD = "hold"
    JOIN_PATH = "join_path"
    KEEP_FILES = "keep_files"
    MAIL_POINTS = "mail_points"
    PRIORITY = "priority"
    SANDBOX = "sandbox"
    CREDENTIAL_NAME = "credential_name"
    ZERO_OR_POSITIVE = "zero_or_positive"
    NON_ZERO_POSITIVE = "non_zero_positive"
    LICENSE_MIN = "license_min"
    LICENSE_MAX = "license_max"
    LICENSE_LINGER = "license_linger"
    MGR_OPR_ACL = "mgr_opr_acl"
    QUEUE_TYPE = "queue_type"
    JOB_STATE = "job_state"


FAMILY_VALIDATORS: Dict[AttributeFamily, Validator] = {
    AttributeFamily.RESOURCE: verify_value_resc,
    AttributeFamily.SELECT: verify_select,
    AttributeFamily.PREEMPT_TARGETS: verify_preempt_targets,
    AttributeFamily.USER_LIST: lists.verify_user_list,
    AttributeFamily.AUTHORIZED_USERS: lists.verify_authorized_users,
    AttributeFamily.MAIL_USERS: lists.verify_mail_users,
    AttributeFamily.SHELL_PATH_LIST: lists.verify_shell_path_list,
    AttributeFamily.STAGE_LIST: lists.verify_stage_list,
    AttributeFamily.DEPEND_LIST: lists.verify_depend_list,
    AttributeFamily.PATH: lists.verify_path,
    AttributeFamily.JOB_ARRAY_RANGE: scalar.verify_job_array_range,
    AttributeFamily.JOB_NAME: scalar.verify_job_name,
    AttributeFamily.CHECKPOINT: scalar.verify_checkpoint,
    AttributeFamily.HOLD: lists.verify_hold,
    AttributeFamily.JOIN_PATH: lists.verify_join_path,
    AttributeFamily.KEEP_FILES: lists.verify_keep_files,
    AttributeFamily.MAIL_POINTS: lists.verify_mail_points,
    AttributeFamily.PRIORITY: scalar.verify_priority,
    AttributeFamily.SANDBOX: scalar.verify_sandbox,
    AttributeFamily.CREDENTIAL_NAME: scalar.verify_credential_name,
    AttributeFamily.ZERO_OR_POSITIVE: scalar.verify_zero_or_positive,
    AttributeFamily.NON_ZERO_POSITIVE: scalar.verify_non_zero_positive,
    AttributeFamily.LICENSE_MIN: scalar.verify_license_min,
    AttributeFamily.LICENSE_MAX: scalar.verify_license_max,
    AttributeFamily.LICENSE_LINGER: scalar.verify_license_linger,
    AttributeFamily.MGR_OPR_ACL: verify_mgr_opr_acl,
    AttributeFamily.QUEUE_TYPE: scalar.verify_queue_type,
    AttributeFamily.JOB_STATE: scalar.verify_job_state,
}

# Value checks a resource definition may name. The generic resource
# validator is excluded: it dispatches on the resource, not the value.
VALUE_CHECKS: Dict[str, Validator] = {
    family.value: validator
    for family, validator in FAMILY_VALIDATORS.items()
    if family is not AttributeFamily.RESOURCE
}

_ATTRIBUTE_FAMILIES = {
    # resource-bearing attributes
    "Resource_List": AttributeFamily.RESOURCE,
    "resources_available": AttributeFamily.RESOURCE,
    "resources_default": AttributeFamily.RESOURCE,
    "resources_max": AttributeFamily.RESOURCE,
    "resources_min": AttributeFamily.RESOURCE,
    "default_chunk": AttributeFamily.RESOURCE,
    # job
    "Job_Name": AttributeFamily.JOB_NAME,
    "Reserve_Name": AttributeFamily.JOB_NAME,
    "Checkpoint": AttributeFamily.CHECKPOINT,
    "depend": AttributeFamily.DEPEND_LIST,
    "Error_Path": AttributeFamily.PATH,
    "Output_Path": AttributeFamily.PATH,
    "Hold_Types": AttributeFamily.HOLD,
    "Join_Path": AttributeFamily.JOIN_PATH,
    "Keep_Files": AttributeFamily.KEEP_FILES,
    "Mail_Points": AttributeFamily.MAIL_POINTS,
    "Mail_Users": AttributeFamily.MAIL_USERS,
    "Priority": AttributeFamily.PRIORITY,
    "Shell_Path_List": AttributeFamily.SHELL_PATH_LIST,
    "User_List": AttributeFamily.USER_LIST,
    "group_list": AttributeFamily.USER_LIST,
    "stagein": AttributeFamily.STAGE_LIST,
    "stageout": AttributeFamily.STAGE_LIST,
    "sandbox": AttributeFamily.SANDBOX,
    "array_indices_submitted": AttributeFamily.JOB_ARRAY_RANGE,
    "job_state": AttributeFamily.JOB_STATE,
    "cred_type": AttributeFamily.CREDENTIAL_NAME,
    "run_count": AttributeFamily.ZERO_OR_POSITIVE,
    "run_count_max": AttributeFamily.ZERO_OR_POSITIVE,
    # reservation
    "Authorized_Users": AttributeFamily.AUTHORIZED_USERS,
    "Authorized_Groups": AttributeFamily.AUTHORIZED_USERS,
    "reserve_count": AttributeFamily.NON_ZERO_POSITIVE,
    # queue
    "queue_type": AttributeFamily.QUEUE_TYPE,
    "max_queued": AttributeFamily.ZERO_OR_POSITIVE,
    "max_running": AttributeFamily.ZERO_OR_POSITIVE,
    "max_user_run": AttributeFamily.ZERO_OR_POSITIVE,
    "max_group_run": AttributeFamily.ZERO_OR_POSITIVE,
    "route_retry_time": AttributeFamily.ZERO_OR_POSITIVE,
    "route_lifetime": AttributeFamily.ZERO_OR_POSITIVE,
    # server
    "managers": AttributeFamily.MGR_OPR_ACL,
    "operators": AttributeFamily.MGR_OPR_ACL,
    "pbs_license_min": AttributeFamily.LICENSE_MIN,
    "pbs_license_max": AttributeFamily.LICENSE_MAX,
    "pbs_license_linger_time": AttributeFamily.LICENSE_LINGER,
    "scheduler_iteration": AttributeFamily.NON_ZERO_POSITIVE,
    "job_history_duration": AttributeFamily.ZERO_OR_POSITIVE,
    "max_array_size": AttributeFamily.ZERO_OR_POSITIVE,
    "max_concurrent_provision": AttributeFamily.NON_ZERO_POSITIVE,
}

ATTRIBUTE_FAMILIES: Dict[str, AttributeFamily] = {
    name.lower(): family for name, family in _ATTRIBUTE_FAMILIES.items()
}


def family_for(name: str) -> Optional[AttributeFamily]:
    """Family of an attribute name (case-insensitive), or None if unregistered."""
    return ATTRIBUTE_FAMILIES.get(name.lower())


def verify_attribute(context: "ValidationContext", attr: Optional[AttributeValue]) -> ValidationOutcome:
    """
    Verify one attribute value with the validator registered for its name.

    Attributes without a registered family pass; whether they may be set
    at all is decided elsewhere.
    """
    if attr is None:
        return ValidationOutcome.failure(ErrorKind.INTERNAL)
    family = family_for(attr.name)
    if family is None:
        return ValidationOutcome.success()
    try:
        return FAMILY_VALIDATORS[family](context, attr)
    except MemoryError:
        return ValidationOutcome.failure(ErrorKind.SYSTEM)
