"""
Verification environment and per-request context.

The environment bundles everything that does not change between
requests: resource tables, license quota, security mode and the host
resolver. A ValidationContext pairs it with the kind of request being
verified. Both are immutable and safe to share between threads.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from .config import DEFAULT_MAX_LICENSES, SecurityMode, VerifyConfig
from .errors import ConfigError
from .hosts import HostResolver, local_hostname, resolve_canonical_hostname
from .models import BatchRequest, ManagerCommand, ParentObject
from .resources import BUILTIN_RESOURCES_PATH, ResourceTable, load_resource_tables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyEnvironment:
    """Request-independent inputs shared by all validators."""

    resources: ResourceTable = field(default_factory=ResourceTable)
    reservation_attributes: ResourceTable = field(default_factory=ResourceTable)
    max_licenses: int = DEFAULT_MAX_LICENSES
    default_server: Optional[str] = None
    kerberos: bool = False
    hostname: Optional[str] = None
    cwd: Optional[str] = None
    resolver: HostResolver = resolve_canonical_hostname

    @property
    def local_host(self) -> str:
        return self.hostname or local_hostname(self.resolver)

    @property
    def working_directory(self) -> str:
        return self.cwd or os.getcwd()

    @classmethod
    def from_config(
        cls,
        config: VerifyConfig,
        resolver: HostResolver = resolve_canonical_hostname,
    ) -> "VerifyEnvironment":
        """Build an environment from site configuration."""
        from .validator.registry import VALUE_CHECKS

        path = config.resources_file or BUILTIN_RESOURCES_PATH
        logger.debug(f"Loading resource tables from {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read resource file {path}: {e}") from e
        resources, resv_attrs = load_resource_tables(content, VALUE_CHECKS)

        if config.resources:
            extra = ResourceTable.from_specs(config.resources, VALUE_CHECKS)
            resources = resources.merged(extra.values())
            logger.debug(f"Added {len(extra)} site resource definitions")

        return cls(
            resources=resources,
            reservation_attributes=resv_attrs,
            max_licenses=config.max_licenses,
            default_server=config.default_server,
            kerberos=config.security == SecurityMode.KRB5,
            hostname=config.local_hostname,
            resolver=resolver,
        )


@lru_cache(maxsize=1)
def default_environment() -> VerifyEnvironment:
    """Environment built from the packaged resource tables."""
    return VerifyEnvironment.from_config(VerifyConfig())


@dataclass(frozen=True)
class ValidationContext:
    """Immutable per-request input threaded through every validator."""

    batch_request: BatchRequest
    parent_object: ParentObject = ParentObject.JOB
    command: ManagerCommand = ManagerCommand.NONE
    environment: VerifyEnvironment = field(default_factory=default_environment)

    @property
    def is_select(self) -> bool:
        return self.batch_request is BatchRequest.SELECT_JOBS
