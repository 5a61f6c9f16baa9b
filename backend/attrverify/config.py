"""Configuration for attribute verification using Pydantic models."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .datatypes import DataType
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LICENSES = 10000000


class SecurityMode(str, Enum):
    """Authentication scheme the server runs under."""
    STANDARD = "standard"
    KRB5 = "krb5"


class ResourceSpec(BaseModel):
    """One resource definition as written in a resource file."""
    name: str = Field(min_length=1)
    type: DataType = DataType.STRING
    value_check: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v[0].isalpha():
            raise ValueError("resource name must start with a letter")
        return v


class VerifyConfig(BaseModel):
    """Site configuration for the verification environment."""
    max_licenses: int = Field(default=DEFAULT_MAX_LICENSES, ge=0)
    default_server: Optional[str] = None
    security: SecurityMode = SecurityMode.STANDARD
    local_hostname: Optional[str] = None
    resources_file: Optional[Path] = None
    resources: List[ResourceSpec] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_content: str, base_dir: Optional[Path] = None) -> "VerifyConfig":
        """
        Load configuration from YAML content.

        Args:
            yaml_content: YAML document.
            base_dir: Directory that a relative ``resources_file`` is resolved against.

        Returns:
            Parsed configuration.
        """
        try:
            data = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        try:
            config = cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        if config.resources_file is not None and base_dir is not None \
                and not config.resources_file.is_absolute():
            config = config.model_copy(update={"resources_file": base_dir / config.resources_file})
        return config

    @classmethod
    def from_file(cls, path: Path) -> "VerifyConfig":
        """Load configuration from a YAML file."""
        logger.debug(f"Loading configuration from {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read configuration {path}: {e}") from e
        return cls.from_yaml(content, base_dir=path.parent)
