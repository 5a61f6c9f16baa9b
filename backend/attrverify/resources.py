"""
Resource definitions and the tables they live in.

A table is built once (from the packaged YAML or a site file) and then
only read. Lookups are case-insensitive, matching how resource names are
treated everywhere else in a batch request.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from .config import ResourceSpec
from .datatypes import DATATYPE_CHECKS, DatatypeCheck, DataType
from .errors import ConfigError
from .models import AttributeValue
from .outcome import ValidationOutcome

if TYPE_CHECKING:
    from .context import ValidationContext


ValueCheck = Callable[["ValidationContext", AttributeValue], ValidationOutcome]

BUILTIN_RESOURCES_PATH = Path(__file__).parent / "data" / "resources.yaml"


@dataclass(frozen=True)
class ResourceDefinition:
    """A named resource with optional datatype and value checks."""

    name: str
    datatype: DataType = DataType.STRING
    datatype_check: Optional[DatatypeCheck] = None
    value_check: Optional[ValueCheck] = None
    value_check_name: Optional[str] = None

    def verify(self, context: "ValidationContext", attr: AttributeValue) -> ValidationOutcome:
        """Run the datatype check, then the value check if the first passed."""
        outcome = ValidationOutcome.success()
        if self.datatype_check is not None:
            outcome = self.datatype_check(attr)
        if outcome.ok and self.value_check is not None:
            outcome = self.value_check(context, attr)
        return outcome


class ResourceTable(Mapping[str, ResourceDefinition]):
    """Read-only, case-insensitive mapping of resource name to definition."""

    def __init__(self, definitions: Iterable[ResourceDefinition] = ()):
        self._defs: Dict[str, ResourceDefinition] = {}
        for definition in definitions:
            self._defs[definition.name.lower()] = definition

    def __getitem__(self, name: str) -> ResourceDefinition:
        return self._defs[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (d.name for d in self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._defs

    def lookup(self, name: str) -> Optional[ResourceDefinition]:
        return self._defs.get(name.lower())

    def merged(self, definitions: Iterable[ResourceDefinition]) -> "ResourceTable":
        """New table with ``definitions`` added, replacing same-named entries."""
        return ResourceTable([*self._defs.values(), *definitions])

    @classmethod
    def from_specs(
        cls,
        specs: Iterable[ResourceSpec],
        value_checks: Mapping[str, ValueCheck],
    ) -> "ResourceTable":
        """Build a table from resource specs, resolving value checks by name."""
        definitions: List[ResourceDefinition] = []
        for spec in specs:
            value_check = None
            if spec.value_check is not None:
                value_check = value_checks.get(spec.value_check)
                if value_check is None:
                    raise ConfigError(
                        f"Resource '{spec.name}' names unknown value check '{spec.value_check}'"
                    )
            definitions.append(ResourceDefinition(
                name=spec.name,
                datatype=spec.type,
                datatype_check=DATATYPE_CHECKS[spec.type],
                value_check=value_check,
                value_check_name=spec.value_check,
            ))
        return cls(definitions)


def load_resource_tables(
    yaml_content: str,
    value_checks: Mapping[str, ValueCheck],
) -> Tuple[ResourceTable, ResourceTable]:
    """
    Load the server resource table and the reservation attribute table.

    Args:
        yaml_content: Document with ``resources`` and ``reservation_attributes`` lists.
        value_checks: Value check functions by name.

    Returns:
        Tuple of (resources, reservation_attributes).
    """
    try:
        data = yaml.safe_load(yaml_content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Resource file must contain a mapping")

    try:
        resources = [ResourceSpec(**item) for item in data.get("resources", [])]
        resv_attrs = [ResourceSpec(**item) for item in data.get("reservation_attributes", [])]
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid resource definition: {e}") from e

    return (
        ResourceTable.from_specs(resources, value_checks),
        ResourceTable.from_specs(resv_attrs, value_checks),
    )
