"""
Runkeeper data set catalog.

Each data set maps to one Health Graph resource. The user picks data sets in
the pipe configuration; the special "All data sets" entry (no name) loads
every data set.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .config import ALL_DATA_SETS_LABEL, MEDIA_TYPE_TEMPLATE, RESOURCES_CONFIG


class ResourceType(str, Enum):
    SETTINGS = "settings"
    RECORDS = "records"
    PROFILE = "profile"
    CHANGE_LOG = "change_log"
    STRENGTH_TRAINING_ACTIVITIES = "strength_training_activities"
    WEIGHT_MEASUREMENTS = "weight_measurements"
    FITNESS_ACTIVITIES = "fitness_activities"
    BACKGROUND_ACTIVITIES = "background_activities"
    FRIENDS = "friends"
    SLEEP_MEASUREMENTS = "sleep_measurements"
    NUTRITIONAL_MEASUREMENTS = "nutritional_measurements"
    GENERAL_MEASUREMENTS = "general_measurements"
    DIABETES_MEASUREMENTS = "diabetes_measurements"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["ResourceType"]:
        """Return the resource type for a data set name, or None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class ResourceSpec:
    """How to fetch one resource type."""

    resource: ResourceType
    label: str
    uri_key: str
    media_type: str
    paginated: bool
    noun: str
    description: str = ""


@dataclass(frozen=True)
class ResourceDescriptor:
    """A data set the user can choose from. The name-less entry means 'all'."""

    label: str
    name: Optional[str] = None
    description: str = ""

    @property
    def is_all(self) -> bool:
        return self.name is None

    def to_dict(self) -> Dict[str, str]:
        if self.is_all:
            return {"labelPlural": self.label}
        return {"name": self.name, "label": self.label, "description": self.description}


def _load_specs() -> Dict[ResourceType, ResourceSpec]:
    configured = set(RESOURCES_CONFIG)
    declared = {rt.value for rt in ResourceType}
    if configured != declared:
        raise RuntimeError(
            f"resources.yaml does not match ResourceType: "
            f"missing={sorted(declared - configured)}, extra={sorted(configured - declared)}"
        )

    specs = {}
    for rt in ResourceType:
        conf = RESOURCES_CONFIG[rt.value]
        specs[rt] = ResourceSpec(
            resource=rt,
            label=conf["label"],
            uri_key=conf["uri_key"],
            media_type=MEDIA_TYPE_TEMPLATE.format(conf["media_type"]),
            paginated=bool(conf["paginated"]),
            noun=conf.get("noun", rt.value.replace("_", " ")),
            description=conf.get("description", ""),
        )
    return specs


RESOURCE_SPECS: Dict[ResourceType, ResourceSpec] = _load_specs()

ALL_DATA_SETS = ResourceDescriptor(label=ALL_DATA_SETS_LABEL)


def descriptor_sort_key(descriptor: ResourceDescriptor):
    # The 'all' entry sorts first, the rest by label
    return (not descriptor.is_all, descriptor.label.casefold())


def get_data_set_list(include_all: bool = True) -> List[ResourceDescriptor]:
    """
    Return the data sets available to the pipe.

    Args:
        include_all: Also offer the 'All data sets' option.

    Returns:
        Descriptors sorted with 'All data sets' first, then by label.
    """
    data_sets = [
        ResourceDescriptor(name=spec.resource.value, label=spec.label, description=spec.description)
        for spec in RESOURCE_SPECS.values()
    ]
    if include_all:
        data_sets.append(ALL_DATA_SETS)
    return sorted(data_sets, key=descriptor_sort_key)
