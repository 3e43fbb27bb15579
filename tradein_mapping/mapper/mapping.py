"""Field mapping rule model."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional


class MappingType(str, Enum):
    """Destination record kind a rule applies to."""

    PRODUCT = "product"
    VARIANT = "variant"
    METADATA = "metadata"


class InvalidTargetPath(ValueError):
    """Raised for target paths nested deeper than one level."""


class TargetPath(NamedTuple):
    """A target field, optionally one level below a parent object."""

    parent: Optional[str]
    child: str

    @classmethod
    def parse(cls, target_field: str) -> "TargetPath":
        """Parse ``"title"`` or ``"variant.option1"``."""
        parts = target_field.split(".")
        if len(parts) == 1:
            return cls(None, target_field)
        if len(parts) == 2:
            return cls(parts[0], parts[1])
        raise InvalidTargetPath(
            f"Target path {target_field!r} is nested deeper than one level"
        )

    @property
    def is_nested(self) -> bool:
        return self.parent is not None


@dataclass(frozen=True)
class MappingRule:
    """Maps a template record field to a commerce platform field."""

    source_field: str
    target_field: str
    mapping_type: MappingType = MappingType.PRODUCT
    transform_template: Optional[str] = None
    is_active: bool = True
    description: Optional[str] = None
    sort_order: int = 0
    id: Optional[str] = None
    target_path: TargetPath = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Normalize mapping type and parse the target path."""
        object.__setattr__(self, "mapping_type", MappingType(self.mapping_type))
        object.__setattr__(self, "target_path", TargetPath.parse(self.target_field))

    def with_changes(self, **changes) -> "MappingRule":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a storage row."""
        return {
            "id": self.id,
            "source_field": self.source_field,
            "target_field": self.target_field,
            "transform_template": self.transform_template,
            "is_active": self.is_active,
            "description": self.description,
            "mapping_type": self.mapping_type.value,
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "MappingRule":
        """Build a rule from a storage row."""
        return cls(
            id=row.get("id"),
            source_field=row["source_field"],
            target_field=row["target_field"],
            transform_template=row.get("transform_template"),
            is_active=row.get("is_active", True),
            description=row.get("description"),
            mapping_type=row.get("mapping_type", MappingType.PRODUCT.value),
            sort_order=int(row.get("sort_order") or 0),
        )
