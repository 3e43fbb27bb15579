"""Mapping rule validation."""
from typing import Any, Dict, Iterable, List

from tradein_mapping.mapper.mapping import MappingType


class RuleValidator:
    """Validates mapping rule rows before they are persisted."""

    def validate_row(self, row: Dict[str, Any]) -> List[str]:
        """Validate a single storage row."""
        errors = []
        label = row.get("id") or row.get("target_field") or "<new mapping>"

        if not str(row.get("source_field") or "").strip():
            errors.append(f"Missing source field for {label}")

        target_field = str(row.get("target_field") or "").strip()
        if not target_field:
            errors.append(f"Missing target field for {label}")
        elif target_field.count(".") > 1:
            errors.append(f"Target field nested deeper than one level: {target_field}")

        mapping_type = row.get("mapping_type")
        if mapping_type not in [t.value for t in MappingType]:
            errors.append(f"Unknown mapping type for {label}: {mapping_type}")

        return errors

    def validate(self, rows: Iterable[Dict[str, Any]]) -> List[str]:
        """Validate rows."""
        errors = []

        for row in rows:
            errors.extend(self.validate_row(row))

        return errors
