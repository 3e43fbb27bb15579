"""Mapping store interface."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from tradein_mapping.mapper.mapping import MappingRule, MappingType


class MappingNotFound(KeyError):
    """Raised when a mapping id does not exist in the store."""


class MappingStore(ABC):
    """Durable list of mapping rules."""

    @abstractmethod
    def fetch_all_mappings(self) -> List[MappingRule]:
        """Every rule, active or not, in storage order."""

    @abstractmethod
    def insert_mapping(self, rule: MappingRule) -> MappingRule:
        """Persist a new rule and return it with its assigned id."""

    @abstractmethod
    def update_mapping(self, mapping_id: str, patch: Dict[str, Any]) -> None:
        """Apply a partial update to an existing rule."""

    @abstractmethod
    def delete_mapping(self, mapping_id: str) -> None:
        """Remove a rule."""

    def fetch_active_mappings(
        self,
        mapping_type: Optional[Union[MappingType, str]] = None,
    ) -> List[MappingRule]:
        """Active rules ordered by mapping type, then sort_order."""
        rules = [rule for rule in self.fetch_all_mappings() if rule.is_active]
        if mapping_type is not None:
            mapping_type = MappingType(mapping_type)
            rules = [rule for rule in rules if rule.mapping_type == mapping_type]
        return sorted(rules, key=lambda rule: (rule.mapping_type.value, rule.sort_order))
