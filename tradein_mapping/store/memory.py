"""In-memory mapping store."""
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from tradein_mapping.mapper.mapping import MappingRule
from tradein_mapping.store.base import MappingNotFound, MappingStore

logger = logging.getLogger(__name__)


class InMemoryMappingStore(MappingStore):
    """Keeps mapping rules in insertion order."""

    def __init__(self, rules: Optional[Iterable[MappingRule]] = None):
        """Initialize store, assigning ids to rules that have none."""
        self._rules: Dict[str, MappingRule] = {}
        for rule in rules or []:
            self._add(rule)

    def _add(self, rule: MappingRule) -> MappingRule:
        if rule.id is None:
            rule = rule.with_changes(id=str(uuid.uuid4()))
        self._rules[rule.id] = rule
        return rule

    def _get(self, mapping_id: str) -> MappingRule:
        try:
            return self._rules[mapping_id]
        except KeyError:
            raise MappingNotFound(mapping_id) from None

    def _changed(self) -> None:
        """Hook called after every mutation."""

    def fetch_all_mappings(self) -> List[MappingRule]:
        return list(self._rules.values())

    def insert_mapping(self, rule: MappingRule) -> MappingRule:
        saved = self._add(rule)
        self._changed()
        logger.debug(f"Inserted mapping {saved.id}: {saved.source_field} → {saved.target_field}")
        return saved

    def update_mapping(self, mapping_id: str, patch: Dict[str, Any]) -> None:
        current = self._get(mapping_id)
        row = current.to_dict()
        row.update(patch)
        row["id"] = mapping_id
        self._rules[mapping_id] = MappingRule.from_dict(row)
        self._changed()

    def delete_mapping(self, mapping_id: str) -> None:
        self._get(mapping_id)
        del self._rules[mapping_id]
        self._changed()
