"""JSON file mapping store."""
import json
import logging
from pathlib import Path
from typing import Union

from tradein_mapping.mapper.mapping import MappingRule
from tradein_mapping.store.memory import InMemoryMappingStore

logger = logging.getLogger(__name__)


class JsonMappingStore(InMemoryMappingStore):
    """Mapping rules persisted as a JSON list of rows."""

    def __init__(self, path: Union[str, Path]):
        """Load rules from ``path`` when it exists."""
        self.path = Path(path)
        rules = []

        if self.path.exists():
            with open(self.path, "r") as f:
                rows = json.load(f)
            rules = [MappingRule.from_dict(row) for row in rows]
            logger.debug(f"Loaded {len(rules)} mappings from {self.path}")

        super().__init__(rules)

    def _changed(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.path, "w") as f:
            json.dump([rule.to_dict() for rule in self.fetch_all_mappings()], f, indent=2)
