"""
Default Mapping Seeder - Adds the baseline mapping rules that are missing

Baseline rules:
- variant card_type → option2
- variant cost (cash value or trade value depending on payment type)
- product product_type
- product tags
- "set" and "rarity" metafield slots (key, namespace, value_type, value)

Existing rules are never modified: the seeder only returns rules to add.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .mapping import MappingRule, MappingType

logger = logging.getLogger(__name__)

METAFIELD_PATTERN = re.compile(r"^metafields\[(\d+)\]\.(.+)$")

METAFIELD_NAMESPACE = "card"
METAFIELD_VALUE_TYPE = "string"

COST_TEMPLATE = "{if paymentType == cash ? cashValue : tradeValue}"
PRODUCT_TYPE_TEMPLATE = "{game_type|Trading Card}"
TAGS_TEMPLATE = "{game_type}, {set_name}, {rarity}, {condition}, {card_type}"


def metafield_index(target_field: str) -> Optional[int]:
    """Slot index of a ``metafields[N].prop`` target, None otherwise."""
    match = METAFIELD_PATTERN.match(target_field)
    return int(match.group(1)) if match else None


def has_metafield_slot(rules: Iterable[MappingRule], key: str) -> bool:
    """True when a metadata rule defines the ``key`` row of a metafield slot."""
    for rule in rules:
        if rule.mapping_type != MappingType.METADATA:
            continue
        match = METAFIELD_PATTERN.match(rule.target_field)
        if match and match.group(2) == "key" and rule.transform_template == key:
            return True
    return False


@dataclass(frozen=True)
class BaselineRule:
    """A baseline rule before its sort_order is known."""

    source_field: str
    target_field: str
    mapping_type: MappingType
    transform_template: Optional[str]
    description: str


@dataclass(frozen=True)
class DefaultMapping:
    """A baseline need: an existence check and the rules that satisfy it."""

    name: str
    exists: Callable[[Sequence[MappingRule]], bool]
    build: Callable[[int], Tuple[BaselineRule, ...]]
    is_metafield_slot: bool = False


def _single(baseline: BaselineRule) -> Callable[[int], Tuple[BaselineRule, ...]]:
    return lambda _slot: (baseline,)


def _metafield_slot(key: str, source_field: str, label: str) -> Callable[[int], Tuple[BaselineRule, ...]]:
    """Four metadata rules sharing the ``metafields[slot]`` parent."""

    def build(slot: int) -> Tuple[BaselineRule, ...]:
        prefix = f"metafields[{slot}]"
        return (
            BaselineRule(source_field, f"{prefix}.key", MappingType.METADATA,
                         key, f"{label} metafield key"),
            BaselineRule(source_field, f"{prefix}.namespace", MappingType.METADATA,
                         METAFIELD_NAMESPACE, f"{label} metafield namespace"),
            BaselineRule(source_field, f"{prefix}.value_type", MappingType.METADATA,
                         METAFIELD_VALUE_TYPE, f"{label} metafield value type"),
            BaselineRule(source_field, f"{prefix}.value", MappingType.METADATA,
                         f"{{{source_field}}}", f"{label} metafield value"),
        )

    return build


def _any_rule(mapping_type: MappingType, **expected) -> Callable[[Sequence[MappingRule]], bool]:
    """Existence check: a rule of ``mapping_type`` with the expected attributes."""

    def exists(rules: Sequence[MappingRule]) -> bool:
        return any(
            rule.mapping_type == mapping_type
            and all(getattr(rule, name) == value for name, value in expected.items())
            for rule in rules
        )

    return exists


DEFAULT_MAPPINGS: Tuple[DefaultMapping, ...] = (
    DefaultMapping(
        name="card_type",
        exists=_any_rule(MappingType.VARIANT, source_field="card_type"),
        build=_single(BaselineRule(
            "card_type", "option2", MappingType.VARIANT, None,
            "Card Type to Variant Option 2",
        )),
    ),
    DefaultMapping(
        name="cost",
        exists=_any_rule(MappingType.VARIANT, source_field="cost"),
        build=_single(BaselineRule(
            "cost", "cost", MappingType.VARIANT, COST_TEMPLATE,
            "Cash or trade value to Variant Cost",
        )),
    ),
    DefaultMapping(
        name="product_type",
        exists=_any_rule(MappingType.PRODUCT, target_field="product_type"),
        build=_single(BaselineRule(
            "game_type", "product_type", MappingType.PRODUCT, PRODUCT_TYPE_TEMPLATE,
            "Game to Product Type",
        )),
    ),
    DefaultMapping(
        name="tags",
        exists=_any_rule(MappingType.PRODUCT, target_field="tags"),
        build=_single(BaselineRule(
            "set_name", "tags", MappingType.PRODUCT, TAGS_TEMPLATE,
            "Card attributes to Product Tags",
        )),
    ),
    DefaultMapping(
        name="set_metafield",
        exists=lambda rules: has_metafield_slot(rules, "set"),
        build=_metafield_slot("set", "set_name", "Set"),
        is_metafield_slot=True,
    ),
    DefaultMapping(
        name="rarity_metafield",
        exists=lambda rules: has_metafield_slot(rules, "rarity"),
        build=_metafield_slot("rarity", "rarity", "Rarity"),
        is_metafield_slot=True,
    ),
)


class DefaultMappingSeeder:
    """Computes the baseline rules missing from a rule set."""

    def __init__(self, defaults: Sequence[DefaultMapping] = DEFAULT_MAPPINGS):
        """Initialize seeder."""
        self.defaults = tuple(defaults)

    def missing(self, existing_rules: Sequence[MappingRule]) -> List[DefaultMapping]:
        """Baseline needs with no matching rule."""
        return [default for default in self.defaults if not default.exists(existing_rules)]

    def seed(self, existing_rules: Iterable[MappingRule]) -> List[MappingRule]:
        """
        Build the rules to add to ``existing_rules``.

        New rules get sort_order values after every existing rule of their
        type, strictly increasing within one pass. Metafield slots take the
        next free ``metafields[N]`` index.

        Args:
            existing_rules: Current rule set (not modified)

        Returns:
            List[MappingRule]: Rules to persist, empty when nothing is missing
        """
        existing_rules = list(existing_rules)
        missing = self.missing(existing_rules)
        if not missing:
            return []

        type_counts: Dict[MappingType, int] = Counter(rule.mapping_type for rule in existing_rules)
        indexes = [metafield_index(rule.target_field) for rule in existing_rules]
        next_slot = max((i for i in indexes if i is not None), default=-1) + 1

        baselines: List[BaselineRule] = []
        for default in missing:
            baselines.extend(default.build(next_slot))
            if default.is_metafield_slot:
                next_slot += 1

        queued: Dict[MappingType, int] = Counter()
        new_rules = []
        for baseline in baselines:
            queued[baseline.mapping_type] += 1
            new_rules.append(MappingRule(
                source_field=baseline.source_field,
                target_field=baseline.target_field,
                mapping_type=baseline.mapping_type,
                transform_template=baseline.transform_template,
                is_active=True,
                description=baseline.description,
                sort_order=type_counts[baseline.mapping_type] + queued[baseline.mapping_type],
            ))

        logger.info(
            f"Seeding {len(new_rules)} default mappings "
            f"({', '.join(default.name for default in missing)})"
        )
        return new_rules


def seed_defaults(existing_rules: Iterable[MappingRule]) -> List[MappingRule]:
    """Return the baseline mapping rules missing from ``existing_rules``."""
    return DefaultMappingSeeder().seed(existing_rules)


def ensure_default_mappings(store) -> List[MappingRule]:
    """
    Persist the missing baseline rules into a mapping store.

    Args:
        store: MappingStore to read every rule from and insert into

    Returns:
        List[MappingRule]: The inserted rules, with their assigned ids
    """
    new_rules = seed_defaults(store.fetch_all_mappings())
    return [store.insert_mapping(rule) for rule in new_rules]
