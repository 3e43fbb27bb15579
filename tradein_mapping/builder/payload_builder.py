"""
Payload Builder - Orchestrates commerce platform product payload generation

Integrates:
- FieldBuilder: product, variant and metadata rule application
- Metafield grouping: metafields[N].prop outputs → metafields[] list
- Fallback values for fields the platform requires
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..mapper.mapping import MappingRule, MappingType
from .field_builder import FieldBuilder
from .template_engine import TemplateEngine

logger = logging.getLogger(__name__)

METAFIELD_PARENT_PATTERN = re.compile(r"^metafields\[(\d+)\]$")


@dataclass
class PayloadDefaults:
    """Fallback values for unmapped required fields"""
    vendor: str = "Card Shop"
    product_type: str = "Trading Card"
    inventory_management: str = "shopify"
    weight: float = 1
    weight_unit: str = "oz"
    metafield_value_type: str = "string"


def build_sku(trade_in_id: Any, item_id: Any) -> str:
    """TRADE-<trade-in id prefix>-<item id prefix>"""
    return f"TRADE-{str(trade_in_id or '')[:8]}-{str(item_id or '')[:8]}"


def build_metafields(
    metadata: Dict[str, Any],
    default_value_type: str = "string",
) -> List[Dict[str, Any]]:
    """
    Group metadata output into platform metafields

    Transforms:
        {"metafields[0]": {"key": "set", "namespace": "card", "value": "Base Set"}}
    Into:
        [{"key": "set", "namespace": "card", "value": "Base Set", "value_type": "string"}]

    Slots missing a key, namespace or value are dropped.
    """
    slots = []
    for parent, group in metadata.items():
        match = METAFIELD_PARENT_PATTERN.match(parent)
        if not match or not isinstance(group, dict):
            continue
        slots.append((int(match.group(1)), group))

    metafields = []
    for index, group in sorted(slots, key=lambda slot: slot[0]):
        if not (group.get("key") and group.get("namespace") and group.get("value")):
            logger.debug(f"Skipping incomplete metafield slot {index}: {group}")
            continue
        metafields.append({
            "key": group["key"],
            "namespace": group["namespace"],
            "value": group["value"],
            "value_type": group.get("value_type") or default_value_type,
        })

    return metafields


class PayloadBuilder:
    """
    Builds complete product payloads from a template record

    Usage:
    ```python
    builder = PayloadBuilder()
    data = build_template_data(item, card, trade_in)
    payload = builder.build(data, rules, item_id=item["id"])
    # Returns: {"title": ..., "variants": [{...}], "metafields": [...]}
    ```
    """

    def __init__(
        self,
        defaults: Optional[PayloadDefaults] = None,
        template_engine: Optional[TemplateEngine] = None,
    ):
        """
        Initialize PayloadBuilder

        Args:
            defaults: Fallback values for required fields
            template_engine: Engine used by the field builder
        """
        self.defaults = defaults or PayloadDefaults()
        self.field_builder = FieldBuilder(template_engine)

    def build_product(self, data: Dict[str, Any], rules: List[MappingRule]) -> Dict[str, Any]:
        """Product fields with required fallbacks"""
        product = self.field_builder.transform(data, MappingType.PRODUCT, rules)

        if not product.get("title"):
            product["title"] = f"{data.get('card_name', '')} - {data.get('condition', '')}"
        if not product.get("body_html"):
            product["body_html"] = (
                f"<p>Trading card: {data.get('card_name', '')}</p>"
                f"<p>Condition: {data.get('condition', '')}</p>"
            )
        if not product.get("vendor"):
            product["vendor"] = self.defaults.vendor
        if not product.get("product_type"):
            product["product_type"] = self.defaults.product_type

        return product

    def build_variant(
        self,
        data: Dict[str, Any],
        rules: List[MappingRule],
        item_id: Any = None,
    ) -> Dict[str, Any]:
        """Variant fields with required fallbacks"""
        variant = self.field_builder.transform(data, MappingType.VARIANT, rules)

        if not variant.get("price") and data.get("price") is not None:
            variant["price"] = str(data["price"])
        if not variant.get("sku"):
            if item_id is None:
                item_id = data.get("item_id")
            variant["sku"] = build_sku(data.get("trade_in_id"), item_id)
        if not variant.get("inventory_quantity"):
            variant["inventory_quantity"] = data.get("quantity")
        if not variant.get("option1"):
            variant["option1"] = data.get("condition")

        variant["inventory_management"] = self.defaults.inventory_management
        variant["weight"] = self.defaults.weight
        variant["weight_unit"] = self.defaults.weight_unit

        return variant

    def build(
        self,
        data: Dict[str, Any],
        rules: Iterable[MappingRule],
        item_id: Any = None,
    ) -> Dict[str, Any]:
        """
        Build a complete product payload

        Args:
            data: Template record (see build_template_data)
            rules: Mapping rules of every type
            item_id: Trade-in item id for the fallback SKU (defaults to data["item_id"])

        Returns:
            Product payload ready for the platform client
        """
        rules = list(rules)
        product = self.build_product(data, rules)

        if data.get("image_url"):
            product["images"] = [{"src": data["image_url"]}]

        metadata = self.field_builder.transform(data, MappingType.METADATA, rules)
        metafields = build_metafields(metadata, self.defaults.metafield_value_type)
        if metafields:
            product["metafields"] = metafields

        product["variants"] = [self.build_variant(data, rules, item_id)]

        logger.info(
            f"Built payload '{product['title']}' "
            f"({len(metafields)} metafields, {len(rules)} rules)"
        )
        return product

    def build_batch(
        self,
        records: List[Dict[str, Any]],
        rules: Iterable[MappingRule],
    ) -> List[Dict[str, Any]]:
        """
        Build payloads for multiple template records

        Records may carry an ``item_id`` key used for the fallback SKU.
        """
        rules = list(rules)
        payloads = [self.build(record, rules, record.get("item_id")) for record in records]
        logger.info(f"Built {len(payloads)} payloads from {len(records)} records")
        return payloads
