"""
Field Builder - Applies mapping rules to a template record

Supports:
- Direct field mapping (source field → target field)
- Template-based values (transform_template)
- One level of nesting in target paths ("variant.option1")
- Ordering by sort_order with last-write-wins on shared targets
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..mapper.mapping import MappingRule, MappingType, TargetPath
from .template_engine import TemplateEngine

logger = logging.getLogger(__name__)


def write_path(output: Dict[str, Any], target: Union[str, TargetPath], value: Any) -> None:
    """
    Write ``value`` into ``output`` at a possibly nested target path

    Example:
        write_path(out, "variant.option1", "Holo")
        # out == {"variant": {"option1": "Holo"}}
    """
    path = target if isinstance(target, TargetPath) else TargetPath.parse(target)

    if not path.is_nested:
        output[path.child] = value
        return

    parent = output.get(path.parent)
    if not isinstance(parent, dict):
        if parent is not None:
            logger.debug(f"Replacing non-object value at {path.parent!r} with a nested object")
        parent = {}
        output[path.parent] = parent

    parent[path.child] = value


class FieldBuilder:
    """Builds commerce platform records from mapping rules"""

    def __init__(self, template_engine: Optional[TemplateEngine] = None):
        """
        Initialize FieldBuilder

        Args:
            template_engine: Engine used for rules with a transform template
        """
        self.template_engine = template_engine or TemplateEngine()

    @staticmethod
    def select_rules(
        rules: Iterable[MappingRule],
        mapping_type: Union[MappingType, str],
    ) -> List[MappingRule]:
        """Active rules of one mapping type, ordered by sort_order (stable)"""
        mapping_type = MappingType(mapping_type)
        selected = [
            rule for rule in rules
            if rule.mapping_type == mapping_type and rule.is_active is True
        ]
        return sorted(selected, key=lambda rule: rule.sort_order)

    def build_value(self, rule: MappingRule, data: Dict[str, Any]) -> Any:
        """Compute the value of a single rule"""
        if rule.transform_template:
            return self.template_engine.render(rule.transform_template, data)

        # Direct mapping, no coercion
        return data.get(rule.source_field)

    def transform(
        self,
        data: Dict[str, Any],
        mapping_type: Union[MappingType, str],
        rules: Iterable[MappingRule],
    ) -> Dict[str, Any]:
        """
        Build an output record for one mapping type

        Args:
            data: Flat template record (not modified)
            mapping_type: product, variant or metadata
            rules: Mapping rules of any type

        Returns:
            Fresh output record
        """
        result: Dict[str, Any] = {}

        for rule in self.select_rules(rules, mapping_type):
            value = self.build_value(rule, data)
            write_path(result, rule.target_path, value)

        return result


_default_builder = FieldBuilder()


def transform_data(
    data: Dict[str, Any],
    mapping_type: Union[MappingType, str],
    rules: Iterable[MappingRule],
) -> Dict[str, Any]:
    """Apply the active ``mapping_type`` rules to ``data``."""
    return _default_builder.transform(data, mapping_type, rules)
