"""
Template Engine - Expands mapping templates against a flat template record

Supports:
- Variable substitution ({field})
- Default fallbacks ({field|default})
- String method calls ({field.charAt(0)}, {field.replace('-', ' ')}, ...)
- Conditional expressions ({if field == value ? then_field : else_field})
"""

import logging
import re
from typing import Any, Dict, Optional

from ..transformer.registry import (
    StringMethodRegistry,
    UnsupportedMethod,
    default_registry,
    strip_quotes,
    to_display_string,
)

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Template engine for commerce platform field values"""

    # Pattern for tokens: {expression}
    TOKEN_PATTERN = re.compile(r"\{([^}]+)\}")

    # Pattern for conditional: {if condition ? true_value : false_value}
    CONDITIONAL_PATTERN = re.compile(r"^if\s+([^?]+?)\s*\?\s*([^:]*?)\s*:\s*(.*)$", re.DOTALL)

    # Pattern for comparisons inside a condition: field == value
    COMPARISON_PATTERN = re.compile(r"^(\w+)\s*(==|!=)\s*(.+)$")

    # Default in a method token: everything after the first pipe
    METHOD_DEFAULT_PATTERN = re.compile(r"\|(.+)$", re.DOTALL)

    # Unquoted branch naming a field
    IDENTIFIER_PATTERN = re.compile(r"^\w+$")

    def __init__(self, registry: Optional[StringMethodRegistry] = None):
        """
        Initialize TemplateEngine

        Args:
            registry: String methods available to method tokens
        """
        self.registry = registry or default_registry

    def render(self, template: Optional[str], data: Dict[str, Any]) -> str:
        """
        Expand every token of a template

        Args:
            template: Template string (e.g., "{card_name} - {condition}")
            data: Flat template record

        Returns:
            Expanded string, empty when the template is empty
        """
        if not template:
            return ""

        return self.TOKEN_PATTERN.sub(
            lambda match: self.resolve_token(match.group(1), data),
            template,
        )

    def resolve_token(self, expr: str, data: Dict[str, Any]) -> str:
        """Resolve the inside of a single {...} token"""
        conditional = self.CONDITIONAL_PATTERN.match(expr.strip())
        if conditional:
            return self._evaluate_conditional(conditional, data)

        if "." in expr:
            return self._evaluate_method(expr, data)

        return self._evaluate_variable(expr, data)

    def _evaluate_variable(self, expr: str, data: Dict[str, Any]) -> str:
        """Substitute a {field} or {field|default} token"""
        parts = expr.split("|")
        field_name = parts[0].strip()
        default_value = parts[1].strip() if len(parts) > 1 else ""

        value = data.get(field_name)
        if value is None:
            return default_value

        return to_display_string(value)

    def _evaluate_method(self, expr: str, data: Dict[str, Any]) -> str:
        """Apply a {field.method(args)} token"""
        field_name, method_expr = expr.split(".", 1)
        field_name = field_name.strip()
        method_expr = method_expr.strip()

        value = data.get(field_name)
        if value is None:
            default_match = self.METHOD_DEFAULT_PATTERN.search(expr)
            return default_match.group(1).strip() if default_match else ""

        value = to_display_string(value)

        try:
            return self.registry.call(value, method_expr)
        except UnsupportedMethod as e:
            logger.debug(f"Method not applied to {field_name}: {e}")
            return value

    def _evaluate_conditional(self, match: "re.Match", data: Dict[str, Any]) -> str:
        """Evaluate an {if condition ? a : b} token"""
        condition = match.group(1).strip()
        true_value = match.group(2).strip()
        false_value = match.group(3).strip()

        branch = true_value if self._evaluate_condition(condition, data) else false_value
        return self._resolve_operand(branch, data)

    def _evaluate_condition(self, condition: str, data: Dict[str, Any]) -> bool:
        """Evaluate a condition (field, field == value, field != value)"""
        comparison = self.COMPARISON_PATTERN.match(condition)
        if comparison:
            field_name, operator, expected = comparison.groups()
            actual = to_display_string(data.get(field_name))
            equal = actual == strip_quotes(expected)
            return equal if operator == "==" else not equal

        value = data.get(condition)
        if isinstance(value, str):
            return value not in ("", "false", "0")
        return bool(value)

    @classmethod
    def _resolve_operand(cls, operand: str, data: Dict[str, Any]) -> str:
        """A bare identifier names a field, anything else is literal text"""
        if cls.IDENTIFIER_PATTERN.match(operand):
            return to_display_string(data.get(operand))
        return strip_quotes(operand)


_default_engine = TemplateEngine()


def apply_template(template: Optional[str], data: Dict[str, Any]) -> str:
    """Expand ``template`` against ``data`` with the default method registry."""
    return _default_engine.render(template, data)
