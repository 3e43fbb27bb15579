"""
Unit tests for the Template Engine

Tests:
- Simple tokens and default fallbacks
- Method tokens and the string method registry
- Conditional tokens
- Graceful degradation (missing fields, unknown methods, bad patterns)
"""

import pytest

from tradein_mapping.builder.template_engine import TemplateEngine, apply_template
from tradein_mapping.transformer.registry import (
    StringMethodRegistry,
    UnsupportedMethod,
    parse_int,
    split_arguments,
    strip_quotes,
    to_display_string,
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def card_record():
    """Sample template record for a trade-in item"""
    return {
        "card_name": "Charizard",
        "set_name": "skyridge",
        "card_number": "4/102",
        "condition": "Near Mint",
        "rarity": "Rare Holo",
        "price": 250.0,
        "cashValue": 125.5,
        "tradeValue": 150,
        "paymentType": "cash",
        "quantity": 1,
        "is_holo": True,
        "card_type": "Holo",
    }


# ============================================================================
# TEST: Simple tokens
# ============================================================================


class TestSimpleTokens:
    """Tests for {field} and {field|default}"""

    def test_multiple_tokens_with_literal_text(self):
        """Test scenario: card name and condition joined by literal text"""
        result = apply_template(
            "{card_name} - {condition}",
            {"card_name": "Charizard", "condition": "Near Mint"},
        )

        assert result == "Charizard - Near Mint"

    def test_missing_field_uses_default(self):
        """Test default fallback for a missing field"""
        assert apply_template("{missing_field|N/A}", {}) == "N/A"

    def test_default_is_trimmed(self):
        """Test default value whitespace is trimmed"""
        assert apply_template("{missing | Unknown }", {}) == "Unknown"

    def test_missing_field_without_default(self):
        """Test missing field yields empty string"""
        assert apply_template("[{missing}]", {}) == "[]"

    def test_none_value_uses_default(self):
        """Test None counts as missing"""
        assert apply_template("{rarity|Common}", {"rarity": None}) == "Common"

    def test_present_value_ignores_default(self, card_record):
        """Test default is not used when the field is present"""
        assert apply_template("{card_name|Unknown}", card_record) == "Charizard"

    def test_empty_string_value_is_kept(self):
        """Test empty string is a present value"""
        assert apply_template("{set_name|Unknown}", {"set_name": ""}) == ""

    def test_field_name_is_trimmed(self, card_record):
        """Test whitespace around the field name"""
        assert apply_template("{ card_name }", card_record) == "Charizard"

    def test_only_first_default_is_used(self):
        """Test extra pipe sections are ignored"""
        assert apply_template("{missing|a|b}", {}) == "a"

    def test_empty_template(self, card_record):
        """Test empty or None template"""
        assert apply_template("", card_record) == ""
        assert apply_template(None, card_record) == ""

    def test_template_without_tokens(self, card_record):
        """Test literal text is copied verbatim"""
        assert apply_template("Trading Card", card_record) == "Trading Card"

    def test_empty_braces_are_literal(self):
        """Test {} is not a token"""
        assert apply_template("a{}b", {}) == "a{}b"

    def test_value_coercion(self, card_record):
        """Test numbers and booleans are coerced to strings"""
        assert apply_template("{quantity}", card_record) == "1"
        assert apply_template("{price}", card_record) == "250"
        assert apply_template("{cashValue}", card_record) == "125.5"
        assert apply_template("{is_holo}", card_record) == "true"
        assert apply_template("{is_holo}", {"is_holo": False}) == "false"

    def test_idempotent(self, card_record):
        """Test repeated expansion yields the same string"""
        template = "{card_name} #{card_number} ({condition.charAt(0)})"

        first = apply_template(template, card_record)
        second = apply_template(template, card_record)

        assert first == second == "Charizard #4/102 (N)"


# ============================================================================
# TEST: Method tokens
# ============================================================================


class TestMethodTokens:
    """Tests for {field.method(args)}"""

    def test_char_at(self):
        """Test scenario: first character of the condition"""
        assert apply_template("{condition.charAt(0)}", {"condition": "Near Mint"}) == "N"

    def test_char_at_out_of_range(self, card_record):
        """Test out-of-range index yields empty string"""
        assert apply_template("{condition.charAt(42)}", card_record) == ""
        assert apply_template("{condition.charAt(-1)}", card_record) == ""

    def test_char_at_non_numeric_index(self, card_record):
        """Test unparsable index behaves as index 0"""
        assert apply_template("{condition.charAt(x)}", card_record) == "N"

    def test_to_upper_case(self):
        """Test scenario: upper-case set name"""
        assert apply_template("{set_name.toUpperCase()}", {"set_name": "skyridge"}) == "SKYRIDGE"

    def test_to_lower_case(self, card_record):
        """Test lower-case conversion"""
        assert apply_template("{condition.toLowerCase()}", card_record) == "near mint"

    def test_case_methods_with_blank_arguments(self, card_record):
        """Test blank text between the parentheses leaves the value unchanged"""
        assert apply_template("{set_name.toUpperCase( )}", {"set_name": "skyridge"}) == "skyridge"
        assert apply_template("{condition.toLowerCase( )}", card_record) == "Near Mint"

    def test_index_methods_with_blank_arguments(self, card_record):
        """Test a blank index behaves as a missing one"""
        assert apply_template("{card_name.charAt( )}", card_record) == "C"
        assert apply_template("{card_name.substring( )}", card_record) == "Charizard"

    def test_substring(self, card_record):
        """Test substring with one and two bounds"""
        assert apply_template("{card_name.substring(0,4)}", card_record) == "Char"
        assert apply_template("{card_name.substring(5)}", card_record) == "zard"

    def test_substring_swapped_and_clamped(self, card_record):
        """Test reversed and out-of-range bounds"""
        assert apply_template("{card_name.substring(4,0)}", card_record) == "Char"
        assert apply_template("{card_name.substring(-3,100)}", card_record) == "Charizard"

    def test_replace_with_quotes(self, card_record):
        """Test replace with quoted arguments"""
        assert apply_template("{condition.replace(' ', '-')}", card_record) == "Near-Mint"
        assert apply_template('{condition.replace("Near", "Lightly")}', card_record) == "Lightly Mint"

    def test_replace_all_occurrences(self):
        """Test every occurrence is replaced"""
        assert apply_template("{name.replace('a', 'o')}", {"name": "banana"}) == "bonono"

    def test_replace_search_is_a_pattern(self):
        """Test search argument is interpreted as a regular expression"""
        assert apply_template("{number.replace('.', '#')}", {"number": "4/1"}) == "###"

    def test_replace_invalid_pattern_keeps_value(self):
        """Test an invalid pattern leaves the value unchanged"""
        assert apply_template("{name.replace('(', 'x')}", {"name": "a(b"}) == "a(b"

    def test_replace_wrong_argument_count(self, card_record):
        """Test replace with one argument is not applied"""
        assert apply_template("{condition.replace('Near')}", card_record) == "Near Mint"

    def test_unknown_method_returns_value(self, card_record):
        """Test unrecognized methods pass the value through"""
        assert apply_template("{card_name.reverse()}", card_record) == "Charizard"
        assert apply_template("{card_name.length}", card_record) == "Charizard"

    def test_method_on_number(self, card_record):
        """Test method applied to a coerced numeric value"""
        assert apply_template("{cashValue.charAt(0)}", card_record) == "1"

    def test_missing_field_with_default(self):
        """Test default is returned and the method is not applied"""
        assert apply_template("{rarity.toUpperCase()|common}", {}) == "common"

    def test_missing_field_without_default(self):
        """Test missing field in a method token yields empty string"""
        assert apply_template("{rarity.toUpperCase()}", {}) == ""

    def test_custom_registry_method(self):
        """Test extending the registry without touching the parser"""
        registry = StringMethodRegistry()
        registry.register("trim", lambda value, args: value.strip())
        engine = TemplateEngine(registry)

        assert engine.render("[{name.trim()}]", {"name": "  Pikachu "}) == "[Pikachu]"


# ============================================================================
# TEST: Conditional tokens
# ============================================================================


class TestConditionalTokens:
    """Tests for {if condition ? a : b}"""

    COST = "{if paymentType == cash ? cashValue : tradeValue}"

    def test_cash_payment_uses_cash_value(self, card_record):
        """Test true branch resolves a field"""
        assert apply_template(self.COST, card_record) == "125.5"

    def test_trade_payment_uses_trade_value(self, card_record):
        """Test false branch resolves a field"""
        card_record["paymentType"] = "trade"

        assert apply_template(self.COST, card_record) == "150"

    def test_not_equal_operator(self, card_record):
        """Test != comparison"""
        template = "{if paymentType != cash ? 'Store Credit' : 'Cash'}"

        assert apply_template(template, card_record) == "Cash"

    def test_truthy_condition_with_literals(self, card_record):
        """Test bare field condition with quoted literal branches"""
        assert apply_template("{if is_holo ? 'Holo' : 'Standard'}", card_record) == "Holo"
        assert apply_template("{if is_reverse_holo ? 'Reverse' : 'Standard'}", card_record) == "Standard"

    def test_quoted_comparison_value(self, card_record):
        """Test quoted literal in the comparison"""
        template = "{if condition == 'Near Mint' ? 'NM' : 'Other'}"

        assert apply_template(template, card_record) == "NM"

    def test_missing_branch_field_is_empty(self):
        """Test a missing field in the chosen branch yields empty string"""
        assert apply_template(self.COST, {"paymentType": "cash"}) == ""
        assert apply_template(self.COST, {"paymentType": "trade", "tradeValue": None}) == ""

    def test_unquoted_text_branch_is_literal(self, card_record):
        """Test a branch that is not a bare identifier is literal text"""
        template = "{if is_holo ? Holo Foil : Standard}"

        assert apply_template(template, card_record) == "Holo Foil"


# ============================================================================
# TEST: Registry helpers
# ============================================================================


class TestRegistryHelpers:
    """Tests for coercion and argument parsing helpers"""

    def test_to_display_string(self):
        """Test string coercion rules"""
        assert to_display_string(None) == ""
        assert to_display_string(True) == "true"
        assert to_display_string(10.0) == "10"
        assert to_display_string(2.5) == "2.5"
        assert to_display_string("x") == "x"

    def test_parse_int(self):
        """Test leading integer parsing"""
        assert parse_int("3") == 3
        assert parse_int(" -2") == -2
        assert parse_int("1.9") == 1
        assert parse_int("abc") is None
        assert parse_int("") is None

    def test_split_arguments_keeps_quoted_commas(self):
        """Test quoted commas stay in one argument"""
        assert split_arguments("',', ' '") == ["','", "' '"]
        assert split_arguments("") == []
        assert split_arguments(" ") == [""]

    def test_strip_quotes(self):
        """Test one quote removed from each side"""
        assert strip_quotes("'a'") == "a"
        assert strip_quotes('"b"') == "b"
        assert strip_quotes("c") == "c"

    def test_call_rejects_non_call_expression(self):
        """Test expressions without parentheses are unsupported"""
        registry = StringMethodRegistry()

        with pytest.raises(UnsupportedMethod):
            registry.call("value", "length")

    def test_case_methods_reject_arguments(self):
        """Test toUpperCase with arguments is unsupported"""
        registry = StringMethodRegistry()

        with pytest.raises(UnsupportedMethod):
            registry.call("value", "toUpperCase(1)")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
