"""String method registry for template method calls."""
import logging
import re
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# Quoted arguments may contain commas: replace(',', ' ')
ARGUMENT_PATTERN = re.compile(r"""('[^']*'|"[^"]*"|[^,]+)""")
CALL_PATTERN = re.compile(r"^([A-Za-z_]\w*)\((.*)\)$", re.DOTALL)
LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


class UnsupportedMethod(Exception):
    """Raised when a method call cannot be applied to a value."""


def to_display_string(value: Any) -> str:
    """Coerce a record value to the string used inside templates."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_int(text: str) -> Optional[int]:
    """Parse the leading integer of ``text``, None when there is none."""
    match = LEADING_INT_PATTERN.match(text)
    if not match:
        return None
    return int(match.group(1))


def strip_quotes(text: str) -> str:
    """Remove one leading and one trailing quote character."""
    text = text.strip()
    if text[:1] in ("'", '"'):
        text = text[1:]
    if text[-1:] in ("'", '"'):
        text = text[:-1]
    return text


def split_arguments(args_str: str) -> List[str]:
    """Split a raw argument list, keeping quoted commas together.

    Only an empty string means no arguments; blank text is one empty argument.
    """
    if not args_str:
        return []
    return [arg.strip() for arg in ARGUMENT_PATTERN.findall(args_str)]


class StringMethodRegistry:
    """Registry of string methods available inside template tokens."""

    def __init__(self):
        """Initialize registry."""
        self.methods: Dict[str, Callable[[str, List[str]], str]] = {
            "charAt": self._char_at,
            "substring": self._substring,
            "toUpperCase": self._to_upper_case,
            "toLowerCase": self._to_lower_case,
            "replace": self._replace,
        }

    def register(self, name: str, func: Callable[[str, List[str]], str]) -> None:
        """Register a custom method."""
        self.methods[name] = func

    def get(self, name: str) -> Optional[Callable[[str, List[str]], str]]:
        """Get method by name."""
        return self.methods.get(name)

    def call(self, value: str, method_expr: str) -> str:
        """
        Apply a method expression such as ``charAt(0)`` to ``value``.

        Raises:
            UnsupportedMethod: If the expression is not a known method call
        """
        match = CALL_PATTERN.match(method_expr)
        if not match:
            raise UnsupportedMethod(method_expr)

        name, args_str = match.group(1), match.group(2)
        method = self.get(name)
        if method is None:
            raise UnsupportedMethod(name)

        return method(value, split_arguments(args_str))

    @staticmethod
    def _char_at(value: str, args: List[str]) -> str:
        """Single character at index, empty when out of range."""
        index = parse_int(args[0]) if args else None
        if index is None:
            index = 0
        if 0 <= index < len(value):
            return value[index]
        return ""

    @staticmethod
    def _substring(value: str, args: List[str]) -> str:
        """Substring between two clamped bounds (swapped when reversed)."""
        length = len(value)

        def clamp(arg: Optional[str]) -> int:
            parsed = parse_int(arg) if arg is not None else None
            if parsed is None:
                return 0
            return min(max(parsed, 0), length)

        start = clamp(args[0]) if args else 0
        end = clamp(args[1]) if len(args) > 1 else length
        if start > end:
            start, end = end, start
        return value[start:end]

    @staticmethod
    def _to_upper_case(value: str, args: List[str]) -> str:
        if args:
            raise UnsupportedMethod("toUpperCase takes no arguments")
        return value.upper()

    @staticmethod
    def _to_lower_case(value: str, args: List[str]) -> str:
        if args:
            raise UnsupportedMethod("toLowerCase takes no arguments")
        return value.lower()

    @staticmethod
    def _replace(value: str, args: List[str]) -> str:
        """Replace every match of a pattern with a literal replacement."""
        if len(args) != 2:
            raise UnsupportedMethod("replace takes exactly two arguments")

        search = strip_quotes(args[0])
        replacement = strip_quotes(args[1])

        # TODO: confirm whether search should be escaped as a literal string
        try:
            pattern = re.compile(search)
        except re.error as e:
            logger.warning(f"Invalid replace pattern {search!r}: {e}")
            return value

        return pattern.sub(lambda _match: replacement, value)


default_registry = StringMethodRegistry()
