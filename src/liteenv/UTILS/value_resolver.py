"""
Utilities for expanding variable references in raw values and coercing
the result into typed values.
"""
import math
import re
import sys
from decimal import Decimal
from typing import Callable, Optional

from ..MODELS.typed_value import TypedValue, ValueKind

Lookup = Callable[[str], Optional[TypedValue]]

ESCAPED_DOLLAR_PLACEHOLDER = "\x00LITEENV_ESCAPED_DOLLAR\x00"

VARIABLE_PATTERN = re.compile(
    r'\$\{(?P<braced>[A-Z_][A-Z0-9_]*)\}|(?<!\\)\$(?P<bare>[A-Z_][A-Z0-9_]*)'
)

NUMERIC_PATTERN = re.compile(
    r'^\s*[+-]?(?:(?P<whole>\d+)(?:\.\d*)?|\.\d+)(?:[eE](?P<exponent>[+-]?\d+))?\s*$'
)

# integers beyond float range stay strings
MAX_INTEGER_DIGITS = sys.float_info.max_10_exp + 1

_LITERALS = {
    'true': TypedValue.boolean(True),
    '(true)': TypedValue.boolean(True),
    'false': TypedValue.boolean(False),
    '(false)': TypedValue.boolean(False),
    'null': TypedValue.null(),
    '(null)': TypedValue.null(),
    'empty': TypedValue.empty(),
    '(empty)': TypedValue.empty(),
    '""': TypedValue.empty(),
    "''": TypedValue.empty(),
    '': TypedValue.empty(),
}

class ValueResolver:
    """
    Turns a raw value from a .env file into its final typed form.
    Supports $VAR and ${VAR} references, and \\$ for a literal dollar sign.
    """
    @staticmethod
    def expand(raw: str, lookup: Lookup) -> str:
        """
        Replaces variable references in ``raw`` using ``lookup``.

        :param raw: The raw value as read from the file.
        :param lookup: Returns the typed value stored under a name, or None.
        :return: The expanded string.
        :raises KeyFormatError: Propagated from ``lookup``.
        """
        text = raw.replace('\\$', ESCAPED_DOLLAR_PLACEHOLDER)

        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            name = match.group('braced') or match.group('bare')
            value = lookup(name)
            # unset and null both collapse to an empty string
            if value is None or value.kind == ValueKind.NULL:
                return ''
            return value.to_string()

        text = VARIABLE_PATTERN.sub(replace, text)
        return text.replace(ESCAPED_DOLLAR_PLACEHOLDER, '$')

    @staticmethod
    def is_numeric(text: str) -> bool:
        return NUMERIC_PATTERN.match(text) is not None

    @staticmethod
    def coerce(text: str) -> TypedValue:
        """
        Converts an expanded string to a typed value.

        - "true"/"(true)", "false"/"(false)" -> boolean
        - "null"/"(null)" -> null
        - "empty"/"(empty)", '""', "''" -> empty string
        - numeric strings -> float if they contain a '.', integer otherwise;
          numbers outside float range stay strings
        - anything else -> string, unchanged

        Keyword matching is case-insensitive.
        """
        literal = _LITERALS.get(text.lower())
        if literal is not None:
            return literal.model_copy()

        match = NUMERIC_PATTERN.match(text)
        if match:
            number = text.strip()
            if '.' in number:
                value = float(number)
                if math.isfinite(value):
                    return TypedValue.float_(value)
                return TypedValue.string(text)

            # exponent forms such as 1e3 are integral without a '.'
            digits = match.group('whole').lstrip('0')
            if not digits:
                return TypedValue.integer(0)
            exponent_text = match.group('exponent') or '0'
            if len(exponent_text.lstrip('+-').lstrip('0')) > 6:
                # far outside float range either way
                exponent_text = '-9999999' if exponent_text.startswith('-') else '9999999'
            exponent = int(exponent_text)
            magnitude = len(digits) + exponent
            if magnitude <= 0:
                return TypedValue.integer(0)
            if magnitude > MAX_INTEGER_DIGITS:
                return TypedValue.string(text)
            return TypedValue.integer(int(Decimal(number)))

        return TypedValue.string(text)

    @staticmethod
    def resolve(raw: str, lookup: Lookup) -> TypedValue:
        """
        Expands then coerces a raw value.

        :param raw: The raw value as read from the file.
        :param lookup: Capability used to resolve variable references.
        :return: The typed value.
        """
        return ValueResolver.coerce(ValueResolver.expand(raw, lookup))
