"""
Models for coerced values.
"""
from typing import Union
from enum import Enum
from pydantic import BaseModel

class ValueKind(str, Enum):
    """
    The variant a coerced value belongs to.
    """
    BOOLEAN = "boolean"
    NULL = "null"
    EMPTY = "empty"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"

class TypedValue(BaseModel):
    """
    A value after interpolation and type coercion.

    ``kind`` is the tag; ``value`` holds the matching Python object
    (bool, None, "", int, float or str).
    """
    kind: ValueKind
    value: Union[bool, int, float, str, None] = None

    @classmethod
    def boolean(cls, value: bool) -> "TypedValue":
        return cls(kind=ValueKind.BOOLEAN, value=bool(value))

    @classmethod
    def null(cls) -> "TypedValue":
        return cls(kind=ValueKind.NULL, value=None)

    @classmethod
    def empty(cls) -> "TypedValue":
        return cls(kind=ValueKind.EMPTY, value="")

    @classmethod
    def integer(cls, value: int) -> "TypedValue":
        return cls(kind=ValueKind.INTEGER, value=int(value))

    @classmethod
    def float_(cls, value: float) -> "TypedValue":
        return cls(kind=ValueKind.FLOAT, value=float(value))

    @classmethod
    def string(cls, value: str) -> "TypedValue":
        return cls(kind=ValueKind.STRING, value=str(value))

    def to_string(self) -> str:
        """
        String form used for interpolation and for publishing to the environment.

        Coercing the result yields an equal TypedValue.

        :return: The string form of the value.
        """
        if self.kind == ValueKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind == ValueKind.NULL:
            return "null"
        if self.kind == ValueKind.EMPTY:
            return ""
        if self.kind == ValueKind.FLOAT:
            text = repr(self.value)
            # keep a '.' so the value coerces back to a float
            if "e" in text and "." not in text:
                mantissa, exponent = text.split("e", 1)
                text = f"{mantissa}.0e{exponent}"
            return text
        return str(self.value)

    def __str__(self) -> str:
        return self.to_string()
