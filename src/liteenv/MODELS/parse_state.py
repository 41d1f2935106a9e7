"""
Models for the line parser state and the pairs it produces.
"""
from typing import Optional
from enum import Enum
from pydantic import BaseModel

class QuoteChar(str, Enum):
    """
    Quote character that opened a value still awaiting its closing quote.
    """
    NONE = ""
    SINGLE = "'"
    DOUBLE = '"'

class ParseState(BaseModel):
    """
    State carried from one physical line to the next.

    Only non-empty while a quoted value spans several lines.
    """
    in_quotes: bool = False
    quote_char: QuoteChar = QuoteChar.NONE
    pending_key: str = ""
    pending_value: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.in_quotes and not self.pending_key and not self.pending_value

class KeyValuePair(BaseModel):
    """
    A completed entry: the key and its raw (unexpanded, unconverted) value.
    """
    key: str
    raw_value: str
    line_number: Optional[int] = None
