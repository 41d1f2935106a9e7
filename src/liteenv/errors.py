"""
Exceptions raised while loading .env files and looking up their values.
"""
from typing import Optional


class LiteEnvError(Exception):
    """Base class for all liteenv errors."""


class EnvSyntaxError(LiteEnvError):
    """
    A single line of a .env file could not be parsed.

    Recoverable: the loader logs it and skips the line.
    """
    def __init__(self, message: str, line: str = "", line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.line_number = line_number


class UnterminatedQuoteError(EnvSyntaxError):
    """A quoted value was still open at end of file (strict loading only)."""


class EnvFileError(LiteEnvError, OSError):
    """The .env file does not exist, is not readable or cannot be opened."""
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class KeyFormatError(LiteEnvError, ValueError):
    """A lookup was attempted with a key that is not an uppercase identifier."""
    def __init__(self, key: str):
        super().__init__(
            f'Invalid key format: "{key}". Keys must start with an uppercase letter or '
            f'underscore and can only contain uppercase letters, numbers, and underscores.'
        )
        self.key = key
