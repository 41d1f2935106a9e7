"""
Store holding typed values loaded from .env files.
"""
import os
from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from ..errors import KeyFormatError
from ..MODELS.typed_value import TypedValue, ValueKind
from ..PARSERS.env_parser import LOOKUP_KEY_PATTERN
from ..UTILS.value_resolver import ValueResolver

class EnvStore:
    """
    Holds the typed values loaded so far and publishes them into an
    environment mapping (``os.environ`` unless another one is given).

    Lookups only accept uppercase identifiers, while files may define
    mixed-case keys; such keys are stored and published but cannot be
    fetched through ``get`` or ``has``.
    """
    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Initializes the store.

        :param environ: The environment mapping to publish into and fall back on.
        """
        self.environ = environ if environ is not None else os.environ
        self._values: Dict[str, TypedValue] = {}

    @staticmethod
    def validate_key(key: str) -> None:
        """
        :raises KeyFormatError: If the key is not an uppercase identifier.
        """
        if not isinstance(key, str) or not LOOKUP_KEY_PATTERN.match(key):
            raise KeyFormatError(key)

    def set(self, key: str, value: TypedValue) -> None:
        """
        Stores a value and publishes its string form.

        :param key: The key as found in the file.
        :param value: The coerced value.
        """
        self._values[key] = value
        self.environ[key] = '' if value.kind == ValueKind.NULL else value.to_string()

    def get(self, key: str, default: Optional[TypedValue] = None) -> Optional[TypedValue]:
        """
        Returns the typed value for a key.

        Values loaded into this store win; otherwise the environment mapping
        is consulted and its string coerced.

        :param key: The key to look up.
        :param default: Returned when the key is not set anywhere.
        :return: The typed value or ``default``.
        :raises KeyFormatError: If the key is not an uppercase identifier.
        """
        self.validate_key(key)
        if key in self._values:
            return self._values[key]
        if key in self.environ:
            return ValueResolver.coerce(self.environ[key])
        return default

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Like ``get`` but returns the plain Python value.
        """
        typed = self.get(key)
        if typed is None:
            return default
        return typed.value

    def lookup(self, name: str) -> Optional[TypedValue]:
        """
        Lookup capability handed to ``ValueResolver.expand``.
        """
        return self.get(name)

    def has(self, key: str) -> bool:
        """
        :raises KeyFormatError: If the key is not an uppercase identifier.
        """
        self.validate_key(key)
        return key in self._values or key in self.environ

    def keys(self) -> List[str]:
        """
        Returns the keys loaded into this store, in load order.
        """
        return list(self._values.keys())

    def items(self) -> List[Tuple[str, TypedValue]]:
        return list(self._values.items())

    def reset(self) -> None:
        """
        Removes every published key from the environment mapping and
        forgets all loaded values.
        """
        for key in self._values:
            self.environ.pop(key, None)
        self._values.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)
