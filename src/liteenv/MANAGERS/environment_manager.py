"""
Managers for loading .env files into an environment store.
"""
import logging
import os
from typing import Any, List, Optional, Union

from ..MODELS.typed_value import TypedValue
from ..PARSERS.env_parser import EnvParser
from ..UTILS.value_resolver import ValueResolver
from .env_store import EnvStore

logger = logging.getLogger(__name__)

ENV_DEFAULT_PATH = ".env"

PathSpec = Union[str, os.PathLike, List[Any]]

class EnvironmentManager:
    """
    Loads .env files: parses each line, expands and coerces every completed
    value, and stores the result. Later loads override earlier ones.
    """
    def __init__(self, store: Optional[EnvStore] = None, base_dir: str = ".", strict: bool = False):
        """
        Initializes the environment manager.

        :param store: The store to write into. A new store over os.environ by default.
        :param base_dir: The base directory for resolving relative paths to .env files.
        :param strict: Raise on a quoted value left open at end of file.
        """
        self.store = store if store is not None else EnvStore()
        self.base_dir = base_dir
        self.strict = strict
        self.parser = EnvParser()

    def _resolve_path(self, path) -> str:
        path = os.fspath(path)
        if os.path.isabs(path) or self.base_dir in ("", "."):
            return path
        return os.path.join(self.base_dir, path)

    def load(self, path=ENV_DEFAULT_PATH) -> List[str]:
        """
        Loads one .env file into the store.

        Lines with syntax errors are logged and skipped; the rest of the
        file still loads.

        :param path: Path to the .env file, relative to base_dir unless absolute.
        :return: The keys set by this file, in file order.
        :raises EnvFileError: If the file is missing, unreadable or cannot be opened.
        :raises KeyFormatError: If a value references a malformed name during expansion.
        """
        file_path = self._resolve_path(path)
        self.parser.validate_file(file_path)
        logger.debug("Loading environment from %s", file_path)

        loaded = []
        for pair in self.parser.iter_pairs(self.parser.read_lines(file_path), strict=self.strict):
            value = ValueResolver.resolve(pair.raw_value, self.store.lookup)
            self.store.set(pair.key, value)
            loaded.append(pair.key)

        logger.debug("Loaded %d variables from %s", len(loaded), file_path)
        return loaded

    def load_multiple(self, *paths: PathSpec) -> List[str]:
        """
        Loads several .env files in order. Lists of paths are flattened.

        :param paths: File paths or (nested) lists of file paths.
        :return: All keys set, in load order.
        """
        loaded = []
        for path in paths:
            if isinstance(path, (list, tuple)):
                loaded.extend(self.load_multiple(*path))
            else:
                loaded.extend(self.load(path))
        return loaded

    def get(self, key: str, default: Optional[TypedValue] = None) -> Optional[TypedValue]:
        return self.store.get(key, default)

    def get_value(self, key: str, default: Any = None) -> Any:
        return self.store.get_value(key, default)

    def has(self, key: str) -> bool:
        return self.store.has(key)

    def keys(self) -> List[str]:
        return self.store.keys()
