import os
import re
from typing import Protocol

from finance_categorizer.logger import get_logger

logger = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """A key-value store could not be read or written."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class CorruptDataError(StorageError):
    """Stored bytes exist but cannot be decoded as text."""


class KeyValueStore(Protocol):
    """
    Text storage keyed by name. Implementations signal failures with
    StorageError (CorruptDataError for undecodable content); callers still
    treat any other exception from a backend as a failed read or write.
    """

    def get(self, key: str) -> str | None:
        """Return the stored text, or None when nothing is stored under key."""
        ...

    def set(self, key: str, value: str) -> None:
        """Overwrite the text stored under key."""
        ...


class InMemoryStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """
    File-backed store keeping one ``<key>.json`` document per key in data_dir.
    """

    def __init__(self, data_dir: str = "."):
        self.data_dir = data_dir

    def path_for(self, key: str) -> str:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key '{key}'")
        return os.path.join(self.data_dir, f"{key}.json")

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise StorageError(f"Failed to read '{key}' from {path}: {e}", e) from e
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"'{key}' at {path} is not valid UTF-8: {e}", e) from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = f"{path}.tmp"
        try:
            if self.data_dir not in {"", ".", "./"}:
                os.makedirs(self.data_dir, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write '{key}' to {path}: {e}", e) from e
        logger.debug("[STORAGE] Wrote %d chars to %s", len(value), path)

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            raise StorageError(f"Failed to remove '{key}' at {path}: {e}", e) from e
