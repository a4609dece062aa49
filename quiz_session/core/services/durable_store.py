"""Key-value persistence used to survive client restarts."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DurableStore(Protocol):
    """Synchronous string key-value store with no cross-key transactions."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStore:
    """Store that keeps every key in one JSON object on disk.

    The whole file is rewritten on each ``set``/``remove`` through a sibling
    temp file that replaces it, so an interrupted write leaves the previous
    contents intact. A missing or unreadable file is treated as an empty store.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._items: dict[str, str] = self._read_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value
        self._write_file()

    def remove(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._write_file()

    def keys(self) -> list[str]:
        return list(self._items)

    def _read_file(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self._file_path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self._file_path)
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write_file(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self._file_path.with_name(self._file_path.name + ".tmp")
            temp_path.write_text(
                json.dumps(self._items, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            os.replace(temp_path, self._file_path)
        except OSError as exc:
            # The in-memory copy stays authoritative for this run.
            logger.error("Could not write storage file %s: %s", self._file_path, exc)
