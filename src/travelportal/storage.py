"""Durable key-value storage for the session principal.

Mirrors the browser ``localStorage`` contract: string keys, string values,
absence signalled by ``None``.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from travelportal.exceptions import StorageError

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage; lives as long as the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


class JsonFileStorage:
    """Storage kept as a single JSON object on disk.

    Every write rewrites the file through a temporary sibling and an
    atomic rename. A missing file reads as empty; so does an unreadable
    or malformed one, which is logged and overwritten on the next write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            _logger.warning("Cannot read storage file %s; treating as empty", self._path, exc_info=True)
            return {}

        try:
            document = json.loads(text)
        except ValueError:
            _logger.warning("Storage file %s is not valid JSON; treating as empty", self._path)
            return {}
        if not isinstance(document, dict):
            _logger.warning("Storage file %s does not hold a JSON object; treating as empty", self._path)
            return {}
        return {str(key): value for key, value in document.items() if isinstance(value, str)}

    def _save(self, items: dict[str, str]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(items, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError(f"cannot write storage file {self._path}: {exc}", path=str(self._path)) from exc

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key not in items:
            return
        del items[key]
        self._save(items)
