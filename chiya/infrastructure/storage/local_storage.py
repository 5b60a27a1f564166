"""
Device-local key/value storage

``InMemoryStorage`` keeps values for the life of the process;
``JsonFileStorage`` persists them to a small JSON file so a table session
survives restarts of the customer client.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from chiya.application.interfaces.local_storage import LocalStorage


class InMemoryStorage(LocalStorage):
    """Process-local storage"""

    def __init__(self):
        self._values: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove_item(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStorage(LocalStorage):
    """Storage backed by one JSON object on disk"""

    def __init__(self, path: str):
        self._path = Path(path)
        self._logger = logging.getLogger(self.__class__.__name__)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove_item(self, key: str) -> None:
        values = self._read()
        if values.pop(key, None) is not None:
            self._write(values)

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._logger.warning("⚠️ Ignoring unreadable storage file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, values: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values), encoding="utf-8")
        os.replace(tmp_path, self._path)
