from __future__ import annotations

import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from message_limit.ports.settings_store import SettingsStore


def _atomic_write(path: Path, text: str) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)


class JsonSettingsStore(SettingsStore):
    """
    Формат:
    {
      "<extension key>": { "enabled": false, "quietPrompts": false, "limit": 10, "advanceCount": 1 },
      ...
    }
    Битый файл переименовывается в *.bad и считается пустым.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._data: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self._data = {}
            return
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else {}
            self._data = data if isinstance(data, dict) else {}
        except (OSError, ValueError):
            try:
                self.path.replace(self.path.with_suffix(self.path.suffix + ".bad"))
            except OSError:
                pass
            self._data = {}

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            rec = self._data.get(key)
            return dict(rec) if isinstance(rec, dict) else None

    def write(self, key: str, record: Dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = dict(record)
            text = json.dumps(self._data, ensure_ascii=False, indent=2)
            _atomic_write(self.path, text)
