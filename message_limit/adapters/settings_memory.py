from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from message_limit.ports.settings_store import SettingsStore


class InMemorySettingsStore(SettingsStore):
    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self.data: Dict[str, Dict[str, Any]] = copy.deepcopy(initial) if initial else {}
        self.writes = 0

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        rec = self.data.get(key)
        return dict(rec) if isinstance(rec, dict) else None

    def write(self, key: str, record: Dict[str, Any]) -> None:
        self.data[key] = dict(record)
        self.writes += 1
