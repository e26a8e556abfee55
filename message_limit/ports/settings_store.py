from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Персистентные настройки расширений, ключ = идентификатор расширения."""

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def write(self, key: str, record: Dict[str, Any]) -> None:
        ...
