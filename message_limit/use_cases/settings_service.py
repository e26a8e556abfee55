from __future__ import annotations

import json
import logging
from dataclasses import replace
from threading import Lock, Timer
from typing import Any, Callable, Dict, List, Optional

from message_limit.domain.models import (
    DEFAULT_RECORD,
    RECORD_FIELDS,
    SETTINGS_KEY,
    LimitSettings,
    invalid_keys,
)
from message_limit.ports.settings_store import SettingsStore

log = logging.getLogger("message_limit")

Listener = Callable[[str, Any], None]


class SettingsService:
    """
    Единственный владелец настроек расширения:
    - load(): первый запуск пишет дефолты, дальше дозаполняет недостающие ключи
    - get()/update(): чтение после записи согласовано (под локом)
    - subscribe(): слушатели получают (field, value) после каждого изменения
    - save_debounced(): запись в store не чаще одного раза за debounce_s
    """

    def __init__(
        self,
        store: SettingsStore,
        *,
        key: str = SETTINGS_KEY,
        debounce_s: float = 1.0,
    ):
        self.store = store
        self.key = key
        self.debounce_s = float(debounce_s)
        self._lock = Lock()
        self._settings = LimitSettings()
        self._listeners: List[Listener] = []
        self._timer: Optional[Timer] = None

    def load(self) -> LimitSettings:
        raw = self.store.read(self.key)
        record: Dict[str, Any] = dict(raw) if isinstance(raw, dict) else {}

        # отсутствующие и значения неверного типа заменяются дефолтами
        missing = invalid_keys(record)
        for k in missing:
            record[k] = DEFAULT_RECORD[k]

        with self._lock:
            self._settings = LimitSettings.from_record(record)

        if missing:
            # сохраняем чужие ключи записи как есть
            self.store.write(self.key, record)
            log.info(json.dumps({"event": "settings_backfilled", "key": self.key, "fields": missing}))

        return self._settings

    def get(self) -> LimitSettings:
        with self._lock:
            return self._settings

    def update(self, **changes: Any) -> LimitSettings:
        unknown = set(changes) - set(RECORD_FIELDS.values())
        if unknown:
            raise TypeError(f"Unknown settings fields: {sorted(unknown)}")

        with self._lock:
            self._settings = replace(self._settings, **changes).clamped()
            current = self._settings

        for name in changes:
            value = getattr(current, name)
            for listener in list(self._listeners):
                listener(name, value)

        return current

    def toggle(self, field: str) -> LimitSettings:
        if field not in ("enabled", "quiet_prompts"):
            raise TypeError(f"Not a flag: {field}")

        with self._lock:
            value = not getattr(self._settings, field)
            self._settings = replace(self._settings, **{field: value})
            current = self._settings

        for listener in list(self._listeners):
            listener(field, value)

        return current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def save_debounced(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            if self.debounce_s <= 0:
                self._timer = None
            else:
                self._timer = Timer(self.debounce_s, self.flush)
                self._timer.daemon = True
                self._timer.start()
                return
        self.flush()

    def flush(self) -> None:
        with self._lock:
            timer = self._timer
            record = self._settings.to_record()

        existing = self.store.read(self.key)
        if isinstance(existing, dict):
            record = {**existing, **record}
        self.store.write(self.key, record)
        log.debug(json.dumps({"event": "settings_saved", "key": self.key, **record}))

        # pending остаётся True, пока запись не завершена
        with self._lock:
            if timer is not None and self._timer is timer:
                timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def close(self) -> None:
        if self.pending:
            self.flush()
