from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal

Role = Literal["system", "user", "assistant", "tool"]

SETTINGS_KEY = "messageLimit"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def utcnow() -> datetime:
    """Всегда timezone-aware UTC."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    id: str
    role: Role
    content: str = ""
    created_at: datetime = field(default_factory=utcnow)
    meta: Dict[str, Any] = field(default_factory=dict)


class GenerationType(str, Enum):
    """Тип запроса генерации. Для обрезки важен только QUIET."""

    NORMAL = "normal"
    REGENERATE = "regenerate"
    SWIPE = "swipe"
    CONTINUE = "continue"
    IMPERSONATE = "impersonate"
    QUIET = "quiet"

    @classmethod
    def parse(cls, value: "GenerationType | str | None") -> "GenerationType":
        if isinstance(value, cls):
            return value
        v = (value or "").strip().lower()
        for t in cls:
            if t.value == v:
                return t
        return cls.NORMAL


@dataclass(frozen=True)
class LimitSettings:
    """
    Настройки ограничения истории.
    - enabled: включена ли обрезка
    - quiet_prompts: применять ли к фоновым (quiet) запросам
    - limit: сколько последних сообщений отправлять
    - advance_count: шаг, с которым сдвигается граница окна
    """

    enabled: bool = False
    quiet_prompts: bool = False
    limit: int = 10
    advance_count: int = 1

    def clamped(self) -> "LimitSettings":
        return replace(
            self,
            limit=max(0, round_half_up(self.limit)),
            advance_count=max(1, round_half_up(self.advance_count)),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "enabled": bool(self.enabled),
            "quietPrompts": bool(self.quiet_prompts),
            "limit": int(self.limit),
            "advanceCount": int(self.advance_count),
        }

    @staticmethod
    def from_record(record: Dict[str, Any]) -> "LimitSettings":
        merged = dict(DEFAULT_RECORD)
        for k, v in (record or {}).items():
            if k in merged and _valid(k, v):
                merged[k] = v
        return LimitSettings(
            enabled=bool(merged["enabled"]),
            quiet_prompts=bool(merged["quietPrompts"]),
            limit=merged["limit"],
            advance_count=merged["advanceCount"],
        ).clamped()


DEFAULT_SETTINGS = LimitSettings()

DEFAULT_RECORD: Dict[str, Any] = {
    "enabled": DEFAULT_SETTINGS.enabled,
    "quietPrompts": DEFAULT_SETTINGS.quiet_prompts,
    "limit": DEFAULT_SETTINGS.limit,
    "advanceCount": DEFAULT_SETTINGS.advance_count,
}

RECORD_FIELDS: Dict[str, str] = {
    "enabled": "enabled",
    "quietPrompts": "quiet_prompts",
    "limit": "limit",
    "advanceCount": "advance_count",
}

FLAG_KEYS = ("enabled", "quietPrompts")
COUNT_KEYS = ("limit", "advanceCount")


def _valid(key: str, value: Any) -> bool:
    if key in FLAG_KEYS:
        return isinstance(value, bool)
    if key in COUNT_KEYS:
        return (
            isinstance(value, (int, float))
            and not isinstance(value, bool)
            and math.isfinite(value)
        )
    return True


def invalid_keys(record: Dict[str, Any]) -> list[str]:
    """Ключи записи, которых нет или у которых неверный тип."""
    return [k for k in DEFAULT_RECORD if not _valid(k, record.get(k))]
