"""
Обрезка истории до последних `limit` сообщений с шагом `advance_count`.

Граница окна сдвигается не на одно сообщение за ход, а сразу на
`advance_count`, поэтому начало отправляемой истории остаётся неизменным
несколько ходов подряд (это помогает кэшу контекста на стороне модели).
"""
from __future__ import annotations

from typing import List

from message_limit.domain.models import GenerationType, LimitSettings, Message


def target_length(length: int, limit: int, advance_count: int) -> int:
    """Сколько сообщений останется после обрезки. advance_count >= 1."""
    if length <= limit:
        return length

    overage = (length - limit) % advance_count
    target = limit if overage == 0 else limit - advance_count + overage
    # limit < advance_count даёт отрицательное значение
    return max(0, target)


def count_to_drop(length: int, settings: LimitSettings) -> int:
    return length - target_length(length, settings.limit, settings.advance_count)


def should_trim(settings: LimitSettings, kind: GenerationType | str) -> bool:
    if not settings.enabled:
        return False
    if GenerationType.parse(kind) is GenerationType.QUIET and not settings.quiet_prompts:
        return False
    return True


def trim(messages: List[Message], settings: LimitSettings, kind: GenerationType | str) -> int:
    """Удаляет префикс `messages` на месте. Возвращает число удалённых."""
    if not should_trim(settings, kind):
        return 0

    n = count_to_drop(len(messages), settings)
    if n > 0:
        del messages[:n]
    return n
