from __future__ import annotations

import json
import logging
from typing import Callable, List

from message_limit.domain.models import GenerationType, LimitSettings, Message
from message_limit.ports.interceptor import AbortHandle, GenerationInterceptor
from message_limit.use_cases.trimmer import trim

log = logging.getLogger("message_limit")


class MessageLimitInterceptor(GenerationInterceptor):
    """
    Хук перед генерацией: обрезает chat по текущим настройкам.
    context_size и abort не используются.
    """

    def __init__(self, settings: Callable[[], LimitSettings]):
        self.settings = settings

    def __call__(
        self,
        chat: List[Message],
        context_size: int,
        abort: AbortHandle,
        kind: GenerationType,
    ) -> None:
        current = self.settings()
        before = len(chat)
        dropped = trim(chat, current, kind)
        if dropped:
            log.debug(json.dumps({
                "event": "trim",
                "type": GenerationType.parse(kind).value,
                "before": before,
                "after": len(chat),
                "limit": current.limit,
                "advance_count": current.advance_count,
            }))
