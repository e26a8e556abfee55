from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from message_limit.domain.models import GenerationType, Message


class AbortHandle:
    """Позволяет перехватчику отменить генерацию до отправки."""

    def __init__(self) -> None:
        self.aborted = False
        self.reason: Optional[str] = None

    def __call__(self, reason: str = "") -> None:
        self.aborted = True
        self.reason = reason or None


@runtime_checkable
class GenerationInterceptor(Protocol):
    """Вызывается перед генерацией, может менять chat на месте."""

    def __call__(
        self,
        chat: List[Message],
        context_size: int,
        abort: AbortHandle,
        kind: GenerationType,
    ) -> None:
        ...
