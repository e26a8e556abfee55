from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, TypedDict, runtime_checkable
from collections.abc import Sequence

from message_limit.domain.models import Message


class LLMUsage(TypedDict, total=False):
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class LLMResponse:
    text: str
    usage: LLMUsage = field(default_factory=dict)
    model: str = ""


@runtime_checkable
class LLMClient(Protocol):
    """Бэкенд генерации: получает уже обрезанный промпт."""

    def generate(self, messages: Sequence[Message], *, max_output_tokens: int) -> LLMResponse:
        ...
