from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from message_limit.domain.models import Message
from message_limit.ports.llm import LLMClient, LLMResponse


class EchoMockLLM(LLMClient):
    def generate(self, messages: Sequence[Message], *, max_output_tokens: int) -> LLMResponse:
        last_user: Optional[Message] = next((m for m in reversed(messages) if m.role == "user"), None)
        text = f"[mock] ({len(messages)} msgs) {last_user.content if last_user else ''}"
        return LLMResponse(text=text, usage={"input_tokens": 0, "output_tokens": 0}, model="mock")


@dataclass
class RecordingMockLLM(LLMClient):
    """Запоминает каждый отправленный промпт (для тестов)."""

    reply: str = "ok"
    calls: List[List[Message]] = field(default_factory=list)

    def generate(self, messages: Sequence[Message], *, max_output_tokens: int) -> LLMResponse:
        self.calls.append(list(messages))
        return LLMResponse(text=self.reply, usage={"input_tokens": 0, "output_tokens": 0}, model="mock")
