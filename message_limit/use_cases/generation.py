from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from message_limit.domain.errors import GenerationAborted
from message_limit.domain.models import GenerationType, Message
from message_limit.ports.interceptor import AbortHandle, GenerationInterceptor
from message_limit.ports.llm import LLMClient

log = logging.getLogger("message_limit")


@dataclass
class GenerationPipeline:
    """
    Собирает промпт из истории, прогоняет перехватчики и отправляет в LLM.
    Перехватчики работают с копией: сохранённая история не обрезается.
    """

    llm: LLMClient
    interceptors: List[GenerationInterceptor] = field(default_factory=list)
    context_size: int = 4096
    max_output_tokens: int = 256

    def prepare(self, history: Sequence[Message], kind: GenerationType | str) -> List[Message]:
        kind = GenerationType.parse(kind)
        chat = list(history)
        abort = AbortHandle()

        for interceptor in self.interceptors:
            interceptor(chat, self.context_size, abort, kind)
            if abort.aborted:
                raise GenerationAborted(abort.reason or "")

        return chat

    def generate(
        self,
        history: Sequence[Message],
        kind: GenerationType | str = GenerationType.NORMAL,
    ) -> tuple[str, Dict[str, Any]]:
        kind = GenerationType.parse(kind)
        chat = self.prepare(history, kind)

        meta: Dict[str, Any] = {
            "type": kind.value,
            "history_messages": len(history),
            "sent_messages": len(chat),
            "dropped_messages": len(history) - len(chat),
        }

        resp = self.llm.generate(chat, max_output_tokens=self.max_output_tokens)
        meta["llm_usage"] = resp.usage
        log.info(json.dumps({"event": "generate", **meta}, ensure_ascii=False))
        return resp.text, meta
