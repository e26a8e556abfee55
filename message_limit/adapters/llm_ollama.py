from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Dict, Any, Optional

import requests

from message_limit.domain.models import Message
from message_limit.ports.llm import LLMClient, LLMResponse


@dataclass
class OllamaLLMClient(LLMClient):
    base_url: str = "http://127.0.0.1:11434"
    model: str = "llama3.1:8b"
    temperature: float = 0.7
    num_ctx: Optional[int] = None
    timeout_s: int = 120

    session: Optional[requests.Session] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.session is None:
            self.session = requests.Session()

    def _payload(self, messages: Sequence[Message], max_output_tokens: int) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "temperature": float(self.temperature),
            "num_predict": int(max_output_tokens),
        }
        if self.num_ctx:
            options["num_ctx"] = int(self.num_ctx)
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content or ""} for m in messages],
            "stream": False,
            "options": options,
        }

    def generate(self, messages: Sequence[Message], *, max_output_tokens: int) -> LLMResponse:
        assert self.session is not None

        r = self.session.post(
            f"{self.base_url}/api/chat",
            json=self._payload(messages, max_output_tokens),
            timeout=self.timeout_s,
        )
        r.raise_for_status()
        data = r.json() if r.content else {}

        msg = data.get("message")
        text = (msg.get("content") or "").strip() if isinstance(msg, dict) else ""

        return LLMResponse(
            text=text,
            usage={
                "input_tokens": int(data.get("prompt_eval_count") or 0),
                "output_tokens": int(data.get("eval_count") or 0),
            },
            model=str(data.get("model") or self.model),
        )
