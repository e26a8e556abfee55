from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from message_limit.app.settings import AppSettings
from message_limit.app.wiring import Bundle, build_bundle
from message_limit.domain.errors import GenerationAborted, InvalidNumericInput
from message_limit.domain.models import GenerationType, Message
from message_limit.use_cases.trimmer import count_to_drop, should_trim

logging.basicConfig(level=logging.INFO, format="%(message)s")
log = logging.getLogger("message_limit")


class ChatMessage(BaseModel):
    role: str = "user"
    content: str = ""


class CommandRequest(BaseModel):
    value: Optional[str] = None


class CommandResponse(BaseModel):
    name: str
    result: str


class TrimRequest(BaseModel):
    messages: List[ChatMessage]
    type: str = GenerationType.NORMAL.value


class TrimResponse(BaseModel):
    dropped: int
    messages: List[ChatMessage]


class GenerateResponse(BaseModel):
    answer: str
    meta: Dict[str, Any]


def _to_domain(messages: List[ChatMessage]) -> List[Message]:
    return [Message(id=uuid4().hex, role=m.role, content=m.content) for m in messages]  # type: ignore[arg-type]


def create_app(bundle: Bundle) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        bundle.service.close()

    app = FastAPI(title="message_limit", lifespan=lifespan)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/settings")
    def get_settings():
        return bundle.service.get().to_record()

    @app.get("/commands")
    def list_commands():
        return [
            {"name": n, "returns": bundle.commands.get(n).returns, "help": bundle.commands.get(n).help}
            for n in bundle.commands.names()
        ]

    @app.post("/commands/{name}", response_model=CommandResponse)
    def run_command(name: str, req: CommandRequest):
        try:
            result = bundle.commands.run(name, req.value)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown command: {name}")
        except InvalidNumericInput as e:
            raise HTTPException(status_code=400, detail=str(e))
        return CommandResponse(name=name, result=result)

    @app.post("/trim", response_model=TrimResponse)
    def trim_preview(req: TrimRequest):
        current = bundle.service.get()
        n = count_to_drop(len(req.messages), current) if should_trim(current, req.type) else 0
        return TrimResponse(dropped=n, messages=req.messages[n:])

    @app.post("/generate", response_model=GenerateResponse)
    def generate(req: TrimRequest):
        try:
            answer, meta = bundle.pipeline.generate(_to_domain(req.messages), req.type)
        except GenerationAborted as e:
            raise HTTPException(status_code=409, detail=str(e))
        log.info(json.dumps({"event": "api_generate", **meta}, ensure_ascii=False))
        return GenerateResponse(answer=answer, meta=meta)

    return app


def build_app() -> FastAPI:
    """uvicorn --factory message_limit.app.api:build_app"""
    return create_app(build_bundle(AppSettings.from_env()))
