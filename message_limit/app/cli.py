from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from typing import List
from uuid import uuid4

from message_limit.app.settings import AppSettings
from message_limit.app.wiring import build_bundle
from message_limit.domain.errors import GenerationAborted, InvalidNumericInput
from message_limit.domain.models import GenerationType, Message


def _msg(role: str, content: str) -> Message:
    return Message(id=uuid4().hex, role=role, content=content)  # type: ignore[arg-type]


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--settings", default=None, help="Override settings file path")
    parser.add_argument("--llm", choices=["mock", "ollama"], default=None)
    parser.add_argument("--model", default=None, help="Override Ollama model")
    parser.add_argument("--context-size", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="%(message)s")

    settings = AppSettings.from_env()

    if args.settings is not None:
        settings = replace(settings, store=replace(settings.store, settings_path=args.settings))

    gen = settings.generation
    if args.llm is not None:
        gen = replace(gen, llm_backend=args.llm)
    if args.model is not None:
        gen = replace(gen, ollama_model=args.model)
    if args.context_size is not None:
        gen = replace(gen, context_size=args.context_size)
    settings = replace(settings, generation=gen)

    bundle = build_bundle(settings)
    bundle.service.subscribe(lambda field, value: print(f"ui> {field} = {value}"))

    history: List[Message] = [_msg("system", settings.generation.system_prompt)]

    print("Type /exit to quit, /help for commands.")
    print("Quiet prompt: /quiet <text> | Preview: /prompt [quiet]\n")

    try:
        while True:
            user_text = input("you> ").strip()
            if not user_text:
                continue
            if user_text == "/exit":
                break

            if user_text == "/help":
                print(bundle.commands.help() + "\n")
                continue

            if user_text.startswith("/ml-"):
                name, _, arg = user_text[1:].partition(" ")
                try:
                    print(f"bot> {bundle.commands.run(name, arg or None)}\n")
                except InvalidNumericInput as e:
                    print(f"bot> error: {e}\n")
                except KeyError as e:
                    print(f"bot> error: {e.args[0]}\n")
                continue

            if user_text.startswith("/prompt"):
                kind = user_text.split(" ", 1)[1] if " " in user_text else GenerationType.NORMAL
                chat = bundle.pipeline.prepare(history, kind)
                print(f"bot> would send {len(chat)} of {len(history)} messages")
                for m in chat:
                    print(f"  {m.role}: {m.content[:60]}")
                print()
                continue

            if user_text == "/quiet":
                print("bot> usage: /quiet <text>\n")
                continue

            kind = GenerationType.NORMAL
            if user_text.startswith("/quiet "):
                kind = GenerationType.QUIET
                user_text = user_text.split(" ", 1)[1].strip()

            history.append(_msg("user", user_text))
            try:
                answer, meta = bundle.pipeline.generate(history, kind)
            except GenerationAborted as e:
                print(f"bot> aborted: {e}\n")
                continue
            history.append(_msg("assistant", answer))
            print(f"bot> {answer}\n")

            if args.debug:
                print("debug> " + json.dumps(meta, ensure_ascii=False, indent=2) + "\n")
    finally:
        bundle.service.close()


if __name__ == "__main__":
    main()
