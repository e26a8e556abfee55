from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from message_limit.domain.errors import InvalidNumericInput
from message_limit.domain.models import round_half_up
from message_limit.use_cases.settings_service import SettingsService

log = logging.getLogger("message_limit")

TRUE_VALUES = {"on", "true", "1"}
TOGGLE_VALUES = {"toggle", "t"}


def is_true_boolean(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def _blank(arg: Optional[str]) -> bool:
    return arg is None or str(arg).strip() == ""


def parse_count(arg: str, *, label: str, minimum: int) -> int:
    """Строка -> целое >= minimum. Нечисловое/inf/nan -> InvalidNumericInput."""
    try:
        x = float(str(arg).strip())
    except (TypeError, ValueError):
        raise InvalidNumericInput(label, arg) from None
    if not math.isfinite(x):
        raise InvalidNumericInput(label, arg)
    return max(minimum, round_half_up(x))


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    returns: str
    callback: Callable[[Optional[str]], str]


class CommandRegistry:
    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        self._commands[command.name] = command

    def names(self) -> List[str]:
        return sorted(self._commands)

    def get(self, name: str) -> Command:
        key = name.strip().lstrip("/").lower()
        if key not in self._commands:
            raise KeyError(f"Unknown command: {name}")
        return self._commands[key]

    def run(self, name: str, arg: Optional[str] = None) -> str:
        cmd = self.get(name)
        result = cmd.callback(arg)
        log.info(json.dumps({"event": "command", "name": cmd.name, "arg": arg, "result": result}, ensure_ascii=False))
        return result

    def help(self) -> str:
        return "\n".join(f"/{c.name} -> {c.returns}: {c.help}" for c in (self._commands[n] for n in self.names()))


class MessageLimitCommands:
    """Команды ml-state / ml-quiet / ml-limit / ml-advance поверх SettingsService."""

    def __init__(self, service: SettingsService):
        self.service = service

    def _set_flag(self, field: str, arg: Optional[str]) -> str:
        if not _blank(arg):
            value = str(arg).strip().lower()
            if value in TOGGLE_VALUES:
                self.service.toggle(field)
            else:
                self.service.update(**{field: is_true_boolean(value)})
            self.service.save_debounced()
        return str(getattr(self.service.get(), field)).lower()

    def _set_count(self, field: str, arg: Optional[str], *, label: str, minimum: int) -> str:
        if not _blank(arg):
            value = parse_count(str(arg), label=label, minimum=minimum)
            self.service.update(**{field: value})
            self.service.save_debounced()
        return str(getattr(self.service.get(), field))

    def state(self, arg: Optional[str] = None) -> str:
        return self._set_flag("enabled", arg)

    def quiet(self, arg: Optional[str] = None) -> str:
        return self._set_flag("quiet_prompts", arg)

    def limit(self, arg: Optional[str] = None) -> str:
        return self._set_count("limit", arg, label="Limit", minimum=0)

    def advance(self, arg: Optional[str] = None) -> str:
        return self._set_count("advance_count", arg, label="Advance count", minimum=1)

    def register(self, registry: CommandRegistry) -> CommandRegistry:
        registry.register(Command(
            name="ml-state",
            help="Change the message limit state. If no argument is provided, return the current state.",
            returns="boolean",
            callback=self.state,
        ))
        registry.register(Command(
            name="ml-quiet",
            help="Change the message limit state for background (quiet) prompts. "
                 "If no argument is provided, return the current state.",
            returns="boolean",
            callback=self.quiet,
        ))
        registry.register(Command(
            name="ml-limit",
            help="Set the maximum number of messages to send. If no argument is provided, return the current limit.",
            returns="number",
            callback=self.limit,
        ))
        registry.register(Command(
            name="ml-advance",
            help="Set the number of messages to advance by when trimming chat. "
                 "If no argument is provided, return the current advance count.",
            returns="number",
            callback=self.advance,
        ))
        return registry


def build_registry(service: SettingsService) -> CommandRegistry:
    return MessageLimitCommands(service).register(CommandRegistry())
