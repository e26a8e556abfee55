from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v


def _env_choice(name: str, default: str, allowed: set[str]) -> str:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    val = v.strip().lower()
    return val if val in allowed else default


@dataclass(frozen=True)
class GenerationSettings:
    system_prompt: str = "You are a helpful assistant."
    context_size: int = 4096
    max_output_tokens: int = 256

    llm_backend: str = "mock"  # mock | ollama
    ollama_url: str = "http://127.0.0.1:11434"
    ollama_model: str = "llama3.1:8b"
    ollama_timeout_s: int = 120


@dataclass(frozen=True)
class StoreSettings:
    settings_path: str = "./data/extension_settings.json"
    settings_key: str = "messageLimit"
    store_backend: str = "json"  # json | memory
    save_debounce_s: float = 1.0


@dataclass(frozen=True)
class AppSettings:
    generation: GenerationSettings = GenerationSettings()
    store: StoreSettings = StoreSettings()

    @staticmethod
    def from_env() -> "AppSettings":
        gen = GenerationSettings(
            system_prompt=_env_str("ML_SYSTEM_PROMPT", GenerationSettings.system_prompt),
            context_size=_env_int("ML_CONTEXT_SIZE", GenerationSettings.context_size),
            max_output_tokens=_env_int("ML_MAX_OUTPUT", GenerationSettings.max_output_tokens),

            llm_backend=_env_choice("ML_LLM", GenerationSettings.llm_backend, {"mock", "ollama"}),
            ollama_url=_env_str("ML_OLLAMA_URL", GenerationSettings.ollama_url),
            ollama_model=_env_str("ML_OLLAMA_MODEL", GenerationSettings.ollama_model),
            ollama_timeout_s=_env_int("ML_OLLAMA_TIMEOUT_S", GenerationSettings.ollama_timeout_s),
        )

        store = StoreSettings(
            settings_path=_env_str("ML_SETTINGS_PATH", StoreSettings.settings_path),
            settings_key=_env_str("ML_SETTINGS_KEY", StoreSettings.settings_key),
            store_backend=_env_choice("ML_STORE", StoreSettings.store_backend, {"json", "memory"}),
            save_debounce_s=_env_float("ML_SAVE_DEBOUNCE_S", StoreSettings.save_debounce_s),
        )

        return AppSettings(generation=gen, store=store)
