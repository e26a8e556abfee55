from __future__ import annotations

from dataclasses import dataclass

from message_limit.app.settings import AppSettings

from message_limit.ports.llm import LLMClient
from message_limit.ports.settings_store import SettingsStore

from message_limit.adapters.interceptor_limit import MessageLimitInterceptor

from message_limit.use_cases.commands import CommandRegistry, build_registry
from message_limit.use_cases.generation import GenerationPipeline
from message_limit.use_cases.settings_service import SettingsService


@dataclass(frozen=True)
class Bundle:
    service: SettingsService
    commands: CommandRegistry
    pipeline: GenerationPipeline
    interceptor: MessageLimitInterceptor


def _build_store(settings: AppSettings) -> SettingsStore:
    if settings.store.store_backend == "memory":
        from message_limit.adapters.settings_memory import InMemorySettingsStore
        return InMemorySettingsStore()

    from message_limit.adapters.settings_json import JsonSettingsStore
    return JsonSettingsStore(settings.store.settings_path)


def _build_llm(settings: AppSettings) -> LLMClient:
    gen = settings.generation
    if gen.llm_backend == "ollama":
        from message_limit.adapters.llm_ollama import OllamaLLMClient
        return OllamaLLMClient(
            base_url=gen.ollama_url,
            model=gen.ollama_model,
            num_ctx=gen.context_size,
            timeout_s=gen.ollama_timeout_s,
        )

    from message_limit.adapters.llm_mock import EchoMockLLM
    return EchoMockLLM()


def build_bundle(
    settings: AppSettings,
    *,
    store: SettingsStore | None = None,
    llm: LLMClient | None = None,
) -> Bundle:
    service = SettingsService(
        store if store is not None else _build_store(settings),
        key=settings.store.settings_key,
        debounce_s=settings.store.save_debounce_s,
    )
    service.load()

    interceptor = MessageLimitInterceptor(service.get)

    pipeline = GenerationPipeline(
        llm=llm if llm is not None else _build_llm(settings),
        interceptors=[interceptor],
        context_size=settings.generation.context_size,
        max_output_tokens=settings.generation.max_output_tokens,
    )

    return Bundle(
        service=service,
        commands=build_registry(service),
        pipeline=pipeline,
        interceptor=interceptor,
    )
