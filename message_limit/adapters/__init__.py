from .interceptor_limit import MessageLimitInterceptor
from .llm_mock import EchoMockLLM, RecordingMockLLM
from .settings_json import JsonSettingsStore
from .settings_memory import InMemorySettingsStore

__all__ = [
    "MessageLimitInterceptor",
    "EchoMockLLM", "RecordingMockLLM",
    "JsonSettingsStore",
    "InMemorySettingsStore",
]
