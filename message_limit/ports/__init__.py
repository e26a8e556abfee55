from .interceptor import AbortHandle, GenerationInterceptor
from .llm import LLMClient, LLMResponse, LLMUsage
from .settings_store import SettingsStore

__all__ = [
    "AbortHandle",
    "GenerationInterceptor",
    "LLMClient",
    "LLMResponse",
    "LLMUsage",
    "SettingsStore",
]
