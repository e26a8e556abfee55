import pytest

from message_limit.adapters.interceptor_limit import MessageLimitInterceptor
from message_limit.adapters.llm_mock import EchoMockLLM, RecordingMockLLM
from message_limit.domain.errors import GenerationAborted
from message_limit.domain.models import GenerationType, LimitSettings, Message
from message_limit.use_cases.generation import GenerationPipeline


def _history(n: int) -> list[Message]:
    return [Message(id=f"m{i}", role="user" if i % 2 == 0 else "assistant", content=f"#{i}") for i in range(n)]


def test_pipeline_trims_prompt_not_history():
    llm = RecordingMockLLM()
    settings = LimitSettings(enabled=True, limit=10, advance_count=5)
    pipeline = GenerationPipeline(llm=llm, interceptors=[MessageLimitInterceptor(lambda: settings)])

    history = _history(12)
    text, meta = pipeline.generate(history, GenerationType.NORMAL)

    assert text == "ok"
    assert len(history) == 12
    assert [m.id for m in llm.calls[0]] == [f"m{i}" for i in range(5, 12)]
    assert meta["sent_messages"] == 7
    assert meta["dropped_messages"] == 5


def test_quiet_generation_respects_flag():
    llm = RecordingMockLLM()
    settings = LimitSettings(enabled=True, quiet_prompts=False, limit=2, advance_count=1)
    pipeline = GenerationPipeline(llm=llm, interceptors=[MessageLimitInterceptor(lambda: settings)])

    _, meta = pipeline.generate(_history(6), "quiet")
    assert meta["type"] == "quiet"
    assert len(llm.calls[0]) == 6


def test_abort_stops_generation():
    llm = RecordingMockLLM()

    def stop(chat, context_size, abort, kind):
        abort("no thanks")

    pipeline = GenerationPipeline(llm=llm, interceptors=[stop])
    with pytest.raises(GenerationAborted):
        pipeline.generate(_history(3))
    assert llm.calls == []


def test_echo_mock_reports_prompt_size():
    settings = LimitSettings(enabled=True, limit=4, advance_count=1)
    pipeline = GenerationPipeline(llm=EchoMockLLM(), interceptors=[MessageLimitInterceptor(lambda: settings)])
    text, _ = pipeline.generate(_history(9))
    assert "[mock]" in text
    assert "(4 msgs)" in text
