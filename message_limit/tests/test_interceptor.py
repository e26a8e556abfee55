from message_limit.adapters.interceptor_limit import MessageLimitInterceptor
from message_limit.domain.models import GenerationType, LimitSettings, Message
from message_limit.ports.interceptor import AbortHandle, GenerationInterceptor


def test_interceptor_reads_current_settings_each_call():
    current = {"s": LimitSettings(enabled=False, limit=3, advance_count=1)}
    hook = MessageLimitInterceptor(lambda: current["s"])
    assert isinstance(hook, GenerationInterceptor)

    chat = [Message(id=str(i), role="user") for i in range(8)]
    abort = AbortHandle()

    hook(chat, 4096, abort, GenerationType.NORMAL)
    assert len(chat) == 8

    current["s"] = LimitSettings(enabled=True, limit=3, advance_count=1)
    hook(chat, 4096, abort, GenerationType.NORMAL)
    assert [m.id for m in chat] == ["5", "6", "7"]
    assert abort.aborted is False
