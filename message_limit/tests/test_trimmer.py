from message_limit.domain.models import GenerationType, LimitSettings, Message
from message_limit.use_cases.trimmer import count_to_drop, should_trim, target_length, trim


def _chat(n: int) -> list[Message]:
    return [Message(id=f"m{i}", role="user", content=str(i)) for i in range(n)]


def _on(limit: int, advance: int, quiet: bool = False) -> LimitSettings:
    return LimitSettings(enabled=True, quiet_prompts=quiet, limit=limit, advance_count=advance)


def test_scenarios():
    cases = [
        # limit, advance, length, expected length after trim
        (10, 1, 15, 10),
        (10, 5, 12, 7),
        (10, 5, 15, 10),
        (10, 5, 10, 10),
        (0, 3, 4, 0),
    ]
    for limit, advance, length, expected in cases:
        chat = _chat(length)
        trim(chat, _on(limit, advance), GenerationType.NORMAL)
        assert len(chat) == expected, (limit, advance, length)


def test_keeps_most_recent_in_order():
    chat = _chat(12)
    survivors = chat[5:]
    dropped = trim(chat, _on(10, 5), GenerationType.NORMAL)

    assert dropped == 5
    assert chat == survivors
    assert all(a is b for a, b in zip(chat, survivors))


def test_noop_when_within_limit():
    for advance in (1, 2, 7, 50):
        for length in range(0, 11):
            chat = _chat(length)
            before = list(chat)
            assert trim(chat, _on(10, advance), "normal") == 0
            assert chat == before


def test_target_length_bounds():
    for limit in range(0, 12):
        for advance in range(1, 8):
            for length in range(limit + 1, limit + 30):
                t = target_length(length, limit, advance)
                assert max(0, limit - advance) <= t <= limit
                if limit - advance + 1 > 0:
                    assert t >= limit - advance + 1


def test_boundary_moves_in_steps_of_advance_count():
    settings = _on(10, 4)
    chat: list[Message] = []
    starts = []
    sizes = []
    for i in range(40):
        chat.append(Message(id=f"m{i}", role="user", content=str(i)))
        trim(chat, settings, GenerationType.NORMAL)
        starts.append(chat[0].id)
        sizes.append(len(chat))

    overflow_starts = starts[10:]
    jumps = [i for i in range(1, len(overflow_starts)) if overflow_starts[i] != overflow_starts[i - 1]]
    assert jumps
    assert all(b - a == 4 for a, b in zip(jumps, jumps[1:]))
    for j in jumps:
        assert int(overflow_starts[j][1:]) - int(overflow_starts[j - 1][1:]) == 4
    assert all(7 <= s <= 10 for s in sizes[10:])


def test_advance_one_always_trims_to_limit():
    for length in range(11, 40):
        chat = _chat(length)
        trim(chat, _on(10, 1), GenerationType.NORMAL)
        assert [m.id for m in chat] == [f"m{i}" for i in range(length - 10, length)]


def test_disabled_and_quiet_guards():
    chat = _chat(30)
    before = list(chat)

    trim(chat, LimitSettings(enabled=False, limit=5, advance_count=1), GenerationType.NORMAL)
    assert chat == before

    trim(chat, _on(5, 1, quiet=False), GenerationType.QUIET)
    assert chat == before

    trim(chat, _on(5, 1, quiet=True), "quiet")
    assert len(chat) == 5


def test_should_trim_only_cares_about_quiet():
    s = _on(5, 1, quiet=False)
    for kind in GenerationType:
        assert should_trim(s, kind) is (kind is not GenerationType.QUIET)


def test_count_to_drop_matches_trim():
    s = _on(6, 4)
    for length in range(0, 25):
        chat = _chat(length)
        assert trim(chat, s, GenerationType.NORMAL) == count_to_drop(length, s)
