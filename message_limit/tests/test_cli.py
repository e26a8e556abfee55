import sys
import tempfile

from message_limit.app import cli


def _run(monkeypatch, capsys, lines):
    feed = iter(lines)
    with tempfile.TemporaryDirectory() as d:
        monkeypatch.setenv("ML_LLM", "mock")
        monkeypatch.setenv("ML_SAVE_DEBOUNCE_S", "0")
        monkeypatch.setattr(sys, "argv", ["message-limit", "--settings", f"{d}/settings.json"])
        monkeypatch.setattr("builtins.input", lambda _prompt="": next(feed))
        cli.main()
    return capsys.readouterr().out


def test_bare_quiet_prints_usage(monkeypatch, capsys):
    out = _run(monkeypatch, capsys, ["/quiet", "/exit"])
    assert "usage: /quiet <text>" in out
    assert "[mock]" not in out


def test_quiet_with_text_is_sent(monkeypatch, capsys):
    out = _run(monkeypatch, capsys, ["/quiet hello", "/exit"])
    assert "[mock]" in out
    assert "hello" in out
