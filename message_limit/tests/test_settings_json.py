import json
import tempfile
from pathlib import Path

from message_limit.adapters.settings_json import JsonSettingsStore
from message_limit.use_cases.settings_service import SettingsService


def test_json_store_persists_between_instances():
    with tempfile.TemporaryDirectory() as d:
        path = f"{d}/sub/settings.json"
        svc = SettingsService(JsonSettingsStore(path), debounce_s=0)
        svc.load()
        svc.update(enabled=True, advance_count=5)
        svc.save_debounced()

        data = json.loads(Path(path).read_text(encoding="utf-8"))
        assert data["messageLimit"]["advanceCount"] == 5

        again = SettingsService(JsonSettingsStore(path), debounce_s=0).load()
        assert again.enabled is True
        assert again.advance_count == 5


def test_json_store_keeps_other_extensions():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "settings.json"
        path.write_text(json.dumps({"otherExt": {"a": 1}}), encoding="utf-8")

        SettingsService(JsonSettingsStore(str(path)), debounce_s=0).load()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["otherExt"] == {"a": 1}
        assert data["messageLimit"]["limit"] == 10


def test_broken_file_is_moved_aside():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonSettingsStore(str(path))
        assert store.read("messageLimit") is None
        assert (Path(d) / "settings.json.bad").exists()
