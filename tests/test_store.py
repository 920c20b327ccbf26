from __future__ import annotations

import json
from pathlib import Path

import pytest

from kvconf.store.base import OptionNotFoundError, PartialWriteError, StoreError, matches_prefix
from kvconf.store.json_store import JsonFileOptionStore
from kvconf.store.memory import MemoryOptionStore
from kvconf.store.writer import write_options
from tests.conftest import FailingStore


def test_prefix_matching() -> None:
    assert matches_prefix("apps.bash.title", "apps.bash")
    assert matches_prefix("apps.bash", "apps.bash")
    assert not matches_prefix("apps.bash2.title", "apps.bash")
    assert matches_prefix("anything", "")


def test_memory_store_delete_by_prefix() -> None:
    store = MemoryOptionStore({"apps.bash.title": "Bash", "apps.bash.icon": "t", "apps.bash2.title": "B2"})

    store.delete_options("apps.bash")

    assert store.get_options() == {"apps.bash2.title": "B2"}


def test_memory_store_delete_missing_prefix_is_not_found() -> None:
    store = MemoryOptionStore()

    with pytest.raises(OptionNotFoundError):
        store.delete_options("apps.none")


def test_json_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "data" / "options.json"
    store = JsonFileOptionStore(path)

    store.set_option("apps.bash.title", "Bash")
    store.set_option("apps.bash.args", '["-c"]')

    reopened = JsonFileOptionStore(path)
    assert reopened.get_options("apps.bash") == {"apps.bash.title": "Bash", "apps.bash.args": '["-c"]'}

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert data["options"]["apps.bash.title"] == "Bash"


def test_json_store_delete(tmp_path: Path) -> None:
    store = JsonFileOptionStore(tmp_path / "options.json")
    store.set_option("apps.a.title", "A")
    store.set_option("apps.b.title", "B")

    store.delete_options("apps.a")

    assert JsonFileOptionStore(tmp_path / "options.json").get_options() == {"apps.b.title": "B"}
    with pytest.raises(OptionNotFoundError):
        store.delete_options("apps.a")


def test_json_store_corrupt_file_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "options.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonFileOptionStore(path).get_options()


def test_write_options_prefixes_every_key(store: MemoryOptionStore) -> None:
    written = write_options(store, "apps.bash", {"title": "Bash", "active": "true"})

    assert written == ["apps.bash.title", "apps.bash.active"]
    assert store.get_options() == {"apps.bash.title": "Bash", "apps.bash.active": "true"}


def test_partial_write_failure_keeps_earlier_writes() -> None:
    store = FailingStore(fail_on=2)

    with pytest.raises(PartialWriteError) as exc:
        write_options(store, "apps.x", {"a": "1", "b": "2", "c": "3"})

    assert exc.value.key == "apps.x.b"
    assert exc.value.written == ["apps.x.a"]
    assert isinstance(exc.value.cause, StoreError)
    assert store.get_options() == {"apps.x.a": "1"}
    assert store.calls == 2
