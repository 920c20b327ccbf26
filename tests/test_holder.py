from __future__ import annotations

import threading

import pytest

from kvconf.config.holder import ConfigHolder
from kvconf.config.schema import AppConfig, Config
from kvconf.mapping.errors import SchemaError, TypeCoercionError


def test_read_returns_a_snapshot() -> None:
    holder = ConfigHolder(Config(apps={"bash": AppConfig(title="Bash")}))

    snapshot = holder.read()
    snapshot.apps["bash"].title = "changed"
    snapshot.apps.clear()

    assert holder.read("apps.bash").title == "Bash"


def test_read_sub_branch_by_path() -> None:
    holder = ConfigHolder(Config(apps={"bash": AppConfig(app_path="/bin/bash")}))

    assert holder.read("apps.bash.path") == "/bin/bash"
    assert holder.read("store.backend") == "file"
    with pytest.raises(KeyError):
        holder.read("apps.missing")
    with pytest.raises(KeyError):
        holder.read("apps.bash.path.deeper")


def test_apply_options_merges_flat_keys() -> None:
    holder = ConfigHolder(Config())

    result = holder.apply_options({"apps.bash.title": "Bash", "apps.bash.active": "true"})

    assert result.applied == ["apps.bash.title", "apps.bash.active"]
    app = holder.read("apps.bash")
    assert app.title == "Bash"
    assert app.active is True


def test_failed_apply_leaves_config_unchanged() -> None:
    holder = ConfigHolder(Config(apps={"bash": AppConfig(priority=1)}))

    with pytest.raises(TypeCoercionError):
        holder.apply_options({"apps.bash.title": "x", "apps.bash.priority": "first"})

    assert holder.read("apps.bash") == AppConfig(priority=1)


def test_mutate_runs_under_the_lock() -> None:
    holder = ConfigHolder(Config(apps={"bash": AppConfig()}))

    removed = holder.mutate(lambda config: config.apps.pop("bash"))

    assert removed == AppConfig()
    assert holder.read().apps == {}


def test_holder_requires_a_record() -> None:
    with pytest.raises(SchemaError):
        ConfigHolder({"apps": {}})


def test_readers_never_observe_a_half_applied_update() -> None:
    holder = ConfigHolder(Config(apps={"a": AppConfig(priority=0, title="t0")}))
    mismatches: list[tuple[int, str]] = []

    def writer(n: int) -> None:
        for i in range(50):
            value = n * 1000 + i
            holder.apply_options({"apps.a.priority": str(value), "apps.a.title": f"t{value}"})

    def reader() -> None:
        for _ in range(200):
            app = holder.read("apps.a")
            if app.title != f"t{app.priority}":
                mismatches.append((app.priority, app.title))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert mismatches == []


def test_exclusive_blocks_other_readers_until_released() -> None:
    holder = ConfigHolder(Config(apps={"bash": AppConfig(title="old")}))
    seen: list[str] = []
    reader = threading.Thread(target=lambda: seen.append(holder.read("apps.bash").title))

    with holder.exclusive() as config:
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        holder.apply_options({"apps.bash.title": "mid"})
        config.apps["bash"].title = "new"
    reader.join()

    assert seen == ["new"]
