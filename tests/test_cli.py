from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from kvconf import __version__
from kvconf.cli.commands import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"store": {"backend": "file", "path": str(tmp_path / "options.json")}}),
        encoding="utf-8",
    )
    return path


def _invoke(config_path: Path, *args: str):
    return runner.invoke(app, ["--config", str(config_path), *args])


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_creates_config(tmp_path: Path) -> None:
    path = tmp_path / "new" / "config.json"

    result = runner.invoke(app, ["--config", str(path), "init"])

    assert result.exit_code == 0
    assert json.loads(path.read_text(encoding="utf-8"))["store"]["backend"] == "file"


def test_set_get_and_list_options(config_path: Path, tmp_path: Path) -> None:
    result = _invoke(config_path, "apps", "set", "bash", "--json", '{"title": "Bash", "args": ["-c"]}')
    assert result.exit_code == 0, result.output

    stored = json.loads((tmp_path / "options.json").read_text(encoding="utf-8"))["options"]
    assert stored["apps.bash.title"] == "Bash"
    assert stored["apps.bash.args"] == '["-c"]'

    result = _invoke(config_path, "apps", "get", "bash")
    assert result.exit_code == 0
    assert '"title": "Bash"' in result.output

    result = _invoke(config_path, "options", "list", "--prefix", "apps.bash")
    assert result.exit_code == 0
    assert "apps.bash.title" in result.output


def test_active_then_delete(config_path: Path, tmp_path: Path) -> None:
    assert _invoke(config_path, "apps", "active", "python").exit_code == 0

    stored = json.loads((tmp_path / "options.json").read_text(encoding="utf-8"))["options"]
    assert stored == {"apps.python.active": "true"}

    result = _invoke(config_path, "apps", "delete", "python")
    assert result.exit_code == 0
    assert json.loads((tmp_path / "options.json").read_text(encoding="utf-8"))["options"] == {}


def test_list_shows_default_apps(config_path: Path) -> None:
    result = _invoke(config_path, "apps", "list")

    assert result.exit_code == 0
    assert "ansible" in result.output
    assert "terraform" in result.output


def test_errors_exit_with_code_one(config_path: Path) -> None:
    missing = _invoke(config_path, "apps", "get", "nothing")
    invalid = _invoke(config_path, "apps", "set", "bash", "--json", '{"priority": "high"}')
    no_input = _invoke(config_path, "apps", "set", "bash")

    assert missing.exit_code == 1
    assert "not found" in missing.output
    assert invalid.exit_code == 1
    assert no_input.exit_code == 1


def test_status_reports_config_store_and_app_count(config_path: Path, tmp_path: Path) -> None:
    store_path = tmp_path / "options.json"

    before = _invoke(config_path, "status")
    assert before.exit_code == 0, before.output
    text = "".join(before.output.split())
    assert f"Config:{config_path}✓" in text
    assert f"Store:file{store_path}empty" in text
    assert "Apps:6" in text

    assert _invoke(config_path, "apps", "set", "custom", "--json", '{"title": "Custom"}').exit_code == 0

    after = _invoke(config_path, "status")
    assert after.exit_code == 0, after.output
    text = "".join(after.output.split())
    assert f"Store:file{store_path}✓" in text
    assert "Apps:7" in text


def test_status_with_memory_store(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"store": {"backend": "memory"}}), encoding="utf-8")

    result = _invoke(path, "status")

    assert result.exit_code == 0, result.output
    assert "Store: memory" in result.output
    assert "Apps: 6" in result.output
