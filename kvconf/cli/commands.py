"""
CLI 命令模块 - kvconf 的所有命令行命令定义。

本模块使用 Typer 框架定义 kvconf 的完整 CLI 命令体系：
- init：创建默认配置文件
- status：查看配置文件、存储后端和应用数量
- apps：应用设置管理（list / get / set / active / delete）
- options：查看选项存储中的原始扁平键值

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出（表格、JSON 高亮等）
- Loguru：日志输出（--verbose 时打开 DEBUG 级别）
"""

import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kvconf import __logo__, __version__

# 创建 Typer 应用实例（CLI 根命令）
app = typer.Typer(
    name="kvconf",
    help=f"{__logo__} kvconf - nested config ⇄ flat option store",
    no_args_is_help=True,
)

console = Console()

_CONFIG_PATH: Path | None = None  # --config 指定的配置文件路径（None 表示默认路径）


def version_callback(value: bool):
    """版本号回调：当用户传入 --version 参数时，打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} kvconf v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """kvconf CLI 根命令回调。处理全局选项（配置文件路径、日志级别、版本号）。"""
    global _CONFIG_PATH
    _CONFIG_PATH = config

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _fail(e: Exception) -> None:
    """打印错误并以退出码 1 结束。"""
    console.print(f"[red]Error: {escape(str(e))}[/red]")
    raise typer.Exit(1)


def _make_service():
    """
    按启动流程组装应用服务：
    1. 加载配置文件
    2. 创建选项存储
    3. 把存储中的持久化选项合并进运行时配置
    """
    from kvconf.apps.service import AppService
    from kvconf.config.holder import ConfigHolder
    from kvconf.config.loader import load_config, load_options, make_store
    from kvconf.mapping.errors import KvconfError
    from kvconf.store.base import StoreError

    config = load_config(_CONFIG_PATH)
    holder = ConfigHolder(config)
    store = make_store(config)
    try:
        load_options(store, holder)
    except (KvconfError, StoreError) as e:
        _fail(e)
    return AppService(holder, store)


# ============================================================================
# Init / Status
# ============================================================================


@app.command()
def init():
    """在配置路径下创建默认配置文件（已存在时询问是否覆盖）。"""
    from kvconf.config.loader import get_config_path, save_config
    from kvconf.config.schema import Config

    config_path = _CONFIG_PATH or get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")


@app.command()
def status():
    """显示配置文件、选项存储和应用数量。"""
    from kvconf.config.loader import get_config_path, load_config

    config_path = _CONFIG_PATH or get_config_path()
    config = load_config(_CONFIG_PATH)

    console.print(f"{__logo__} kvconf Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")
    if config.store.backend == "file":
        store_path = config.store.resolved_path
        console.print(f"Store: file {store_path} {'[green]✓[/green]' if store_path.exists() else '[dim]empty[/dim]'}")
    else:
        console.print("Store: memory")

    service = _make_service()
    console.print(f"Apps: {len(service.list_apps())}")


# ============================================================================
# App Commands
# ============================================================================

apps_app = typer.Typer(help="Manage app settings")
app.add_typer(apps_app, name="apps")


@apps_app.command("list")
def apps_list():
    """以表格形式列出全部应用（内置 + 已配置）。"""
    service = _make_service()

    table = Table(title="Apps")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Icon")
    table.add_column("Color")
    table.add_column("Status")

    for summary in service.list_apps():
        status = "[green]active[/green]" if summary.active else "[dim]inactive[/dim]"
        table.add_row(summary.id, escape(summary.title), escape(summary.icon), escape(summary.color), status)

    console.print(table)


@apps_app.command("get")
def apps_get(
    app_id: str = typer.Argument(..., help="App ID"),
):
    """以 JSON 形式打印单个应用的设置。"""
    from kvconf.mapping.errors import KvconfError

    service = _make_service()
    try:
        app_config = service.get_app(app_id)
    except KvconfError as e:
        _fail(e)
    console.print_json(app_config.model_dump_json(by_alias=True))


@apps_app.command("set")
def apps_set(
    app_id: str = typer.Argument(..., help="App ID"),
    data: str = typer.Option(None, "--json", "-j", help="App settings as a JSON object"),
    file: Path = typer.Option(None, "--file", "-f", help="Read app settings from a JSON file"),
):
    """
    写入一个应用的全部设置。

    设置可以通过 --json 直接传入，或通过 --file 从文件读取；未给出的字段使用默认值。
    """
    from kvconf.config.schema import AppConfig
    from kvconf.mapping.errors import KvconfError
    from kvconf.store.base import StoreError

    if file is not None:
        data = file.read_text(encoding="utf-8")
    if not data:
        console.print("[red]Error: Must specify --json or --file[/red]")
        raise typer.Exit(1)

    service = _make_service()
    try:
        app_config = AppConfig.model_validate_json(data)
        service.set_app(app_id, app_config)
    except (ValidationError, KvconfError, StoreError) as e:
        _fail(e)
    console.print(f"[green]✓[/green] Saved app '{app_id}'")


@apps_app.command("active")
def apps_active(
    app_id: str = typer.Argument(..., help="App ID"),
    disable: bool = typer.Option(False, "--disable", help="Deactivate instead of activate"),
):
    """激活或停用应用。使用 --disable 标志来停用。"""
    from kvconf.mapping.errors import KvconfError
    from kvconf.store.base import StoreError

    service = _make_service()
    try:
        service.set_app_active(app_id, not disable)
    except (KvconfError, StoreError) as e:
        _fail(e)
    console.print(f"[green]✓[/green] App '{app_id}' {'deactivated' if disable else 'activated'}")


@apps_app.command("delete")
def apps_delete(
    app_id: str = typer.Argument(..., help="App ID to delete"),
):
    """删除应用的全部持久化设置。"""
    from kvconf.mapping.errors import KvconfError
    from kvconf.store.base import StoreError

    service = _make_service()
    try:
        service.delete_app(app_id)
    except (KvconfError, StoreError) as e:
        _fail(e)
    console.print(f"[green]✓[/green] Deleted app '{app_id}'")


# ============================================================================
# Option Commands
# ============================================================================

options_app = typer.Typer(help="Inspect the raw option store")
app.add_typer(options_app, name="options")


@options_app.command("list")
def options_list(
    prefix: str = typer.Option("", "--prefix", "-p", help="Only keys under this prefix"),
):
    """列出选项存储中的扁平键值。"""
    from kvconf.config.loader import load_config, make_store
    from kvconf.store.base import StoreError

    store = make_store(load_config(_CONFIG_PATH))
    try:
        options = store.get_options(prefix)
    except StoreError as e:
        _fail(e)

    if not options:
        console.print("No options.")
        return

    table = Table(title="Options")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in sorted(options.items()):
        table.add_row(escape(key), escape(value))

    console.print(table)


if __name__ == "__main__":
    app()
