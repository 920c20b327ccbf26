"""
应用设置服务 (apps/service.py)
=============================
管理各应用（ansible / terraform / bash 等）的启动器设置。每个应用的每个字段都独立保存在
选项存储中，键为 "apps.<应用ID>.<字段键>"，因此可以单独修改某一个字段而不影响其他字段。

操作一览：
- list_apps：内置应用 + 已配置应用的摘要列表
- get_app：读取单个应用的完整设置
- set_app：整体写入一个应用的设置（逐字段写入存储，再合并进运行时配置）
- set_app_active：只修改 active 开关
- delete_app：删除一个应用的全部持久化选项，并从运行时配置中移除

写入语义（重要）：
set_app 逐键写入，不具备跨键原子性。某个键写入失败时，之前已写入的键保留在存储中，
并且同样会合并进运行时配置，保证运行时配置与存储一致；随后 PartialWriteError 继续向上抛出。

并发：每个写操作在 ConfigHolder.exclusive() 内完成「写存储 + 合并」，
多个调用方同时写同一应用时，存储与运行时配置总是停在同一个调用方的值上。

【Java 开发者类比】
- AppService 类似于 Spring 的 @Service 类，ConfigHolder 和 OptionStore 是注入的依赖
"""

import re

from loguru import logger

from kvconf.config.holder import ConfigHolder
from kvconf.config.loader import APPS_PREFIX
from kvconf.config.schema import AppConfig, AppSummary, Config
from kvconf.mapping.assign import AssignResult
from kvconf.mapping.encoder import encode_options, encode_value
from kvconf.mapping.errors import KvconfError
from kvconf.mapping.flatten import flatten
from kvconf.store.base import OptionNotFoundError, OptionStore, PartialWriteError
from kvconf.store.writer import option_key, write_options

# 内置应用：即使没有任何配置也会出现在列表中
DEFAULT_APP_IDS = ("ansible", "terraform", "tofu", "bash", "powershell", "python")

_APP_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class AppNotFoundError(KvconfError):
    """请求的应用 ID 不存在于运行时配置中。"""


class InvalidAppIdError(KvconfError):
    """应用 ID 为空或含有非法字符（尤其是键分隔符 "."）。"""


def validate_app_id(app_id: str) -> str:
    """
    校验应用 ID。

    应用 ID 会成为扁平键的一段，因此不能为空，也不能包含 "."，
    否则 "apps.<id>.title" 会被拆成错误的层级。
    """
    if not app_id or not _APP_ID_RE.match(app_id):
        raise InvalidAppIdError(f"invalid app id {app_id!r}")
    return app_id


class AppService:
    """应用设置的读写入口。"""

    def __init__(self, holder: ConfigHolder, store: OptionStore):
        self.holder = holder
        self.store = store

    def _prefix(self, app_id: str) -> str:
        return option_key(APPS_PREFIX, app_id)

    def list_apps(self) -> list[AppSummary]:
        """返回内置应用与已配置应用合并后的摘要列表（按 ID 排序）。"""
        config: Config = self.holder.read()
        apps = {app_id: AppConfig() for app_id in DEFAULT_APP_IDS}
        apps.update(config.apps)
        return [
            AppSummary(
                id=app_id,
                title=app.title,
                icon=app.icon,
                color=app.color,
                dark_color=app.dark_color,
                active=app.active,
            )
            for app_id, app in sorted(apps.items())
        ]

    def get_app(self, app_id: str) -> AppConfig:
        """读取单个应用设置的快照。"""
        validate_app_id(app_id)
        try:
            return self.holder.read(self._prefix(app_id))
        except KeyError:
            raise AppNotFoundError(f"app '{app_id}' not found") from None

    def set_app(self, app_id: str, app: AppConfig) -> AssignResult:
        """
        写入一个应用的全部字段。

        流程：flatten → encode_options（全部编码成功后才开始写）→ write_options → 合并进运行时配置

        异常:
            SerializationError: 某个字段无法编码（此时没有任何写入）
            PartialWriteError: 某个键写入失败（已写入的键保留并已合并）
        """
        validate_app_id(app_id)
        prefix = self._prefix(app_id)
        encoded = encode_options(flatten(app))

        with self.holder.exclusive():
            try:
                write_options(self.store, prefix, encoded)
            except PartialWriteError as e:
                if e.written:
                    self._apply(prefix, encoded, e.written)
                raise

            result = self._apply(prefix, encoded, [option_key(prefix, k) for k in encoded])
        logger.info(f"App '{app_id}' saved ({len(encoded)} options)")
        return result

    def set_app_active(self, app_id: str, active: bool) -> AssignResult:
        """只修改应用的 active 开关。"""
        validate_app_id(app_id)
        key = option_key(self._prefix(app_id), "active")
        value = encode_value(active, key)
        with self.holder.exclusive():
            self.store.set_option(key, value)
            result = self.holder.apply_options({key: value})
        logger.info(f"App '{app_id}' active={active}")
        return result

    def delete_app(self, app_id: str) -> None:
        """删除应用的全部持久化选项并从运行时配置中移除。存储中本来就没有该应用时视为成功。"""
        validate_app_id(app_id)
        with self.holder.exclusive() as config:
            try:
                self.store.delete_options(self._prefix(app_id))
            except OptionNotFoundError:
                logger.warning(f"No persisted options for app '{app_id}'")
            config.apps.pop(app_id, None)
        logger.info(f"App '{app_id}' deleted")

    def _apply(self, prefix: str, encoded: dict[str, str], written: list[str]) -> AssignResult:
        """把已写入存储的键合并进运行时配置。"""
        options = {option_key(prefix, k): v for k, v in encoded.items()}
        return self.holder.apply_options({k: options[k] for k in written})
