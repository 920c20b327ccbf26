"""
配置加载工具模块 (config/loader.py)
=================================
本模块负责 kvconf 配置的加载、保存，以及把选项存储中的持久化状态叠加到配置对象上：
- 配置文件默认路径: ~/.kvconf/config.json
- 启动流程: 默认值 → config.json → 环境变量（KVCONF_*）→ 选项存储中的 apps.* 选项

对于 Java 开发者：
- 类似于 Spring Boot 的 application.yml 加载机制
- load_options 类似于从数据库表中读取运行时可修改的配置项并覆盖静态配置
"""

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from kvconf.config.holder import ConfigHolder
from kvconf.config.schema import Config
from kvconf.mapping.assign import AssignResult
from kvconf.store.base import OptionStore
from kvconf.store.json_store import JsonFileOptionStore
from kvconf.store.memory import MemoryOptionStore

APPS_PREFIX = "apps"  # 应用设置在选项存储中的键前缀


def get_config_path() -> Path:
    """获取默认配置文件路径: ~/.kvconf/config.json"""
    return Path.home() / ".kvconf" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    从 JSON 文件加载配置，若文件不存在则返回默认配置。

    参数:
        config_path: 可选的配置文件路径。为 None 时使用默认路径。

    返回:
        Config 配置对象实例
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return Config(**data)  # 经 BaseSettings 初始化，文件中未出现的项仍可由环境变量提供
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            # 配置文件损坏时降级使用默认配置，而非直接报错退出
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    将配置对象保存为 JSON 文件（字段使用外部名称，如 path / args）。

    参数:
        config: 要保存的配置对象
        config_path: 可选的保存路径。为 None 时使用默认路径。
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def make_store(config: Config) -> OptionStore:
    """根据 store.backend 创建选项存储后端。"""
    if config.store.backend == "memory":
        return MemoryOptionStore()
    return JsonFileOptionStore(config.store.resolved_path)


def load_options(store: OptionStore, holder: ConfigHolder, prefix: str = APPS_PREFIX) -> AssignResult:
    """
    把选项存储中 prefix 下的全部持久化选项合并进运行时配置。

    参数:
        store: 选项存储
        holder: 运行时配置持有者
        prefix: 要加载的键前缀，默认 "apps"

    返回:
        合并结果
    """
    options = store.get_options(prefix)
    if not options:
        return AssignResult()
    result = holder.apply_options(options)
    logger.info(f"Loaded {len(result.applied)} persisted options under '{prefix}'")
    return result
