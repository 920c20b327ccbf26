"""
配置模块 (config)
================
本模块是 kvconf 的配置系统入口，负责：
1. 定义配置数据模型（schema.py）—— 使用 Pydantic 定义所有配置项的结构和默认值
2. 持有运行时配置对象（holder.py）—— 互斥锁保护的唯一所有者
3. 加载/保存配置文件（loader.py）—— JSON 文件 + 选项存储中的持久化选项

对于 Java 开发者：
- Pydantic 的 BaseModel 类似于 Java 中的 POJO/DTO，但自带数据验证功能
- Config 类似于 Spring Boot 的 @ConfigurationProperties，将配置文件映射为类型安全的对象
"""

from kvconf.config.holder import ConfigHolder
from kvconf.config.loader import get_config_path, load_config, load_options, make_store, save_config
from kvconf.config.schema import AppConfig, Config

__all__ = [
    "AppConfig",
    "Config",
    "ConfigHolder",
    "get_config_path",
    "load_config",
    "load_options",
    "make_store",
    "save_config",
]
