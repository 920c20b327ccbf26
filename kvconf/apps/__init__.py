"""
应用设置模块 (apps)
==================
基于映射引擎和选项存储实现的应用启动器设置管理。

- AppService：应用设置的增删改查
- DEFAULT_APP_IDS：内置应用 ID 列表
"""

from kvconf.apps.service import (
    DEFAULT_APP_IDS,
    AppNotFoundError,
    AppService,
    InvalidAppIdError,
    validate_app_id,
)

__all__ = ["DEFAULT_APP_IDS", "AppNotFoundError", "AppService", "InvalidAppIdError", "validate_app_id"]
