"""
选项存储模块 (store)
===================
kvconf 的持久化边界：一个只接受文本值的简单键值存储。

- base.py：OptionStore 抽象接口与存储异常
- memory.py：内存实现
- json_store.py：JSON 文件实现
- writer.py：多键写入（部分成功语义）
"""

from kvconf.store.base import (
    OptionNotFoundError,
    OptionStore,
    PartialWriteError,
    StoreError,
    matches_prefix,
)
from kvconf.store.json_store import JsonFileOptionStore
from kvconf.store.memory import MemoryOptionStore
from kvconf.store.writer import option_key, write_options

__all__ = [
    "JsonFileOptionStore",
    "MemoryOptionStore",
    "OptionNotFoundError",
    "OptionStore",
    "PartialWriteError",
    "StoreError",
    "matches_prefix",
    "option_key",
    "write_options",
]
