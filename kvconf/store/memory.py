"""内存选项存储 - 进程内字典实现，主要用于测试和临时运行。"""

import threading

from loguru import logger

from kvconf.store.base import OptionNotFoundError, OptionStore, matches_prefix


class MemoryOptionStore(OptionStore):
    """基于字典的选项存储。进程退出后数据丢失。"""

    name = "memory"

    def __init__(self, options: dict[str, str] | None = None):
        self._options: dict[str, str] = dict(options or {})
        self._lock = threading.Lock()

    def set_option(self, key: str, value: str) -> None:
        with self._lock:
            self._options[key] = value
        logger.debug(f"Option set: {key}")

    def delete_options(self, prefix: str) -> None:
        with self._lock:
            keys = [k for k in self._options if matches_prefix(k, prefix)]
            if not keys:
                raise OptionNotFoundError(f"no options under '{prefix}'")
            for k in keys:
                del self._options[k]
        logger.debug(f"Deleted {len(keys)} options under {prefix}")

    def get_options(self, prefix: str = "") -> dict[str, str]:
        with self._lock:
            return {k: v for k, v in self._options.items() if matches_prefix(k, prefix)}
