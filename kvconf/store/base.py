"""
选项存储抽象接口 (store/base.py)
==============================
定义所有选项存储后端必须实现的接口。kvconf 只要求一个最简单的键值存储：

- set_option(key, value)：写入单个文本值
- delete_options(prefix)：删除某个前缀下的全部键（没有匹配键时抛出 OptionNotFoundError）
- get_options(prefix)：读取某个前缀下的全部键值

前缀匹配规则：前缀本身以及所有以 "前缀." 开头的键。
例如 delete_options("apps.bash") 会删除 "apps.bash.title"，但不会删除 "apps.bash2.title"。

【Java 开发者类比】
- OptionStore 类似于 Spring Data 的 Repository 接口
- 各后端（内存 / JSON 文件）类似于不同的 Repository 实现
"""

from abc import ABC, abstractmethod


class StoreError(Exception):
    """存储后端调用失败。"""


class OptionNotFoundError(StoreError):
    """delete_options 没有匹配到任何键。调用方通常把它当作成功处理。"""


class PartialWriteError(StoreError):
    """
    多键写入过程中某个键写入失败。

    写入不具备跨键原子性：失败之前已写入的键仍然保留在存储中，不会回滚。

    属性:
        key: 写入失败的完整键
        written: 失败之前已成功写入的完整键列表
    """

    def __init__(self, key: str, written: list[str], cause: Exception):
        super().__init__(f"failed to write option '{key}' ({len(written)} written before it): {cause}")
        self.key = key
        self.written = written
        self.cause = cause


def matches_prefix(key: str, prefix: str) -> bool:
    """判断 key 是否位于 prefix 之下（空前缀匹配所有键）。"""
    if not prefix:
        return True
    return key == prefix or key.startswith(prefix + ".")


class OptionStore(ABC):
    """选项存储后端的抽象基类。实现类的每次调用都是同步的，失败立即抛出 StoreError，不做重试。"""

    name: str = "base"

    @abstractmethod
    def set_option(self, key: str, value: str) -> None:
        """写入单个选项（覆盖已有值）。"""
        pass

    @abstractmethod
    def delete_options(self, prefix: str) -> None:
        """
        删除 prefix 下的全部选项。

        异常:
            OptionNotFoundError: 没有任何匹配的键
        """
        pass

    @abstractmethod
    def get_options(self, prefix: str = "") -> dict[str, str]:
        """读取 prefix 下的全部选项。"""
        pass
