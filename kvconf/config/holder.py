"""
运行时配置持有者 (config/holder.py)
=================================
进程内只有一份「活」的配置对象，所有请求处理方都共享它。ConfigHolder 是它唯一的所有者：

- read()：在锁内取一份深拷贝返回，调用方拿到的是快照，不会看到合并到一半的状态
- assign() / apply_options()：在锁内把嵌套树合并进配置对象，整个合并过程对其他读写是原子的
- mutate()：在锁内执行任意修改（如删除某个应用）
- exclusive()：持有锁执行一组操作（如先写选项存储再合并），期间其他读写全部等待

【Java 开发者类比】
- 类似于用 ReentrantLock 保护的 AtomicReference<Config>
- read() 返回防御性拷贝，相当于 Collections.unmodifiableMap 的效果
"""

import copy
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from kvconf.mapping.assign import AssignResult, assign
from kvconf.mapping.errors import SchemaError
from kvconf.mapping.nested import NestedTree, reconstruct
from kvconf.mapping.schema import is_record, node_map

T = TypeVar("T")


class ConfigHolder:
    """用互斥锁保护的配置对象句柄。所有读写都经由它串行化。"""

    def __init__(self, config: Any):
        if not is_record(config):
            raise SchemaError(f"cannot hold {type(config).__name__}: not a record")
        self._config = config
        self._lock = threading.RLock()

    def read(self, path: str | None = None) -> Any:
        """
        读取当前配置（或某个子分支）的快照。

        参数:
            path: 可选的点分路径，如 "apps.bash"；为 None 时返回整个配置

        返回:
            深拷贝后的对象；路径不存在时抛出 KeyError
        """
        with self._lock:
            return copy.deepcopy(self._resolve(path) if path else self._config)

    def _resolve(self, path: str) -> Any:
        node: Any = self._config
        for segment in path.split("."):
            if isinstance(node, dict):
                if segment not in node:
                    raise KeyError(path)
                node = node[segment]
            elif is_record(node):
                field = node_map(type(node)).get(segment)
                if field is None:
                    raise KeyError(path)
                node = getattr(node, field.attr)
            else:
                raise KeyError(path)
        return node

    def assign(self, tree: NestedTree) -> AssignResult:
        """把嵌套树合并进配置对象（与其他读写互斥）。"""
        with self._lock:
            return assign(tree, self._config)

    def apply_options(self, flat: dict[str, str]) -> AssignResult:
        """由扁平键值重建嵌套树后合并。键是相对于根配置的完整路径（如 "apps.bash.title"）。"""
        tree = reconstruct(flat)
        return self.assign(tree)

    def mutate(self, fn: Callable[[Any], T]) -> T:
        """在锁内对配置对象执行任意修改，返回 fn 的返回值。"""
        with self._lock:
            return fn(self._config)

    @contextmanager
    def exclusive(self) -> Iterator[Any]:
        """
        在 with 块内独占配置对象。

        锁是可重入的，块内仍可调用 read / assign / apply_options / mutate。
        用于把「写选项存储」和「合并进运行时配置」合成一步，
        避免并发写入交错后存储与运行时配置不一致。
        """
        with self._lock:
            yield self._config
