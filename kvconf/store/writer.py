"""
多键写入 (store/writer.py)

把一组已编码的扁平键值逐个写入选项存储，完整键为 "前缀.扁平键"。

注意：写入不具备跨键原子性。第 N 个键写入失败时，前 N-1 个键已经持久化，
不会回滚；调用方收到的 PartialWriteError 会标明失败的键和已写入的键。
需要原子性的调用方应在存储后端自行实现事务。
"""

from loguru import logger

from kvconf.store.base import OptionStore, PartialWriteError, StoreError


def option_key(prefix: str, key: str) -> str:
    """拼接存储键：前缀为空时直接返回扁平键。"""
    return f"{prefix}.{key}" if prefix else key


def write_options(store: OptionStore, prefix: str, encoded: dict[str, str]) -> list[str]:
    """
    依次写入 encoded 中的每个键值（按字典顺序，即字段声明顺序）。

    参数:
        store: 选项存储
        prefix: 键前缀（如 "apps.bash"）
        encoded: 扁平键 → 已编码文本

    返回:
        已写入的完整键列表

    异常:
        PartialWriteError: 某个键写入失败（之前的写入保留，不重试）
    """
    written: list[str] = []
    for key, value in encoded.items():
        full_key = option_key(prefix, key)
        try:
            store.set_option(full_key, value)
        except StoreError as e:
            logger.error(f"Failed to write option {full_key}: {e}")
            raise PartialWriteError(full_key, written, e) from e
        written.append(full_key)
    return written
