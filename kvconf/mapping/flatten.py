"""
扁平化器 (mapping/flatten.py)

把嵌套的配置对象展开为 {"父键.子键": 叶子值} 形式的扁平映射。
叶子值保持原始 Python 值（未编码），编码由 encoder.encode_options 负责。

示例:
    Outer(inner=Inner(x=1), tags=["a"])  →  {"inner.x": 1, "tags": ["a"]}
"""

from typing import Any

from kvconf.mapping.errors import SchemaError
from kvconf.mapping.schema import describe, is_record

SEPARATOR = "."


def flatten(obj: Any, strict: bool = True) -> dict[str, Any]:
    """
    递归展开配置对象。

    - 字段值是记录 → 递归展开，子键加上 "父键." 前缀
    - 其他值（标量、序列、字典、None）→ 原样作为叶子值保存，不再深入

    参数:
        obj: pydantic 模型实例 / dataclass 实例 / ConfigHolder
        strict: 为 True 时非记录输入抛出 SchemaError；为 False 时返回空字典

    返回:
        扁平键 → 叶子值 的字典（按字段声明顺序）
    """
    from kvconf.config.holder import ConfigHolder

    if isinstance(obj, ConfigHolder):
        obj = obj.read()

    if not is_record(obj):
        if strict:
            raise SchemaError(f"cannot flatten {type(obj).__name__}: not a record")
        return {}

    result: dict[str, Any] = {}
    for node in describe(type(obj)):
        value = getattr(obj, node.attr)
        if is_record(value):
            for child_key, child_value in flatten(value).items():
                result[node.name + SEPARATOR + child_key] = child_value
        else:
            result[node.name] = value
    return result
