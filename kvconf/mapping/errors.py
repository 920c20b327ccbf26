"""
映射引擎异常类型定义 (mapping/errors.py)
=====================================
扁平化 / 重建 / 合并 过程中可能出现的所有错误。

异常层级：
KvconfError
├── SchemaError              - 输入不是记录类型，或 schema 本身有问题（如重复键名）
├── SerializationError       - 复合值（列表/字典）编码或解码失败
├── StructuralConflictError  - 扁平键路径冲突（同一路径既是叶子又是分支）
└── TypeCoercionError        - 文本无法转换为字段声明的类型

存储层的 StoreError 定义在 kvconf/store/base.py 中。
"""

from typing import Any


class KvconfError(Exception):
    """kvconf 所有业务异常的基类。"""


class SchemaError(KvconfError):
    """输入不是记录类型（pydantic 模型 / dataclass），或 schema 无法映射为扁平键。"""


class SerializationError(KvconfError):
    """复合值编码为文本或从文本解码失败。"""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class StructuralConflictError(KvconfError):
    """
    扁平键之间存在结构冲突。

    例如 "apps.x" 被赋为叶子值，而 "apps.x.y" 又要求 "apps.x" 是分支。
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class TypeCoercionError(KvconfError):
    """
    文本值无法转换为字段声明的类型。

    属性:
        path: 出错字段的点分路径（如 "apps.bash.priority"）
        declared_type: 字段声明类型
        value: 原始输入值
    """

    def __init__(self, path: str, declared_type: Any, value: Any, reason: str = ""):
        type_name = getattr(declared_type, "__name__", repr(declared_type))
        message = f"cannot convert {value!r} to {type_name} for '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path
        self.declared_type = declared_type
        self.value = value
