"""
映射引擎 (mapping)
=================
kvconf 的核心：在「类型化的嵌套配置对象」与「点分扁平键值」之间双向转换。

写路径：配置对象 → flatten() → encode_options() → 选项存储
更新路径：扁平键值 → reconstruct() → assign() → 原地修改的配置对象

各子模块：
- naming.py：规范键命名规则
- schema.py：字段描述符注册表（ConfigNode）
- flatten.py：扁平化器
- encoder.py：复合值编码器
- nested.py：嵌套树重建器
- assign.py：结构合并器
- errors.py：异常类型
"""

from kvconf.mapping.assign import AssignResult, assign, coerce
from kvconf.mapping.encoder import decode_sequence, encode_options, encode_value
from kvconf.mapping.errors import (
    KvconfError,
    SchemaError,
    SerializationError,
    StructuralConflictError,
    TypeCoercionError,
)
from kvconf.mapping.flatten import flatten
from kvconf.mapping.naming import canonical_key
from kvconf.mapping.nested import NestedTree, flatten_tree, reconstruct
from kvconf.mapping.schema import ConfigNode, NodeKind, describe

__all__ = [
    "AssignResult",
    "ConfigNode",
    "KvconfError",
    "NestedTree",
    "NodeKind",
    "SchemaError",
    "SerializationError",
    "StructuralConflictError",
    "TypeCoercionError",
    "assign",
    "canonical_key",
    "coerce",
    "decode_sequence",
    "describe",
    "encode_options",
    "encode_value",
    "flatten",
    "flatten_tree",
    "reconstruct",
]
