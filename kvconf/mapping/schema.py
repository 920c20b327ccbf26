"""
配置 schema 描述符注册表 (mapping/schema.py)
==========================================
把一个记录类（pydantic 模型或 dataclass）的字段一次性解析为 ConfigNode 描述符列表，
之后扁平化器（flatten）和合并器（assign）都只依赖这些描述符，而不是每次都重新做类型内省。

描述符按类缓存（lru_cache），因此同一个字段的规范键在进程生命周期内保持不变。

字段种类（NodeKind）：
- SCALAR：标量（str/int/float/bool/Enum/None 等）
- SEQUENCE：有序序列（list/tuple/set）——扁平化时作为叶子值整体保存
- NESTED_RECORD：嵌套记录——扁平化时递归展开为 "父键.子键"
- MAPPING：字典字段（如 apps: dict[str, AppConfig]）——扁平化时作为叶子值，
  合并时可以按条目递归

【Java 开发者类比】
- ConfigNode 类似于 Jackson 的 BeanPropertyDefinition
- describe() 类似于 Jackson 为每个类缓存的 BeanDescription
"""

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel

from kvconf.mapping.errors import SchemaError
from kvconf.mapping.naming import canonical_key

OPTION_KEY = "option_key"  # 字段元数据中显式指定扁平键的名称


class NodeKind(str, Enum):
    """字段种类。"""
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    NESTED_RECORD = "nested_record"
    MAPPING = "mapping"


@dataclass(frozen=True)
class ConfigNode:
    """
    单个配置字段的描述符。

    属性:
        name: 规范键片段（由 canonical_key 推导，决定扁平键）
        attr: Python 属性名（用于 getattr/setattr）
        kind: 字段种类
        declared_type: 字段声明类型（原始注解，可能是 Optional[...]）
    """
    name: str
    attr: str
    kind: NodeKind
    declared_type: Any

    @property
    def record_type(self) -> type | None:
        """NESTED_RECORD 字段对应的记录类，其他种类返回 None。"""
        if self.kind is not NodeKind.NESTED_RECORD:
            return None
        return unwrap_optional(self.declared_type)

    @property
    def value_type(self) -> Any:
        """MAPPING 字段的值类型（dict[str, X] 中的 X），无法确定时为 Any。"""
        args = get_args(unwrap_optional(self.declared_type))
        return args[1] if len(args) == 2 else Any


def is_record_type(tp: Any) -> bool:
    """判断类型是否为记录类型（pydantic 模型或 dataclass 类）。"""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def is_record(obj: Any) -> bool:
    """判断对象是否为记录实例（而不是记录类本身）。"""
    return not isinstance(obj, type) and is_record_type(type(obj))


def unwrap_optional(tp: Any) -> Any:
    """Optional[X] / X | None → X；其他类型原样返回。"""
    if get_origin(tp) in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def allows_none(tp: Any) -> bool:
    """类型是否接受 None（Optional[X]、X | None、Any）。"""
    if tp is Any or tp is type(None):
        return True
    if get_origin(tp) in (Union, types.UnionType):
        return type(None) in get_args(tp)
    return False


def classify(tp: Any) -> NodeKind:
    """根据声明类型判断字段种类。"""
    base = unwrap_optional(tp)
    if is_record_type(base):
        return NodeKind.NESTED_RECORD
    origin = get_origin(base) or base
    if isinstance(origin, type):
        if issubclass(origin, (str, bytes)):
            return NodeKind.SCALAR
        if issubclass(origin, Mapping):
            return NodeKind.MAPPING
        if issubclass(origin, (list, tuple, set, frozenset)):
            return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def _pydantic_fields(cls: type[BaseModel]) -> list[tuple[str, Any, str | None]]:
    fields = []
    for attr, info in cls.model_fields.items():
        alias = None
        if isinstance(info.json_schema_extra, dict):
            alias = info.json_schema_extra.get(OPTION_KEY)
        alias = alias or info.serialization_alias or info.alias
        fields.append((attr, info.annotation, alias))
    return fields


def _dataclass_fields(cls: type) -> list[tuple[str, Any, str | None]]:
    hints = typing.get_type_hints(cls)
    return [
        (f.name, hints.get(f.name, Any), f.metadata.get(OPTION_KEY))
        for f in dataclasses.fields(cls)
    ]


@lru_cache(maxsize=None)
def describe(cls: type) -> tuple[ConfigNode, ...]:
    """
    解析记录类的全部字段描述符（按声明顺序），结果按类缓存。

    参数:
        cls: pydantic 模型类或 dataclass 类

    返回:
        ConfigNode 元组

    异常:
        SchemaError: cls 不是记录类型，或两个字段推导出相同的规范键
    """
    if not is_record_type(cls):
        raise SchemaError(f"{cls!r} is not a record type")

    raw = _pydantic_fields(cls) if issubclass(cls, BaseModel) else _dataclass_fields(cls)

    nodes: list[ConfigNode] = []
    seen: dict[str, str] = {}
    for attr, annotation, alias in raw:
        name = canonical_key(attr, alias)
        if name in seen:
            raise SchemaError(
                f"{cls.__name__}: fields '{seen[name]}' and '{attr}' share the key '{name}'"
            )
        seen[name] = attr
        nodes.append(ConfigNode(name=name, attr=attr, kind=classify(annotation), declared_type=annotation))
    return tuple(nodes)


def node_map(cls: type) -> dict[str, ConfigNode]:
    """规范键 → 描述符 的映射，便于合并时按键查找。"""
    return {node.name: node for node in describe(cls)}
