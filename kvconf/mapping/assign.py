"""
结构合并器 (mapping/assign.py)
=============================
把 reconstruct() 产出的嵌套树合并进一个已存在的配置对象（原地修改）。

合并规则：
- 树中出现的键 → 对应字段被更新（分支递归进入子对象，叶子文本按声明类型转换后赋值）
- 树中未出现的键 → 字段保持不变（部分更新的核心保证：改一个选项不会把兄弟选项重置为默认值）
- 树中有但 schema 中没有的键 → 忽略，记录在 AssignResult.ignored 中（兼容新/旧版本留下的存储键）

错误策略：遇到第一个类型转换错误即中止，且不做任何修改（all-or-nothing）。
实现上分两阶段：
1. 规划阶段：遍历整棵树，完成全部类型转换，生成待执行的修改列表
2. 提交阶段：依次执行修改（只有 setattr / 字典赋值，不会再失败）

【Java 开发者类比】
- 类似于 Jackson 的 ObjectMapper.readerForUpdating(obj).readValue(json)，
  但增加了"先校验全部再提交"的事务语义
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache, partial
from typing import Any, Callable, get_args

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from kvconf.mapping.encoder import NULL_TEXT, encode_value, unescape_text
from kvconf.mapping.errors import SchemaError, StructuralConflictError, TypeCoercionError
from kvconf.mapping.nested import NestedTree
from kvconf.mapping.schema import (
    ConfigNode,
    NodeKind,
    allows_none,
    classify,
    is_record,
    is_record_type,
    node_map,
    unwrap_optional,
)


@dataclass
class AssignResult:
    """
    一次合并的结果。

    属性:
        applied: 已赋值的字段路径（点分形式）
        ignored: 因 schema 中不存在而被忽略的键路径
    """
    applied: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _reason(e: ValidationError) -> str:
    errors = e.errors()
    return errors[0]["msg"] if errors else str(e)


def _enum_member(enum_type: type[Enum], text: str) -> Enum:
    for member in enum_type:
        if encode_value(member.value) == text:
            return member
    choices = ", ".join(encode_value(m.value) for m in enum_type)
    raise ValueError(f"expected one of {choices}")


def coerce(value: Any, declared_type: Any, path: str = "") -> Any:
    """
    把叶子值转换为字段声明类型。

    - 文本 "null" 且类型允许 None → None
    - Enum 类型：按成员 value 的编码文本匹配（"2" → Level.HIGH）
    - 其他标量类型：去掉 escape_text 加的反斜杠后，pydantic 宽松模式校验
      （"3" → 3，"true" → True，"ab" → b"ab"，ISO 8601 → datetime）
    - 序列 / 字典 / 记录类型：按 JSON 文本解析后校验
    - 非文本值（调用方直接传入 Python 值）：直接校验

    异常:
        TypeCoercionError: 值无法转换为声明类型
    """
    adapter = _adapter(declared_type)
    try:
        if not isinstance(value, str):
            return adapter.validate_python(value)
        if value == NULL_TEXT and allows_none(declared_type):
            return None
        if classify(declared_type) is not NodeKind.SCALAR:
            return adapter.validate_json(value)
        base = unwrap_optional(declared_type)
        if isinstance(base, type) and issubclass(base, Enum):
            return _enum_member(base, value)
        return adapter.validate_python(unescape_text(value))
    except ValidationError as e:
        raise TypeCoercionError(path, declared_type, value, _reason(e)) from e
    except ValueError as e:
        raise TypeCoercionError(path, declared_type, value, str(e)) from e


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _new_record(tp: type, path: str) -> Any:
    try:
        return tp()
    except (ValidationError, TypeError) as e:
        raise SchemaError(f"cannot create a default {tp.__name__} for '{path}': {e}") from e


def _check_mutable(obj: Any, path: str) -> None:
    if isinstance(obj, BaseModel):
        frozen = obj.model_config.get("frozen", False)
    else:
        frozen = getattr(getattr(obj, "__dataclass_params__", None), "frozen", False)
    if frozen:
        raise SchemaError(f"'{path or type(obj).__name__}' is frozen and cannot be updated")


class _Planner:
    """规划阶段：收集全部修改，但不触碰目标对象。"""

    def __init__(self, result: AssignResult):
        self.result = result
        self.changes: list[Callable[[], None]] = []

    def record(self, tree: NestedTree, obj: Any, prefix: str) -> None:
        nodes = node_map(type(obj))
        for key, sub in tree.items():
            path = _join(prefix, key)
            node = nodes.get(key)
            if node is None:
                self.result.ignored.append(path)
                continue
            _check_mutable(obj, prefix)
            if isinstance(sub, dict):
                self.branch(sub, obj, node, path)
            else:
                value = coerce(sub, node.declared_type, path)
                self.changes.append(partial(setattr, obj, node.attr, value))
                self.result.applied.append(path)

    def branch(self, sub: NestedTree, obj: Any, node: ConfigNode, path: str) -> None:
        current = getattr(obj, node.attr)
        if node.kind is NodeKind.NESTED_RECORD:
            if not is_record(current):
                current = _new_record(node.record_type, path)
                self.changes.append(partial(setattr, obj, node.attr, current))
            self.record(sub, current, path)
        elif node.kind is NodeKind.MAPPING:
            if current is None:
                current = {}
                self.changes.append(partial(setattr, obj, node.attr, current))
            self.mapping(sub, current, node.value_type, path)
        else:
            raise StructuralConflictError(
                f"'{path}' is a {node.kind.value} field and cannot take nested keys", path
            )

    def mapping(self, sub: NestedTree, target: dict, value_type: Any, prefix: str) -> None:
        base = unwrap_optional(value_type)
        for key, entry in sub.items():
            path = _join(prefix, key)
            existing = target.get(key)
            if not isinstance(entry, dict):
                value = coerce(entry, value_type, path)
                self.changes.append(partial(target.__setitem__, key, value))
                self.result.applied.append(path)
            elif is_record_type(base):
                if not is_record(existing):
                    existing = _new_record(base, path)
                    self.changes.append(partial(target.__setitem__, key, existing))
                self.record(entry, existing, path)
            elif classify(base) is NodeKind.MAPPING:
                if not isinstance(existing, dict):
                    existing = {}
                    self.changes.append(partial(target.__setitem__, key, existing))
                args = get_args(base)
                self.mapping(entry, existing, args[1] if len(args) == 2 else Any, path)
            else:
                raise StructuralConflictError(
                    f"'{path}' holds {getattr(base, '__name__', base)} values and cannot take nested keys",
                    path,
                )


def assign(tree: NestedTree, target: Any) -> AssignResult:
    """
    把嵌套树合并进 target（原地修改）。

    参数:
        tree: reconstruct() 产出的嵌套树
        target: 已填充的配置对象（pydantic 模型或 dataclass 实例）

    返回:
        AssignResult，列出已赋值与被忽略的路径

    异常:
        SchemaError: target 不是记录，或需要修改的对象是 frozen 的
        TypeCoercionError: 任一叶子无法转换（此时 target 未被修改）
        StructuralConflictError: 为标量/序列字段提供了嵌套键
    """
    if not is_record(target):
        raise SchemaError(f"cannot assign into {type(target).__name__}: not a record")

    result = AssignResult()
    planner = _Planner(result)
    planner.record(tree, target, "")

    for change in planner.changes:
        change()

    for path in result.applied:
        logger.debug(f"Assigned option {path}")
    if result.ignored:
        logger.warning(f"Ignored unknown option keys: {', '.join(result.ignored)}")
    return result
