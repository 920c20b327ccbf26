"""
复合值编码器 (mapping/encoder.py)
================================
选项存储只接受文本值，因此每个叶子值写入前都要转换为字符串：

- 序列（list/tuple/set）和字典 → 紧凑 JSON，如 ["a","b"]
- 布尔 → "true" / "false"
- 整数 → str(value)；浮点数 → repr(value)（与区域设置无关，可无损往返）
- None → "null"
- Enum → 其 value 的文本
- 字符串 → 原样；恰好是 "null"（或若干反斜杠加 "null"）的字符串前面再加一个反斜杠，
  以便和 None 区分
- 其他标量（bytes、datetime、Decimal、UUID 等）→ pydantic 的 JSON 文本形式，
  如 b"ab" → "ab"，datetime → ISO 8601

【Java 开发者类比】
- 类似于 Spring 的 ConversionService，只是方向固定为 对象 → String
"""

import json
import re
from enum import Enum
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from kvconf.mapping.errors import SerializationError

NULL_TEXT = "null"
ESCAPE = "\\"

_NULL_LIKE = re.compile(r"\\*null")


def _is_composite(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset, dict))


def escape_text(text: str) -> str:
    """把会与 NULL_TEXT 混淆的字符串（"null"、"\\null"、...）多加一个反斜杠。"""
    return ESCAPE + text if _NULL_LIKE.fullmatch(text) else text


def unescape_text(text: str) -> str:
    """escape_text 的逆操作。"""
    if text.startswith(ESCAPE) and _NULL_LIKE.fullmatch(text):
        return text[1:]
    return text


def encode_value(value: Any, key: str | None = None) -> str:
    """
    把单个叶子值编码为可存储的文本。

    参数:
        value: 扁平化器产出的叶子值
        key: 所属扁平键（仅用于错误信息）

    异常:
        SerializationError: 值（或复合值中的元素）无法转为 JSON 文本，
            例如不是合法 UTF-8 的 bytes
    """
    if _is_composite(value):
        try:
            return json.dumps(
                to_jsonable_python(value),
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError(f"cannot encode value of '{key}': {e}", key=key) from e

    if value is None:
        return NULL_TEXT
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return encode_value(value.value, key)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return escape_text(value)

    try:
        data = to_jsonable_python(value)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode value of '{key}': {e}", key=key) from e
    if isinstance(data, str):
        return escape_text(data)
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def encode_options(flat: dict[str, Any]) -> dict[str, str]:
    """
    编码整组扁平键值。任一值编码失败立即抛出，不返回部分结果，
    保证后续写入步骤不会消费到半成品。
    """
    return {key: encode_value(value, key) for key, value in flat.items()}


def decode_sequence(text: str) -> list[Any]:
    """把编码后的序列文本还原为列表（保持元素顺序）。"""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"malformed sequence text {text!r}: {e}") from e
    if not isinstance(data, list):
        raise SerializationError(f"expected a JSON array, got {type(data).__name__}")
    return data
