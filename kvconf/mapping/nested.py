"""
嵌套树重建器 (mapping/nested.py)

把 {"apps.bash.title": "Bash"} 形式的扁平键值按分隔符逐层拆开，
还原为 {"apps": {"bash": {"title": "Bash"}}} 形式的嵌套字典树。
flatten_tree 是其逆操作。
"""

from typing import Any

from kvconf.mapping.errors import StructuralConflictError

NestedTree = dict[str, Any]  # 值为文本（叶子）或另一个 NestedTree（分支）


def reconstruct(flat: dict[str, Any], sep: str = ".") -> NestedTree:
    """
    由扁平键值重建嵌套树。

    结果只取决于输入键值集合，与遍历顺序无关：同一路径既被用作叶子又被用作分支时，
    无论哪一个先出现都会抛出 StructuralConflictError，而不是静默覆盖。

    参数:
        flat: 扁平键 → 文本值
        sep: 键分隔符，默认 "."

    异常:
        StructuralConflictError: 叶子/分支冲突，或键中含空片段（如 "a..b"）
    """
    tree: NestedTree = {}
    for key, value in flat.items():
        segments = key.split(sep)
        if not all(segments):
            raise StructuralConflictError(f"key {key!r} has an empty segment", key)

        node = tree
        for depth, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                path = sep.join(segments[: depth + 1])
                raise StructuralConflictError(
                    f"'{path}' holds a value and cannot also contain '{key}'", path
                )
            node = child

        leaf = segments[-1]
        if isinstance(node.get(leaf), dict):
            raise StructuralConflictError(f"'{key}' is a branch and cannot hold a value", key)
        node[leaf] = value
    return tree


def flatten_tree(tree: NestedTree, sep: str = ".") -> dict[str, Any]:
    """把嵌套树重新拼接为扁平键值（reconstruct 的逆操作）。"""
    flat: dict[str, Any] = {}
    for segment, value in tree.items():
        if isinstance(value, dict):
            for child_key, child_value in flatten_tree(value, sep).items():
                flat[segment + sep + child_key] = child_value
        else:
            flat[segment] = value
    return flat
