"""
扁平键命名规则 (mapping/naming.py)

字段的扁平键片段由「声明名 + 可选别名」决定，规则见 canonical_key。
"""

OMIT_MARKER = "-"  # 显式"忽略别名"标记，此时回退到字段声明名


def canonical_key(name: str, alias: str | None = None) -> str:
    """
    计算字段的规范键片段。

    规则：
    1. 别名为空或为 "-" 时，使用字段声明名
    2. 别名可携带逗号分隔的修饰符（如 "dark_color,omitempty"），只取第一段
    3. 第一段为空或为 "-" 时同样回退到声明名

    示例:
        canonical_key("DarkColor", "dark_color,omitempty") → "dark_color"
        canonical_key("title") → "title"
        canonical_key("secret", "-") → "secret"
    """
    if not alias or alias == OMIT_MARKER:
        return name
    segment = alias.split(",", 1)[0].strip()
    if not segment or segment == OMIT_MARKER:
        return name
    return segment
