"""
kvconf - 类型化嵌套配置 ⇄ 扁平点分键值 的双向映射引擎

模块概述：
    本文件是 kvconf 包的入口文件（__init__.py），定义了包的元信息。
    kvconf 把一个嵌套的配置对象展开为可以独立寻址、独立持久化的字符串选项，
    并能把部分更新过的选项合并回运行时配置，未涉及的字段保持不变。

    整个包的核心功能包括：
    - 映射引擎（mapping）：扁平化、编码、嵌套树重建、结构合并
    - 选项存储（store）：内存 / JSON 文件两种后端
    - 配置系统（config）：Pydantic 配置模型、加载器、互斥锁保护的运行时配置
    - 应用设置（apps）：按应用 ID 管理启动器设置
    - 命令行（cli）：基于 Typer 的管理命令
"""

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出等场景的品牌标识
__logo__ = "🗝"
