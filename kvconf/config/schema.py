"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 kvconf 的完整配置结构。
所有配置项都有默认值，用户只需在 config.json 中覆盖需要修改的部分。

整体配置结构（树形）：
Config (根配置)
├── apps        - 各应用（ansible/terraform/bash 等）的启动器设置，按应用 ID 索引
├── store       - 选项存储后端配置
└── log_level   - 日志级别

apps 下的每个字段在选项存储中对应一个扁平键，如：
    apps.bash.title       = "Bash"
    apps.bash.dark_color  = "#222222"
    apps.bash.args        = ["-c"]

对于 Java 开发者：
- Pydantic 的 BaseModel 类似于 Java 的 POJO/Record，但自带字段验证和默认值
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
- Field(alias=...) 类似于 Jackson 的 @JsonProperty，决定字段的外部名称（也是扁平键片段）
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class AppConfig(BaseModel):
    """单个应用的启动器设置。"""
    active: bool = False  # 是否在界面中启用该应用
    priority: int = 0  # 排序优先级（越大越靠前）
    title: str = ""  # 显示名称
    icon: str = ""  # 图标名称
    color: str = ""  # 亮色主题下的颜色
    dark_color: str = ""  # 暗色主题下的颜色
    app_path: str = Field("", alias="path")  # 可执行文件路径
    app_args: list[str] = Field(default_factory=list, alias="args")  # 启动参数

    model_config = ConfigDict(populate_by_name=True)


class AppSummary(BaseModel):
    """应用列表中每一项的精简视图。"""
    id: str
    title: str = ""
    icon: str = ""
    color: str = ""
    dark_color: str = ""
    active: bool = False


class StoreConfig(BaseModel):
    """选项存储后端配置。"""
    backend: Literal["file", "memory"] = "file"  # file: JSON 文件持久化；memory: 仅进程内
    path: str = "~/.kvconf/options.json"  # file 后端的存储文件路径

    @property
    def resolved_path(self) -> Path:
        """展开 ~ 后的存储文件路径。"""
        return Path(self.path).expanduser()


class Config(BaseSettings):
    """
    kvconf 根配置类。

    继承自 Pydantic 的 BaseSettings，除了支持从 JSON 文件加载外，
    还支持从环境变量读取配置：
    - 环境变量前缀: KVCONF_
    - 嵌套分隔符: __ (双下划线)
    - 示例: KVCONF_STORE__BACKEND=memory 可覆盖 store.backend
    """
    apps: dict[str, AppConfig] = Field(default_factory=dict)  # 应用 ID → 应用设置
    store: StoreConfig = Field(default_factory=StoreConfig)  # 选项存储配置
    log_level: str = "INFO"  # 日志级别

    model_config = ConfigDict(
        env_prefix="KVCONF_",
        env_nested_delimiter="__",
    )
