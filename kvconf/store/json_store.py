"""
JSON 文件选项存储 (store/json_store.py)

把全部选项保存在一个 JSON 文件中（默认 ~/.kvconf/options.json）：

    {
      "version": 1,
      "options": {
        "apps.bash.title": "Bash",
        "apps.bash.args": "[\"-c\"]"
      }
    }

文件在首次访问时懒加载，每次修改后整体重写（先写临时文件再替换，避免写到一半的文件）。
"""

import json
import os
import threading
from pathlib import Path

from loguru import logger

from kvconf.store.base import OptionNotFoundError, OptionStore, StoreError, matches_prefix

STORE_VERSION = 1


class JsonFileOptionStore(OptionStore):
    """基于单个 JSON 文件的选项存储。"""

    name = "file"

    def __init__(self, path: Path):
        """
        参数:
            path: 存储文件路径（父目录不存在时会在首次写入时创建）
        """
        self.path = path
        self._options: dict[str, str] | None = None  # 懒加载的内存副本
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        """从磁盘读取选项（仅首次调用时读取文件）。"""
        if self._options is not None:
            return self._options

        if not self.path.exists():
            self._options = {}
            return self._options

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"cannot read option store {self.path}: {e}") from e

        options = data.get("options", {}) if isinstance(data, dict) else None
        if not isinstance(options, dict):
            raise StoreError(f"option store {self.path} has no 'options' object")
        self._options = {str(k): str(v) for k, v in options.items()}
        logger.debug(f"Loaded {len(self._options)} options from {self.path}")
        return self._options

    def _save(self, options: dict[str, str]) -> None:
        """整体重写存储文件。"""
        data = {"version": STORE_VERSION, "options": dict(sorted(options.items()))}
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"cannot write option store {self.path}: {e}") from e

    def set_option(self, key: str, value: str) -> None:
        with self._lock:
            options = dict(self._load())
            options[key] = value
            self._save(options)
            self._options = options
        logger.debug(f"Option set: {key}")

    def delete_options(self, prefix: str) -> None:
        with self._lock:
            current = self._load()
            options = {k: v for k, v in current.items() if not matches_prefix(k, prefix)}
            removed = len(current) - len(options)
            if not removed:
                raise OptionNotFoundError(f"no options under '{prefix}'")
            self._save(options)
            self._options = options
        logger.debug(f"Deleted {removed} options under {prefix}")

    def get_options(self, prefix: str = "") -> dict[str, str]:
        with self._lock:
            return {k: v for k, v in self._load().items() if matches_prefix(k, prefix)}
