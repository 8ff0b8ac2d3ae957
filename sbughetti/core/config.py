"""集中配置管理

替代各模块散落的路径 / 命令常量，提供统一的配置入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sbughetti.core.exceptions import ConfigError
from sbughetti.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "sbughetti.yml"


@dataclass
class Config:
    """全局配置"""

    # 目录 / 文件
    install_dir: str = ".spacchetti"
    registry_file: str = ".spacchetti/spacchetti.json"
    manifest: str = "spacchetti.dhall"

    # 外部命令
    converter_cmd: str = "dhall-to-json"
    compiler_cmd: str = "purs compile"

    # 安装
    max_workers: int = 10

    # 源码 glob
    project_globs: list[str] = field(
        default_factory=lambda: ["src/**/*.purs", "test/**/*.purs"],
    )
    source_glob: str = "src/**/*.purs"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def __post_init__(self) -> None:
        """校验并规整从 YAML 读入的字段类型"""
        for name in ("install_dir", "registry_file", "manifest",
                     "converter_cmd", "compiler_cmd", "source_glob"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"配置项 {name} 必须是非空字符串: {value!r}")

        workers = self.max_workers
        if isinstance(workers, str) and workers.strip().isdigit():
            workers = int(workers)
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigError(f"配置项 max_workers 必须是正整数: {self.max_workers!r}")
        self.max_workers = workers

        globs = self.project_globs
        if isinstance(globs, str):
            globs = [globs]
        if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
            raise ConfigError(f"配置项 project_globs 必须是字符串列表: {self.project_globs!r}")
        self.project_globs = list(globs)

        if not isinstance(self.extra, dict):
            raise ConfigError("配置项 extra 必须是字典")

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
