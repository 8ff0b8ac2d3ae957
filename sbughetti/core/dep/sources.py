"""源码 glob 汇总

每个已解析的包生成一条 "<目标目录>/src/**/*.purs" 形式的 glob，
只做路径推导，不访问文件系统（默认安装已完成）。
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from sbughetti.core.dep.models import target_path
from sbughetti.core.dep.provider import ConfigProvider, package_field

DEFAULT_SOURCE_GLOB = "src/**/*.purs"


def source_glob(install_dir: str | Path, name: str, version: str,
                pattern: str = DEFAULT_SOURCE_GLOB) -> str:
    return f"{target_path(install_dir, name, version).as_posix()}/{pattern}"


def collect_source_globs(
    provider: ConfigProvider,
    names: Iterable[str],
    install_dir: str | Path,
    pattern: str = DEFAULT_SOURCE_GLOB,
) -> set[str]:
    """每个包一条 glob，结果去重且无序"""
    return {
        source_glob(install_dir, name, package_field(provider, name, "version"), pattern)
        for name in names
    }
