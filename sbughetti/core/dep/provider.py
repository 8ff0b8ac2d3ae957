"""注册表查询

职责:
- 以键路径表达式查询注册表文档（packages.<name>.<field> / dependencies[]）
- 封装包字段读取的便捷函数，统一错误为 ConfigLookupError

表达式语法:
    packages.prelude.version           -> str
    packages."purescript-foo".repo     -> str（带点或横线的键可加引号）
    packages.prelude.dependencies[]    -> list[str]
    dependencies[]                     -> list[str]（项目直接依赖）
开头的 "." 可省略，兼容 jq 风格写法。
"""

from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Protocol, Union

import yaml

from sbughetti.core.dep.models import PackageRecord
from sbughetti.core.exceptions import ConfigLookupError
from sbughetti.utils.yaml_io import load_document

logger = logging.getLogger(__name__)

QueryResult = Union[str, list[str]]

_KEY_RE = re.compile(r'"([^"]*)"|([^".\[\]\s]+)')


class ConfigProvider(Protocol):
    """注册表查询协议 — 纯读取"""

    def query(self, expr: str) -> QueryResult:
        ...


def parse_path(expr: str) -> tuple[list[str], bool]:
    """把查询表达式拆成 (键列表, 是否取列表)"""
    text = expr.strip()
    as_list = text.endswith("[]")
    if as_list:
        text = text[:-2]
    if text.startswith("."):
        text = text[1:]

    keys: list[str] = []
    pos = 0
    while pos < len(text):
        m = _KEY_RE.match(text, pos)
        if m is None:
            raise ConfigLookupError(f"非法查询路径: {expr}", path=expr)
        keys.append(m.group(1) if m.group(1) is not None else m.group(2))
        pos = m.end()
        if pos < len(text):
            if text[pos] != "." or pos == len(text) - 1:
                raise ConfigLookupError(f"非法查询路径: {expr}", path=expr)
            pos += 1

    if not keys:
        raise ConfigLookupError(f"空查询路径: {expr!r}", path=expr)
    return keys, as_list


class _DocumentProvider:
    """在嵌套 dict 上求值查询表达式，子类负责提供文档"""

    def _document(self) -> Any:
        raise NotImplementedError

    def query(self, expr: str) -> QueryResult:
        keys, as_list = parse_path(expr)
        node = self._document()
        walked: list[str] = []
        for key in keys:
            walked.append(key)
            if not isinstance(node, dict) or key not in node:
                raise ConfigLookupError(
                    f"注册表中没有条目: {'.'.join(walked)}", path=expr,
                )
            node = node[key]

        if as_list:
            if not isinstance(node, list) or not all(isinstance(x, str) for x in node):
                raise ConfigLookupError(
                    f"条目不是字符串列表: {expr} (实际: {type(node).__name__})",
                    path=expr,
                )
            return list(node)

        if not isinstance(node, str):
            raise ConfigLookupError(
                f"条目不是字符串: {expr} (实际: {type(node).__name__})", path=expr,
            )
        return node


class DocumentConfigProvider(_DocumentProvider):
    """基于注册表文件（JSON / YAML）的查询器，首次查询时加载并缓存

    安装阶段多个工作线程共享同一实例，加载过程加锁。
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: Any = None
        self._loaded = False
        self._lock = threading.Lock()

    def _document(self) -> Any:
        with self._lock:
            if not self._loaded:
                self._data = self._load()
                self._loaded = True
            return self._data

    def _load(self) -> Any:
        try:
            data = load_document(self.path)
        except FileNotFoundError as e:
            raise ConfigLookupError(f"注册表文档不存在: {self.path}") from e
        except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
            raise ConfigLookupError(f"注册表文档格式错误: {self.path} - {e}") from e
        logger.debug("注册表已加载: %s", self.path)
        return data


class MappingConfigProvider(_DocumentProvider):
    """基于内存字典的查询器，供编程式调用和测试使用"""

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data

    def _document(self) -> Any:
        return self.data


# =========================================================================
# 便捷读取
# =========================================================================

def _quote(name: str) -> str:
    if '"' in name:
        raise ConfigLookupError(f"包名包含非法字符: {name}", path=name)
    return f'"{name}"'


def package_field(provider: ConfigProvider, name: str, field: str) -> str:
    """读取 packages.<name>.<field> 字符串字段"""
    result = provider.query(f"packages.{_quote(name)}.{field}")
    if not isinstance(result, str):
        raise ConfigLookupError(f"{name}.{field} 不是字符串")
    return result.strip()


def package_dependencies(provider: ConfigProvider, name: str) -> list[str]:
    """读取 packages.<name>.dependencies[]"""
    result = provider.query(f"packages.{_quote(name)}.dependencies[]")
    if not isinstance(result, list):
        raise ConfigLookupError(f"{name}.dependencies 不是列表")
    return [d.strip() for d in result]


def root_dependencies(provider: ConfigProvider) -> list[str]:
    """读取项目直接依赖 dependencies[]"""
    result = provider.query("dependencies[]")
    if not isinstance(result, list):
        raise ConfigLookupError("dependencies 不是列表")
    return [d.strip() for d in result]


def read_record(
    provider: ConfigProvider, name: str, *, with_dependencies: bool = True,
) -> PackageRecord:
    """读取完整的包条目"""
    deps = tuple(package_dependencies(provider, name)) if with_dependencies else ()
    return PackageRecord(
        name=name,
        repo=package_field(provider, name, "repo"),
        version=package_field(provider, name, "version"),
        dependencies=deps,
    )
