"""依赖图解析器

从根包出发，沿 "depends on" 边计算传递闭包。
注册表是唯一数据源；任何一次查询失败都会中止整个解析，
不返回不完整的依赖集合。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sbughetti.core.dep.provider import (
    ConfigProvider,
    package_dependencies,
    root_dependencies,
)

logger = logging.getLogger(__name__)


class DependencyResolver:
    """依赖图解析器 - 深度优先遍历，visited 集合防环"""

    def __init__(self, provider: ConfigProvider) -> None:
        self.provider = provider

    def resolve(self, roots: Iterable[str]) -> frozenset[str]:
        """计算 roots 的传递闭包。

        visited 由本次调用创建并显式传递，调用结束即丢弃。
        结果无序，调用方不得依赖迭代顺序。
        """
        visited: set[str] = set()
        for root in roots:
            self._visit(root, visited)
        logger.info("依赖解析完成: %d 个包", len(visited))
        return frozenset(visited)

    def resolve_roots(self) -> frozenset[str]:
        """解析项目直接依赖（注册表 dependencies[]）的传递闭包"""
        roots = root_dependencies(self.provider)
        logger.debug("直接依赖: %s", ", ".join(roots) or "(无)")
        return self.resolve(roots)

    def _visit(self, root: str, visited: set[str]) -> None:
        # 显式栈代替递归，长依赖链不受解释器递归深度限制
        stack = [root]
        while stack:
            name = stack.pop()
            if name in visited:
                continue
            visited.add(name)
            deps = package_dependencies(self.provider, name)
            logger.debug("  %s -> [%s]", name, ", ".join(deps))
            stack.extend(reversed(deps))
