"""编译器调用

把项目自身的源码 glob 与依赖包 glob 一起交给编译器（默认 purs compile）。
glob 原样作为参数传递，由编译器自行展开。
"""

from __future__ import annotations

import logging
import shlex
import time
from collections.abc import Iterable

from sbughetti.core.exceptions import BuildError
from sbughetti.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)


class BuildTool:
    """编译器适配器"""

    def __init__(
        self,
        compiler_cmd: str = "purs compile",
        project_globs: Iterable[str] = ("src/**/*.purs", "test/**/*.purs"),
        executor: CommandExecutor | None = None,
    ) -> None:
        self.compiler_cmd = compiler_cmd
        self.project_globs = list(project_globs)
        self._executor = executor

    def command(self, dep_globs: Iterable[str]) -> list[str]:
        """完整命令行: 编译器 + 项目 glob + 依赖 glob（排序后，命令行可复现）"""
        return [*shlex.split(self.compiler_cmd), *self.project_globs, *sorted(set(dep_globs))]

    def compile(self, dep_globs: Iterable[str], cwd: str = ".") -> CommandResult:
        """执行编译，失败时原样携带编译器输出抛 BuildError"""
        args = self.command(dep_globs)
        logger.info("编译: %s (%d 个 glob)", args[0], len(args) - 1)
        start = time.monotonic()
        r = (self._executor or get_executor()).execute(args, cwd=cwd)
        duration = time.monotonic() - start
        if not r.success:
            logger.error("编译失败 (rc=%d, %.1fs)", r.returncode, duration)
            raise BuildError(
                f"编译失败 (rc={r.returncode})", returncode=r.returncode, output=r.output,
            )
        logger.info("编译完成 (%.1fs)", duration)
        return r
