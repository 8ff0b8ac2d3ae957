"""依赖包管理器

把注册表、解析、安装、glob 汇总、编译串成一条流水线，供 CLI 调用。

流程:
    清单 --(dhall-to-json)--> 注册表文档
    dependencies[] --resolve--> 传递闭包
    传递闭包 --install_all--> <install_dir>/<name>/<version>/
    传递闭包 --sources--> glob 集合 --build--> 编译器

用法:
    from sbughetti.core.dep_manager import DepManager

    dm = DepManager()
    dm.install()
    for g in sorted(dm.sources()):
        print(g)
    dm.build()
"""

from __future__ import annotations

import logging
from pathlib import Path

from sbughetti.core.builder import BuildTool
from sbughetti.core.config import Config, get_config
from sbughetti.core.dep.fetcher import GitFetcher, PackageFetcher
from sbughetti.core.dep.installer import PackageInstaller
from sbughetti.core.dep.models import InstallReport
from sbughetti.core.dep.orchestrator import InstallOrchestrator
from sbughetti.core.dep.provider import ConfigProvider, DocumentConfigProvider
from sbughetti.core.dep.registry import ensure_registry
from sbughetti.core.dep.resolver import DependencyResolver
from sbughetti.core.dep.sources import collect_source_globs
from sbughetti.core.exceptions import FilesystemError
from sbughetti.utils.shell import CommandExecutor, CommandResult

logger = logging.getLogger(__name__)


class DepManager:
    """依赖包统一管理器

    provider / fetcher / executor 均可注入；不注入时按 Config 构造默认实现。
    """

    def __init__(
        self,
        config: Config | None = None,
        provider: ConfigProvider | None = None,
        fetcher: PackageFetcher | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.install_dir = Path(self.config.install_dir)
        self._executor = executor
        self._provider = provider
        self.fetcher = fetcher or GitFetcher(executor=executor)

    # ------------------------------------------------------------------
    # 准备
    # ------------------------------------------------------------------

    def ensure_install_dir(self) -> Path:
        try:
            self.install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"无法创建安装目录 {self.install_dir}: {e}") from e
        return self.install_dir

    @property
    def provider(self) -> ConfigProvider:
        """注册表查询器，首次访问时按需生成注册表文档"""
        if self._provider is None:
            registry = ensure_registry(
                self.config.manifest,
                self.config.registry_file,
                converter_cmd=self.config.converter_cmd,
                executor=self._executor,
            )
            self._provider = DocumentConfigProvider(registry)
        return self._provider

    # ------------------------------------------------------------------
    # 流水线
    # ------------------------------------------------------------------

    def resolve(self) -> frozenset[str]:
        """项目依赖的传递闭包"""
        return DependencyResolver(self.provider).resolve_roots()

    def install(self, max_workers: int | None = None) -> InstallReport:
        """解析并安装全部依赖"""
        self.ensure_install_dir()
        names = self.resolve()
        installer = PackageInstaller(self.provider, self.fetcher, self.install_dir)
        workers = max_workers if max_workers is not None else self.config.max_workers
        return InstallOrchestrator(installer, max_workers=workers).install_all(names)

    def sources(self) -> set[str]:
        """全部依赖包的源码 glob"""
        return collect_source_globs(
            self.provider, self.resolve(), self.config.install_dir,
            pattern=self.config.source_glob,
        )

    def build(self) -> CommandResult:
        """编译项目源码 + 依赖源码"""
        tool = BuildTool(
            compiler_cmd=self.config.compiler_cmd,
            project_globs=self.config.project_globs,
            executor=self._executor,
        )
        return tool.compile(self.sources())
