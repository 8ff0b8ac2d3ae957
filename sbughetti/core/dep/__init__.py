"""依赖包解析与安装

- models.py: 数据模型 + 目标路径规则
- provider.py: 注册表查询
- registry.py: 注册表文档生成
- resolver.py: 传递闭包解析
- fetcher.py: Git 拉取
- installer.py: 单包幂等安装
- orchestrator.py: 有界并发批量安装
- sources.py: 源码 glob 汇总
"""

from sbughetti.core.dep.fetcher import GitFetcher, PackageFetcher
from sbughetti.core.dep.installer import PackageInstaller
from sbughetti.core.dep.models import InstallOutcome, InstallReport, PackageRecord
from sbughetti.core.dep.orchestrator import InstallOrchestrator
from sbughetti.core.dep.provider import (
    ConfigProvider,
    DocumentConfigProvider,
    MappingConfigProvider,
)
from sbughetti.core.dep.resolver import DependencyResolver
from sbughetti.core.dep.sources import collect_source_globs

__all__ = [
    "ConfigProvider",
    "DocumentConfigProvider",
    "MappingConfigProvider",
    "PackageRecord",
    "InstallOutcome",
    "InstallReport",
    "DependencyResolver",
    "PackageFetcher",
    "GitFetcher",
    "PackageInstaller",
    "InstallOrchestrator",
    "collect_source_globs",
]
