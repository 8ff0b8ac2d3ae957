"""单包安装器

目标目录已存在则直接跳过，否则调用拉取器。
同一 (name, version) 可以反复调用，只有第一次会真正拉取。
"""

from __future__ import annotations

import logging
from pathlib import Path

from sbughetti.core.dep.fetcher import PackageFetcher
from sbughetti.core.dep.models import InstallOutcome, target_path
from sbughetti.core.dep.provider import ConfigProvider, read_record
from sbughetti.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class PackageInstaller:
    def __init__(
        self,
        provider: ConfigProvider,
        fetcher: PackageFetcher,
        install_dir: str | Path,
    ) -> None:
        self.provider = provider
        self.fetcher = fetcher
        self.install_dir = Path(install_dir)

    def install(self, name: str) -> InstallOutcome:
        """安装单个包，返回 already-present / freshly-installed

        Raises:
            ConfigLookupError: 注册表中缺少 repo / version
            FetchError: 拉取失败
        """
        record = read_record(self.provider, name, with_dependencies=False)
        target = target_path(self.install_dir, name, record.version)

        if target.exists():
            logger.debug("已存在，跳过: %s", target)
            return InstallOutcome.ALREADY_PRESENT

        logger.info("安装: %s", target)
        try:
            self.fetcher.fetch(record.repo, record.version, target)
        except FetchError as e:
            if not e.name:
                e.name = name
            raise
        return InstallOutcome.FRESHLY_INSTALLED
