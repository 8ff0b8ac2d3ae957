"""并发安装编排

对解析结果中的每个包启动一个安装任务:
  - 线程池限制同时运行的任务数（max_workers）
  - 所有任务先全部提交，再统一等待
  - 全部结束后才返回；任一失败则整批失败（first-failure-wins）
  - 不主动取消仍在运行的兄弟任务，失败时丢弃它们的结果
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from sbughetti.core.dep.installer import PackageInstaller
from sbughetti.core.dep.models import InstallOutcome, InstallReport
from sbughetti.core.exceptions import SbughettiError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 10


class InstallOrchestrator:
    """有界并发的批量安装器"""

    def __init__(self, installer: PackageInstaller, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self.installer = installer
        self.max_workers = max(1, max_workers)

    def install_all(self, names: Iterable[str]) -> InstallReport:
        """安装全部包，返回汇总；任一失败时抛出最先观察到的异常"""
        # 去重且保持顺序，保证同名包只启动一个任务
        pending = list(dict.fromkeys(names))
        if not pending:
            return InstallReport()

        workers = min(self.max_workers, len(pending))
        logger.info("安装 %d 个依赖包 (并发 %d)", len(pending), workers)

        outcomes: dict[str, InstallOutcome] = {}
        first_error: SbughettiError | OSError | None = None
        failed: list[str] = []

        # with 退出时 shutdown(wait=True)，即同步屏障
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="install") as pool:
            futures = {pool.submit(self.installer.install, name): name for name in pending}
            for future in as_completed(futures):
                name = futures[future]
                try:
                    outcomes[name] = future.result()
                except (SbughettiError, OSError) as e:
                    logger.error("安装失败: %s - %s", name, e)
                    failed.append(name)
                    if first_error is None:
                        first_error = e

        if first_error is not None:
            logger.error(
                "安装汇总: %d 成功, %d 失败 (%s)",
                len(outcomes), len(failed), ", ".join(sorted(failed)),
            )
            raise first_error

        report = InstallReport(outcomes=outcomes)
        logger.info(
            "安装完成: 新安装 %d, 已存在 %d", len(report.installed), len(report.present),
        )
        return report
