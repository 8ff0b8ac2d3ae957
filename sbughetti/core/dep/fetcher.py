"""依赖包拉取器

职责:
- 按仓库地址 + 精确版本 ref 拉取源码到目标目录
- 失败时不留下目标目录，保证重试安全
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from sbughetti.core.exceptions import FetchError
from sbughetti.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

_SAFE_REF_RE = re.compile(r"^[a-zA-Z0-9_./@+\-]+$")


def _is_safe_ref(ref: str) -> bool:
    """git ref 规则子集，拒绝会被当作绝对路径、上级目录或命令行选项的写法"""
    return bool(
        ref
        and _SAFE_REF_RE.match(ref)
        and not ref.startswith(("/", "-"))
        and ".." not in ref
        and "//" not in ref
        and not ref.endswith("/")
    )


class PackageFetcher(Protocol):
    """拉取器协议: 成功则 destination 存在且完整，失败抛 FetchError 且 destination 不存在"""

    def fetch(self, repo: str, version: str, destination: Path) -> None:
        ...


class GitFetcher:
    """Git 拉取器 — 固定到 tag/branch，不解析浮动版本

    先 clone 到同级临时目录，成功后再 rename 到目标目录，
    进程中途退出也不会留下被误认为"已安装"的半成品目录。
    """

    def __init__(self, executor: CommandExecutor | None = None, shallow: bool = True) -> None:
        self._executor = executor
        self.shallow = shallow

    @property
    def executor(self) -> CommandExecutor:
        return self._executor or get_executor()

    def _clone_args(self, repo: str, version: str, dest: Path) -> list[str]:
        args = ["git", "clone", "-c", "advice.detachedHead=false"]
        if self.shallow:
            args += ["--depth", "1"]
        return args + ["--branch", version, repo, str(dest)]

    def fetch(self, repo: str, version: str, destination: Path) -> None:
        if not repo:
            raise FetchError(f"仓库地址为空: {destination}")
        if not _is_safe_ref(version):
            raise FetchError(f"版本 ref 包含非法字符: {version!r}")

        destination.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(
            dir=str(destination.parent), prefix=f".{destination.name}.",
        ))
        try:
            r = self.executor.execute(self._clone_args(repo, version, staging))
            if not r.success:
                raise FetchError(
                    f"git clone 失败 {repo}@{version} (rc={r.returncode}): "
                    f"{r.stderr.strip()[:500]}"
                )
            try:
                staging.rename(destination)
            except OSError as e:
                raise FetchError(f"无法移动到目标目录 {destination}: {e}") from e
        except Exception:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        logger.debug("  已拉取: %s@%s -> %s", repo, version, destination)
