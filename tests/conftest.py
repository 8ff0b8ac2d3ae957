"""共享 fixture — 注册表样例 + fake 拉取器 / 执行器

fake 实现都遵循 core 中的协议（PackageFetcher / CommandExecutor），
通过构造参数注入，无需 patch subprocess。
"""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from sbughetti.core.dep.provider import MappingConfigProvider
from sbughetti.utils.shell import CommandResult


def make_registry(graph: dict[str, list[str]], roots: list[str] | None = None) -> dict:
    """由 {包名: [依赖]} 生成注册表文档，repo/version 按包名推导"""
    return {
        "dependencies": list(roots or []),
        "packages": {
            name: {
                "repo": f"https://github.com/purescript/purescript-{name}.git",
                "version": f"v1.0.0-{name}",
                "dependencies": list(deps),
            }
            for name, deps in graph.items()
        },
    }


class FakeFetcher:
    """记录调用的拉取器；成功时创建目标目录，fail_repos 中的仓库抛 FetchError"""

    def __init__(self, fail_repos: set[str] | None = None, delay: float = 0.0) -> None:
        self.fail_repos = fail_repos or set()
        self.delay = delay
        self.calls: list[tuple[str, str, Path]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def fetch(self, repo: str, version: str, destination: Path) -> None:
        from sbughetti.core.exceptions import FetchError

        with self._lock:
            self.calls.append((repo, version, destination))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if repo in self.fail_repos:
                raise FetchError(f"fake clone failed: {repo}@{version}")
            (destination / "src").mkdir(parents=True)
        finally:
            with self._lock:
                self.active -= 1


class FakeExecutor:
    """记录命令的执行器，按命令首个参数返回预设结果"""

    def __init__(self, results: dict[str, CommandResult] | None = None) -> None:
        self.results = results or {}
        self.calls: list[dict] = []

    def execute(self, cmd, *, cwd=".", input_text=None) -> CommandResult:  # type: ignore[no-untyped-def]
        args = cmd.split() if isinstance(cmd, str) else list(cmd)
        self.calls.append({"args": args, "cwd": cwd, "input": input_text})
        return self.results.get(args[0], CommandResult(0, "", ""))


@pytest.fixture()
def diamond_provider() -> MappingConfigProvider:
    """A -> [B, C], B -> [C], C -> []"""
    return MappingConfigProvider(make_registry(
        {"A": ["B", "C"], "B": ["C"], "C": []}, roots=["A"],
    ))


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
