"""sbughetti 命令行接口

命令按领域拆分为子模块，每个模块注册自己的命令到 main group。
group 以 chain 模式运行，可在一次调用中依次执行多个任务:

    sbughetti install build
"""

from __future__ import annotations

import functools
import os
from collections.abc import Callable
from typing import Any

import click

from sbughetti import __version__
from sbughetti.core.config import DEFAULT_CONFIG_FILE, init_config
from sbughetti.core.dep_manager import DepManager
from sbughetti.core.exceptions import SbughettiError
from sbughetti.utils.logger import setup_logging


def handle_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """把业务异常转换为 ClickException：非零退出码 + stderr 提示"""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except SbughettiError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e

    return wrapper


class CliState:
    """一次命令行调用共享的状态，DepManager 在首个任务真正执行时才创建"""

    def __init__(self, config_path: str) -> None:
        self.config_path = config_path
        self._manager: DepManager | None = None

    @property
    def manager(self) -> DepManager:
        if self._manager is None:
            dm = DepManager(config=init_config(self.config_path))
            dm.ensure_install_dir()
            self._manager = dm
        return self._manager


pass_state = click.make_pass_decorator(CliState)


@click.group(chain=True, invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
              help="配置文件路径（不存在则使用默认配置）")
@click.pass_context
def main(ctx: click.Context, config_path: str) -> None:
    """sbughetti - PureScript 依赖包安装与编译"""
    if ctx.invoked_subcommand is None:
        click.echo("请至少指定一个任务（install / sources / build / resolve），详见 --help。", err=True)
        ctx.exit(1)
    setup_logging(
        level=os.getenv("SBUGHETTI_LOG_LEVEL", "INFO"),
        json_output=os.getenv("SBUGHETTI_LOG_JSON", "") == "1",
    )
    ctx.obj = CliState(config_path)


# 注册各领域子命令
from sbughetti.cli.cmd_deps import register as _reg_deps  # noqa: E402

_reg_deps(main)
