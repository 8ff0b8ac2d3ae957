"""CLI — 依赖包解析 / 安装 / 编译命令"""

from __future__ import annotations

import click

from sbughetti.cli import CliState, handle_errors, pass_state
from sbughetti.core.dep.provider import read_record
from sbughetti.core.exceptions import BuildError


def register(group: click.Group) -> None:
    group.add_command(resolve)
    group.add_command(install)
    group.add_command(sources)
    group.add_command(build)


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="同时显示版本和仓库地址")
@pass_state
@handle_errors
def resolve(state: CliState, verbose: bool) -> None:
    """列出项目依赖的传递闭包"""
    dm = state.manager
    for name in sorted(dm.resolve()):
        if verbose:
            rec = read_record(dm.provider, name, with_dependencies=False)
            click.echo(f"  {name:30s} {rec.version:12s} {rec.repo}")
        else:
            click.echo(name)


@click.command()
@click.option("--workers", "-j", type=int, default=None, help="并发安装数（默认取配置 max_workers）")
@pass_state
@handle_errors
def install(state: CliState, workers: int | None) -> None:
    """安装项目依赖（已存在的版本目录直接跳过）"""
    report = state.manager.install(max_workers=workers)
    click.echo(f"已安装依赖: {report.total} 个 (新安装 {len(report.installed)}, 已存在 {len(report.present)})")


@click.command()
@pass_state
@handle_errors
def sources(state: CliState) -> None:
    """输出依赖包源码 glob，每行一条"""
    for glob in sorted(state.manager.sources()):
        click.echo(glob)


@click.command()
@pass_state
@handle_errors
def build(state: CliState) -> None:
    """编译项目（项目源码 + 依赖源码）"""
    try:
        result = state.manager.build()
    except BuildError as e:
        if e.output:
            click.echo(e.output, err=True, nl=False)
        raise
    if result.output:
        click.echo(result.output, nl=False)
    click.echo("编译成功。")
