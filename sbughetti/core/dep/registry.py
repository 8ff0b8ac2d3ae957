"""注册表文档生成

注册表文档（JSON）由清单文件经外部转换命令（默认 dhall-to-json）生成。
文档已存在时直接复用，不重复转换。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from sbughetti.core.exceptions import ConfigLookupError, ExecutionError
from sbughetti.utils.shell import CommandExecutor, run_cmd
from sbughetti.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)


def _import_expr(manifest: Path) -> str:
    """dhall 从 stdin 读取表达式，相对路径需以 ./ 开头才被视为文件导入"""
    text = manifest.as_posix()
    if manifest.is_absolute() or text.startswith(("./", "../")):
        return text
    return f"./{text}"


def ensure_registry(
    manifest: str | Path,
    registry_file: str | Path,
    converter_cmd: str = "dhall-to-json",
    executor: CommandExecutor | None = None,
) -> Path:
    """确保注册表文档存在，返回其路径

    Raises:
        ConfigLookupError: 清单不存在、转换命令失败或输出不是合法 JSON
    """
    registry = Path(registry_file)
    if registry.exists():
        return registry

    src = Path(manifest)
    if not src.exists():
        raise ConfigLookupError(f"清单文件不存在: {src}")

    logger.info("生成注册表: %s -> %s", src, registry)
    try:
        r = run_cmd(
            converter_cmd, input_text=_import_expr(src), label="清单转换", executor=executor,
        )
    except ExecutionError as e:
        raise ConfigLookupError(str(e)) from e
    try:
        json.loads(r.stdout)
    except json.JSONDecodeError as e:
        raise ConfigLookupError(f"转换输出不是合法 JSON: {e}") from e

    atomic_write(registry, r.stdout)
    return registry
