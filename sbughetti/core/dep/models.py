"""依赖包数据模型

数据类:
- PackageRecord: 注册表中单个包的元信息
- InstallOutcome: 单个包的安装结果
- InstallReport: 一次批量安装的汇总
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath

from sbughetti.core.exceptions import ConfigLookupError


@dataclass(frozen=True)
class PackageRecord:
    """注册表条目（只读，归注册表文档所有）"""

    name: str
    repo: str
    version: str
    dependencies: tuple[str, ...] = ()


class InstallOutcome(str, Enum):
    ALREADY_PRESENT = "already-present"
    FRESHLY_INSTALLED = "freshly-installed"


@dataclass
class InstallReport:
    """批量安装汇总，只在全部成功时产生"""

    outcomes: dict[str, InstallOutcome] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def installed(self) -> list[str]:
        return sorted(
            n for n, o in self.outcomes.items() if o is InstallOutcome.FRESHLY_INSTALLED
        )

    @property
    def present(self) -> list[str]:
        return sorted(
            n for n, o in self.outcomes.items() if o is InstallOutcome.ALREADY_PRESENT
        )


def _check_segment(kind: str, value: str) -> None:
    """name / version 必须是安装根目录下的相对路径段"""
    parts = value.replace("\\", "/").split("/")
    if (
        not value.strip()
        or PurePosixPath(value).is_absolute()
        or Path(value).is_absolute()
        or any(p in ("", ".", "..") for p in parts)
    ):
        raise ConfigLookupError(f"非法的包{kind}，会越出安装目录: {value!r}", path=value)


def target_path(install_dir: str | Path, name: str, version: str) -> Path:
    """包的安装目录: <install_dir>/<name>/<version>

    同一 (name, version) 永远得到同一路径，目录是否存在即是否已安装。

    Raises:
        ConfigLookupError: name 或 version 会让路径越出 install_dir
    """
    _check_segment("名", name)
    _check_segment("版本", version)
    return Path(install_dir) / name / version
