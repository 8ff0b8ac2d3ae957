"""统一异常体系

所有业务异常继承 SbughettiError，各层只抛不吞，由 CLI 入口统一决定退出码。
"""

from __future__ import annotations


class SbughettiError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(SbughettiError):
    """配置文件内容无效"""

    code = "CONFIG_ERROR"


class ConfigLookupError(SbughettiError):
    """注册表文档缺失，或查询路径无匹配 / 类型不符"""

    code = "CONFIG_LOOKUP_ERROR"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class FetchError(SbughettiError):
    """依赖包拉取失败"""

    code = "FETCH_ERROR"

    def __init__(self, message: str, name: str = "") -> None:
        super().__init__(message)
        self.name = name


class FilesystemError(SbughettiError):
    """安装根目录无法创建"""

    code = "FILESYSTEM_ERROR"


class ExecutionError(SbughettiError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class BuildError(SbughettiError):
    """编译器返回非零退出码"""

    code = "BUILD_ERROR"

    def __init__(self, message: str, returncode: int = 1, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output
