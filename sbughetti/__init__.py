"""sbughetti - PureScript 依赖包解析、安装与编译工具"""

__version__ = "0.1.0"
