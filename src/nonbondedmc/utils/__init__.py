"""工具模块 - 物理常数与日志配置"""

from .utils import bjerrum_length, setup_logging

__all__ = ["bjerrum_length", "setup_logging"]
