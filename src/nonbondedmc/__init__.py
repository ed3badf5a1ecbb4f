"""
NonbondedMC - 蒙特卡洛非键能增量计算引擎

在蒙特卡洛移动中只计算受扰动基团相关的对相互作用能，
并周期性地与全体系重算结果对账以监控浮点漂移。
"""

__version__ = "1.0.0"
__author__ = "Gilbert"

from . import core, energy, potentials, utils

__all__ = ["core", "potentials", "energy", "utils"]
