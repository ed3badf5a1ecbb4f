#!/usr/bin/env python3
"""
NonbondedMC - 对势模块

这是一个包，提供了用于蒙特卡洛模拟的非键对势及其求和组合。
采用延迟导入模式以避免循环依赖并提高加载性能。

.. moduleauthor:: Gilbert Young
.. versionadded:: 1.0.0
"""

# 1. 定义公开接口
__all__ = [
    "PairPotential",
    "CombinedPairPotential",
    "combine",
    "LennardJones",
    "WeeksChandlerAndersen",
    "Coulomb",
    "DebyeHuckel",
    "DipoleDipole",
    "DipoleDipoleRF",
    "create_pair_potential",
]


# 2. 使用 __getattr__ 实现延迟加载
def __getattr__(name):
    if name == "PairPotential":
        from .base import PairPotential

        return PairPotential
    elif name in ("CombinedPairPotential", "combine"):
        from . import combined

        return getattr(combined, name)
    elif name in ("LennardJones", "WeeksChandlerAndersen"):
        from . import lennard_jones

        return getattr(lennard_jones, name)
    elif name in ("Coulomb", "DebyeHuckel"):
        from . import coulomb

        return getattr(coulomb, name)
    elif name in ("DipoleDipole", "DipoleDipoleRF"):
        from . import dipole

        return getattr(dipole, name)
    elif name == "create_pair_potential":
        from .factory import create_pair_potential

        return create_pair_potential
    else:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
