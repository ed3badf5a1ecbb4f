#!/usr/bin/env python3
"""
NonbondedMC - 对势基类模块

.. moduleauthor:: Gilbert Young
"""

from abc import ABC, abstractmethod

import numpy as np

from nonbondedmc.core.structure import Particle


class PairPotential(ABC):
    """对势的抽象基类。

    对势是两个粒子与其分离矢量的纯函数，返回标量能量。任何具体模型
    只需实现 :meth:`__call__`；多个对势可以用 ``+`` 或
    :func:`nonbondedmc.potentials.combined.combine` 组合为求和势。

    Parameters
    ----------
    parameters : dict
        势能参数字典（按具体模型定义）。
    cutoff : float
        势能截断距离，单位 Å；默认不截断。

    Notes
    -----
    - 不得修改传入的粒子。
    - 对任何大于零的物理分离距离返回有限值；零距离（粒子重合）
      的结果未定义，由调用者负责避免，非有限值应原样向上传播。
    - 单位约定：能量 kT，长度 Å。
    """

    name = "pair potential"

    def __init__(self, parameters: dict, cutoff: float = np.inf):
        if cutoff <= 0:
            raise ValueError(f"截断距离必须为正数，当前: {cutoff}")
        self.parameters = parameters
        self.cutoff = float(cutoff)
        self._cutoff2 = self.cutoff * self.cutoff

    @abstractmethod
    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        """计算一对粒子的相互作用能。

        Parameters
        ----------
        a, b : Particle
            相互作用的两个粒子。
        r : numpy.ndarray
            分离矢量 (3,)，单位 Å。

        Returns
        -------
        float
            对相互作用能，单位 kT。

        Notes
        -----
        抽象方法，必须由子类实现。
        """
        raise NotImplementedError

    def evaluate(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        """与 :meth:`__call__` 等价的显式接口。"""
        return self(a, b, r)

    def __add__(self, other: "PairPotential") -> "PairPotential":
        if not isinstance(other, PairPotential):
            return NotImplemented
        from nonbondedmc.potentials.combined import combine

        return combine(self, other)

    def info(self) -> str:
        """返回势能的简要描述。"""
        params = ", ".join(f"{k}={v}" for k, v in self.parameters.items())
        if np.isfinite(self.cutoff):
            params = f"{params}, cutoff={self.cutoff}" if params else f"cutoff={self.cutoff}"
        return f"{self.name}({params})"

    def __repr__(self) -> str:
        return self.info()
