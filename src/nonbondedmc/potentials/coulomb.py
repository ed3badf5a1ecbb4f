#!/usr/bin/env python3
r"""
NonbondedMC - 静电对势模块

.. moduleauthor:: Gilbert Young

以 kT 为能量单位的库仑势与屏蔽库仑（Debye–Hückel）势：

.. math::
   \beta u_{ij}(r) = l_B\,\frac{z_i z_j}{r},\qquad
   \beta u_{ij}^{DH}(r) = l_B\,\frac{z_i z_j}{r}\,e^{-r/\lambda_D}

其中 :math:`l_B` 为 Bjerrum 长度，:math:`\lambda_D` 为 Debye 屏蔽长度。
"""

import logging

import numpy as np

from nonbondedmc.core.structure import Particle
from nonbondedmc.utils.utils import DEFAULT_TEMPERATURE, bjerrum_length

from .base import PairPotential

logger = logging.getLogger(__name__)


class Coulomb(PairPotential):
    """库仑对势（均匀介电背景）。

    Parameters
    ----------
    epsr : float
        相对介电常数。
    temperature : float, optional
        绝对温度 (K)，用于计算 Bjerrum 长度。
    cutoff : float, optional
        截断距离（Å），默认不截断。
    """

    name = "Coulomb"

    def __init__(
        self,
        epsr: float,
        temperature: float = DEFAULT_TEMPERATURE,
        cutoff: float = np.inf,
    ):
        self.bjerrum_length = bjerrum_length(epsr, temperature)
        super().__init__({"epsr": epsr, "temperature": temperature}, cutoff)
        logger.debug(
            f"{self.name} potential initialized with epsr={epsr}, "
            f"lB={self.bjerrum_length:.4f} Å."
        )

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        r2 = np.dot(r, r)
        if r2 > self._cutoff2:
            return 0.0
        return self.bjerrum_length * a.charge * b.charge / np.sqrt(r2)


class DebyeHuckel(Coulomb):
    """Debye–Hückel 屏蔽库仑势。

    Parameters
    ----------
    epsr : float
        相对介电常数。
    debye_length : float
        Debye 屏蔽长度（Å）。
    temperature : float, optional
        绝对温度 (K)。
    cutoff : float, optional
        截断距离（Å）。
    """

    name = "Debye-Huckel"

    def __init__(
        self,
        epsr: float,
        debye_length: float,
        temperature: float = DEFAULT_TEMPERATURE,
        cutoff: float = np.inf,
    ):
        if debye_length <= 0:
            raise ValueError(f"Debye 长度必须为正数，当前: {debye_length}")
        super().__init__(epsr, temperature, cutoff)
        self.parameters["debye_length"] = debye_length
        self.kappa = 1.0 / debye_length

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        r2 = np.dot(r, r)
        if r2 > self._cutoff2:
            return 0.0
        d = np.sqrt(r2)
        return self.bjerrum_length * a.charge * b.charge / d * np.exp(-self.kappa * d)
