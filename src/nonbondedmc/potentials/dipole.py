#!/usr/bin/env python3
r"""
NonbondedMC - 偶极-偶极对势模块

.. moduleauthor:: Gilbert Young

两个点偶极的相互作用能：

.. math::
   \beta u = -l_B\,\mu_1 \mu_2\,\hat{\mu}_1^{\top}\,\mathbf{T}\,\hat{\mu}_2,\qquad
   \mathbf{T} = \frac{3\,\mathbf{r}\mathbf{r}^{\top}}{|\mathbf{r}|^5}
              - \frac{\mathbf{I}}{|\mathbf{r}|^3}

反应场 (reaction field) 修正在球形截断 :math:`r_c` 内扣除

.. math::
   l_B\,\frac{2(\varepsilon_{RF}-1)}{(\varepsilon_{RF}+1)\,r_c^3}\,
   \boldsymbol{\mu}_1\cdot\boldsymbol{\mu}_2
"""

import logging

import numpy as np

from nonbondedmc.core.structure import Particle
from nonbondedmc.utils.utils import DEFAULT_TEMPERATURE, bjerrum_length

from .base import PairPotential

logger = logging.getLogger(__name__)


def mu2mu(mu1: np.ndarray, mu2: np.ndarray, mu1xmu2: float, r: np.ndarray) -> float:
    """偶极-偶极张量缩并（不含 Bjerrum 长度）

    Parameters
    ----------
    mu1, mu2 : numpy.ndarray
        偶极方向单位向量
    mu1xmu2 : float
        两偶极大小的乘积
    r : numpy.ndarray
        分离矢量 :math:`R_{1\\to 2}`

    Returns
    -------
    float
    """
    inv_r2 = 1.0 / np.dot(r, r)
    inv_r3 = np.sqrt(inv_r2) * inv_r2
    inv_r5 = inv_r3 * inv_r2
    w = -(3.0 * inv_r5 * np.dot(mu1, r) * np.dot(mu2, r) - inv_r3 * np.dot(mu1, mu2))
    return w * mu1xmu2


class DipoleDipole(PairPotential):
    """点偶极-偶极相互作用。

    Parameters
    ----------
    epsr : float
        相对介电常数。
    temperature : float, optional
        绝对温度 (K)。
    cutoff : float, optional
        截断距离（Å），默认不截断。
    """

    name = "Dipole-dipole"

    def __init__(
        self,
        epsr: float,
        temperature: float = DEFAULT_TEMPERATURE,
        cutoff: float = np.inf,
    ):
        self.bjerrum_length = bjerrum_length(epsr, temperature)
        super().__init__({"epsr": epsr, "temperature": temperature}, cutoff)

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        if np.dot(r, r) > self._cutoff2:
            return 0.0
        return self.bjerrum_length * mu2mu(a.mu, b.mu, a.mu_scalar * b.mu_scalar, r)

    def field(self, p: Particle, r: np.ndarray) -> np.ndarray:
        """偶极 ``p`` 在相对位置 ``r`` 处产生的电场"""
        inv_r2 = 1.0 / np.dot(r, r)
        inv_r1 = np.sqrt(inv_r2)
        inv_r3 = inv_r1 * inv_r2
        rn = r * inv_r1
        return (3.0 * np.dot(p.mu, rn) * rn - p.mu) * p.mu_scalar * inv_r3


class DipoleDipoleRF(DipoleDipole):
    """带球形截断与反应场修正的偶极-偶极相互作用。

    Parameters
    ----------
    epsr : float
        相对介电常数。
    cutoff : float
        截断距离（Å），超出为零。
    epsilon_rf : float, optional
        反应场介电常数，默认80。
    temperature : float, optional
        绝对温度 (K)。
    """

    name = "Dipole-dipole (RF)"

    def __init__(
        self,
        epsr: float,
        cutoff: float,
        epsilon_rf: float = 80.0,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        super().__init__(epsr, temperature, cutoff)
        self.parameters["epsilon_rf"] = epsilon_rf
        self._krf = (
            self.bjerrum_length
            * (2.0 * (epsilon_rf - 1.0) / (epsilon_rf + 1.0))
            / self.cutoff**3
        )

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        if np.dot(r, r) >= self._cutoff2:
            return 0.0
        return DipoleDipole.__call__(self, a, b, r) - self._krf * np.dot(
            a.mu, b.mu
        ) * a.mu_scalar * b.mu_scalar
