#!/usr/bin/env python3
r"""
NonbondedMC - Lennard-Jones 势模块

.. moduleauthor:: Gilbert Young

Lennard–Jones (12–6) 势用于近似描述粒子间的短程排斥与色散吸引：

.. math::
   V(r) = 4\,\varepsilon\Big[\Big(\frac{\sigma}{r}\Big)^{12} - \Big(\frac{\sigma}{r}\Big)^6\Big]

其中 :math:`\varepsilon` 为势阱深度（kT），:math:`\sigma` 为零势能点对应长度（Å）。
不同类型间的参数可由 Lorentz–Berthelot 混合规则得到：

.. math::
   \sigma_{ij} = \frac{\sigma_i + \sigma_j}{2},\qquad
   \varepsilon_{ij} = \sqrt{\varepsilon_i\,\varepsilon_j}

Weeks–Chandler–Andersen (WCA) 势为在 :math:`2^{1/6}\sigma` 处截断并
上移 :math:`\varepsilon` 的纯排斥 LJ 势。

References
----------
- J. E. Jones (1924), Proceedings of the Royal Society A, 106(738), 441–462.
- J. D. Weeks, D. Chandler, H. C. Andersen (1971), J. Chem. Phys. 54, 5237.
"""

import logging

import numpy as np

from nonbondedmc.core.atomdata import AtomTypeTable
from nonbondedmc.core.structure import Particle

from .base import PairPotential

logger = logging.getLogger(__name__)

_WCA_FACTOR2 = 2.0 ** (1.0 / 3.0)  # (2^{1/6})^2


def _mixing_matrices(atom_types: AtomTypeTable, mixing: str):
    sigma = atom_types.property_array("sigma")
    eps = atom_types.property_array("eps")
    mixing = mixing.upper()
    if mixing == "LB":
        sigma_ij = 0.5 * (sigma[:, None] + sigma[None, :])
    elif mixing in ("GEOMETRIC", "GEO"):
        sigma_ij = np.sqrt(sigma[:, None] * sigma[None, :])
    else:
        raise ValueError(f"未知的混合规则: {mixing}")
    eps_ij = np.sqrt(eps[:, None] * eps[None, :])
    return eps_ij, sigma_ij


class LennardJones(PairPotential):
    r"""Lennard–Jones (12–6) 对势实现。

    Parameters
    ----------
    epsilon : float | numpy.ndarray
        势阱深度 epsilon（kT）；二维数组时按粒子类型 id 索引。
    sigma : float | numpy.ndarray
        零势能点对应长度 sigma（Å）；形状须与 ``epsilon`` 一致。
    cutoff : float, optional
        截断距离（Å），超出部分能量为零；默认不截断。

    Notes
    -----
    - 单位：能量 kT，长度 Å。
    - 零距离时结果为非有限值，不做特殊处理。
    """

    name = "Lennard-Jones"

    def __init__(self, epsilon, sigma, cutoff: float = np.inf):
        eps = np.asarray(epsilon, dtype=np.float64)
        sig = np.asarray(sigma, dtype=np.float64)
        if eps.shape != sig.shape or eps.ndim not in (0, 2):
            raise ValueError(
                f"epsilon 与 sigma 必须同为标量或同形状方阵: {eps.shape} vs {sig.shape}"
            )
        if eps.ndim == 0:
            parameters = {"epsilon": float(eps), "sigma": float(sig)}
        else:
            parameters = {"ntypes": eps.shape[0]}
        super().__init__(parameters, cutoff)
        self._per_type = eps.ndim == 2
        self._eps4 = 4.0 * eps
        self._sigma2 = sig * sig
        logger.debug(
            f"{self.name} potential initialized with {parameters}, cutoff={cutoff}."
        )

    @classmethod
    def from_atom_types(
        cls, atom_types: AtomTypeTable, mixing: str = "LB", cutoff: float = np.inf
    ):
        """由原子类型表的 ``sigma``/``eps`` 按混合规则构建。"""
        eps_ij, sigma_ij = _mixing_matrices(atom_types, mixing)
        return cls(eps_ij, sigma_ij, cutoff=cutoff)

    def _params(self, a: Particle, b: Particle):
        if self._per_type:
            return self._eps4[a.type_id, b.type_id], self._sigma2[a.type_id, b.type_id]
        return self._eps4, self._sigma2

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        r2 = np.dot(r, r)
        if r2 > self._cutoff2:
            return 0.0
        eps4, sigma2 = self._params(a, b)
        x = (sigma2 / r2) ** 3
        return eps4 * (x * x - x)


class WeeksChandlerAndersen(LennardJones):
    r"""WCA 纯排斥势。

    .. math::
       V(r) = V_{LJ}(r) + \varepsilon,\quad r < 2^{1/6}\sigma

    超出 :math:`2^{1/6}\sigma` 时为零。
    """

    name = "WCA"

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        r2 = np.dot(r, r)
        eps4, sigma2 = self._params(a, b)
        if r2 >= sigma2 * _WCA_FACTOR2:
            return 0.0
        x = (sigma2 / r2) ** 3
        return eps4 * (x * x - x) + 0.25 * eps4
