#!/usr/bin/env python3
"""
NonbondedMC - 组合对势模块

将若干对势按项求和，例如 Lennard-Jones + Coulomb。

.. moduleauthor:: Gilbert Young
"""

import logging

import numpy as np

from nonbondedmc.core.structure import Particle

from .base import PairPotential

logger = logging.getLogger(__name__)


class CombinedPairPotential(PairPotential):
    r"""求和对势 :math:`U = \sum_k U_k`。

    Parameters
    ----------
    terms : sequence of PairPotential
        各项对势，按给定顺序求和。
    """

    name = "Combined"

    def __init__(self, terms):
        terms = tuple(terms)
        if not terms:
            raise ValueError("组合对势至少需要一项")
        super().__init__({}, cutoff=max(t.cutoff for t in terms))
        self.terms = terms

    def __call__(self, a: Particle, b: Particle, r: np.ndarray) -> float:
        u = 0.0
        for term in self.terms:
            u += term(a, b, r)
        return u

    def info(self) -> str:
        return " + ".join(t.info() for t in self.terms)


def combine(*terms: PairPotential) -> PairPotential:
    """组合多个对势为求和势；嵌套的求和势会被展平。

    Parameters
    ----------
    *terms : PairPotential
        参与求和的对势。

    Returns
    -------
    PairPotential
        只有一项时直接返回该项，否则返回 :class:`CombinedPairPotential`。

    Raises
    ------
    ValueError
        未提供任何对势。
    TypeError
        参数不是 :class:`PairPotential`。
    """
    flat = []
    for term in terms:
        if isinstance(term, CombinedPairPotential):
            flat.extend(term.terms)
        elif isinstance(term, PairPotential):
            flat.append(term)
        else:
            raise TypeError(f"不是对势对象: {term!r}")
    if not flat:
        raise ValueError("组合对势至少需要一项")
    if len(flat) == 1:
        return flat[0]
    combined = CombinedPairPotential(flat)
    logger.debug(f"Combined pair potential: {combined.info()}")
    return combined
