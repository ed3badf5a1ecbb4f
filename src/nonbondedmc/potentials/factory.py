#!/usr/bin/env python3
"""
NonbondedMC - 对势构建模块

由 YAML 配置中的 ``energy`` 段构建对势，例如::

    energy:
        - nonbonded_pmwca:
            wca: {mixing: LB}
            coulomb: {epsr: 80}

每个以 ``nonbonded`` 开头的条目内的各项被求和；多个条目再整体求和。
对势在模拟初始化时构建一次，此后保持不变。
"""

import logging
from collections.abc import Callable, Mapping

import numpy as np

from nonbondedmc.core.atomdata import AtomTypeTable
from nonbondedmc.utils.utils import DEFAULT_TEMPERATURE

from .base import PairPotential
from .combined import combine
from .coulomb import Coulomb, DebyeHuckel
from .dipole import DipoleDipole, DipoleDipoleRF
from .lennard_jones import LennardJones, WeeksChandlerAndersen

logger = logging.getLogger(__name__)


def _lennard_jones(opts, atom_types, temperature):
    cutoff = float(opts.get("cutoff", np.inf))
    if "epsilon" in opts or "sigma" in opts:
        return LennardJones(opts["epsilon"], opts["sigma"], cutoff=cutoff)
    return LennardJones.from_atom_types(
        atom_types, mixing=opts.get("mixing", "LB"), cutoff=cutoff
    )


def _wca(opts, atom_types, temperature):
    if "epsilon" in opts or "sigma" in opts:
        return WeeksChandlerAndersen(opts["epsilon"], opts["sigma"])
    return WeeksChandlerAndersen.from_atom_types(
        atom_types, mixing=opts.get("mixing", "LB")
    )


def _coulomb(opts, atom_types, temperature):
    return Coulomb(
        float(opts.get("epsr", 80.0)),
        temperature=temperature,
        cutoff=float(opts.get("cutoff", np.inf)),
    )


def _debye_huckel(opts, atom_types, temperature):
    return DebyeHuckel(
        float(opts.get("epsr", 80.0)),
        float(opts["debyelength"]),
        temperature=temperature,
        cutoff=float(opts.get("cutoff", np.inf)),
    )


def _dipole_dipole(opts, atom_types, temperature):
    return DipoleDipole(
        float(opts.get("epsr", 1.0)),
        temperature=temperature,
        cutoff=float(opts.get("cutoff", np.inf)),
    )


def _dipole_dipole_rf(opts, atom_types, temperature):
    return DipoleDipoleRF(
        float(opts.get("epsr", 1.0)),
        float(opts["cutoff"]),
        epsilon_rf=float(opts.get("epsilon_rf", 80.0)),
        temperature=temperature,
    )


_TERM_BUILDERS: dict[str, Callable] = {
    "lennardjones": _lennard_jones,
    "lj": _lennard_jones,
    "wca": _wca,
    "coulomb": _coulomb,
    "debyehuckel": _debye_huckel,
    "dipoledipole": _dipole_dipole,
    "dipoledipole_rf": _dipole_dipole_rf,
}


def _build_entry(name: str, terms, atom_types, temperature) -> PairPotential:
    if not name.startswith("nonbonded"):
        raise ValueError(f"不支持的能量项: {name}")
    if not isinstance(terms, Mapping) or not terms:
        raise ValueError(f"能量项 '{name}' 缺少对势定义")
    built = []
    for term_name, opts in terms.items():
        key = str(term_name).lower()
        if key not in _TERM_BUILDERS:
            raise ValueError(f"未知的对势类型: {term_name}")
        built.append(_TERM_BUILDERS[key](opts or {}, atom_types, temperature))
    return combine(*built)


def create_pair_potential(
    energy,
    atom_types: AtomTypeTable | None = None,
    temperature: float = DEFAULT_TEMPERATURE,
) -> PairPotential:
    """由配置构建对势

    Parameters
    ----------
    energy : list[dict] | dict
        YAML ``energy`` 段
    atom_types : AtomTypeTable, optional
        原子类型表，混合规则需要
    temperature : float, optional
        绝对温度 (K)，静电项需要

    Returns
    -------
    PairPotential

    Raises
    ------
    ValueError
        配置为空、条目名称或对势类型未知
    """
    atom_types = atom_types if atom_types is not None else AtomTypeTable()
    if isinstance(energy, Mapping):
        entries = list(energy.items())
    else:
        entries = [item for entry in (energy or []) for item in entry.items()]
    if not entries:
        raise ValueError("配置中没有定义任何能量项")
    potential = combine(
        *(_build_entry(name, terms, atom_types, temperature) for name, terms in entries)
    )
    logger.info(f"Pair potential: {potential.info()}")
    return potential
