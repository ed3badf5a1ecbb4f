#!/usr/bin/env python3
r"""
非键能增量计算模块

给定移动前后的两份粒子存储与变更集，只计算被扰动基团参与的对相互
作用能，返回 ``(energy_old, energy_new)`` 供接受判据使用：

.. math::
    U^{\mathrm{old/new}} = \sum_{d \in D}\sum_{f \notin D} U_{df}
                         + \sum_{\substack{d, d' \in D \\ d < d'}} U_{dd'}

静态-静态基团对在新旧状态中完全相同，互相抵消，无需计算；因此单次
评估的代价为 :math:`O(N k)` 而非 :math:`O(N^2)`，:math:`k` 为被扰动
粒子数。基团内部的相互作用属于成键能，不在本模块范围内。

Classes
-------
NonbondedEnergy
    基于对势的非键能评估器

Notes
-----
- 求和顺序：按 ``change.groups`` 的插入顺序遍历被扰动基团，按基团
  索引升序遍历静态基团。并行求和时结果按提交顺序收集后串行累加，
  数值与串行路径完全一致。
- 零距离等退化几何产生的 ``inf``/``nan`` 不做特殊处理，原样返回。
"""

import logging
from collections.abc import Sequence
from concurrent.futures import Executor

import numpy as np

from nonbondedmc.core.structure import (
    Change,
    Group,
    GroupChange,
    Particle,
    ParticleStore,
)
from nonbondedmc.potentials.base import PairPotential

logger = logging.getLogger(__name__)

# 让非有限值传播而不是告警或抛出
_PROPAGATE = {"all": "ignore"}


class NonbondedEnergy:
    """非键能评估器

    Parameters
    ----------
    pair_potential : PairPotential
        对势，在模拟初始化时注入，此后不变
    include_moved_pairs : bool, optional
        是否计算被扰动基团之间的相互作用，默认 True。为 False 时要求
        每次移动只扰动一个基团，否则抛出 ValueError
    executor : concurrent.futures.Executor, optional
        用于分发静态基团求和的执行器；为 None 时串行计算

    Examples
    --------
    >>> from nonbondedmc.potentials import Coulomb
    >>> nb = NonbondedEnergy(Coulomb(epsr=80))
    >>> nb.evaluate_change(old, new, Change())  # doctest: +SKIP
    (0.0, 0.0)
    """

    def __init__(
        self,
        pair_potential: PairPotential,
        include_moved_pairs: bool = True,
        executor: Executor | None = None,
    ) -> None:
        self.pair_potential = pair_potential
        self.include_moved_pairs = include_moved_pairs
        self.executor = executor
        logger.debug(
            f"Nonbonded energy initialized with {pair_potential.info()}, "
            f"include_moved_pairs={include_moved_pairs}, "
            f"parallel={executor is not None}"
        )

    # --------- 基本对相互作用 ---------
    def pair_energy(self, store: ParticleStore, a: Particle, b: Particle) -> float:
        """两个粒子间的相互作用能，分离矢量由存储的几何给出"""
        return self.pair_potential(a, b, store.geometry.vdist(a.position, b.position))

    def group_pair_energy(
        self, store: ParticleStore, group_a: Group, group_b: Group
    ) -> float:
        """两个基团间的相互作用能（|A|·|B| 次对计算）

        同一基团与自身之间返回0，基团内部相互作用不在此计算。
        """
        if group_a is group_b:
            return 0.0
        return self.index_pair_energy(store, group_a.indices, group_b.indices)

    def index_pair_energy(
        self, store: ParticleStore, indices_a: Sequence[int], indices_b: Sequence[int]
    ) -> float:
        """两个显式索引列表之间的相互作用能"""
        particles = store.particles
        geo = store.geometry
        pot = self.pair_potential
        u = 0.0
        for i in indices_a:
            a = particles[i]
            for j in indices_b:
                b = particles[j]
                u += pot(a, b, geo.vdist(a.position, b.position))
        return u

    # --------- 增量评估 ---------
    def _moved_static_terms(
        self, store: ParticleStore, gc: GroupChange, fixed: Sequence[int]
    ) -> list[float]:
        moved = store.groups[gc.index]
        groups = store.groups

        if gc.all:

            def term(f):
                with np.errstate(**_PROPAGATE):
                    return self.group_pair_energy(store, moved, groups[f])

        else:
            indices = moved.select(gc.atoms)

            def term(f):
                with np.errstate(**_PROPAGATE):
                    return self.index_pair_energy(store, indices, groups[f].indices)

        if self.executor is None:
            return [term(f) for f in fixed]
        return list(self.executor.map(term, fixed))

    def _moved_moved(self, store: ParticleStore, change: Change) -> float:
        u = 0.0
        groups = store.groups
        with np.errstate(**_PROPAGATE):
            for k, first in enumerate(change.groups):
                for second in change.groups[k + 1 :]:
                    u += self.group_pair_energy(
                        store, groups[first.index], groups[second.index]
                    )
        return u

    def evaluate_change(
        self, old_store: ParticleStore, new_store: ParticleStore, change: Change
    ) -> tuple[float, float]:
        """计算移动前后被扰动基团参与的非键能

        Parameters
        ----------
        old_store : ParticleStore
            已接受状态
        new_store : ParticleStore
            试探状态，基团划分与 ``old_store`` 相同
        change : Change
            变更集

        Returns
        -------
        tuple[float, float]
            ``(energy_old, energy_new)``；空变更集返回 ``(0.0, 0.0)``
            且不做任何对计算

        Raises
        ------
        ValueError
            变更集无效，或新旧存储的基团划分不一致，或关闭了
            ``include_moved_pairs`` 而变更集扰动了多个基团
        """
        if change.empty():
            return (0.0, 0.0)

        num_groups = len(old_store.groups)
        if len(new_store.groups) != num_groups:
            raise ValueError(
                f"新旧存储的基团数不一致: {num_groups} vs {len(new_store.groups)}"
            )
        for k, (og, ng) in enumerate(zip(old_store.groups, new_store.groups)):
            if og is not ng and og.indices != ng.indices:
                raise ValueError(
                    f"新旧存储的基团 {k} 划分不一致: {og.indices} vs {ng.indices}"
                )
        change.validate(num_groups, [len(g) for g in old_store.groups])
        if not self.include_moved_pairs and len(change) > 1:
            raise ValueError(
                f"变更集扰动了 {len(change)} 个基团，但未启用被扰动基团间的相互作用"
            )

        touched = change.touched_group_index()
        fixed = [i for i in range(num_groups) if not change.is_touched(i, touched)]

        u_old = 0.0
        u_new = 0.0
        with np.errstate(**_PROPAGATE):
            for gc in change.groups:
                for u in self._moved_static_terms(old_store, gc, fixed):
                    u_old += u
                for u in self._moved_static_terms(new_store, gc, fixed):
                    u_new += u

            if self.include_moved_pairs and len(change) > 1:
                u_old += self._moved_moved(old_store, change)
                u_new += self._moved_moved(new_store, change)

        return (float(u_old), float(u_new))

    # --------- 全体系重算 ---------
    def system_energy(self, store: ParticleStore) -> float:
        """全体系非键能（所有基团对 i<j 之和，O(N²)）

        与增量评估一致地排除基团内部相互作用。代价昂贵，调用频率应由
        调用者控制。
        """
        groups = store.groups
        u = 0.0
        with np.errstate(**_PROPAGATE):
            for i in range(len(groups)):
                for j in range(i + 1, len(groups)):
                    u += self.group_pair_energy(store, groups[i], groups[j])
        logger.debug(
            f"Full nonbonded recomputation over {len(groups)} groups: {u:.10g}"
        )
        return float(u)

    def info(self) -> str:
        """返回评估器配置摘要"""
        return (
            f"Nonbonded energy\n"
            f"  pair potential      = {self.pair_potential.info()}\n"
            f"  moved<->moved terms = {self.include_moved_pairs}\n"
            f"  parallel            = {self.executor is not None}\n"
        )
