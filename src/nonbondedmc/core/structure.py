#!/usr/bin/env python3
r"""
粒子存储与变更集模块

该模块提供蒙特卡洛模拟中的基础数据结构：粒子、基团、粒子存储
以及描述一次移动所扰动基团的变更集。

数据模型
--------
粒子存储是粒子的唯一所有者；基团只保存指向存储的索引。任意时刻
概念上存在两份索引完全一致的存储：已接受状态（old）与试探状态
（trial/new），索引 ``i`` 在两份存储中指向同一逻辑粒子。

变更集记录一次移动所扰动的基团（按基团索引严格递增排列），并可
选地给出基团内被改变粒子的相对索引：

.. math::
    \Delta U = \sum_{d \in D}\sum_{f \notin D} \left[
        U^{\mathrm{new}}_{df} - U^{\mathrm{old}}_{df} \right]

其中 :math:`D` 为被扰动基团集合。

Classes
-------
Particle
    单个粒子：位置、类型与势函数所需的载荷
Group
    指向粒子存储的有序、无重复索引集合
ParticleStore
    粒子与基团的所有者，附带几何
GroupChange
    单个基团的变更记录
Change
    一次移动的变更集

Notes
-----
长度单位为埃(Å)，能量单位为 kT。

Examples
--------
>>> from nonbondedmc.core.geometry import Cuboid
>>> store = ParticleStore(Cuboid(20.0))
>>> gi = store.add_group("ion", [Particle([0, 0, 0], charge=1.0)])
>>> change = Change()
>>> change.add(gi)
>>> change.touched_group_index()
[0]
"""

import bisect
import logging
from collections.abc import Iterable, Sequence

import numpy as np

from nonbondedmc.core.atomdata import AtomType, AtomTypeTable
from nonbondedmc.core.geometry import Geometry

# 配置日志记录
logger = logging.getLogger(__name__)


def _as_vector(value, what: str) -> np.ndarray:
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{what}必须是3D向量，当前形状: {vec.shape}")
    return vec


class Particle:
    r"""粒子对象，蒙特卡洛模拟的基本单元

    除位置外的属性对能量引擎是不透明的，只由对势读取。

    Parameters
    ----------
    position : array_like
        3D笛卡尔坐标 (Å)
    type_id : int, optional
        原子类型编号，默认0
    charge : float, optional
        电荷 (e)
    mu : array_like, optional
        偶极矩单位向量，默认 ``(0, 0, 0)``
    mu_scalar : float, optional
        偶极矩大小 (eÅ)
    alpha : float, optional
        极化率

    Examples
    --------
    >>> p = Particle([1.0, 0.0, 0.0], type_id=0, charge=-1.0)
    >>> q = p.copy()
    >>> q.position is p.position
    False
    """

    def __init__(
        self,
        position,
        type_id: int = 0,
        charge: float = 0.0,
        mu=None,
        mu_scalar: float = 0.0,
        alpha: float = 0.0,
    ) -> None:
        self.position = _as_vector(position, "位置")
        self.type_id = int(type_id)
        self.charge = float(charge)
        self.mu = (
            np.zeros(3, dtype=np.float64) if mu is None else _as_vector(mu, "偶极矩")
        )
        self.mu_scalar = float(mu_scalar)
        self.alpha = float(alpha)

    @classmethod
    def from_atom_type(cls, atom_type: AtomType, position) -> "Particle":
        """由原子类型构造粒子，电荷与偶极大小取自类型表"""
        return cls(
            position,
            type_id=atom_type.id,
            charge=atom_type.charge,
            mu_scalar=atom_type.mulen,
            alpha=atom_type.alphax,
        )

    def copy(self) -> "Particle":
        """创建 Particle 的深拷贝"""
        return Particle(
            self.position.copy(),
            type_id=self.type_id,
            charge=self.charge,
            mu=self.mu.copy(),
            mu_scalar=self.mu_scalar,
            alpha=self.alpha,
        )

    def __repr__(self) -> str:
        return (
            f"Particle(position={self.position.tolist()}, type_id={self.type_id}, "
            f"charge={self.charge})"
        )


class Group:
    """基团：指向粒子存储的有序索引集合

    基团不拥有粒子。对能量引擎而言基团是只读的。

    Parameters
    ----------
    name : str
        基团名称（如分子名）
    indices : Iterable[int]
        粒子在存储中的索引，必须唯一且非负

    Raises
    ------
    ValueError
        索引重复或为负
    """

    def __init__(self, name: str, indices: Iterable[int]) -> None:
        idx = tuple(int(i) for i in indices)
        if len(set(idx)) != len(idx):
            raise ValueError(f"基团 '{name}' 中存在重复索引")
        if any(i < 0 for i in idx):
            raise ValueError(f"基团 '{name}' 中存在负索引")
        self.name = name
        self.indices = idx

    @classmethod
    def from_range(cls, name: str, begin: int, end: int) -> "Group":
        """由连续区间 ``[begin, end)`` 构造"""
        if end < begin:
            raise ValueError(f"无效区间 [{begin}, {end})")
        return cls(name, range(begin, end))

    @property
    def is_contiguous(self) -> bool:
        idx = self.indices
        return all(b == a + 1 for a, b in zip(idx, idx[1:]))

    def range(self) -> tuple[int, int]:
        """返回连续基团的区间 ``(begin, end)``

        Raises
        ------
        ValueError
            基团不是连续区间
        """
        if not self.is_contiguous:
            raise ValueError(f"基团 '{self.name}' 不是连续区间")
        if not self.indices:
            return (0, 0)
        return (self.indices[0], self.indices[-1] + 1)

    def select(self, relative: Iterable[int]) -> list[int]:
        """将基团内相对索引转换为存储中的绝对索引"""
        return [self.indices[i] for i in relative]

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)

    def __contains__(self, index) -> bool:
        return index in self.indices

    def __repr__(self) -> str:
        return f"Group(name={self.name!r}, size={len(self)})"


class ParticleStore:
    r"""粒子存储，粒子的唯一所有者

    Parameters
    ----------
    geometry : Geometry
        几何（距离函数），构造后只读，可在副本间共享
    particles : list of Particle, optional
        初始粒子
    groups : list of Group, optional
        初始基团

    Attributes
    ----------
    particles : list of Particle
        粒子序列
    groups : list of Group
        基团序列
    geometry : Geometry
        几何
    """

    def __init__(
        self,
        geometry: Geometry,
        particles: list[Particle] | None = None,
        groups: list[Group] | None = None,
    ) -> None:
        self.geometry = geometry
        self.particles = list(particles) if particles is not None else []
        self.groups = []
        # 已归属某个基团的粒子索引，基团之间不得重叠
        self._claimed: set[int] = set()
        for group in groups or []:
            self._append_group(group)

    def _check_group(self, group: Group) -> None:
        n = len(self.particles)
        for i in group:
            if i >= n:
                raise ValueError(
                    f"基团 '{group.name}' 的索引 {i} 超出粒子数 {n}"
                )
        shared = sorted(self._claimed.intersection(group.indices))
        if shared:
            raise ValueError(
                f"基团 '{group.name}' 与已有基团共享粒子: {shared}"
            )

    def _append_group(self, group: Group) -> int:
        self._check_group(group)
        self.groups.append(group)
        self._claimed.update(group.indices)
        return len(self.groups) - 1

    @property
    def num_particles(self) -> int:
        return len(self.particles)

    @property
    def num_groups(self) -> int:
        return len(self.groups)

    def add_particles(self, particles: Iterable[Particle]) -> list[int]:
        """追加粒子，返回其索引"""
        begin = len(self.particles)
        self.particles.extend(particles)
        return list(range(begin, len(self.particles)))

    def add_group(self, name: str, particles: Sequence[Particle]) -> int:
        """追加粒子并以其为连续区间新建基团，返回基团索引"""
        begin = len(self.particles)
        self.add_particles(particles)
        return self._append_group(Group.from_range(name, begin, len(self.particles)))

    def add_index_group(self, name: str, indices: Iterable[int]) -> int:
        """以已有粒子的显式索引新建基团，返回基团索引"""
        return self._append_group(Group(name, indices))

    def insert_molecule(
        self,
        name: str,
        type_names: Sequence[str],
        positions,
        atom_types: AtomTypeTable,
    ) -> int:
        """按原子类型插入一个分子

        Parameters
        ----------
        name : str
            分子（基团）名称
        type_names : Sequence[str]
            各原子的类型名称
        positions : array_like
            原子位置 (N, 3)
        atom_types : AtomTypeTable
            原子类型表

        Returns
        -------
        int
            新基团的索引
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        if len(positions) != len(type_names):
            raise ValueError(
                f"位置数 {len(positions)} 与原子数 {len(type_names)} 不一致"
            )
        particles = []
        for type_name, pos in zip(type_names, positions):
            particle = Particle.from_atom_type(atom_types[type_name], pos)
            self.geometry.boundary(particle.position)
            particles.append(particle)
        return self.add_group(name, particles)

    def group_index(self, name: str) -> list[int]:
        """返回给定名称的全部基团索引"""
        return [i for i, g in enumerate(self.groups) if g.name == name]

    def get_positions(self) -> np.ndarray:
        """返回所有粒子位置 (N, 3)"""
        if not self.particles:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([p.position for p in self.particles], dtype=np.float64)

    def copy(self) -> "ParticleStore":
        """深拷贝粒子；基团与几何为只读对象，直接共享"""
        return ParticleStore(
            self.geometry,
            [p.copy() for p in self.particles],
            list(self.groups),
        )

    def sync(self, other: "ParticleStore", change: "Change") -> None:
        """从另一份存储复制变更集所涉及的粒子

        接受移动后以 ``old.sync(trial, change)`` 提交，
        拒绝后以 ``trial.sync(old, change)`` 还原。
        """
        for gc in change.groups:
            group = other.groups[gc.index]
            indices = group.indices if gc.all else group.select(gc.atoms)
            for i in indices:
                self.particles[i] = other.particles[i].copy()

    def __repr__(self) -> str:
        return (
            f"ParticleStore(particles={self.num_particles}, "
            f"groups={self.num_groups}, geometry={type(self.geometry).__name__})"
        )


class GroupChange:
    """单个基团的变更记录

    Parameters
    ----------
    index : int
        基团在存储中的索引
    atoms : Iterable[int], optional
        基团内被改变粒子的相对索引；为空表示整个基团
    """

    def __init__(self, index: int, atoms: Iterable[int] | None = None) -> None:
        self.index = int(index)
        self.atoms = [int(a) for a in atoms] if atoms is not None else []

    @property
    def all(self) -> bool:
        """是否整个基团被改变"""
        return not self.atoms

    def __repr__(self) -> str:
        return f"GroupChange(index={self.index}, atoms={self.atoms})"


class Change:
    """一次移动的变更集

    ``groups`` 保持移动提议者给出的插入顺序；有效的变更集要求该顺序
    按基团索引严格递增。空变更集表示无操作移动。
    """

    def __init__(self, groups: Iterable[GroupChange] | None = None) -> None:
        self.groups: list[GroupChange] = list(groups) if groups is not None else []

    def add(self, index: int, atoms: Iterable[int] | None = None) -> GroupChange:
        """追加一个基团变更（不重新排序）"""
        gc = GroupChange(index, atoms)
        self.groups.append(gc)
        return gc

    def empty(self) -> bool:
        return not self.groups

    def clear(self) -> None:
        self.groups.clear()

    def touched_group_index(self) -> list[int]:
        """被扰动基团的索引（有序）"""
        return sorted(gc.index for gc in self.groups)

    def is_touched(self, index: int, touched: Sequence[int] | None = None) -> bool:
        """二分查找判断基团是否被扰动"""
        if touched is None:
            touched = self.touched_group_index()
        pos = bisect.bisect_left(touched, index)
        return pos < len(touched) and touched[pos] == index

    def validate(
        self, num_groups: int, group_sizes: Sequence[int] | None = None
    ) -> None:
        """检查变更集的前置条件

        Parameters
        ----------
        num_groups : int
            存储中的基团数
        group_sizes : Sequence[int], optional
            各基团大小，用于检查相对粒子索引

        Raises
        ------
        ValueError
            基团索引越界、未严格递增，或相对粒子索引越界、未严格递增
        """
        previous = -1
        for gc in self.groups:
            if not 0 <= gc.index < num_groups:
                raise ValueError(
                    f"变更集中的基团索引 {gc.index} 超出范围 [0, {num_groups})"
                )
            if gc.index <= previous:
                raise ValueError(
                    f"变更集中的基团索引必须严格递增: {[g.index for g in self.groups]}"
                )
            previous = gc.index
            if gc.atoms:
                if any(b <= a for a, b in zip(gc.atoms, gc.atoms[1:])):
                    raise ValueError(
                        f"基团 {gc.index} 的粒子索引必须严格递增: {gc.atoms}"
                    )
                upper = group_sizes[gc.index] if group_sizes is not None else None
                if gc.atoms[0] < 0 or (upper is not None and gc.atoms[-1] >= upper):
                    raise ValueError(
                        f"基团 {gc.index} 的粒子索引超出范围 "
                        f"[0, {upper}): {gc.atoms}"
                    )

    def __len__(self) -> int:
        return len(self.groups)

    def __repr__(self) -> str:
        return f"Change(groups={self.groups})"
