#!/usr/bin/env python3
"""
原子类型表模块

提供只读的原子类型元数据（电荷、直径、势阱深度等），由模拟初始化阶段
显式构建后传递给粒子存储与对势，不依赖任何进程级全局状态，
因此多个并行副本可以安全地各自持有一份。

Classes
-------
AtomType
    单个原子类型的不可变描述
AtomTypeTable
    按插入顺序分配 id 的只读类型表

Examples
--------
>>> table = AtomTypeTable.from_config(
...     [{"Na+": {"q": 1.0, "sigma": 4.0, "eps": 0.5}},
...      {"Cl-": {"q": -1.0, "sigma": 4.0, "eps": 0.5}}]
... )
>>> table["Cl-"].id
1
>>> table.names_to_ids(["*"])
[0, 1]
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType

import numpy as np

logger = logging.getLogger(__name__)

# YAML 中的简写键名
_KEY_ALIASES = {
    "q": "charge",
    "alpha": "alphax",
}


@dataclass(frozen=True)
class AtomType:
    """原子类型的通用属性

    Parameters
    ----------
    name : str
        类型名称，如 ``"Na+"``
    id : int
        类型编号，由 :class:`AtomTypeTable` 分配
    charge : float
        电荷 (e)
    mw : float
        分子量
    sigma : float
        直径，用于 Lennard-Jones 等 (Å)
    eps : float
        Lennard-Jones 势阱深度 (kT)
    activity : float
        化学活度 (mol/l)
    alphax : float
        超额极化率（无量纲）
    dp : float
        平移位移参数 (Å)
    dprot : float
        转动位移参数 (度)
    mulen : float
        偶极矩大小 (eÅ)
    hydrophobic : bool
        是否疏水
    implicit : bool
        是否为隐式粒子（如质子）
    properties : Mapping[str, float]
        其它任意命名的标量属性（只读）
    """

    name: str
    id: int = -1
    charge: float = 0.0
    mw: float = 1.0
    sigma: float = 0.0
    eps: float = 0.0
    activity: float = 0.0
    alphax: float = 0.0
    dp: float = 0.0
    dprot: float = 0.0
    mulen: float = 0.0
    hydrophobic: bool = False
    implicit: bool = False
    properties: Mapping = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # 冻结额外属性，防止通过引用被修改
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(
                self, "properties", MappingProxyType(dict(self.properties))
            )

    def get_property(self, name: str) -> float:
        """读取额外属性

        Raises
        ------
        KeyError
            属性不存在
        """
        try:
            return self.properties[name]
        except KeyError:
            raise KeyError(f"原子类型 '{self.name}' 没有属性 '{name}'") from None

    @property
    def radius(self) -> float:
        return 0.5 * self.sigma

    @classmethod
    def from_dict(cls, name: str, data: Mapping) -> "AtomType":
        """由配置字典构造；未知键存入 ``properties``。"""
        known = {f.name for f in fields(cls)} - {"name", "id", "properties"}
        kwargs = {}
        extra = {}
        for key, value in (data or {}).items():
            key = _KEY_ALIASES.get(key, key)
            if key in known:
                kwargs[key] = value
            else:
                extra[key] = float(value)
        for key in ("charge", "mw", "sigma", "eps", "activity", "alphax"):
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
        return cls(name=name, properties=extra, **kwargs)


class AtomTypeTable:
    """只读原子类型表

    类型 id 按插入顺序从 0 开始分配。重复名称会覆盖先前的条目，
    但保留原有 id。

    Parameters
    ----------
    atom_types : Iterable[AtomType]
        原子类型序列
    """

    def __init__(self, atom_types: Iterable[AtomType] = ()) -> None:
        ordered: dict[str, AtomType] = {}
        for atom_type in atom_types:
            if atom_type.name in ordered:
                type_id = ordered[atom_type.name].id
                logger.debug(f"Atom type '{atom_type.name}' redefined.")
            else:
                type_id = len(ordered)
            ordered[atom_type.name] = replace(atom_type, id=type_id)
        self._by_name = MappingProxyType(ordered)
        self._by_id = tuple(ordered.values())

    @classmethod
    def from_config(cls, atomlist) -> "AtomTypeTable":
        """由 YAML ``atomlist`` 段构建

        Parameters
        ----------
        atomlist : list[dict] | dict
            ``[{"Na+": {"q": 1.0, ...}}, ...]`` 或 ``{"Na+": {...}, ...}``

        Returns
        -------
        AtomTypeTable
        """
        if atomlist is None:
            return cls()
        if isinstance(atomlist, Mapping):
            items = list(atomlist.items())
        else:
            items = []
            for entry in atomlist:
                if not isinstance(entry, Mapping):
                    raise ValueError(f"无效的原子类型条目: {entry!r}")
                items.extend(entry.items())
        table = cls(AtomType.from_dict(name, data) for name, data in items)
        logger.debug(f"Loaded {len(table)} atom types: {table.names}")
        return table

    def __getitem__(self, name: str) -> AtomType:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"原子类型 '{name}' 未定义") from None

    def __contains__(self, name) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[AtomType]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    @property
    def names(self) -> list[str]:
        return [a.name for a in self._by_id]

    def by_id(self, type_id: int) -> AtomType:
        """按 id 查找原子类型"""
        if not 0 <= type_id < len(self._by_id):
            raise KeyError(f"原子类型 id {type_id} 超出范围")
        return self._by_id[type_id]

    def names_to_ids(self, names: Iterable[str]) -> list[int]:
        """将名称列表转换为 id 列表

        通配符 ``"*"`` 选择全部类型。

        Raises
        ------
        ValueError
            名称不存在
        """
        ids = []
        for name in names:
            if name == "*":
                return list(range(len(self._by_id)))
            if name not in self._by_name:
                raise ValueError(f"name '{name}' not found")
            ids.append(self._by_name[name].id)
        return ids

    def property_array(self, name: str) -> np.ndarray:
        """返回按 id 排列的属性数组（用于构建混合规则矩阵）"""
        return np.array([getattr(a, name) for a in self._by_id], dtype=np.float64)
