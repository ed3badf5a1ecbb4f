"""配置加载模块

提供轻量的 YAML 配置加载与从配置构建模拟组件的工具函数：

- 递归合并多份 YAML（后者覆盖前者）
- 点路径访问（如 ``geometry.length``）
- 统一设置随机种子（numpy/random）
- 构建原子类型表、几何、对势与漂移跟踪器

配置示例::

    temperature: 300
    geometry: {type: cuboid, length: 100}
    energy:
        - nonbonded_pmwca:
            wca: {mixing: LB}
            coulomb: {epsr: 80}
    energy_drift: {rtol: 1.0e-6, atol: 1.0e-9}
    atomlist:
        - Na+ : {q:  1.0, eps: 0.5, sigma: 4.0, dp: 20}
        - Cl- : {q: -1.0, eps: 0.5, sigma: 4.0, dp: 20}
"""

from __future__ import annotations

import logging
import random as _random
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from nonbondedmc.core.atomdata import AtomTypeTable
from nonbondedmc.core.geometry import Cuboid, Geometry, OpenGeometry
from nonbondedmc.utils.utils import DEFAULT_TEMPERATURE

logger = logging.getLogger(__name__)


def _deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_update(out[k], v)
        else:
            out[k] = v
    return out


def _get_by_path(d: dict, path: str, default: Any = None) -> Any:
    cur = d
    for key in path.split("."):
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


@dataclass
class _Resolved:
    data: dict
    sources: list[str]


class ConfigManager:
    """配置管理器

    加载一组 YAML 配置文件并进行递归合并，提供点路径访问与常用工具。

    Parameters
    ----------
    files : Iterable[str] | None, optional
        需要加载的 YAML 文件列表，后者覆盖前者；若为 ``None`` 则只构建空配置。
    data : dict | None, optional
        直接给定的配置字典，合并在所有文件之后。

    Attributes
    ----------
    data : dict
        合并后的配置数据（只读属性 ``.data`` 暴露内部字典）。
    """

    def __init__(
        self, files: Iterable[str] | None = None, data: dict | None = None
    ) -> None:
        self._resolved = self._load_all(files)
        if data:
            self._resolved.data = _deep_update(self._resolved.data, data)

    # --------- 加载与解析 ---------
    def _load_all(self, files: Iterable[str] | None) -> _Resolved:
        data: dict[str, Any] = {}
        sources: list[str] = []
        if files:
            for p in files:
                path = Path(p)
                if not path.exists():
                    logger.warning(f"配置文件不存在，已跳过: {path}")
                    continue
                with open(path, encoding="utf-8") as f:
                    ov = yaml.safe_load(f) or {}
                data = _deep_update(data, ov)
                sources.append(str(path))
        return _Resolved(data=data, sources=sources)

    @property
    def data(self) -> dict:
        """获取合并后的配置数据字典。"""
        return self._resolved.data

    @property
    def sources(self) -> list[str]:
        """实际加载的配置文件列表。"""
        return list(self._resolved.sources)

    # --------- 访问接口 ---------
    def get(self, path: str, default: Any | None = None) -> Any:
        """获取配置值（点路径）

        使用 ``a.b.c`` 形式访问嵌套字典，若不存在则返回 ``default``。

        Parameters
        ----------
        path : str
            点路径键名，例如 ``"geometry.length"``。
        default : Any, optional
            当键不存在时返回的默认值。

        Returns
        -------
        Any
            对应的配置值或 ``default``。
        """
        return _get_by_path(self._resolved.data, path, default)

    # --------- 实用工具 ---------
    def set_global_seed(self, seed: int | None = None) -> int:
        """统一设置随机种子

        同时设置 ``numpy.random`` 与 Python ``random`` 的种子。``random.seed``
        为 ``"fixed"`` 时使用默认种子 42，为 ``"hardware"`` 时由系统熵源抽取一个
        随机种子；两种情况下实际使用的种子都会被返回，便于复现。

        Parameters
        ----------
        seed : int | None, optional
            若为 ``None``，则读取 ``random.seed``（默认 42）。

        Returns
        -------
        int
            实际使用的种子值。
        """
        if seed is None:
            value = self.get("random.seed", 42)
            if value == "hardware":
                seed = int(np.random.SeedSequence().entropy % 2**32)
            elif value == "fixed":
                seed = 42
            else:
                seed = int(value)
        np.random.seed(seed)
        _random.seed(seed)
        return seed


def build_atom_types(cfg: ConfigManager) -> AtomTypeTable:
    """由 ``atomlist`` 段构建原子类型表"""
    return AtomTypeTable.from_config(cfg.get("atomlist", []))


def build_geometry(cfg: ConfigManager) -> Geometry:
    """由 ``geometry`` 段构建几何

    Raises
    ------
    ValueError
        几何类型未知或缺少边长
    """
    kind = str(cfg.get("geometry.type", "cuboid")).lower()
    if kind in ("cuboid", "cube"):
        length = cfg.get("geometry.length")
        if length is None:
            raise ValueError("cuboid 几何需要 geometry.length")
        return Cuboid(length)
    if kind in ("open", "none"):
        return OpenGeometry()
    raise ValueError(f"未知的几何类型: {kind}")


def build_pair_potential(cfg: ConfigManager, atom_types: AtomTypeTable | None = None):
    """由 ``energy`` 段与 ``temperature`` 构建对势"""
    from nonbondedmc.potentials.factory import create_pair_potential

    if atom_types is None:
        atom_types = build_atom_types(cfg)
    temperature = float(cfg.get("temperature", DEFAULT_TEMPERATURE))
    return create_pair_potential(cfg.get("energy"), atom_types, temperature)


def build_drift_tracker(cfg: ConfigManager):
    """由 ``energy_drift`` 段构建漂移跟踪器"""
    from nonbondedmc.energy.drift import EnergyDriftTracker

    return EnergyDriftTracker(
        rtol=float(cfg.get("energy_drift.rtol", 1e-6)),
        atol=float(cfg.get("energy_drift.atol", 1e-9)),
    )
