#!/usr/bin/env python3
r"""
几何与边界条件模块

为能量计算提供距离函数。几何对象构造后即为只读，可被新旧两份
粒子存储共享。

最小镜像约定 (Minimum Image Convention)，正交盒子：

.. math::
    r_{k,\min} = r_k - L_k \,\lfloor r_k / L_k + 1/2 \rfloor

盒子以原点为中心，坐标范围 :math:`[-L_k/2, L_k/2)`。

Classes
-------
Geometry
    几何抽象基类
Cuboid
    正交周期性盒子
OpenGeometry
    无边界的开放空间
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from numba import jit

logger = logging.getLogger(__name__)


@jit(nopython=True)
def _minimum_image_numba(displacement, box, inv_box):
    """JIT优化的最小镜像位移

    Parameters
    ----------
    displacement : numpy.ndarray
        位移向量 (3,)
    box : numpy.ndarray
        盒子边长 (3,)
    inv_box : numpy.ndarray
        盒子边长倒数 (3,)

    Returns
    -------
    numpy.ndarray
        最小镜像位移 (3,)
    """
    out = np.empty(3)
    for k in range(3):
        out[k] = displacement[k] - box[k] * np.floor(
            displacement[k] * inv_box[k] + 0.5
        )
    return out


class Geometry(ABC):
    """几何抽象基类

    子类只需实现 :meth:`vdist` 与 :meth:`boundary`。
    """

    @abstractmethod
    def vdist(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """返回分离矢量 ``a - b``（考虑边界条件）"""
        raise NotImplementedError

    @abstractmethod
    def boundary(self, position: np.ndarray) -> None:
        """就地将位置折回模拟盒内"""
        raise NotImplementedError

    @property
    @abstractmethod
    def volume(self) -> float:
        raise NotImplementedError

    def sqdist(self, a: np.ndarray, b: np.ndarray) -> float:
        r = self.vdist(a, b)
        return np.dot(r, r)

    def dist(self, a: np.ndarray, b: np.ndarray) -> float:
        return np.sqrt(self.sqdist(a, b))

    def info(self) -> str:
        return f"{type(self).__name__}(volume={self.volume:.6g})"


class Cuboid(Geometry):
    """正交周期性盒子

    Parameters
    ----------
    lengths : float | array_like
        盒子边长 (Å)；标量表示立方盒子

    Raises
    ------
    ValueError
        边长非正或不是有限值
    """

    def __init__(self, lengths) -> None:
        box = np.array(lengths, dtype=np.float64)
        if box.ndim == 0:
            box = np.full(3, float(box))
        if box.shape != (3,):
            raise ValueError(f"盒子边长必须是标量或3D向量，当前形状: {box.shape}")
        if not np.all(np.isfinite(box)) or np.any(box <= 0):
            raise ValueError("Box dimensions must be positive")
        self._box = box
        self._inv_box = 1.0 / box
        logger.debug(f"Cuboid geometry initialized with lengths={box.tolist()}")

    @property
    def lengths(self) -> np.ndarray:
        view = self._box.view()
        view.setflags(write=False)
        return view

    @property
    def volume(self) -> float:
        return float(np.prod(self._box))

    def vdist(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return _minimum_image_numba(
            np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64),
            self._box,
            self._inv_box,
        )

    def boundary(self, position: np.ndarray) -> None:
        position -= self._box * np.floor(position * self._inv_box + 0.5)

    def check_cutoff(self, cutoff: float) -> bool:
        """检查截断半径是否满足最小镜像要求（不超过半个盒长）"""
        half = 0.5 * float(np.min(self._box))
        if cutoff > half:
            logger.warning(
                f"Cutoff radius ({cutoff:.3f}) is too large "
                f"compared to half box length ({half:.3f})"
            )
            return False
        return True


class OpenGeometry(Geometry):
    """无边界开放空间，分离矢量即坐标差"""

    @property
    def volume(self) -> float:
        return np.inf

    def vdist(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)

    def boundary(self, position: np.ndarray) -> None:
        return None
