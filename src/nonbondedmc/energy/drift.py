#!/usr/bin/env python3
r"""
能量漂移跟踪模块

在每次接受移动后累加能量增量，并按固定节奏与全体系重算结果对账：

.. math::
    U_{\mathrm{running}} \leftarrow U_{\mathrm{running}}
        + \left(U^{\mathrm{new}} - U^{\mathrm{old}}\right)

对账只报告差异，不自动修正；超出容差时每次对账记录一条 WARNING。
浮点舍入带来的小幅漂移是预期的，只有大幅漂移才提示实现错误。

Classes
-------
DriftReport
    单次对账结果
EnergyDriftTracker
    运行能量累加与对账
"""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriftReport:
    """单次对账结果

    Attributes
    ----------
    running : float
        对账时的累加能量
    reference : float
        全体系重算能量
    absolute : float
        绝对差 ``|running - reference|``
    relative : float
        相对差 ``absolute / |reference|``
    within_tolerance : bool
        是否在容差以内
    """

    running: float
    reference: float
    absolute: float
    relative: float
    within_tolerance: bool

    @property
    def drift(self) -> float:
        """有符号漂移 ``running - reference``"""
        return self.running - self.reference


class EnergyDriftTracker:
    """运行能量跟踪器

    Parameters
    ----------
    rtol : float, optional
        相对容差，默认 1e-6
    atol : float, optional
        绝对容差，默认 1e-9；绝对差或相对差任一在容差内即视为通过

    Examples
    --------
    >>> tracker = EnergyDriftTracker()
    >>> tracker.init(10.0)
    >>> tracker.apply_delta(2.0, 3.0)
    >>> tracker.apply_delta(-1.0, 0.5)
    >>> tracker.running
    12.5
    """

    def __init__(self, rtol: float = 1e-6, atol: float = 1e-9) -> None:
        if rtol < 0 or atol < 0:
            raise ValueError("容差必须为非负数")
        self.rtol = float(rtol)
        self.atol = float(atol)
        self._initialized = False
        self.initial = 0.0
        self._running = 0.0
        self.num_deltas = 0
        self.history: list[DriftReport] = []

    def _require_init(self) -> None:
        if not self._initialized:
            raise RuntimeError("EnergyDriftTracker 尚未初始化，请先调用 init()")

    def init(self, energy: float) -> None:
        """以一次全体系重算结果初始化运行能量"""
        self.initial = float(energy)
        self._running = float(energy)
        self.num_deltas = 0
        self.history = []
        self._initialized = True
        logger.debug(f"Energy drift tracker initialized with U={energy:.10g}")

    @property
    def running(self) -> float:
        """当前累加能量"""
        self._require_init()
        return self._running

    def apply_delta(self, delta_old: float, delta_new: float) -> None:
        """移动被接受后累加 ``delta_new - delta_old``"""
        self._require_init()
        self._running += delta_new - delta_old
        self.num_deltas += 1

    def __iadd__(self, du: float) -> "EnergyDriftTracker":
        self._require_init()
        self._running += du
        self.num_deltas += 1
        return self

    def reconcile(self, full_energy: float) -> DriftReport:
        """与全体系重算结果对账

        Parameters
        ----------
        full_energy : float
            全体系重算得到的能量

        Returns
        -------
        DriftReport
            对账结果；不修改运行能量
        """
        self._require_init()
        reference = float(full_energy)
        absolute = abs(self._running - reference)
        if reference != 0.0:
            relative = absolute / abs(reference)
        else:
            relative = 0.0 if absolute == 0.0 else np.inf
        within = bool(absolute <= self.atol or relative <= self.rtol)
        report = DriftReport(
            running=self._running,
            reference=reference,
            absolute=absolute,
            relative=float(relative),
            within_tolerance=within,
        )
        self.history.append(report)
        if within:
            logger.debug(
                f"Energy drift check passed: abs={absolute:.3e}, rel={relative:.3e}"
            )
        else:
            logger.warning(
                f"Energy drift beyond tolerance: running={self._running:.10g}, "
                f"reference={reference:.10g}, abs={absolute:.3e}, rel={relative:.3e} "
                f"(rtol={self.rtol:g}, atol={self.atol:g})"
            )
        return report

    def resync(self, full_energy: float) -> float:
        """用全体系重算结果显式覆盖运行能量，返回被丢弃的漂移"""
        self._require_init()
        drift = self._running - float(full_energy)
        self._running = float(full_energy)
        logger.debug(f"Running energy resynchronized, discarded drift {drift:.3e}")
        return drift

    @property
    def max_drift(self) -> float:
        """历次对账中的最大绝对漂移"""
        if not self.history:
            return 0.0
        return max(r.absolute for r in self.history)

    def info(self) -> str:
        """返回跟踪器状态摘要"""
        if not self._initialized:
            return "Energy drift\n  (not initialized)\n"
        last = self.history[-1] if self.history else None
        lines = [
            "Energy drift",
            f"  initial energy      = {self.initial:.10g}",
            f"  running energy      = {self._running:.10g}",
            f"  accepted deltas     = {self.num_deltas}",
            f"  reconciliations     = {len(self.history)}",
            f"  max absolute drift  = {self.max_drift:.3e}",
        ]
        if last is not None:
            lines.append(f"  last relative drift = {last.relative:.3e}")
        return "\n".join(lines) + "\n"
