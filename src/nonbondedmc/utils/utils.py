# 文件名: utils.py
# 作者: Gilbert Young
# 修改日期: 2025-07-11
# 文件描述: 物理常数、Bjerrum 长度换算与日志配置工具。

"""
工具模块

包含静电相关的物理常数与单位换算（基于 ``scipy.constants``），
以及统一的日志配置函数 :func:`setup_logging`。
"""

import logging
import os

from scipy import constants

logger = logging.getLogger(__name__)

KB_IN_J: float = constants.k
"""玻尔兹曼常数 kB（单位 J/K）。"""

ELEMENTARY_CHARGE: float = constants.e
"""元电荷（单位 C）。"""

ANGSTROM: float = constants.angstrom
"""1 Å 对应的米数。"""

DEFAULT_TEMPERATURE: float = 298.15
"""默认温度（K）。"""


def bjerrum_length(epsr: float, temperature: float = DEFAULT_TEMPERATURE) -> float:
    r"""计算 Bjerrum 长度

    .. math::
        l_B = \frac{e^2}{4\pi\varepsilon_0\varepsilon_r k_B T}

    Parameters
    ----------
    epsr : float
        相对介电常数
    temperature : float, optional
        绝对温度 (K)

    Returns
    -------
    float
        Bjerrum 长度 (Å)；水在 298.15 K 约为 7.0 Å

    Raises
    ------
    ValueError
        介电常数或温度非正
    """
    if epsr <= 0:
        raise ValueError(f"相对介电常数必须为正数，当前: {epsr}")
    if temperature <= 0:
        raise ValueError(f"温度必须为正数，当前: {temperature}")
    lb = ELEMENTARY_CHARGE**2 / (
        4.0 * constants.pi * constants.epsilon_0 * epsr * KB_IN_J * temperature
    )
    return lb / ANGSTROM


_CONSOLE_HANDLER = "nonbondedmc-console"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """配置 ``nonbondedmc`` 的日志输出

    在根记录器上挂一个控制台 handler（重复调用只调整级别，不重复添加）。
    给定 ``log_file`` 时另写一份完整的 DEBUG 日志，便于事后检查能量漂移。

    Parameters
    ----------
    level : int, optional
        控制台日志级别，默认 INFO
    log_file : str, optional
        日志文件路径；父目录不存在时自动创建
    """
    root = logging.getLogger()
    formatter = logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S")

    console = next((h for h in root.handlers if h.get_name() == _CONSOLE_HANDLER), None)
    if console is None:
        console = logging.StreamHandler()
        console.set_name(_CONSOLE_HANDLER)
        console.setFormatter(formatter)
        root.addHandler(console)
    console.setLevel(level)

    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        root.addHandler(fh)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(level)
