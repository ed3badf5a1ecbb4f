#!/usr/bin/env python3
"""
盐水体系 Metropolis 蒙特卡洛示例

由 YAML 配置构建原子类型、几何与对势，对单离子基团执行随机平移。
每次移动只计算被扰动离子参与的能量差，接受后累加到运行能量，并按
固定节奏与全体系重算结果对账。

用法::

    python examples/salt_mc.py [config.yaml] [--workers N]

.. moduleauthor:: Gilbert Young
"""

import argparse
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from nonbondedmc.core.config import (
    ConfigManager,
    build_atom_types,
    build_drift_tracker,
    build_geometry,
    build_pair_potential,
)
from nonbondedmc.core.structure import Change, ParticleStore
from nonbondedmc.energy import NonbondedEnergy
from nonbondedmc.utils import setup_logging

logger = logging.getLogger("salt_mc")


def build_system(cfg, atom_types, geometry, rng):
    """在盒子中随机插入若干 Na+/Cl- 离子，每个离子为一个基团"""
    store = ParticleStore(geometry)
    n_pairs = int(cfg.get("moves.pairs", 40))
    half = 0.5 * geometry.lengths
    for _ in range(n_pairs):
        for name in ("Na+", "Cl-"):
            pos = rng.uniform(-half, half)
            store.insert_molecule(name, [name], [pos], atom_types)
    return store


def run(cfg, workers=0):
    seed = cfg.set_global_seed()
    rng = np.random.default_rng(seed)
    atom_types = build_atom_types(cfg)
    geometry = build_geometry(cfg)
    potential = build_pair_potential(cfg, atom_types)
    tracker = build_drift_tracker(cfg)

    executor = ThreadPoolExecutor(max_workers=workers) if workers > 0 else None
    nb = NonbondedEnergy(potential, executor=executor)
    logger.info(nb.info())

    old = build_system(cfg, atom_types, geometry, rng)
    trial = old.copy()
    tracker.init(nb.system_energy(old))

    steps = int(cfg.get("moves.steps", 10000))
    check_every = int(cfg.get("moves.check_every", 1000))
    dp = atom_types.property_array("dp")
    accepted = 0
    try:
        for step in range(1, steps + 1):
            g = int(rng.integers(old.num_groups))
            change = Change()
            change.add(g)
            for i in trial.groups[g]:
                p = trial.particles[i]
                p.position += rng.uniform(-0.5, 0.5, size=3) * dp[p.type_id]
                geometry.boundary(p.position)

            u_old, u_new = nb.evaluate_change(old, trial, change)
            du = u_new - u_old
            if du <= 0 or rng.random() < math.exp(-du):
                old.sync(trial, change)
                tracker.apply_delta(u_old, u_new)
                accepted += 1
            else:
                trial.sync(old, change)

            if step % check_every == 0:
                tracker.reconcile(nb.system_energy(old))
                logger.info(
                    f"step {step}: U = {tracker.running:.6f} kT, "
                    f"acceptance = {accepted / step:.3f}"
                )
    finally:
        if executor is not None:
            executor.shutdown()

    logger.info("\n" + tracker.info())
    return tracker


def main():
    here = os.path.dirname(os.path.abspath(__file__))
    parser = argparse.ArgumentParser(description="盐水体系 Metropolis MC 示例")
    parser.add_argument(
        "config", nargs="?", default=os.path.join(here, "seawater.yaml")
    )
    parser.add_argument("--workers", type=int, default=0, help="并行线程数")
    parser.add_argument("--log", default=None, help="DEBUG 日志文件路径")
    args = parser.parse_args()

    setup_logging(log_file=args.log)
    run(ConfigManager(files=[args.config]), workers=args.workers)


if __name__ == "__main__":
    main()
