"""
pytest配置文件 - 提供全局fixtures和测试配置
"""

import numpy as np
import pytest

from nonbondedmc.core.atomdata import AtomType, AtomTypeTable
from nonbondedmc.core.geometry import Cuboid, OpenGeometry
from nonbondedmc.core.structure import Particle, ParticleStore
from nonbondedmc.potentials.base import PairPotential


class InverseDistance(PairPotential):
    """测试用 1/r 对势，记录调用次数与调用的粒子对"""

    name = "1/r"

    def __init__(self):
        super().__init__({})
        self.calls = 0
        self.pairs = []

    def __call__(self, a, b, r):
        self.calls += 1
        self.pairs.append((id(a), id(b)))
        return 1.0 / np.sqrt(np.dot(r, r))

    def reset(self):
        self.calls = 0
        self.pairs = []


@pytest.fixture
def inverse_distance():
    """提供带调用计数的 1/r 对势"""
    return InverseDistance()


@pytest.fixture
def salt_types():
    """NaCl 原子类型表"""
    return AtomTypeTable(
        [
            AtomType("Na+", charge=1.0, sigma=4.0, eps=0.5, dp=20.0),
            AtomType("Cl-", charge=-1.0, sigma=4.0, eps=0.5, dp=20.0),
        ]
    )


@pytest.fixture
def open_geometry():
    return OpenGeometry()


@pytest.fixture
def cubic_box():
    """边长 20 Å 的立方周期盒子"""
    return Cuboid(20.0)


@pytest.fixture
def three_particle_store(open_geometry):
    """三个单粒子基团：粒子0、1静止，粒子2在x轴上

    旧状态中粒子2与粒子0相距2、与粒子1相距4。
    """
    store = ParticleStore(open_geometry)
    store.add_group("p0", [Particle([0.0, 0.0, 0.0])])
    store.add_group("p1", [Particle([-2.0, 0.0, 0.0])])
    store.add_group("p2", [Particle([2.0, 0.0, 0.0])])
    return store


@pytest.fixture
def molecule_store(cubic_box):
    """四个基团（大小为 2、1、3、2）组成的小体系"""
    rng = np.random.default_rng(7)
    store = ParticleStore(cubic_box)
    sizes = [2, 1, 3, 2]
    centres = [[-5.0, -5.0, -5.0], [5.0, -5.0, 0.0], [-5.0, 5.0, 5.0], [5.0, 5.0, -5.0]]
    for k, (n, centre) in enumerate(zip(sizes, centres)):
        centre = np.array(centre)
        particles = [
            Particle(centre + rng.uniform(-1.0, 1.0, size=3), charge=(-1.0) ** k)
            for _ in range(n)
        ]
        store.add_group(f"mol{k}", particles)
    return store


# 全局测试配置
def pytest_configure(config):
    """pytest全局配置"""
    # 设置numpy错误处理
    np.seterr(all="raise")


def pytest_runtest_setup(item):
    """每个测试前的设置"""
    # 设置随机种子确保可重现性
    np.random.seed(42)
