#!/usr/bin/env python3
"""配置系统测试模块

测试ConfigManager的配置加载、合并、随机种子，以及由配置构建
原子类型表、几何、对势与漂移跟踪器。
"""

import random

import numpy as np
import pytest
import yaml

from nonbondedmc.core.config import (
    ConfigManager,
    build_atom_types,
    build_drift_tracker,
    build_geometry,
    build_pair_potential,
)
from nonbondedmc.core.geometry import Cuboid, OpenGeometry
from nonbondedmc.potentials.combined import CombinedPairPotential

SEAWATER = """
temperature: 300
random: {seed: fixed}
geometry: {type: cuboid, length: 100}
energy:
    - nonbonded_pmwca:
        wca: {mixing: LB}
        coulomb: {epsr: 80}
energy_drift: {rtol: 1.0e-8, atol: 1.0e-10}
atomlist:
    - Na+: {q:  1.0, eps: 0.5, sigma: 4.0, dp: 20}
    - Cl-: {q: -1.0, eps: 0.5, sigma: 4.0, dp: 20}
"""


@pytest.fixture
def seawater(tmp_path):
    config_file = tmp_path / "seawater.yaml"
    config_file.write_text(SEAWATER)
    return ConfigManager(files=[str(config_file)])


class TestConfigManagerBasic:
    """基本配置加载测试"""

    def test_empty_config_initialization(self):
        """测试空配置初始化"""
        cfg = ConfigManager()
        assert cfg.data == {}
        assert cfg.sources == []

    def test_single_file_loading(self, seawater):
        """测试单个YAML文件加载"""
        assert seawater.get("temperature") == 300
        assert seawater.get("geometry.length") == 100
        assert seawater.get("geometry.missing", "x") == "x"
        assert len(seawater.sources) == 1

    def test_multiple_file_merging(self, tmp_path):
        """测试多个配置文件合并"""
        base_config = tmp_path / "base.yaml"
        base_config.write_text(
            yaml.dump({"geometry": {"type": "cuboid", "length": 50}, "temperature": 298})
        )
        override_config = tmp_path / "override.yaml"
        override_config.write_text(yaml.dump({"geometry": {"length": 80}}))

        cfg = ConfigManager(files=[str(base_config), str(override_config)])
        assert cfg.get("geometry.length") == 80  # 被覆盖
        assert cfg.get("geometry.type") == "cuboid"  # 保持原值
        assert cfg.get("temperature") == 298

    def test_data_overrides_files(self, seawater, tmp_path):
        cfg = ConfigManager(
            files=seawater.sources, data={"geometry": {"type": "open"}}
        )
        assert cfg.get("geometry.type") == "open"
        assert cfg.get("geometry.length") == 100

    def test_missing_file_is_skipped(self, tmp_path, caplog):
        cfg = ConfigManager(files=[str(tmp_path / "nope.yaml")])
        assert cfg.data == {}
        assert cfg.sources == []
        assert "nope.yaml" in caplog.text


class TestSeed:
    """随机种子设置"""

    def test_fixed(self, seawater):
        assert seawater.set_global_seed() == 42

    def test_explicit_seed_reproducible(self):
        cfg = ConfigManager()
        cfg.set_global_seed(123)
        a = (np.random.rand(), random.random())
        cfg.set_global_seed(123)
        assert (np.random.rand(), random.random()) == a

    def test_integer_from_config(self):
        assert ConfigManager(data={"random": {"seed": 7}}).set_global_seed() == 7

    def test_hardware_seed_is_returned(self):
        """hardware 模式抽取随机种子并返回，用它可复现同一序列"""
        seed = ConfigManager(data={"random": {"seed": "hardware"}}).set_global_seed()
        assert 0 <= seed < 2**32
        first = np.random.rand()
        np.random.seed(seed)
        assert np.random.rand() == first


class TestBuilders:
    """由配置构建模拟组件"""

    def test_atom_types(self, seawater):
        table = build_atom_types(seawater)
        assert table.names == ["Na+", "Cl-"]
        assert table["Cl-"].charge == -1.0

    def test_cuboid_geometry(self, seawater):
        geo = build_geometry(seawater)
        assert isinstance(geo, Cuboid)
        assert geo.volume == pytest.approx(1e6)

    def test_open_geometry(self):
        geo = build_geometry(ConfigManager(data={"geometry": {"type": "open"}}))
        assert isinstance(geo, OpenGeometry)

    def test_geometry_errors(self):
        with pytest.raises(ValueError):
            build_geometry(ConfigManager(data={"geometry": {"type": "cuboid"}}))
        with pytest.raises(ValueError):
            build_geometry(ConfigManager(data={"geometry": {"type": "sphere"}}))

    def test_pair_potential(self, seawater):
        u = build_pair_potential(seawater)
        assert isinstance(u, CombinedPairPotential)
        assert [t.name for t in u.terms] == ["WCA", "Coulomb"]
        assert u.terms[1].parameters["temperature"] == 300.0

    def test_drift_tracker(self, seawater):
        tracker = build_drift_tracker(seawater)
        assert tracker.rtol == 1e-8
        assert tracker.atol == 1e-10

    def test_drift_tracker_defaults(self):
        tracker = build_drift_tracker(ConfigManager())
        assert (tracker.rtol, tracker.atol) == (1e-6, 1e-9)
