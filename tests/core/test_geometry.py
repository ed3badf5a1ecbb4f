"""
几何模块的单元测试
"""

import logging

import numpy as np
import pytest

from nonbondedmc.core.geometry import Cuboid, Geometry, OpenGeometry


class TestCuboid:
    """正交周期盒子"""

    def test_minimum_image(self):
        geo = Cuboid([10.0, 20.0, 30.0])
        r = geo.vdist(np.array([4.5, 0.0, 0.0]), np.array([-4.5, 0.0, 0.0]))
        assert np.allclose(r, [-1.0, 0.0, 0.0])
        r = geo.vdist(np.array([0.0, 9.0, -14.0]), np.array([0.0, -9.0, 14.0]))
        assert np.allclose(r, [0.0, -2.0, 2.0])

    def test_distance_helpers(self):
        geo = Cuboid(10.0)
        a = np.array([4.0, 0.0, 0.0])
        b = np.array([-4.0, 0.0, 0.0])
        assert geo.sqdist(a, b) == pytest.approx(4.0)
        assert geo.dist(a, b) == pytest.approx(2.0)

    def test_boundary_wraps_in_place(self):
        geo = Cuboid(10.0)
        pos = np.array([6.0, -7.0, 4.0])
        geo.boundary(pos)
        assert np.allclose(pos, [-4.0, 3.0, 4.0])

    def test_volume(self):
        assert Cuboid([2.0, 3.0, 4.0]).volume == pytest.approx(24.0)

    @pytest.mark.parametrize("lengths", [0.0, -1.0, [1.0, 2.0], [1.0, np.inf, 1.0]])
    def test_invalid_lengths(self, lengths):
        with pytest.raises(ValueError):
            Cuboid(lengths)

    def test_lengths_read_only(self):
        geo = Cuboid(5.0)
        with pytest.raises(ValueError):
            geo.lengths[0] = 1.0

    def test_check_cutoff(self, caplog):
        geo = Cuboid(10.0)
        assert geo.check_cutoff(4.0)
        with caplog.at_level(logging.WARNING, logger="nonbondedmc.core.geometry"):
            assert not geo.check_cutoff(6.0)
        assert "too large" in caplog.text


class TestOpenGeometry:
    """无边界几何"""

    def test_plain_difference(self):
        geo = OpenGeometry()
        r = geo.vdist([100.0, 0.0, 0.0], [-100.0, 0.0, 0.0])
        assert np.allclose(r, [200.0, 0.0, 0.0])
        assert geo.volume == np.inf

    def test_boundary_is_noop(self):
        pos = np.array([1e6, 0.0, 0.0])
        OpenGeometry().boundary(pos)
        assert pos[0] == 1e6


def test_geometry_is_abstract():
    with pytest.raises(TypeError):
        Geometry()
