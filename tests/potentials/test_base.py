"""
测试对势基类与组合对势
"""

import numpy as np
import pytest

from nonbondedmc.core.structure import Particle
from nonbondedmc.potentials.base import PairPotential
from nonbondedmc.potentials.combined import CombinedPairPotential, combine


class Constant(PairPotential):
    """返回常数能量的测试对势"""

    name = "Constant"

    def __init__(self, value, cutoff=np.inf):
        super().__init__({"value": value}, cutoff)
        self.value = value

    def __call__(self, a, b, r):
        return self.value


@pytest.fixture
def pair():
    return Particle([0, 0, 0]), Particle([1, 0, 0]), np.array([-1.0, 0.0, 0.0])


def test_pair_potential_is_abstract():
    """PairPotential 基类不能被直接实例化"""
    with pytest.raises(TypeError):
        PairPotential(parameters={})


def test_non_positive_cutoff():
    with pytest.raises(ValueError):
        Constant(1.0, cutoff=0.0)


def test_evaluate_matches_call(pair):
    u = Constant(2.5)
    assert u.evaluate(*pair) == u(*pair) == 2.5


def test_info_lists_parameters():
    assert Constant(1.0).info() == "Constant(value=1.0)"
    assert "cutoff=3.0" in Constant(1.0, cutoff=3.0).info()


class TestCombine:
    """组合对势"""

    def test_sum_of_terms(self, pair):
        u = combine(Constant(1.0), Constant(2.0), Constant(-0.5))
        assert isinstance(u, CombinedPairPotential)
        assert u(*pair) == pytest.approx(2.5)
        assert u.info().count(" + ") == 2

    def test_add_operator_flattens(self, pair):
        u = Constant(1.0) + Constant(2.0) + Constant(3.0)
        assert isinstance(u, CombinedPairPotential)
        assert len(u.terms) == 3
        assert u(*pair) == pytest.approx(6.0)

    def test_single_term_returned_unchanged(self):
        c = Constant(1.0)
        assert combine(c) is c

    def test_cutoff_is_largest_term(self):
        u = combine(Constant(1.0, cutoff=2.0), Constant(1.0, cutoff=5.0))
        assert u.cutoff == 5.0

    def test_empty(self):
        with pytest.raises(ValueError):
            combine()

    def test_not_a_potential(self):
        with pytest.raises(TypeError):
            combine(Constant(1.0), lambda a, b, r: 0.0)
