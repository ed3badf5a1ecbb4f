"""
变更集的单元测试
"""

import pytest

from nonbondedmc.core.structure import Change, GroupChange


class TestChange:
    """测试Change"""

    def test_empty(self):
        change = Change()
        assert change.empty()
        assert len(change) == 0
        assert change.touched_group_index() == []
        change.validate(0)

    def test_add_keeps_insertion_order(self):
        change = Change()
        change.add(3)
        change.add(1, atoms=[0, 2])
        assert [gc.index for gc in change.groups] == [3, 1]
        assert change.touched_group_index() == [1, 3]
        assert change.groups[0].all
        assert not change.groups[1].all

    def test_is_touched(self):
        change = Change([GroupChange(2), GroupChange(5), GroupChange(9)])
        touched = change.touched_group_index()
        assert change.is_touched(5)
        assert change.is_touched(9, touched)
        assert not change.is_touched(0, touched)
        assert not change.is_touched(10, touched)

    def test_clear(self):
        change = Change()
        change.add(0)
        change.clear()
        assert change.empty()

    def test_validate_ok(self):
        change = Change()
        change.add(0)
        change.add(2, atoms=[0, 1])
        change.validate(3, [1, 1, 2])


class TestChangeValidation:
    """无效变更集"""

    @pytest.mark.parametrize("indices", [[3], [-1], [1, 0], [2, 2]])
    def test_bad_group_indices(self, indices):
        change = Change(GroupChange(i) for i in indices)
        with pytest.raises(ValueError):
            change.validate(3)

    @pytest.mark.parametrize("atoms", [[1, 0], [0, 0], [-1], [4]])
    def test_bad_atom_indices(self, atoms):
        change = Change([GroupChange(0, atoms)])
        with pytest.raises(ValueError):
            change.validate(1, [4])

    def test_atom_upper_bound_needs_sizes(self):
        change = Change([GroupChange(0, [10])])
        change.validate(1)
        with pytest.raises(ValueError, match="超出范围"):
            change.validate(1, [3])
