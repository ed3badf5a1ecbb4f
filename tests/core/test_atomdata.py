"""
原子类型表的单元测试
"""

import dataclasses

import numpy as np
import pytest

from nonbondedmc.core.atomdata import AtomType, AtomTypeTable


class TestAtomType:
    """测试AtomType"""

    def test_from_dict_aliases_and_extras(self):
        a = AtomType.from_dict("Na+", {"q": 1, "sigma": 4.0, "eps": 0.5, "tfe": 2.5})
        assert a.charge == 1.0
        assert a.sigma == 4.0
        assert a.radius == 2.0
        assert a.get_property("tfe") == 2.5
        with pytest.raises(KeyError):
            a.get_property("tension")

    def test_is_immutable(self):
        a = AtomType("Na+", properties={"x": 1.0})
        with pytest.raises(dataclasses.FrozenInstanceError):
            a.charge = 2.0
        with pytest.raises(TypeError):
            a.properties["x"] = 2.0


class TestAtomTypeTable:
    """测试AtomTypeTable"""

    def test_ids_follow_insertion_order(self, salt_types):
        assert len(salt_types) == 2
        assert salt_types["Na+"].id == 0
        assert salt_types.by_id(1).name == "Cl-"
        assert salt_types.names == ["Na+", "Cl-"]
        assert "Na+" in salt_types
        assert "K+" not in salt_types

    def test_from_config_list(self):
        table = AtomTypeTable.from_config(
            [
                {"Na+": {"q": 1.0, "eps": 0.5, "sigma": 4.0, "dp": 20}},
                {"Cl-": {"q": -1.0, "eps": 0.5, "sigma": 4.0, "dp": 20}},
            ]
        )
        assert [a.charge for a in table] == [1.0, -1.0]
        assert table["Cl-"].dp == 20

    def test_from_config_mapping(self):
        table = AtomTypeTable.from_config({"sol": {"mulen": 1.5, "alpha": 0.2}})
        assert table["sol"].mulen == 1.5
        assert table["sol"].alphax == 0.2

    def test_from_config_none(self):
        assert len(AtomTypeTable.from_config(None)) == 0

    def test_from_config_invalid_entry(self):
        with pytest.raises(ValueError):
            AtomTypeTable.from_config(["Na+"])

    def test_redefinition_keeps_id(self):
        table = AtomTypeTable(
            [AtomType("A", charge=1.0), AtomType("B"), AtomType("A", charge=2.0)]
        )
        assert len(table) == 2
        assert table["A"].id == 0
        assert table["A"].charge == 2.0

    def test_names_to_ids(self, salt_types):
        assert salt_types.names_to_ids(["Cl-", "Na+"]) == [1, 0]
        assert salt_types.names_to_ids(["*"]) == [0, 1]
        with pytest.raises(ValueError, match="not found"):
            salt_types.names_to_ids(["K+"])

    def test_lookup_errors(self, salt_types):
        with pytest.raises(KeyError):
            salt_types["K+"]
        with pytest.raises(KeyError):
            salt_types.by_id(5)

    def test_property_array(self, salt_types):
        assert np.allclose(salt_types.property_array("charge"), [1.0, -1.0])
