# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

import pandas as pd
import pytest

import chronostore
from chronostore import CO2CapMode, ModelInputs, Setup
from chronostore.consistency import IndexMappingError, InputShapeError


def test_from_dict(inputs):
    record = ModelInputs.from_dict(inputs)
    assert record.resources.tolist() == [1, 2, 3]
    assert record.resources.name == "resource"
    assert record.stor_all.tolist() == [3]
    assert record.hours.tolist() == list(range(1, 9))
    assert record.zones.tolist() == [1]
    assert record.segments.tolist() == [1]
    assert record.periods.n_periods == 3
    assert record.long_duration_storage.tolist() == [3]
    assert record.short_duration_storage.empty
    assert record.demand.shape == (8, 1)
    assert record.demand.columns.name == "zone"
    assert record.availability.columns.tolist() == [1, 2, 3]


def test_missing_key(inputs):
    del inputs["Period_Map"]
    with pytest.raises(InputShapeError, match="Period_Map"):
        ModelInputs.from_dict(inputs)


def test_unknown_key(inputs):
    inputs["NotAnInput"] = 1
    with pytest.raises(InputShapeError, match="NotAnInput"):
        ModelInputs.from_dict(inputs)


def test_hours_must_match_periods(inputs):
    inputs["T"] = 10
    with pytest.raises(InputShapeError, match="T=10"):
        ModelInputs.from_dict(inputs)


@pytest.mark.parametrize("value", [0, -2, 1.5, True])
def test_scalars_must_be_positive_integers(inputs, value):
    inputs["Z"] = value
    with pytest.raises(InputShapeError, match="n_zones"):
        ModelInputs.from_dict(inputs)


def test_resource_count(inputs):
    inputs["G"] = 4
    with pytest.raises(InputShapeError, match="G=4"):
        ModelInputs.from_dict(inputs)


def test_unknown_storage_resource(inputs):
    inputs["STOR_ALL"] = [3, 7]
    with pytest.raises(IndexMappingError, match="7"):
        ModelInputs.from_dict(inputs)


def test_duplicate_storage_resource(inputs):
    inputs["STOR_ALL"] = [3, 3]
    with pytest.raises(InputShapeError, match="more than once"):
        ModelInputs.from_dict(inputs)


def test_zone_outside_range(inputs):
    inputs["dfGen"].loc[0, "Zone"] = 2
    with pytest.raises(IndexMappingError, match="zone"):
        ModelInputs.from_dict(inputs)


def test_missing_required_column(inputs):
    inputs["dfGen"] = inputs["dfGen"].drop(columns="Self_Disch")
    with pytest.raises(InputShapeError, match="Self_Disch"):
        ModelInputs.from_dict(inputs)


def test_defaults_are_filled(inputs):
    inputs["dfGen"] = inputs["dfGen"][["R_ID", "Zone", "Self_Disch", "Eff_Up", "Eff_Down"]]
    record = ModelInputs.from_dict(inputs)
    assert (record.gen.Max_Cap_MW == -1).all()
    assert (record.gen.Existing_Cap_MWh == 0).all()
    # Without an 'LDS' column every storage resource is eligible
    assert record.long_duration_storage.tolist() == [3]
    assert record.gen.loc[[1, 2], "LDS"].tolist() == [0, 0]


@pytest.mark.parametrize(
    ("column", "value"),
    [("Eff_Up", 0.0), ("Eff_Down", 1.2), ("Self_Disch", 1.0), ("Self_Disch", -0.1)],
)
def test_storage_parameters_out_of_range(inputs, column, value):
    inputs["dfGen"].loc[2, column] = value
    with pytest.raises(InputShapeError, match=column):
        ModelInputs.from_dict(inputs)


def test_declared_periods_must_match_map(inputs):
    inputs["NPeriods"] = 5
    with pytest.raises(InputShapeError, match="5 modeled periods"):
        ModelInputs.from_dict(inputs)


def test_period_map_errors_propagate(inputs):
    inputs["Period_Map"] = pd.DataFrame(
        {"Rep_Period": [1, 2, 1], "Rep_Period_Index": [1, 2, 3]}
    )
    with pytest.raises(IndexMappingError):
        ModelInputs.from_dict(inputs)


def test_demand_shape(inputs):
    inputs["pD"] = pd.DataFrame({"load": [10.0] * 7})
    with pytest.raises(InputShapeError, match="demand"):
        ModelInputs.from_dict(inputs)


def test_omega_shape(inputs):
    inputs["omega"] = [1.0] * 3
    with pytest.raises(InputShapeError, match="omega"):
        ModelInputs.from_dict(inputs)


def test_omega_defaults_to_one(inputs):
    del inputs["omega"]
    record = ModelInputs.from_dict(inputs)
    assert (record.omega == 1).all()
    assert record.omega.index.name == "hour"


def test_non_served_energy_pairs(inputs):
    del inputs["pMax_D_Curtail"]
    with pytest.raises(InputShapeError, match="together"):
        ModelInputs.from_dict(inputs)


def test_co2_tables(inputs, co2_tables):
    inputs.update(co2_tables)
    record = ModelInputs.from_dict(inputs)
    assert record.n_co2_caps == 1
    assert record.co2_cap_zones.index.tolist() == [1]
    assert record.max_co2.columns.tolist() == [1]


def test_co2_tables_disagree_on_caps(inputs, co2_tables):
    inputs.update(co2_tables)
    inputs["dfMaxCO2"] = pd.DataFrame({"cap_1": [30.0], "cap_2": [10.0]})
    with pytest.raises(InputShapeError, match="cap columns"):
        ModelInputs.from_dict(inputs)


def test_setup_from_dict():
    setup = Setup.from_dict({"CO2Cap": 2, "StorageLosses": 0, "LongDurationStorage": 1})
    assert setup.co2_cap is CO2CapMode.LOAD_RATE
    assert setup.storage_losses is False
    assert setup.long_duration_storage is True


def test_setup_defaults():
    setup = Setup()
    assert setup.co2_cap is CO2CapMode.NONE
    assert setup.long_duration_storage


def test_setup_rejects_unknown_key():
    with pytest.raises(InputShapeError, match="Reserves"):
        Setup.from_dict({"Reserves": 1})


def test_setup_rejects_invalid_mode():
    with pytest.raises(InputShapeError, match="CO2 cap mode"):
        Setup(co2_cap=7)


def test_inputs_are_immutable(inputs):
    record = ModelInputs.from_dict(inputs)
    with pytest.raises(AttributeError):
        record.n_zones = 2


def test_case_accepts_records(inputs):
    case = chronostore.Case(ModelInputs.from_dict(inputs), Setup(long_duration_storage=False))
    assert not case.setup.long_duration_storage
    assert case.period_map.rep_periods == 2
    assert "modeled_periods=3" in repr(case)
