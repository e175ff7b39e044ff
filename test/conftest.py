# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

import numpy as np
import pandas as pd
import pytest
from linopy import available_solvers

import chronostore

chronostore.options.debug.runtime_verification = True

requires_highs = pytest.mark.skipif(
    "highs" not in available_solvers, reason="HiGHS not installed"
)

HOURS_PER_SUBPERIOD = 4
REP_PERIODS = 2


@pytest.fixture
def gen():
    """Gas plant, solar park and a long-duration battery in one zone."""
    return pd.DataFrame(
        {
            "R_ID": [1, 2, 3],
            "Resource": ["gas", "solar", "battery"],
            "Zone": [1, 1, 1],
            "Self_Disch": [0.0, 0.0, 0.0],
            "Eff_Up": [1.0, 1.0, 0.9],
            "Eff_Down": [1.0, 1.0, 0.9],
            "Existing_Cap_MW": [0.0, 0.0, 0.0],
            "Existing_Cap_MWh": [0.0, 0.0, 0.0],
            "Max_Cap_MW": [-1.0, -1.0, -1.0],
            "Max_Cap_MWh": [-1.0, -1.0, -1.0],
            "Inv_Cost_per_MWyr": [1000.0, 500.0, 100.0],
            "Inv_Cost_per_MWhyr": [0.0, 0.0, 10.0],
            "Var_OM_Cost_per_MWh": [50.0, 0.0, 0.0],
            "CO2_per_MWh": [0.5, 0.0, 0.0],
            "CO2_per_Start": [1.0, 0.0, 0.0],
            "LDS": [0, 0, 1],
        }
    )


@pytest.fixture
def period_map():
    """Three chronological periods, the third one represented by the first."""
    return pd.DataFrame({"Rep_Period": [1, 2, 1], "Rep_Period_Index": [1, 2, 1]})


@pytest.fixture
def inputs(gen, period_map):
    n_hours = REP_PERIODS * HOURS_PER_SUBPERIOD
    solar = [0.0, 0.5, 1.0, 0.2, 0.0, 0.1, 0.3, 0.0]
    availability = pd.DataFrame(
        np.column_stack([np.ones(n_hours), solar, np.ones(n_hours)])
    )
    return {
        "dfGen": gen,
        "G": 3,
        "T": n_hours,
        "Z": 1,
        "REP_PERIOD": REP_PERIODS,
        "hours_per_subperiod": HOURS_PER_SUBPERIOD,
        "STOR_ALL": [3],
        "Period_Map": period_map,
        "NPeriods": 3,
        "omega": [2.0] * HOURS_PER_SUBPERIOD + [1.0] * HOURS_PER_SUBPERIOD,
        "pD": pd.DataFrame({"load": [10.0] * n_hours}),
        "pP_Max": availability,
        "pC_D_Curtail": [5000.0],
        "pMax_D_Curtail": [1.0],
        "COMMIT": [1],
        "THERM_ALL": [1],
        "VRE": [2],
    }


@pytest.fixture
def case(inputs):
    return chronostore.Case(inputs)


@pytest.fixture
def co2_tables():
    return {
        "dfCO2CapZones": pd.DataFrame({"cap_1": [1]}),
        "dfMaxCO2": pd.DataFrame({"cap_1": [30.0]}),
        "dfMaxCO2Rate": pd.DataFrame({"cap_1": [0.1]}),
    }
