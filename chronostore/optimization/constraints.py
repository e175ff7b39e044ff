# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Define optimisation constraints of a case with Linopy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd
import xarray as xr

from chronostore.common import as_dataarray, incidence
from chronostore.inputs import RESOURCE_DIM, SEGMENT_DIM, ZONE_DIM
from chronostore.optimization.common import storage_parameters, take
from chronostore.periods import (
    HOUR_DIM,
    MODELED_PERIOD_DIM,
    REP_PERIOD_DIM,
    end_hours,
    start_hours,
)

if TYPE_CHECKING:
    from chronostore.case import Case

logger = logging.getLogger(__name__)


def _hourly(frame: pd.DataFrame, columns_dim: str) -> xr.DataArray:
    return xr.DataArray(
        frame.to_numpy(),
        coords={HOUR_DIM: frame.index.to_numpy(), columns_dim: frame.columns.to_numpy()},
        dims=(HOUR_DIM, columns_dim),
    )


def define_operational_limit_constraints(case: Case) -> None:
    """Limit dispatch by available capacity and charging by power capacity.

    'cMaxPower' bounds ``vP <= pP_Max * eTotalCap`` for all resources, where the
    availability defaults to one. 'cMaxCharge' bounds ``vCHARGE <= eTotalCap``
    for storage resources.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    capacity = case.expression("eTotalCap")

    if inputs.availability is None:
        limit = capacity
    else:
        limit = capacity * _hourly(inputs.availability, RESOURCE_DIM)
    case.add_constraints("cMaxPower", case.variable("vP") - limit <= 0)

    if inputs.stor_all.empty:
        return

    limit = capacity.sel({RESOURCE_DIM: inputs.stor_all})
    case.add_constraints("cMaxCharge", case.variable("vCHARGE") - limit <= 0)


def define_storage_constraints(case: Case) -> None:
    """Define the hourly inventory balance of storage resources.

    For each storage resource and every hour ``t`` which does not start a
    representative period, 'cSoCBalInterior' enforces:

    vS(t) = (1 - Self_Disch) * vS(t-1) + Eff_Up * vCHARGE(t)
            - (1 / Eff_Down) * vP(t)

    In the first hour of each representative period, the previous inventory
    is the one of the last hour of the same period ('cSoCBalStart'). Resources
    handled by long-duration storage are excluded from 'cSoCBalStart'; their
    start-hour balance is defined by
    `define_long_duration_storage_start_constraints`. 'cSoCMax' bounds the
    inventory by 'eTotalCapEnergy'.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    stor = inputs.stor_all
    if stor.empty:
        return

    soc = case.variable("vS")
    discharge = case.variable("vP").sel({RESOURCE_DIM: stor})
    charge = case.variable("vCHARGE")
    retention, eff_up, inv_eff_down = storage_parameters(inputs, stor)

    case.add_constraints("cSoCMax", soc - case.expression("eTotalCapEnergy") <= 0)

    first = start_hours(inputs.rep_periods, inputs.hours_per_subperiod)
    last = end_hours(inputs.rep_periods, inputs.hours_per_subperiod)

    interior = inputs.hours.difference(first.to_numpy()).rename(HOUR_DIM)
    if not interior.empty:
        previous = pd.Series(interior - 1, index=interior)
        rhs = (
            take(soc, HOUR_DIM, previous) * retention
            - discharge.sel({HOUR_DIM: interior}) * inv_eff_down
            + charge.sel({HOUR_DIM: interior}) * eff_up
        )
        case.add_constraints("cSoCBalInterior", soc.sel({HOUR_DIM: interior}) == rhs)

    if case.setup.long_duration_storage:
        wrapping = inputs.short_duration_storage
    else:
        wrapping = stor
    if wrapping.empty:
        return

    soc = soc.sel({RESOURCE_DIM: wrapping})
    discharge = discharge.sel({RESOURCE_DIM: wrapping})
    charge = charge.sel({RESOURCE_DIM: wrapping})
    retention, eff_up, inv_eff_down = storage_parameters(inputs, wrapping)

    rhs = (
        take(soc, HOUR_DIM, last) * retention
        - take(discharge, HOUR_DIM, first) * inv_eff_down
        + take(charge, HOUR_DIM, first) * eff_up
    )
    case.add_constraints("cSoCBalStart", take(soc, HOUR_DIM, first) == rhs)


def define_power_balance_constraints(case: Case) -> None:
    """Balance supply and demand in each zone and hour.

    'cPowerBalance' requires dispatch less storage charging plus non-served
    energy to meet the demand 'pD'. 'cMaxNSE' limits each non-served energy
    segment to its share 'pMax_D_Curtail' of demand. Nothing is built without
    demand.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    if inputs.demand is None:
        return

    gen = inputs.gen
    zones = inputs.zones
    demand = _hourly(inputs.demand, ZONE_DIM)

    supply = incidence(gen.Zone, RESOURCE_DIM, zones, ZONE_DIM)
    lhs = (case.variable("vP") * supply).sum(RESOURCE_DIM)

    stor = inputs.stor_all
    if not stor.empty:
        storage = incidence(gen.loc[stor, "Zone"], RESOURCE_DIM, zones, ZONE_DIM)
        lhs = lhs - (case.variable("vCHARGE") * storage).sum(RESOURCE_DIM)

    if "vNSE" in case.model.variables:
        nse = case.variable("vNSE")
        lhs = lhs + nse.sum(SEGMENT_DIM)
        share = as_dataarray(inputs.nse_max, SEGMENT_DIM)
        case.add_constraints("cMaxNSE", nse <= share * demand)

    case.add_constraints("cPowerBalance", lhs == demand)


def define_long_duration_storage_start_constraints(case: Case) -> None:
    """Link the first hour of each representative period to its last hour.

    For long-duration storage, the inventory at the start of a representative
    period ``w`` equals the inventory at its end less the change 'vdSOC' over
    the period, decayed by one hour of self-discharge:

    vS(H(w-1)+1) = (1 - Self_Disch) * (vS(Hw) - vdSOC(w))
                   - (1 / Eff_Down) * vP(H(w-1)+1) + Eff_Up * vCHARGE(H(w-1)+1)

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    ldes = inputs.long_duration_storage
    first = start_hours(inputs.rep_periods, inputs.hours_per_subperiod)
    last = end_hours(inputs.rep_periods, inputs.hours_per_subperiod)

    soc = case.variable("vS").sel({RESOURCE_DIM: ldes})
    discharge = case.variable("vP").sel({RESOURCE_DIM: ldes})
    charge = case.variable("vCHARGE").sel({RESOURCE_DIM: ldes})
    delta = case.variable("vdSOC")
    retention, eff_up, inv_eff_down = storage_parameters(inputs, ldes)

    rhs = (
        (take(soc, HOUR_DIM, last) - delta) * retention
        - take(discharge, HOUR_DIM, first) * inv_eff_down
        + take(charge, HOUR_DIM, first) * eff_up
    )
    case.add_constraints(
        "cSoCBalLongDurationStorageStart", take(soc, HOUR_DIM, first) == rhs
    )


def define_long_duration_storage_interior_constraints(case: Case) -> None:
    """Carry inventory from each chronological period to the next.

    vSOCw(n+1) = vSOCw(n) + vdSOC(f(n))  for n = 1..N-1

    With a single chronological period, no constraint is built.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    pm = case.period_map
    periods = pm.periods
    if len(periods) < 2:
        logger.debug("Single modeled period, no inter-period inventory transfer.")
        return

    soc_start = case.variable("vSOCw")
    delta = case.variable("vdSOC")

    current = periods[:-1]
    following = take(soc_start, MODELED_PERIOD_DIM, pd.Series(periods[1:], index=current))
    increment = take(delta, REP_PERIOD_DIM, pm.rep_index.loc[current])
    case.add_constraints(
        "cSoCBalLongDurationStorageInterior",
        following == soc_start.sel({MODELED_PERIOD_DIM: current}) + increment,
    )


def define_long_duration_storage_end_constraints(case: Case) -> None:
    """Close the inventory cycle over the year.

    vSOCw(1) = vSOCw(N) + vdSOC(f(N))

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    pm = case.period_map
    periods = pm.periods
    soc_start = case.variable("vSOCw")
    delta = case.variable("vdSOC")

    final = periods[-1:]
    initial = take(soc_start, MODELED_PERIOD_DIM, pd.Series(periods[:1], index=final))
    increment = take(delta, REP_PERIOD_DIM, pm.rep_index.loc[final])
    case.add_constraints(
        "cSoCBalLongDurationStorageEnd",
        initial == soc_start.sel({MODELED_PERIOD_DIM: final}) + increment,
    )


def define_long_duration_storage_upper_constraints(case: Case) -> None:
    """Bound the inventory at the start of each chronological period by 'eTotalCapEnergy'.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    ldes = case.inputs.long_duration_storage
    capacity = case.expression("eTotalCapEnergy").sel({RESOURCE_DIM: ldes})
    case.add_constraints(
        "cSoCBalLongDurationStorageUpper", case.variable("vSOCw") - capacity <= 0
    )


def define_long_duration_storage_sub_constraints(case: Case) -> None:
    """Tie inter-period inventory to the simulated inventory of representative periods.

    For every chronological period ``n`` that is itself representative, the
    inventory at its start equals the simulated inventory at the end of
    ``f(n)`` less the change over it:

    vSOCw(n) = vS(H f(n)) - vdSOC(f(n))

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    pm = case.period_map
    ldes = inputs.long_duration_storage

    soc = case.variable("vS").sel({RESOURCE_DIM: ldes})
    soc_start = case.variable("vSOCw")
    delta = case.variable("vdSOC")

    represented = pm.rep_index.loc[pm.rep_set]
    final_hour = represented * inputs.hours_per_subperiod
    rhs = take(soc, HOUR_DIM, final_hour) - take(delta, REP_PERIOD_DIM, represented)
    case.add_constraints(
        "cSoCBalLongDurationStorageSub",
        soc_start.sel({MODELED_PERIOD_DIM: pm.rep_set}) == rhs,
    )


def define_long_duration_storage_constraints(case: Case) -> None:
    """Define all constraint families of long-duration storage.

    The inventory variables have to be declared beforehand, see
    `chronostore.optimization.variables.define_long_duration_storage_variables`.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    define_long_duration_storage_start_constraints(case)
    define_long_duration_storage_interior_constraints(case)
    define_long_duration_storage_end_constraints(case)
    define_long_duration_storage_upper_constraints(case)
    define_long_duration_storage_sub_constraints(case)
