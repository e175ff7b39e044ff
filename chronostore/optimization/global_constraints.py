# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Define system-wide policy constraints with Linopy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr

from chronostore.common import UnexpectedError, as_dataarray, incidence
from chronostore.inputs import CAP_DIM, RESOURCE_DIM, SEGMENT_DIM, ZONE_DIM, CO2CapMode
from chronostore.optimization.common import take
from chronostore.periods import HOUR_DIM

if TYPE_CHECKING:
    from collections.abc import Callable

    from linopy import LinearExpression

    from chronostore.case import Case

logger = logging.getLogger(__name__)

COMMIT_DIM = "committed"


def _zone_table(table: pd.DataFrame) -> xr.DataArray:
    return xr.DataArray(
        table.to_numpy(dtype=float),
        coords={ZONE_DIM: table.index.to_numpy(), CAP_DIM: table.columns.to_numpy()},
        dims=(ZONE_DIM, CAP_DIM),
    )


def define_emission_expressions(case: Case) -> None:
    """Define the emissions of each resource and zone per hour.

    'eEmissionsByPlant' adds the start-up emissions of committed resources to
    the emissions of dispatch, 'eEmissionsByZone' aggregates them per zone.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    gen = inputs.gen

    by_plant = case.variable("vP") * as_dataarray(gen.CO2_per_MWh, RESOURCE_DIM)
    if not inputs.commit.empty:
        # vSTART is absent outside COMMIT, so only committed slots are taken
        commit = pd.Series(
            inputs.commit.to_numpy(), index=pd.Index(inputs.commit, name=COMMIT_DIM)
        )
        start_up = take(case.variable("vSTART"), RESOURCE_DIM, commit) * take(
            as_dataarray(gen.CO2_per_Start, RESOURCE_DIM), RESOURCE_DIM, commit
        )
        spread = incidence(commit, COMMIT_DIM, inputs.resources, RESOURCE_DIM)
        by_plant = by_plant + (start_up * spread).sum(COMMIT_DIM)
    case.add_expression("eEmissionsByPlant", by_plant)

    location = incidence(gen.Zone, RESOURCE_DIM, inputs.zones, ZONE_DIM)
    case.add_expression("eEmissionsByZone", (by_plant * location).sum(RESOURCE_DIM))


def _mass_cap_bound(
    case: Case, cap_zones: xr.DataArray
) -> tuple[LinearExpression | None, xr.DataArray]:
    return None, (cap_zones * _zone_table(case.inputs.max_co2)).sum(ZONE_DIM)


def _load_rate_cap_bound(
    case: Case, cap_zones: xr.DataArray
) -> tuple[LinearExpression | None, xr.DataArray]:
    inputs = case.inputs
    omega = as_dataarray(inputs.omega, HOUR_DIM)
    rate = _zone_table(inputs.max_co2_rate) * cap_zones

    demand = xr.DataArray(
        inputs.demand.to_numpy(),
        coords={HOUR_DIM: inputs.hours, ZONE_DIM: inputs.zones},
        dims=(HOUR_DIM, ZONE_DIM),
    )
    constant = (rate * (demand * omega).sum(HOUR_DIM)).sum(ZONE_DIM)

    terms = []
    if "vNSE" in case.model.variables:
        served = (case.variable("vNSE").sum(SEGMENT_DIM) * omega).sum(HOUR_DIM)
        terms.append(-(served * rate).sum(ZONE_DIM))

    stor = inputs.stor_all
    if not stor.empty:
        location = incidence(inputs.gen.loc[stor, "Zone"], RESOURCE_DIM, inputs.zones, ZONE_DIM)
        losses = case.add_expression(
            "eELOSSByZone", (case.expression("eELOSS") * location).sum(RESOURCE_DIM)
        )
        if case.setup.storage_losses:
            terms.append((losses * rate).sum(ZONE_DIM))

    if not terms:
        return None, constant
    expr = terms[0]
    for term in terms[1:]:
        expr = expr + term
    return expr, constant


def _generation_rate_cap_bound(
    case: Case, cap_zones: xr.DataArray
) -> tuple[LinearExpression | None, xr.DataArray]:
    inputs = case.inputs
    omega = as_dataarray(inputs.omega, HOUR_DIM)
    rate = _zone_table(inputs.max_co2_rate) * cap_zones
    no_allowance = xr.zeros_like(rate.sum(ZONE_DIM))

    generators = (
        inputs.therm_all.append([inputs.vre, inputs.must_run, inputs.hydro_res])
        .unique()
        .rename(RESOURCE_DIM)
    )
    if generators.empty:
        logger.warning(
            "No generating resources are listed, the emission rate cap allows no emissions."
        )
        return None, no_allowance

    location = incidence(inputs.gen.loc[generators, "Zone"], RESOURCE_DIM, inputs.zones, ZONE_DIM)
    generation = case.add_expression(
        "eGenerationByZone",
        (case.variable("vP").sel({RESOURCE_DIM: generators}) * location).sum(RESOURCE_DIM),
    )
    allowance = (generation * omega * rate).sum([HOUR_DIM, ZONE_DIM])
    return -allowance, no_allowance


_CO2_CAP_BOUNDS: dict[
    CO2CapMode,
    Callable[[Case, xr.DataArray], tuple[LinearExpression | None, xr.DataArray]],
] = {
    CO2CapMode.MASS: _mass_cap_bound,
    CO2CapMode.LOAD_RATE: _load_rate_cap_bound,
    CO2CapMode.GENERATION_RATE: _generation_rate_cap_bound,
}


def define_co2_cap(case: Case) -> None:
    """Cap the weighted emissions of the zones in each CO2 cap group.

    The left hand side of 'cCO2Emissions_systemwide' is, for each cap,

    sum_{z in cap, t} omega_t * eEmissionsByZone(z, t)

    and the bound depends on the setup 'CO2Cap':

    * MASS: the sum of 'dfMaxCO2' over the zones of the cap.
    * LOAD_RATE: the emission rate 'dfMaxCO2Rate' times the weighted served
      demand, plus storage losses if 'StorageLosses' is set.
    * GENERATION_RATE: the emission rate times the weighted generation of
      thermal, variable renewable, must-run and hydro resources.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    mode = case.setup.co2_cap
    if mode is CO2CapMode.NONE:
        return
    if mode not in _CO2_CAP_BOUNDS:
        msg = f"No CO2 cap formulation for mode {mode!r}."
        raise UnexpectedError(msg)

    logger.info("Building CO2 cap with mode '%s'", mode.name)
    define_emission_expressions(case)

    inputs = case.inputs
    cap_zones = _zone_table(inputs.co2_cap_zones)
    weight = as_dataarray(inputs.omega, HOUR_DIM) * cap_zones
    lhs = (case.expression("eEmissionsByZone") * weight).sum([ZONE_DIM, HOUR_DIM])

    bound, constant = _CO2_CAP_BOUNDS[mode](case, cap_zones)
    if bound is not None:
        lhs = lhs + bound
    if not np.isfinite(constant.values).all():
        msg = "CO2 cap bounds must be finite."
        raise ValueError(msg)

    case.add_constraints("cCO2Emissions_systemwide", lhs <= constant)
