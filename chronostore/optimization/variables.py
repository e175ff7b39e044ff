# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Define optimisation variables of a case with Linopy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
import xarray as xr

from chronostore.common import as_dataarray
from chronostore.consistency import InputShapeError
from chronostore.inputs import RESOURCE_DIM
from chronostore.optimization.common import expansion_limit
from chronostore.periods import HOUR_DIM, REP_PERIOD_DIM

if TYPE_CHECKING:
    from chronostore.case import Case

logger = logging.getLogger(__name__)


def define_capacity_variables(case: Case) -> None:
    """Initialize variables for new power and energy capacity.

    Declares 'vCAP' for all resources and 'vCAPENERGY' for storage resources.
    Expansion is bounded by 'Max_Cap_MW' (resp. 'Max_Cap_MWh') less the existing
    capacity, a negative maximum leaves it unbounded.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    gen = case.inputs.gen
    upper = expansion_limit(gen.Max_Cap_MW, gen.Existing_Cap_MW)
    case.add_variables("vCAP", lower=0, upper=as_dataarray(upper, RESOURCE_DIM))

    stor = case.inputs.stor_all
    if stor.empty:
        return

    gen = gen.loc[stor]
    upper = expansion_limit(gen.Max_Cap_MWh, gen.Existing_Cap_MWh)
    case.add_variables("vCAPENERGY", lower=0, upper=as_dataarray(upper, RESOURCE_DIM))


def define_operational_variables(case: Case) -> None:
    """Initialize hourly dispatch, charging, inventory and start-up variables.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    inputs = case.inputs
    hours = inputs.hours

    case.add_variables("vP", lower=0, coords=[inputs.resources, hours])

    if not inputs.stor_all.empty:
        case.add_variables("vCHARGE", lower=0, coords=[inputs.stor_all, hours])
        case.add_variables("vS", lower=0, coords=[inputs.stor_all, hours])

    if not inputs.commit.empty:
        committable = inputs.resources.isin(inputs.commit)
        mask = xr.DataArray(
            np.repeat(committable[:, None], len(hours), axis=1),
            coords={RESOURCE_DIM: inputs.resources, HOUR_DIM: hours},
            dims=(RESOURCE_DIM, HOUR_DIM),
        )
        case.add_variables("vSTART", lower=0, coords=[inputs.resources, hours], mask=mask)

    segments = inputs.segments
    if inputs.demand is None or segments.empty:
        return

    case.add_variables("vNSE", lower=0, coords=[segments, hours, inputs.zones])


def define_long_duration_storage_variables(case: Case) -> None:
    """Initialize inventory variables carried across representative periods.

    For every long-duration storage resource, 'vSOCw' holds the inventory at
    the start of each chronological period and 'vdSOC' the free change of
    inventory over each representative period.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    Raises
    ------
    InputShapeError
        If no storage resource is eligible.
    ModelConflictError
        If one of the variables is already declared.

    """
    ldes = case.inputs.long_duration_storage
    if ldes.empty:
        msg = "No storage resource is flagged for long-duration storage ('LDS' == 1)."
        raise InputShapeError(msg)

    pm = case.period_map
    rep_periods = pd.RangeIndex(1, pm.rep_periods + 1, name=REP_PERIOD_DIM)

    case.add_variables("vSOCw", lower=0, coords=[ldes, pm.periods])
    case.add_variables("vdSOC", coords=[ldes, rep_periods])
    logger.debug(
        "Declared inter-period inventory for %d resources over %d periods",
        len(ldes),
        pm.n_periods,
    )
