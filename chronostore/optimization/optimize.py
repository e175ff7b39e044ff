# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Build optimisation problems from chronostore cases with Linopy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from linopy import Model, merge

from chronostore._options import options
from chronostore.common import as_dataarray
from chronostore.guards import _assert_model_integrity
from chronostore.inputs import RESOURCE_DIM, SEGMENT_DIM
from chronostore.optimization.constraints import (
    define_long_duration_storage_constraints,
    define_operational_limit_constraints,
    define_power_balance_constraints,
    define_storage_constraints,
)
from chronostore.optimization.expressions import (
    define_capacity_expressions,
    define_storage_loss_expressions,
)
from chronostore.optimization.global_constraints import define_co2_cap
from chronostore.optimization.variables import (
    define_capacity_variables,
    define_long_duration_storage_variables,
    define_operational_variables,
)
from chronostore.periods import HOUR_DIM

if TYPE_CHECKING:
    from chronostore.case import Case

logger = logging.getLogger(__name__)


def define_objective(case: Case) -> None:
    """Define the cost minimising objective.

    Sums the following terms, each only if some cost is non-zero:

    1. **Investment costs** of new power capacity, 'Inv_Cost_per_MWyr' * 'vCAP'.
    2. **Investment costs** of new energy capacity, 'Inv_Cost_per_MWhyr' * 'vCAPENERGY'.
    3. **Variable costs** of dispatch, weighted by 'omega'.
    4. **Non-served energy costs** per segment, weighted by 'omega'.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    Raises
    ------
    ValueError
        If no term carries a cost.

    """
    m = case.model
    inputs = case.inputs
    gen = inputs.gen
    omega = as_dataarray(inputs.omega, HOUR_DIM)
    terms = []

    cost = as_dataarray(gen.Inv_Cost_per_MWyr, RESOURCE_DIM)
    if (cost != 0).any():
        terms.append((case.variable("vCAP") * cost).sum())

    if "vCAPENERGY" in m.variables:
        cost = as_dataarray(gen.loc[inputs.stor_all, "Inv_Cost_per_MWhyr"], RESOURCE_DIM)
        if (cost != 0).any():
            terms.append((case.variable("vCAPENERGY") * cost).sum())

    cost = as_dataarray(gen.Var_OM_Cost_per_MWh, RESOURCE_DIM)
    if (cost != 0).any():
        terms.append((case.variable("vP") * (cost * omega)).sum())

    if "vNSE" in m.variables:
        cost = as_dataarray(inputs.nse_cost, SEGMENT_DIM)
        if (cost != 0).any():
            terms.append((case.variable("vNSE") * (cost * omega)).sum())

    if not terms:
        msg = (
            "Objective function could not be created. Please make sure the "
            "components have cost values set."
        )
        raise ValueError(msg)

    m.objective = merge(terms)


def long_duration_storage(case: Case) -> None:
    """Add inventory accounting across representative periods to the model.

    Declares 'vSOCw' and 'vdSOC' for storage resources flagged with 'LDS'
    and links them to the intra-period storage model by the constraint
    families 'cSoCBalLongDurationStorageStart', '...Interior', '...End',
    '...Upper' and '...Sub'. Requires 'vS', 'vP', 'vCHARGE' and
    'eTotalCapEnergy' on the model.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    Raises
    ------
    InputShapeError
        If no storage resource is flagged for long-duration storage.
    MissingComponentError
        If the intra-period storage model is not built yet.
    ModelConflictError
        If long-duration storage was already added.

    """
    logger.info("Long Duration Storage Module")
    define_long_duration_storage_variables(case)
    define_long_duration_storage_constraints(case)


def create_model(
    case: Case, consistency_check: bool | None = None, **kwargs: Any
) -> Model:
    """Create a linopy.Model instance from a case.

    The model is stored at `case.model`. Building starts from an empty model,
    so calling this again discards the previous one. If building fails, no
    model is left on the case.

    Parameters
    ----------
    case : chronostore.Case
        Case instance
    consistency_check : bool, optional
        Whether to run the consistency check before building the model.
        Defaults to the option `params.create_model.consistency_check`.
    **kwargs:
        Keyword arguments used by `linopy.Model()`, such as `solver_dir` or `chunk`.

    Returns
    -------
    linopy.Model

    """
    case._model = None
    case.expressions = {}

    if consistency_check is None:
        consistency_check = options.params.create_model.consistency_check
    if consistency_check:
        case.consistency_check()

    kwargs.setdefault("force_dim_names", options.params.create_model.force_dim_names)
    case._model = Model(**kwargs)

    try:
        # Define variables
        define_capacity_variables(case)
        define_operational_variables(case)

        # Define expressions
        define_capacity_expressions(case)
        define_storage_loss_expressions(case)

        # Define constraints
        define_operational_limit_constraints(case)
        define_storage_constraints(case)
        define_power_balance_constraints(case)

        if case.setup.long_duration_storage:
            long_duration_storage(case)

        # Define policies
        define_co2_cap(case)

        define_objective(case)
    except Exception:
        case._model = None
        case.expressions = {}
        raise

    if options.debug.runtime_verification:
        _assert_model_integrity(case)

    logger.info(
        "Created model with %d variables and %d constraints",
        case.model.nvars,
        case.model.ncons,
    )
    return case.model
