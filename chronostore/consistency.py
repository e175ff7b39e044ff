# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Error types and consistency checks for model inputs.

Mainly used in `Case.consistency_check()`, which runs before a model is built.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from chronostore.common import list_as_string

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chronostore.case import Case

logger = logging.getLogger(__name__)


class ConsistencyError(ValueError):
    """Error raised when inputs or the shared model are inconsistent."""


class InputShapeError(ConsistencyError):
    """A required key or column is absent, or a table has the wrong size."""


class IndexMappingError(ConsistencyError):
    """An identifier or period does not map to where it has to."""


class ModelConflictError(ConsistencyError):
    """A variable, expression or constraint name is already on the model."""


class MissingComponentError(ConsistencyError, KeyError):
    """A builder referenced a variable or expression which is not declared yet."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


def _log_or_raise(strict: bool, message: str, *args: Any) -> None:
    formatted_message = message % args if args else message
    if strict:
        raise ConsistencyError(formatted_message)
    logger.warning(message, *args)


def check_long_duration_storage_resources(case: Case) -> None:
    """Check that long-duration storage is only requested when it applies.

    Always strict: an empty set of eligible resources cannot be recovered from.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.

    """
    if not case.setup.long_duration_storage:
        return
    if case.inputs.long_duration_storage.empty:
        msg = (
            "Long-duration storage is enabled but no resource in 'STOR_ALL' is "
            "flagged with 'LDS'. Disable it in the setup or flag resources."
        )
        raise InputShapeError(msg)


def check_co2_cap_tables(case: Case) -> None:
    """Check that the tables required by the selected CO2 cap are given and aligned.

    Always strict.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.

    """
    mode = case.setup.co2_cap
    inputs = case.inputs
    required = mode.required_inputs
    missing = [attr for attr in required if getattr(inputs, attr) is None]
    if missing:
        msg = (
            f"CO2 cap mode '{mode.name}' requires the inputs: "
            f"{list_as_string(missing)}"
        )
        raise InputShapeError(msg)

    if not required:
        return

    zones = inputs.zones
    caps = inputs.co2_cap_zones.columns
    for attr in required:
        table = getattr(inputs, attr)
        if attr in ("co2_cap_zones", "max_co2", "max_co2_rate"):
            if not table.index.equals(zones):
                msg = f"Table '{attr}' must be indexed by the zones 1..{inputs.n_zones}."
                raise InputShapeError(msg)
            if not table.columns.equals(caps):
                msg = (
                    f"Table '{attr}' must have the same cap columns as "
                    f"'co2_cap_zones': {list_as_string(caps)}."
                )
                raise InputShapeError(msg)


def check_for_zero_weights(case: Case, strict: bool = False) -> None:
    """Check whether some hours carry no weight in the objective and policies.

    Activate strict mode by passing `['zero_weights']` to the `strict` argument.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.
    strict : bool, optional
        If True, raise an error instead of logging a warning.

    """
    omega = case.inputs.omega
    zero = omega.index[omega == 0]
    if not zero.empty:
        _log_or_raise(
            strict,
            "The following hours have zero weight and are ignored by costs and caps: %s",
            list_as_string(zero),
        )


def check_for_idle_storage(case: Case, strict: bool = False) -> None:
    """Check for storage resources which can never hold energy.

    Activate strict mode by passing `['idle_storage']` to the `strict` argument.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.
    strict : bool, optional
        If True, raise an error instead of logging a warning.

    """
    gen = case.inputs.gen.loc[case.inputs.stor_all]
    idle = gen.index[(gen.Existing_Cap_MWh <= 0) & (gen.Max_Cap_MWh == 0)]
    if not idle.empty:
        _log_or_raise(
            strict,
            "The following storage resources have no energy capacity and cannot be expanded: %s",
            list_as_string(idle),
        )


def check_for_vanishing_inventory(case: Case, strict: bool = False) -> None:
    """Check for long-duration storage losing almost all energy within one period.

    Such resources cannot carry inventory across representative periods in any
    meaningful way. Activate strict mode by passing `['vanishing_inventory']`
    to the `strict` argument.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.
    strict : bool, optional
        If True, raise an error instead of logging a warning.

    """
    if not case.setup.long_duration_storage:
        return
    ldes = case.inputs.long_duration_storage
    retained = (1 - case.inputs.gen.loc[ldes, "Self_Disch"]) ** (
        case.inputs.hours_per_subperiod
    )
    vanishing = ldes[np.asarray(retained < 0.01)]
    if not vanishing.empty:
        _log_or_raise(
            strict,
            "The following long-duration storage resources retain less than 1%% of "
            "their inventory over one representative period: %s",
            list_as_string(vanishing),
        )


def consistency_check(case: Case, strict: Sequence[str] | None = None) -> None:
    """Check the case inputs for consistency before building a model.

    Structural problems always raise. Suspicious but buildable inputs are
    logged as warnings unless their check name is passed in `strict`.

    Parameters
    ----------
    case : chronostore.Case
        The case to check.
    strict : list of str, optional
        Names of the lenient checks that should raise instead of warn. Valid
        names are 'zero_weights', 'idle_storage' and 'vanishing_inventory'.

    """
    strict = list(strict or [])
    unknown = set(strict) - {"zero_weights", "idle_storage", "vanishing_inventory"}
    if unknown:
        msg = f"Unknown consistency checks: {list_as_string(sorted(unknown))}"
        raise ValueError(msg)

    check_long_duration_storage_resources(case)
    check_co2_cap_tables(case)

    check_for_zero_weights(case, "zero_weights" in strict)
    check_for_idle_storage(case, "idle_storage" in strict)
    check_for_vanishing_inventory(case, "vanishing_inventory" in strict)
