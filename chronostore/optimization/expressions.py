# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Define named expressions shared between model builders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chronostore.common import as_dataarray
from chronostore.inputs import RESOURCE_DIM
from chronostore.periods import HOUR_DIM

if TYPE_CHECKING:
    from chronostore.case import Case

logger = logging.getLogger(__name__)


def define_capacity_expressions(case: Case) -> None:
    """Define total power capacity 'eTotalCap' and energy capacity 'eTotalCapEnergy'.

    Total capacity is the existing capacity plus the new capacity.

    Parameters
    ----------
    case : chronostore.Case
        Case instance

    """
    gen = case.inputs.gen
    existing = as_dataarray(gen.Existing_Cap_MW, RESOURCE_DIM)
    case.add_expression("eTotalCap", case.variable("vCAP") + existing)

    stor = case.inputs.stor_all
    if stor.empty:
        return

    existing = as_dataarray(gen.loc[stor, "Existing_Cap_MWh"], RESOURCE_DIM)
    case.add_expression("eTotalCapEnergy", case.variable("vCAPENERGY") + existing)


def define_storage_loss_expressions(case: Case) -> None:
    """Define the weighted energy lost by each storage resource, 'eELOSS'."""
    stor = case.inputs.stor_all
    if stor.empty:
        return

    omega = as_dataarray(case.inputs.omega, HOUR_DIM)
    charge = case.variable("vCHARGE")
    discharge = case.variable("vP").sel({RESOURCE_DIM: stor})
    case.add_expression("eELOSS", ((charge - discharge) * omega).sum(HOUR_DIM))
