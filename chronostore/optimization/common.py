# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Use common methods for optimization problem definition with Linopy."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import numpy as np
import pandas as pd
import xarray as xr

from chronostore.common import as_dataarray
from chronostore.inputs import RESOURCE_DIM

if TYPE_CHECKING:
    from chronostore.inputs import ModelInputs

T = TypeVar("T")


def take(ds: T, dim: str, labels: pd.Series) -> T:
    """Select the `labels` values along `dim` and relabel by the `labels` index.

    Works on xarray and linopy objects alike. The selected dimension is renamed
    to the name of the index of `labels`, which lets a variable defined over
    e.g. representative periods be addressed per chronological period.

    Parameters
    ----------
    ds : xr.DataArray, linopy.Variable or linopy.LinearExpression
        Object to select from.
    dim : str
        Dimension to select along.
    labels : pd.Series
        Values are labels of `dim`, the named index gives the new coordinates.

    Returns
    -------
    Object of the same type, with dimension ``labels.index.name``.

    Examples
    --------
    >>> da = xr.DataArray([10, 20], coords={"rep_period": [1, 2]}, dims="rep_period")
    >>> f = pd.Series([1, 2, 1], index=pd.RangeIndex(1, 4, name="modeled_period"))
    >>> take(da, "rep_period", f).values
    array([10, 20, 10])

    """
    new_dim = labels.index.name
    if new_dim is None:
        msg = "The index of `labels` must be named."
        raise ValueError(msg)
    selected = ds.sel({dim: labels.to_numpy()})
    if new_dim != dim:
        selected = selected.rename({dim: new_dim})
    return selected.assign_coords({new_dim: labels.index.to_numpy()})


def storage_parameters(
    inputs: ModelInputs, resources: pd.Index
) -> tuple[xr.DataArray, xr.DataArray, xr.DataArray]:
    """Return retention, charging efficiency and inverse discharging efficiency.

    Retention is ``1 - Self_Disch``, the share of inventory kept over one hour.
    """
    gen = inputs.gen.loc[resources]
    retention = as_dataarray(1 - gen.Self_Disch, RESOURCE_DIM)
    eff_up = as_dataarray(gen.Eff_Up, RESOURCE_DIM)
    inv_eff_down = as_dataarray(1 / gen.Eff_Down, RESOURCE_DIM)
    return retention, eff_up, inv_eff_down


def expansion_limit(max_cap: pd.Series, existing: pd.Series) -> pd.Series:
    """Upper bound of new capacity, infinite where the maximum is negative."""
    return (max_cap - existing).clip(lower=0).where(max_cap >= 0, np.inf)
