# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""General utility functions for chronostore."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd
import xarray as xr

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


class UnexpectedError(AssertionError):
    """Custom error for unexpected conditions found by runtime verification."""

    def __init__(self, message: str = "") -> None:
        track_message = (
            "This points to a bug in chronostore rather than in the input data."
        )

        if message:
            message += f"\n{track_message}"
        else:
            message = track_message

        super().__init__(message)


def list_as_string(
    list_: Iterable, prefix: str = "", style: str = "comma-separated"
) -> str:
    """Convert a list to a formatted string.

    Parameters
    ----------
    list_ : Iterable
        The input sequence to be converted. Items are formatted with `str`.
    prefix : str, optional
        String to prepend to each line, by default "".
    style : {'comma-separated', 'bullet-list'}, optional
        Output format style, by default "comma-separated".

    Returns
    -------
    str
        Formatted string representation of the input sequence.

    Examples
    --------
    >>> list_as_string([1, 2, 3])
    '1, 2, 3'

    >>> list_as_string(['x', 'y'], prefix='  ')
    '  x, y'

    """
    items = [str(item) for item in list_]
    if not items:
        return ""

    if style == "comma-separated":
        return prefix + ", ".join(items)
    if style == "bullet-list":
        return prefix + "- " + f"\n{prefix}- ".join(items)
    msg = f"Style '{style}' not recognized. Use 'comma-separated' or 'bullet-list'."
    raise ValueError(msg)


def as_dataarray(ser: pd.Series, dim: str) -> xr.DataArray:
    """Convert a series to a one-dimensional DataArray along `dim`.

    Examples
    --------
    >>> as_dataarray(pd.Series([0.9, 0.8], index=[1, 2]), "resource").dims
    ('resource',)

    """
    return xr.DataArray(ser.to_numpy(), coords={dim: ser.index.to_numpy()}, dims=dim)


def incidence(mapping: pd.Series, dim: str, targets: Sequence, target_dim: str) -> xr.DataArray:
    """Build a 0/1 membership matrix of `mapping` members over `targets`.

    Entry ``(i, j)`` equals one if ``mapping[i] == targets[j]``. Summing an
    expression multiplied by this matrix over `dim` aggregates it per target,
    and every target is present in the result even when no member maps to it.

    Parameters
    ----------
    mapping : pd.Series
        Target of each member, indexed by member.
    dim : str
        Dimension name of the members.
    targets : Sequence
        Labels of the target dimension.
    target_dim : str
        Dimension name of the targets.

    Examples
    --------
    >>> zones = pd.Series([1, 2, 1], index=[10, 11, 12])
    >>> incidence(zones, "resource", [1, 2], "zone").sum("resource").values
    array([2, 1])

    """
    matrix = pd.DataFrame(
        mapping.to_numpy()[:, None] == pd.Index(targets).to_numpy()[None, :],
        index=mapping.index,
        columns=pd.Index(targets),
    ).astype(int)
    return xr.DataArray(
        matrix.to_numpy(),
        coords={dim: matrix.index.to_numpy(), target_dim: matrix.columns.to_numpy()},
        dims=(dim, target_dim),
    )
