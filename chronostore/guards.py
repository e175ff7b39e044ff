# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Assertion guards for runtime verification of chronostore.

Methods of this module should only be called when
chronostore.options.debug.runtime_verification is True. By default and in
production, this is False to avoid overhead. In development and testing, it
can be enabled to catch errors early.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

import numpy as np

from chronostore.common import UnexpectedError

if TYPE_CHECKING:
    from collections.abc import Callable

    from chronostore.case import Case


def _guard_error_handler(func: Callable) -> Callable:
    """Decorate guard functions to handle unexpected errors."""

    @functools.wraps(func)
    def _wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            return func(*args, **kwargs)
        except UnexpectedError:
            raise
        except Exception as e:
            msg = f"Unexpected error in guard function {func.__name__}: {e}. "
            raise UnexpectedError(msg) from e

    return _wrapper


@_guard_error_handler
def _long_duration_storage_shape_verification(case: Case) -> None:
    """Assert that every long-duration storage family has one row per resource and index.

    Parameters
    ----------
    case : chronostore.Case
        The case after the model was built.

    Raises
    ------
    UnexpectedError
        If a constraint family has an unexpected number of rows.

    """
    m = case.model
    n_ldes = len(case.inputs.long_duration_storage)
    pm = case.period_map
    expected = {
        "cSoCBalLongDurationStorageStart": pm.rep_periods,
        "cSoCBalLongDurationStorageInterior": pm.n_periods - 1,
        "cSoCBalLongDurationStorageEnd": 1,
        "cSoCBalLongDurationStorageUpper": pm.n_periods,
        "cSoCBalLongDurationStorageSub": len(pm.rep_set),
    }
    for name, per_resource in expected.items():
        if per_resource == 0:
            if name in m.constraints:
                msg = f"Constraint '{name}' should not be built for a single modeled period."
                raise UnexpectedError(msg)
            continue
        size = m.constraints[name].labels.size
        if size != n_ldes * per_resource:
            msg = (
                f"Constraint '{name}' has {size} rows, expected "
                f"{n_ldes} resources x {per_resource}."
            )
            raise UnexpectedError(msg)


@_guard_error_handler
def _period_map_verification(case: Case) -> None:
    """Assert that the resolved period map is a surjection onto its representatives."""
    pm = case.period_map
    if not pm.periods.equals(pm.rep_index.index):
        msg = "Modeled periods and period map index diverge."
        raise UnexpectedError(msg)
    represented = pm.rep_index.loc[pm.rep_set]
    if not np.array_equal(
        np.sort(represented.to_numpy()), np.arange(1, pm.rep_periods + 1)
    ):
        msg = "Representative set does not cover every representative period exactly once."
        raise UnexpectedError(msg)


# Main guard functions


def _assert_model_integrity(case: Case) -> None:
    """Check the built model of a case for internal consistency.

    Parameters
    ----------
    case : chronostore.Case
        The case to verify.

    """
    _period_map_verification(case)
    if case.setup.long_duration_storage:
        _long_duration_storage_shape_verification(case)
