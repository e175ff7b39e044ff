# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Map chronological periods onto representative periods.

A year is approximated by ``W`` representative periods of ``H`` hours each,
simulated back to back as hours ``1..W*H``. Every one of the ``N``
chronological (modeled) periods of the year is represented by exactly one
of them, ``f(n) = w``. Periods are numbered from one throughout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd
from pandas.api.types import is_bool_dtype, is_integer_dtype

from chronostore.common import list_as_string
from chronostore.consistency import IndexMappingError, InputShapeError

logger = logging.getLogger(__name__)

PERIOD_MAP_COLUMNS = ["Rep_Period", "Rep_Period_Index"]

MODELED_PERIOD_DIM = "modeled_period"
REP_PERIOD_DIM = "rep_period"
HOUR_DIM = "hour"


def hour_range(period: int, hours_per_subperiod: int) -> tuple[int, int]:
    """Return the first and last simulated hour of a representative period.

    Parameters
    ----------
    period : int
        Representative period, starting at one.
    hours_per_subperiod : int
        Number of hours simulated per representative period.

    Returns
    -------
    tuple of int
        ``(H * (period - 1) + 1, H * period)``

    Examples
    --------
    >>> hour_range(1, 24)
    (1, 24)
    >>> hour_range(3, 168)
    (337, 504)

    """
    if period < 1:
        msg = f"Representative periods start at 1, got {period}."
        raise ValueError(msg)
    if hours_per_subperiod < 1:
        msg = f"hours_per_subperiod must be >= 1, got {hours_per_subperiod}."
        raise ValueError(msg)
    return hours_per_subperiod * (period - 1) + 1, hours_per_subperiod * period


def start_hours(rep_periods: int, hours_per_subperiod: int) -> pd.Series:
    """First simulated hour of every representative period, indexed by period."""
    index = pd.RangeIndex(1, rep_periods + 1, name=REP_PERIOD_DIM)
    return pd.Series(
        [hour_range(w, hours_per_subperiod)[0] for w in index], index=index, name=HOUR_DIM
    )


def end_hours(rep_periods: int, hours_per_subperiod: int) -> pd.Series:
    """Last simulated hour of every representative period, indexed by period."""
    index = pd.RangeIndex(1, rep_periods + 1, name=REP_PERIOD_DIM)
    return pd.Series(
        [hour_range(w, hours_per_subperiod)[1] for w in index], index=index, name=HOUR_DIM
    )


@dataclass(frozen=True, eq=False)
class PeriodMap:
    """Resolved mapping of chronological periods to representative periods.

    Attributes
    ----------
    rep_index : pd.Series
        Representative period ``f(n)`` of every chronological period ``n``.
        Index: modeled periods ``1..N``, values: representative periods ``1..W``.
    rep_set : pd.Index
        Chronological periods which are themselves representative.
    rep_periods : int
        Number of representative periods ``W``.

    """

    rep_index: pd.Series
    rep_set: pd.Index
    rep_periods: int

    @property
    def n_periods(self) -> int:
        """Number of chronological periods ``N``."""
        return len(self.rep_index)

    @property
    def periods(self) -> pd.Index:
        """Chronological periods ``1..N``."""
        return self.rep_index.index

    def representatives(self) -> pd.Series:
        """Chronological period standing for each representative period.

        Index: representative periods ``1..W``, values: modeled periods.
        """
        return pd.Series(
            self.rep_set.to_numpy(),
            index=pd.Index(self.rep_index.loc[self.rep_set].to_numpy(), name=REP_PERIOD_DIM),
            name=MODELED_PERIOD_DIM,
        ).sort_index()

    def weights(self) -> pd.Series:
        """Number of chronological periods represented by each representative period."""
        index = pd.RangeIndex(1, self.rep_periods + 1, name=REP_PERIOD_DIM)
        return self.rep_index.value_counts().reindex(index, fill_value=0).rename("weight")


def _representative_flags(rep_period: pd.Series) -> pd.Series:
    """Flag chronological periods which represent themselves.

    The flag column may be boolean or hold, for every chronological period,
    the chronological period that was picked as its representative.
    """
    if is_bool_dtype(rep_period):
        return rep_period
    if not is_integer_dtype(rep_period):
        msg = "Column 'Rep_Period' must hold booleans or integer period ids."
        raise IndexMappingError(msg)
    return pd.Series(rep_period.to_numpy() == rep_period.index.to_numpy(), index=rep_period.index)


def resolve_period_map(
    period_map: pd.DataFrame, rep_periods: int | None = None
) -> PeriodMap:
    """Resolve the period map table into a `PeriodMap`.

    Parameters
    ----------
    period_map : pd.DataFrame
        One row per chronological period, in chronological order, with
        the columns 'Rep_Period' and 'Rep_Period_Index'. Rows are renumbered
        ``1..N`` in order.
    rep_periods : int, optional
        Declared number of representative periods ``W``. If omitted, it is
        taken as the largest 'Rep_Period_Index'.

    Returns
    -------
    PeriodMap

    Raises
    ------
    InputShapeError
        If a column is missing or the table is empty.
    IndexMappingError
        If a representative index is not in ``1..W``, if a representative
        period is not represented by exactly one chronological period mapping
        to itself, or if periods sharing a representative disagree on its index.

    Examples
    --------
    >>> pm = resolve_period_map(pd.DataFrame({"Rep_Period": [1, 2, 1],
    ...                                       "Rep_Period_Index": [1, 2, 1]}))
    >>> pm.rep_index.tolist(), pm.rep_set.tolist()
    ([1, 2, 1], [1, 2])

    """
    missing = [col for col in PERIOD_MAP_COLUMNS if col not in period_map.columns]
    if missing:
        msg = f"Period map is missing the columns: {list_as_string(missing)}"
        raise InputShapeError(msg)
    if period_map.empty:
        msg = "Period map has no rows."
        raise InputShapeError(msg)

    periods = pd.RangeIndex(1, len(period_map) + 1, name=MODELED_PERIOD_DIM)
    table = period_map[PERIOD_MAP_COLUMNS].set_axis(periods)

    index = table.Rep_Period_Index
    if index.isna().any() or not is_integer_dtype(index):
        msg = "Column 'Rep_Period_Index' must hold an integer for every period."
        raise IndexMappingError(msg)
    index = index.astype(int).rename(REP_PERIOD_DIM)

    if rep_periods is None:
        rep_periods = int(index.max())
    if len(periods) < rep_periods:
        msg = (
            f"Period map has {len(periods)} chronological periods, fewer than "
            f"the {rep_periods} representative periods."
        )
        raise IndexMappingError(msg)

    out_of_range = periods[((index < 1) | (index > rep_periods)).to_numpy()]
    if not out_of_range.empty:
        msg = (
            f"Chronological periods {list_as_string(out_of_range)} map to a "
            f"representative period outside 1..{rep_periods}."
        )
        raise IndexMappingError(msg)

    flags = _representative_flags(table.Rep_Period)
    rep_set = periods[flags.to_numpy()]

    counts = index.loc[rep_set].value_counts().reindex(
        pd.RangeIndex(1, rep_periods + 1), fill_value=0
    )
    unrepresented = counts.index[(counts == 0).to_numpy()]
    if not unrepresented.empty:
        msg = (
            f"Representative periods {list_as_string(unrepresented)} are not "
            "represented by any chronological period mapping to itself."
        )
        raise IndexMappingError(msg)
    ambiguous = counts.index[(counts > 1).to_numpy()]
    if not ambiguous.empty:
        msg = (
            f"Representative periods {list_as_string(ambiguous)} are represented "
            "by more than one chronological period."
        )
        raise IndexMappingError(msg)

    if not is_bool_dtype(table.Rep_Period):
        # Every period must carry the index of the period it names as representative.
        named = table.Rep_Period.astype(int)
        unknown = periods[~named.isin(rep_set).to_numpy()]
        if not unknown.empty:
            msg = (
                f"Chronological periods {list_as_string(unknown)} name a "
                "representative period which does not represent itself."
            )
            raise IndexMappingError(msg)
        expected = index.loc[named.to_numpy()].to_numpy()
        disagree = periods[expected != index.to_numpy()]
        if not disagree.empty:
            msg = (
                f"Chronological periods {list_as_string(disagree)} disagree with "
                "their representative period on 'Rep_Period_Index'."
            )
            raise IndexMappingError(msg)

    logger.debug(
        "Resolved period map with %d chronological and %d representative periods",
        len(periods),
        rep_periods,
    )
    return PeriodMap(
        rep_index=index, rep_set=rep_set.rename(MODELED_PERIOD_DIM), rep_periods=rep_periods
    )
