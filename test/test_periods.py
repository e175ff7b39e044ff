# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

import pandas as pd
import pytest

from chronostore.consistency import IndexMappingError, InputShapeError
from chronostore.periods import end_hours, hour_range, resolve_period_map, start_hours


@pytest.mark.parametrize(
    ("period", "hours", "expected"),
    [(1, 24, (1, 24)), (2, 24, (25, 48)), (3, 168, (337, 504)), (1, 1, (1, 1))],
)
def test_hour_range(period, hours, expected):
    assert hour_range(period, hours) == expected


@pytest.mark.parametrize(("period", "hours"), [(0, 24), (-1, 24), (1, 0)])
def test_hour_range_rejects_invalid(period, hours):
    with pytest.raises(ValueError):
        hour_range(period, hours)


def test_start_and_end_hours():
    first = start_hours(3, 4)
    last = end_hours(3, 4)
    assert first.index.name == "rep_period"
    assert first.tolist() == [1, 5, 9]
    assert last.tolist() == [4, 8, 12]
    assert (last - first + 1 == 4).all()


def test_resolve_integer_form(period_map):
    pm = resolve_period_map(period_map, 2)
    assert pm.n_periods == 3
    assert pm.rep_periods == 2
    assert pm.periods.tolist() == [1, 2, 3]
    assert pm.periods.name == "modeled_period"
    assert pm.rep_index.tolist() == [1, 2, 1]
    assert pm.rep_set.tolist() == [1, 2]
    assert pm.representatives().to_dict() == {1: 1, 2: 2}
    assert pm.weights().to_dict() == {1: 2, 2: 1}


def test_resolve_boolean_form():
    table = pd.DataFrame(
        {
            "Rep_Period": [False, True, False, True],
            "Rep_Period_Index": [2, 2, 1, 1],
        }
    )
    pm = resolve_period_map(table)
    assert pm.rep_periods == 2
    assert pm.rep_set.tolist() == [2, 4]
    assert pm.representatives().to_dict() == {1: 4, 2: 2}


def test_resolve_renumbers_rows():
    table = pd.DataFrame(
        {"Rep_Period": [1, 2], "Rep_Period_Index": [1, 2]}, index=[10, 20]
    )
    pm = resolve_period_map(table, 2)
    assert pm.periods.tolist() == [1, 2]


def test_every_period_has_one_image_and_representatives_are_reflexive(period_map):
    pm = resolve_period_map(period_map, 2)
    assert pm.rep_index.index.is_unique
    assert set(pm.rep_index) <= set(range(1, pm.rep_periods + 1))
    represented = pm.rep_index.loc[pm.rep_set]
    assert sorted(represented) == list(range(1, pm.rep_periods + 1))


def test_missing_column():
    with pytest.raises(InputShapeError, match="Rep_Period_Index"):
        resolve_period_map(pd.DataFrame({"Rep_Period": [1]}))


def test_empty_table():
    with pytest.raises(InputShapeError):
        resolve_period_map(pd.DataFrame({"Rep_Period": [], "Rep_Period_Index": []}))


def test_fewer_periods_than_representatives():
    table = pd.DataFrame({"Rep_Period": [1, 2], "Rep_Period_Index": [1, 2]})
    with pytest.raises(IndexMappingError, match="fewer"):
        resolve_period_map(table, 3)


def test_index_out_of_range():
    table = pd.DataFrame({"Rep_Period": [1, 2, 1], "Rep_Period_Index": [1, 2, 3]})
    with pytest.raises(IndexMappingError, match="outside 1..2"):
        resolve_period_map(table, 2)


def test_non_integer_index():
    table = pd.DataFrame({"Rep_Period": [1, 2], "Rep_Period_Index": [1.5, 2.0]})
    with pytest.raises(IndexMappingError):
        resolve_period_map(table, 2)


def test_unrepresented_period():
    table = pd.DataFrame(
        {"Rep_Period": [True, False, False], "Rep_Period_Index": [1, 2, 1]}
    )
    with pytest.raises(IndexMappingError, match="not represented"):
        resolve_period_map(table, 2)


def test_ambiguous_period():
    table = pd.DataFrame(
        {"Rep_Period": [True, True, True], "Rep_Period_Index": [1, 2, 1]}
    )
    with pytest.raises(IndexMappingError, match="more than one"):
        resolve_period_map(table, 2)


def test_unknown_representative():
    table = pd.DataFrame({"Rep_Period": [1, 2, 4], "Rep_Period_Index": [1, 2, 1]})
    with pytest.raises(IndexMappingError, match="does not represent itself"):
        resolve_period_map(table, 2)


def test_disagreeing_index():
    table = pd.DataFrame({"Rep_Period": [1, 2, 1], "Rep_Period_Index": [1, 2, 2]})
    with pytest.raises(IndexMappingError, match="disagree"):
        resolve_period_map(table, 2)
