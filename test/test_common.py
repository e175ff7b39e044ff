# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

import numpy as np
import pandas as pd
import pytest
import xarray as xr

from chronostore.common import as_dataarray, incidence, list_as_string
from chronostore.optimization.common import expansion_limit, take


@pytest.mark.parametrize(
    ("items", "style", "expected"),
    [
        ([1, 2, 3], "comma-separated", "1, 2, 3"),
        (["a", "b"], "bullet-list", "- a\n- b"),
        ([], "comma-separated", ""),
    ],
)
def test_list_as_string(items, style, expected):
    assert list_as_string(items, style=style) == expected


def test_list_as_string_invalid_style():
    with pytest.raises(ValueError, match="not recognized"):
        list_as_string([1], style="table")


def test_as_dataarray():
    da = as_dataarray(pd.Series([0.5, 0.25], index=[3, 4]), "resource")
    assert da.dims == ("resource",)
    assert da.sel(resource=4).item() == 0.25


def test_incidence_keeps_empty_targets():
    matrix = incidence(pd.Series([1, 1, 3], index=[10, 11, 12]), "resource", [1, 2, 3], "zone")
    assert matrix.dims == ("resource", "zone")
    assert matrix.sum("resource").values.tolist() == [2, 0, 1]
    assert matrix.sum("zone").values.tolist() == [1, 1, 1]


def test_take_relabels():
    da = xr.DataArray([10, 20], coords={"rep_period": [1, 2]}, dims="rep_period")
    f = pd.Series([1, 2, 1], index=pd.RangeIndex(1, 4, name="modeled_period"))
    result = take(da, "rep_period", f)
    assert result.dims == ("modeled_period",)
    assert result.coords["modeled_period"].values.tolist() == [1, 2, 3]
    assert result.values.tolist() == [10, 20, 10]


def test_take_same_dimension():
    da = xr.DataArray([1, 2, 3, 4], coords={"hour": [1, 2, 3, 4]}, dims="hour")
    previous = pd.Series([1, 2, 3], index=pd.Index([2, 3, 4], name="hour"))
    assert take(da, "hour", previous).values.tolist() == [1, 2, 3]


def test_take_requires_named_index():
    da = xr.DataArray([1], coords={"hour": [1]}, dims="hour")
    with pytest.raises(ValueError, match="named"):
        take(da, "hour", pd.Series([1]))


def test_expansion_limit():
    limit = expansion_limit(pd.Series([-1.0, 5.0, 2.0]), pd.Series([3.0, 1.0, 4.0]))
    assert np.isinf(limit[0])
    assert limit[1] == 4.0
    assert limit[2] == 0.0
