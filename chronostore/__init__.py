# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Chronostore.

Long-duration storage inventory across representative periods for capacity
expansion models built with linopy.
"""

from chronostore import common, consistency, optimization, periods
from chronostore._options import (
    describe_options,
    get_option,
    option_context,
    options,
    reset_options,
    set_option,
)
from chronostore.case import Case
from chronostore.common import UnexpectedError
from chronostore.consistency import (
    ConsistencyError,
    IndexMappingError,
    InputShapeError,
    MissingComponentError,
    ModelConflictError,
)
from chronostore.inputs import CO2CapMode, ModelInputs, Setup
from chronostore.optimization import long_duration_storage
from chronostore.periods import PeriodMap, hour_range, resolve_period_map
from chronostore.version import __version__, __version_base__

__all__ = [
    "__version__",
    "__version_base__",
    "options",
    "set_option",
    "get_option",
    "describe_options",
    "reset_options",
    "option_context",
    "common",
    "consistency",
    "optimization",
    "periods",
    "Case",
    "CO2CapMode",
    "ModelInputs",
    "Setup",
    "PeriodMap",
    "hour_range",
    "resolve_period_map",
    "long_duration_storage",
    "ConsistencyError",
    "IndexMappingError",
    "InputShapeError",
    "MissingComponentError",
    "ModelConflictError",
    "UnexpectedError",
]
