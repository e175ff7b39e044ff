# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Build optimisation problems from chronostore cases with Linopy."""

from chronostore.optimization import (
    constraints,
    expressions,
    global_constraints,
    optimize,
    variables,
)
from chronostore.optimization.optimize import create_model, long_duration_storage

__all__ = [
    "constraints",
    "expressions",
    "global_constraints",
    "optimize",
    "variables",
    "create_model",
    "long_duration_storage",
]
