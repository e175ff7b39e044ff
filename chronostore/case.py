# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Case class, the context shared by all model builders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chronostore.consistency import (
    MissingComponentError,
    ModelConflictError,
    consistency_check,
)
from chronostore.inputs import ModelInputs, Setup

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from linopy import Constraint, LinearExpression, Model, Variable

    from chronostore.periods import PeriodMap

logger = logging.getLogger(__name__)


class Case:
    """Inputs, settings and the optimisation model built from them.

    Builder functions receive the case, read its inputs and append variables,
    expressions and constraints to `Case.model` through the accessors below.
    Referencing a component which no builder has declared yet raises
    `MissingComponentError`, declaring a name twice raises `ModelConflictError`.

    Parameters
    ----------
    inputs : ModelInputs or Mapping
        Input record, or a legacy input dictionary passed to
        `ModelInputs.from_dict`.
    setup : Setup or Mapping, optional
        Settings record, or a legacy settings dictionary passed to
        `Setup.from_dict`. Defaults to `Setup()`.

    Examples
    --------
    >>> case = Case(inputs, {"CO2Cap": 1})  # doctest: +SKIP
    >>> m = case.create_model()  # doctest: +SKIP
    >>> m.variables["vSOCw"]  # doctest: +SKIP

    """

    def __init__(
        self,
        inputs: ModelInputs | Mapping[str, Any],
        setup: Setup | Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(inputs, ModelInputs):
            inputs = ModelInputs.from_dict(inputs)
        if setup is None:
            setup = Setup()
        elif not isinstance(setup, Setup):
            setup = Setup.from_dict(setup)

        self.inputs = inputs
        self.setup = setup
        self.expressions: dict[str, LinearExpression] = {}
        self._model: Model | None = None

    def __repr__(self) -> str:
        inputs = self.inputs
        return (
            f"Case(resources={inputs.n_resources}, hours={inputs.n_hours}, "
            f"zones={inputs.n_zones}, rep_periods={inputs.rep_periods}, "
            f"modeled_periods={inputs.periods.n_periods})"
        )

    @property
    def period_map(self) -> PeriodMap:
        """Mapping of chronological onto representative periods."""
        return self.inputs.periods

    @property
    def model(self) -> Model:
        """The linopy model, available once `Case.create_model` was called."""
        if self._model is None:
            msg = "No model has been created yet. Call `Case.create_model()` first."
            raise MissingComponentError(msg)
        return self._model

    @property
    def has_model(self) -> bool:
        return self._model is not None

    def _check_free(self, name: str) -> None:
        m = self.model
        if name in m.variables or name in self.expressions:
            msg = f"'{name}' is already declared on the model. Each component is built once."
            raise ModelConflictError(msg)

    def variable(self, name: str) -> Variable:
        """Return the declared variable `name`.

        Raises
        ------
        MissingComponentError
            If no builder has declared the variable yet.

        """
        if name not in self.model.variables:
            msg = (
                f"Variable '{name}' is referenced before it is declared. Make sure "
                "the builder declaring it runs first."
            )
            raise MissingComponentError(msg)
        return self.model.variables[name]

    def expression(self, name: str) -> LinearExpression:
        """Return the declared expression `name`.

        Raises
        ------
        MissingComponentError
            If no builder has declared the expression yet.

        """
        if name not in self.expressions:
            msg = (
                f"Expression '{name}' is referenced before it is declared. Make "
                "sure the builder declaring it runs first."
            )
            raise MissingComponentError(msg)
        return self.expressions[name]

    def add_variables(self, name: str, **kwargs: Any) -> Variable:
        """Declare a variable on the model, see `linopy.Model.add_variables`."""
        self._check_free(name)
        return self.model.add_variables(name=name, **kwargs)

    def add_expression(self, name: str, expression: LinearExpression) -> LinearExpression:
        """Register a named expression for later builders."""
        self._check_free(name)
        self.expressions[name] = expression
        return expression

    def add_constraints(self, name: str, lhs: Any, *args: Any, **kwargs: Any) -> Constraint:
        """Add a constraint family to the model, see `linopy.Model.add_constraints`."""
        if name in self.model.constraints:
            msg = f"Constraint '{name}' is already declared on the model. Each component is built once."
            raise ModelConflictError(msg)
        return self.model.add_constraints(lhs, *args, name=name, **kwargs)

    def consistency_check(self, strict: Sequence[str] | None = None) -> None:
        """Check the inputs for consistency, see `chronostore.consistency.consistency_check`."""
        consistency_check(self, strict=strict)

    def create_model(
        self, consistency_check: bool | None = None, **kwargs: Any
    ) -> Model:
        """Build the optimisation model, see `chronostore.optimization.create_model`."""
        from chronostore.optimization.optimize import create_model  # noqa: PLC0415

        return create_model(self, consistency_check=consistency_check, **kwargs)
