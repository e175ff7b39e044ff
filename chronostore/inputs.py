# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Immutable input and settings records of a capacity expansion case.

Both records validate eagerly on construction, so that a case which could be
built at all has all its keys, columns and index sets in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from chronostore.common import list_as_string
from chronostore.consistency import IndexMappingError, InputShapeError
from chronostore.periods import HOUR_DIM, PeriodMap, resolve_period_map

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

RESOURCE_DIM = "resource"
ZONE_DIM = "zone"
SEGMENT_DIM = "segment"
CAP_DIM = "cap"

GEN_REQUIRED_COLUMNS = ["Zone", "Self_Disch", "Eff_Up", "Eff_Down"]

GEN_DEFAULT_COLUMNS: dict[str, float] = {
    "Existing_Cap_MW": 0.0,
    "Existing_Cap_MWh": 0.0,
    "Max_Cap_MW": -1.0,
    "Max_Cap_MWh": -1.0,
    "Inv_Cost_per_MWyr": 0.0,
    "Inv_Cost_per_MWhyr": 0.0,
    "Var_OM_Cost_per_MWh": 0.0,
    "CO2_per_MWh": 0.0,
    "CO2_per_Start": 0.0,
}

# Keys of the legacy input dictionary and the fields they populate
INPUT_KEYS: dict[str, str] = {
    "dfGen": "gen",
    "G": "n_resources",
    "T": "n_hours",
    "Z": "n_zones",
    "REP_PERIOD": "rep_periods",
    "hours_per_subperiod": "hours_per_subperiod",
    "STOR_ALL": "stor_all",
    "Period_Map": "period_map",
    "NPeriods": "n_modeled_periods",
    "omega": "omega",
    "pD": "demand",
    "pP_Max": "availability",
    "pC_D_Curtail": "nse_cost",
    "pMax_D_Curtail": "nse_max",
    "COMMIT": "commit",
    "THERM_ALL": "therm_all",
    "VRE": "vre",
    "MUST_RUN": "must_run",
    "HYDRO_RES": "hydro_res",
    "dfCO2CapZones": "co2_cap_zones",
    "dfMaxCO2": "max_co2",
    "dfMaxCO2Rate": "max_co2_rate",
    "NCO2Cap": "n_co2_caps",
}

REQUIRED_INPUT_KEYS = [
    "dfGen",
    "G",
    "T",
    "Z",
    "REP_PERIOD",
    "hours_per_subperiod",
    "STOR_ALL",
    "Period_Map",
]

RESOURCE_SETS = ["stor_all", "commit", "therm_all", "vre", "must_run", "hydro_res"]


def _reject_unknown(keys: Sequence[str], known: Sequence[str], what: str) -> None:
    unknown = [key for key in keys if key not in known]
    if unknown:
        msg = f"Unknown {what} keys: {list_as_string(unknown)}"
        raise InputShapeError(msg)


class CO2CapMode(IntEnum):
    """Formulation of the CO2 emissions cap.

    The legacy setting 'CO2Cap' holds the integer value.
    """

    NONE = 0
    MASS = 1
    LOAD_RATE = 2
    GENERATION_RATE = 3

    @property
    def required_inputs(self) -> tuple[str, ...]:
        """Input fields the formulation reads."""
        return {
            CO2CapMode.NONE: (),
            CO2CapMode.MASS: ("co2_cap_zones", "max_co2"),
            CO2CapMode.LOAD_RATE: ("co2_cap_zones", "max_co2_rate", "demand"),
            CO2CapMode.GENERATION_RATE: ("co2_cap_zones", "max_co2_rate"),
        }[self]


@dataclass(frozen=True)
class Setup:
    """Model settings.

    Attributes
    ----------
    co2_cap : CO2CapMode
        Formulation of the emissions cap, `CO2CapMode.NONE` to build none.
    storage_losses : bool
        Whether storage losses count as demand in the load-rate emissions cap.
    long_duration_storage : bool
        Whether storage flagged with 'LDS' may carry inventory across
        representative periods.

    """

    co2_cap: CO2CapMode = CO2CapMode.NONE
    storage_losses: bool = True
    long_duration_storage: bool = True

    def __post_init__(self) -> None:
        try:
            mode = CO2CapMode(self.co2_cap)
        except ValueError as e:
            msg = (
                f"Invalid CO2 cap mode {self.co2_cap!r}, expected one of "
                f"{list_as_string(int(m) for m in CO2CapMode)}."
            )
            raise InputShapeError(msg) from e
        object.__setattr__(self, "co2_cap", mode)
        object.__setattr__(self, "storage_losses", bool(self.storage_losses))
        object.__setattr__(self, "long_duration_storage", bool(self.long_duration_storage))

    @classmethod
    def from_dict(cls, setup: Mapping[str, Any]) -> Setup:
        """Create settings from a legacy settings dictionary.

        Recognised keys are 'CO2Cap', 'StorageLosses' and 'LongDurationStorage'.

        Examples
        --------
        >>> Setup.from_dict({"CO2Cap": 1}).co2_cap
        <CO2CapMode.MASS: 1>

        """
        keys = {
            "CO2Cap": "co2_cap",
            "StorageLosses": "storage_losses",
            "LongDurationStorage": "long_duration_storage",
        }
        _reject_unknown(list(setup), list(keys), "setup")
        return cls(**{keys[key]: value for key, value in setup.items()})


@dataclass(frozen=True, eq=False)
class ModelInputs:
    """Input data of a capacity expansion case over representative periods.

    Sets of resources are given by resource id, the index of `gen`. Hours
    ``1..T`` concatenate the ``W`` representative periods of
    `hours_per_subperiod` hours each, zones are numbered ``1..Z``.

    Use `ModelInputs.from_dict` to build the record from a legacy input
    dictionary.
    """

    gen: pd.DataFrame
    n_resources: int
    n_hours: int
    n_zones: int
    rep_periods: int
    hours_per_subperiod: int
    stor_all: Sequence
    period_map: pd.DataFrame
    n_modeled_periods: int | None = None
    omega: Sequence | None = None
    demand: pd.DataFrame | None = None
    availability: pd.DataFrame | None = None
    nse_cost: Sequence | None = None
    nse_max: Sequence | None = None
    commit: Sequence = ()
    therm_all: Sequence = ()
    vre: Sequence = ()
    must_run: Sequence = ()
    hydro_res: Sequence = ()
    co2_cap_zones: pd.DataFrame | None = None
    max_co2: pd.DataFrame | None = None
    max_co2_rate: pd.DataFrame | None = None
    n_co2_caps: int | None = None
    periods: PeriodMap = field(init=False, repr=False)

    @classmethod
    def from_dict(cls, inputs: Mapping[str, Any]) -> ModelInputs:
        """Create the record from a legacy input dictionary.

        Parameters
        ----------
        inputs : Mapping
            Dictionary with the keys of `INPUT_KEYS`, e.g. 'dfGen', 'T' or
            'Period_Map'.

        Raises
        ------
        InputShapeError
            If a required key is missing or an unknown key is given.

        """
        _reject_unknown(list(inputs), list(INPUT_KEYS), "input")
        missing = [key for key in REQUIRED_INPUT_KEYS if key not in inputs]
        if missing:
            msg = f"Missing required input keys: {list_as_string(missing)}"
            raise InputShapeError(msg)
        return cls(**{INPUT_KEYS[key]: value for key, value in inputs.items()})

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    def __post_init__(self) -> None:
        for name in ("n_resources", "n_hours", "n_zones", "rep_periods", "hours_per_subperiod"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
                msg = f"Input '{name}' must be a positive integer, got {value!r}."
                raise InputShapeError(msg)
            self._set(name, int(value))

        if self.n_hours != self.rep_periods * self.hours_per_subperiod:
            msg = (
                f"Number of hours T={self.n_hours} does not match "
                f"{self.rep_periods} representative periods of "
                f"{self.hours_per_subperiod} hours."
            )
            raise InputShapeError(msg)

        self._set("gen", self._validate_gen(self.gen))

        for name in RESOURCE_SETS:
            ids = pd.Index(list(getattr(self, name)), name=RESOURCE_DIM)
            unknown = ids.difference(self.gen.index)
            if not unknown.empty:
                msg = (
                    f"Resources {list_as_string(unknown)} of set '{name}' have "
                    "no row in the resource table."
                )
                raise IndexMappingError(msg)
            if ids.has_duplicates:
                msg = f"Set '{name}' lists resources more than once."
                raise InputShapeError(msg)
            self._set(name, ids)

        self._validate_storage()

        if self.n_modeled_periods is not None and self.n_modeled_periods != len(
            self.period_map
        ):
            msg = (
                f"Period map has {len(self.period_map)} rows but "
                f"{self.n_modeled_periods} modeled periods are declared."
            )
            raise InputShapeError(msg)
        self._set("periods", resolve_period_map(self.period_map, self.rep_periods))

        self._set("omega", self._hourly_series("omega", self.omega, default=1.0))
        if self.demand is not None:
            self._set("demand", self._hourly_frame("demand", self.demand, self.zones))
        if self.availability is not None:
            self._set(
                "availability",
                self._hourly_frame("availability", self.availability, self.resources),
            )
        self._validate_non_served_energy()
        self._validate_co2_tables()

    def _validate_gen(self, gen: pd.DataFrame) -> pd.DataFrame:
        gen = gen.copy()
        if "R_ID" in gen.columns:
            gen = gen.set_index("R_ID")
        gen.index.name = RESOURCE_DIM

        if len(gen) != self.n_resources:
            msg = f"Resource table has {len(gen)} rows, expected G={self.n_resources}."
            raise InputShapeError(msg)
        if gen.index.has_duplicates:
            msg = "Resource table has duplicate resource ids."
            raise InputShapeError(msg)

        missing = [col for col in GEN_REQUIRED_COLUMNS if col not in gen.columns]
        if missing:
            msg = f"Resource table is missing the columns: {list_as_string(missing)}"
            raise InputShapeError(msg)

        for col, default in GEN_DEFAULT_COLUMNS.items():
            if col not in gen.columns:
                gen[col] = default

        outside = gen.index[~gen.Zone.isin(range(1, self.n_zones + 1)).to_numpy()]
        if not outside.empty:
            msg = (
                f"Resources {list_as_string(outside)} are located in a zone "
                f"outside 1..{self.n_zones}."
            )
            raise IndexMappingError(msg)
        return gen

    def _validate_storage(self) -> None:
        gen = self.gen
        if "LDS" not in gen.columns:
            gen["LDS"] = gen.index.isin(self.stor_all).astype(int)

        stor = gen.loc[self.stor_all]
        invalid = {
            "Eff_Up": ~((stor.Eff_Up > 0) & (stor.Eff_Up <= 1)),
            "Eff_Down": ~((stor.Eff_Down > 0) & (stor.Eff_Down <= 1)),
            "Self_Disch": ~((stor.Self_Disch >= 0) & (stor.Self_Disch < 1)),
        }
        for col, mask in invalid.items():
            if mask.any():
                msg = (
                    f"Column '{col}' is out of range for storage resources "
                    f"{list_as_string(stor.index[mask.to_numpy()])}."
                )
                raise InputShapeError(msg)

    def _hourly_series(self, name: str, values: Any, default: float) -> pd.Series:
        if values is None:
            return pd.Series(default, index=self.hours, name=name)
        values = np.asarray(values, dtype=float)
        if values.shape != (self.n_hours,):
            msg = f"Input '{name}' must have one value per hour (T={self.n_hours})."
            raise InputShapeError(msg)
        return pd.Series(values, index=self.hours, name=name)

    def _hourly_frame(
        self, name: str, frame: pd.DataFrame, columns: pd.Index
    ) -> pd.DataFrame:
        frame = pd.DataFrame(frame)
        if frame.shape != (self.n_hours, len(columns)):
            msg = (
                f"Input '{name}' must have shape ({self.n_hours}, {len(columns)}), "
                f"got {frame.shape}."
            )
            raise InputShapeError(msg)
        return frame.set_axis(self.hours, axis=0).set_axis(columns, axis=1).astype(float)

    def _validate_non_served_energy(self) -> None:
        if (self.nse_cost is None) != (self.nse_max is None):
            msg = "Inputs 'nse_cost' and 'nse_max' must be given together."
            raise InputShapeError(msg)
        if self.nse_cost is None:
            return
        cost = np.asarray(self.nse_cost, dtype=float)
        share = np.asarray(self.nse_max, dtype=float)
        if cost.ndim != 1 or cost.shape != share.shape:
            msg = "Inputs 'nse_cost' and 'nse_max' must list one value per segment."
            raise InputShapeError(msg)
        segments = pd.RangeIndex(1, len(cost) + 1, name=SEGMENT_DIM)
        self._set("nse_cost", pd.Series(cost, index=segments, name="nse_cost"))
        self._set("nse_max", pd.Series(share, index=segments, name="nse_max"))

    def _validate_co2_tables(self) -> None:
        n_caps = self.n_co2_caps
        for name in ("co2_cap_zones", "max_co2", "max_co2_rate"):
            table = getattr(self, name)
            if table is None:
                continue
            table = pd.DataFrame(table)
            if len(table) != self.n_zones:
                msg = f"Table '{name}' must have one row per zone (Z={self.n_zones})."
                raise InputShapeError(msg)
            if n_caps is None:
                n_caps = table.shape[1]
            if table.shape[1] != n_caps:
                msg = (
                    f"Table '{name}' has {table.shape[1]} cap columns, "
                    f"expected {n_caps}."
                )
                raise InputShapeError(msg)
            caps = pd.RangeIndex(1, n_caps + 1, name=CAP_DIM)
            self._set(name, table.set_axis(self.zones, axis=0).set_axis(caps, axis=1))
        self._set("n_co2_caps", n_caps)

    @property
    def hours(self) -> pd.RangeIndex:
        """Simulated hours ``1..T``."""
        return pd.RangeIndex(1, self.n_hours + 1, name=HOUR_DIM)

    @property
    def zones(self) -> pd.RangeIndex:
        """Zones ``1..Z``."""
        return pd.RangeIndex(1, self.n_zones + 1, name=ZONE_DIM)

    @property
    def resources(self) -> pd.Index:
        """Ids of all resources."""
        return self.gen.index

    @property
    def segments(self) -> pd.Index:
        """Segments of non-served energy, empty if none are given."""
        if self.nse_cost is None:
            return pd.RangeIndex(1, 1, name=SEGMENT_DIM)
        return self.nse_cost.index

    @property
    def long_duration_storage(self) -> pd.Index:
        """Storage resources eligible for inter-period inventory accounting."""
        flagged = self.gen.loc[self.stor_all, "LDS"] == 1
        return self.stor_all[flagged.to_numpy()]

    @property
    def short_duration_storage(self) -> pd.Index:
        """Storage resources whose inventory wraps within each representative period."""
        return self.stor_all.difference(self.long_duration_storage, sort=False)

