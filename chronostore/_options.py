# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Global options of chronostore.

Options are registered under dotted paths, e.g.
``"params.create_model.force_dim_names"``, and can be read and written as
attributes of `options`, through `get_option`/`set_option`, or temporarily
through `option_context`.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any


class InvalidOptionError(AttributeError):
    """Raised for a path that is not a registered option."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Invalid option '{path}'. Check 'describe_options()' for valid options."
        )


@dataclass
class _Setting:
    default: Any
    docs: str
    value: Any = field(init=False)

    def __post_init__(self) -> None:
        self.value = self.default


_SETTINGS: dict[str, _Setting] = {
    "debug.runtime_verification": _Setting(
        False,
        "Verify the period map and the dimensions of the long-duration storage "
        "families after every model build. Adds overhead and is meant for "
        "development and testing.",
    ),
    "params.create_model.force_dim_names": _Setting(
        True,
        "Default value for the 'force_dim_names' argument passed to linopy.Model.",
    ),
    "params.create_model.consistency_check": _Setting(
        True,
        "Default value for the 'consistency_check' parameter of Case.create_model.",
    ),
}


def _setting(path: str) -> _Setting:
    if path not in _SETTINGS:
        raise InvalidOptionError(path)
    return _SETTINGS[path]


class Options:
    """Attribute access to the options below `prefix`."""

    def __init__(self, prefix: str = "") -> None:
        object.__setattr__(self, "_prefix", prefix)

    def _path(self, name: str) -> str:
        return f"{self._prefix}.{name}" if self._prefix else name

    def __getattr__(self, name: str) -> Any:
        path = self._path(name)
        if path in _SETTINGS:
            return _SETTINGS[path].value
        if any(key.startswith(path + ".") for key in _SETTINGS):
            return Options(path)
        raise InvalidOptionError(path)

    def __setattr__(self, name: str, value: Any) -> None:
        _setting(self._path(name)).value = value

    def __dir__(self) -> list[str]:
        depth = self._prefix.count(".") + 1 if self._prefix else 0
        start = self._prefix + "." if self._prefix else ""
        return sorted(
            {key.split(".")[depth] for key in _SETTINGS if key.startswith(start)}
        )

    def __repr__(self) -> str:
        return f"Options({self._prefix or 'root'}: {', '.join(dir(self))})"


options = Options()


def get_option(path: str) -> Any:
    """Get the value of the option at `path`.

    Examples
    --------
    >>> chronostore.get_option("params.create_model.force_dim_names")
    True

    """
    return _setting(path).value


def set_option(path: str, value: Any) -> None:
    """Set the value of the option at `path`."""
    _setting(path).value = value


def reset_options() -> None:
    """Reset all options to their default values."""
    for setting in _SETTINGS.values():
        setting.value = setting.default


def describe_options() -> None:
    """Print the path, default and description of every option."""
    print("Chronostore Options\n===================")  # noqa: T201
    for path, setting in sorted(_SETTINGS.items()):
        print(f"{path}:")  # noqa: T201
        print(f"    Default: {setting.default}")  # noqa: T201
        print(f"    Description: {setting.docs}")  # noqa: T201


@contextmanager
def option_context(*args: Any) -> Generator[None, None, None]:
    """Context manager to temporarily set options.

    Parameters
    ----------
    *args : str, Any
        Pairs of option path and value.

    Examples
    --------
    >>> with chronostore.option_context("debug.runtime_verification", True):
    ...     case.create_model()

    """
    if len(args) % 2 != 0:
        msg = "Arguments must be paired option paths and values."
        raise ValueError(msg)

    previous: dict[str, Any] = {}
    try:
        for path, value in zip(args[::2], args[1::2]):
            previous[path] = get_option(path)
            set_option(path, value)
        yield
    finally:
        for path, value in previous.items():
            set_option(path, value)
