# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

import pytest

import chronostore

ALL_OPTIONS = [
    "debug.runtime_verification",
    "params.create_model.force_dim_names",
    "params.create_model.consistency_check",
]


def test_attribute_access():
    with chronostore.option_context("params.create_model.force_dim_names", False):
        assert chronostore.options.params.create_model.force_dim_names is False
        chronostore.options.params.create_model.force_dim_names = True
        assert chronostore.get_option("params.create_model.force_dim_names") is True

    with pytest.raises(AttributeError, match="Invalid option 'params.solve'"):
        chronostore.options.params.solve
    with pytest.raises(AttributeError, match="Invalid option"):
        chronostore.options.params.create_model.unknown = 1
    # A category is not an option
    with pytest.raises(AttributeError, match="Invalid option 'params'"):
        chronostore.options.params = False


def test_getter_and_setter_functions():
    with chronostore.option_context("params.create_model.consistency_check", True):
        chronostore.set_option("params.create_model.consistency_check", False)
        assert chronostore.options.params.create_model.consistency_check is False

    with pytest.raises(AttributeError, match="Invalid option"):
        chronostore.get_option("params.create_model")
    with pytest.raises(AttributeError, match="Invalid option"):
        chronostore.set_option("debug.unknown", True)


def test_dir_lists_children():
    assert dir(chronostore.options) == ["debug", "params"]
    assert dir(chronostore.options.params.create_model) == [
        "consistency_check",
        "force_dim_names",
    ]


def test_describe_options(capsys):
    chronostore.describe_options()
    described = capsys.readouterr().out

    assert described.startswith("Chronostore Options")
    for path in ALL_OPTIONS:
        assert f"{path}:" in described


def test_option_context_restores_on_error():
    before = chronostore.options.debug.runtime_verification
    with pytest.raises(ValueError, match="inside"):
        with chronostore.option_context("debug.runtime_verification", not before):
            assert chronostore.options.debug.runtime_verification is not before
            raise ValueError("inside")
    assert chronostore.options.debug.runtime_verification is before

    with pytest.raises(ValueError, match="Arguments must be paired"):
        with chronostore.option_context("debug.runtime_verification"):
            pass


def test_reset_options():
    current = [chronostore.get_option(path) for path in ALL_OPTIONS]
    pairs = [item for pair in zip(ALL_OPTIONS, current) for item in pair]
    with chronostore.option_context(*pairs):
        chronostore.set_option("params.create_model.force_dim_names", False)
        chronostore.reset_options()
        assert chronostore.options.debug.runtime_verification is False
        assert chronostore.options.params.create_model.force_dim_names is True
        assert chronostore.options.params.create_model.consistency_check is True


def test_consistency_check_option(inputs):
    inputs["dfGen"]["LDS"] = 0
    case = chronostore.Case(inputs, {"LongDurationStorage": True})
    with chronostore.option_context("params.create_model.consistency_check", False):
        # Skipping the check defers the error to the variable declaration
        with pytest.raises(chronostore.InputShapeError, match="LDS"):
            case.create_model()
    assert not case.has_model
