"""Tests for the discrete state space component."""

from __future__ import annotations

import numpy as np
import pytest

from dosio.components import DiscreteStateSpaceBuilder
from dosio.errors import ConfigurationError, InputsError, OutputsError, StepError
from dosio.signals import IO


def _integrator(**kwargs):
    builder = DiscreteStateSpaceBuilder().matrices(1.0, 1.0, kwargs.pop("c", 1.0))
    builder.input("M1HPCmd", 1).output("OSSM1Lcl", 1)
    if "steps" in kwargs:
        builder.steps(kwargs.pop("steps"))
    return builder.build()


def test_integrator_holds_its_input() -> None:
    system = _integrator()
    first = system.in_step_out([IO("M1HPCmd", [2.0])])
    assert first[0].name == "OSSM1Lcl"
    np.testing.assert_allclose(first[0].data, [2.0])
    second = system.in_step_out(None)
    np.testing.assert_allclose(second[0].data, [4.0])


def test_tags_follow_declared_ports() -> None:
    system = _integrator()
    assert [io.name for io in system.inputs_tags()] == ["M1HPCmd"]
    assert [io.name for io in system.outputs_tags()] == ["OSSM1Lcl"]


def test_step_limit_terminates() -> None:
    system = _integrator(steps=2)
    system.step().step()
    with pytest.raises(StepError):
        system.step()


def test_wide_ports_use_offsets() -> None:
    system = (
        DiscreteStateSpaceBuilder()
        .matrices(np.zeros((3, 3)), np.eye(3), np.eye(3), np.eye(3))
        .input("TTcmd", 1)
        .input("M2poscmd", 2)
        .output("TTFB", 2)
        .output("M2posFB", 1)
        .build()
    )
    outputs = system.in_step_out([IO("M2poscmd", [2.0, 3.0]), IO("TTcmd", [1.0])])
    np.testing.assert_allclose(outputs[0].data, [2.0, 4.0])
    np.testing.assert_allclose(outputs[1].data, [6.0])


def test_width_mismatch_is_an_inputs_error() -> None:
    system = _integrator()
    with pytest.raises(InputsError) as excinfo:
        system.inputs([IO("M1HPCmd", [1.0, 2.0])])
    assert isinstance(excinfo.value.__cause__, ValueError)
    with pytest.raises(InputsError, match="invalid input: Pssn"):
        system.inputs([IO("Pssn", [1.0])])


def test_missing_output_matrix() -> None:
    system = _integrator(c=None)
    system.step()
    with pytest.raises(OutputsError):
        system.outputs()


def test_builder_validation() -> None:
    with pytest.raises(ConfigurationError):
        DiscreteStateSpaceBuilder().build()
    with pytest.raises(ConfigurationError):
        DiscreteStateSpaceBuilder().matrices(np.eye(2), np.ones((2, 2))).input("TTcmd", 1).build()
    with pytest.raises(ConfigurationError):
        DiscreteStateSpaceBuilder().matrices(1.0, [[1.0, 1.0]]).input("TTcmd", 1).input("TTcmd", 1).build()
    with pytest.raises(ConfigurationError):
        DiscreteStateSpaceBuilder().steps(0)
