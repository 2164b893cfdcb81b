import numpy as np
import pytest

from gaussdiff import (
    ConcentrationField,
    PeriodicGrid,
    PDEBase,
    TracerAdvectionDiffusionPDE,
)
from gaussdiff.solvers import Controller, EulerSolver
from gaussdiff.trackers import CallbackTracker, FinishedSimulation


def test_controller_t_range():
    """Test setting the time range of a simulation."""
    solver = EulerSolver(TracerAdvectionDiffusionPDE())
    assert Controller(solver, t_range=3, tracker=None).t_range == (0, 3)
    assert Controller(solver, t_range=(1, 2), tracker=None).t_range == (1, 2)
    with pytest.raises(ValueError):
        Controller(solver, t_range=[1, 2, 3], tracker=None)


def test_controller_run():
    """Test running a simulation with the controller directly."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    solver = EulerSolver(TracerAdvectionDiffusionPDE(diffusivity=0))
    times = []
    tracker = CallbackTracker(lambda state, t: times.append(t), interrupts=0.25)
    controller = Controller(solver, t_range=(1, 2), tracker=tracker)
    res = controller.run(state, dt=0.125)

    np.testing.assert_allclose(res.data, state.data)
    assert res is not state
    np.testing.assert_allclose(times, [1, 1.25, 1.5, 1.75, 2])

    info = controller.diagnostics["controller"]
    assert info["successful"]
    assert info["stop_reason"] == "Reached final time"
    assert info["t_start"] == 1
    assert info["t_final"] == pytest.approx(2)
    assert "solver" in info["profiler"]
    assert isinstance(controller.diagnostics["package_version"], str)


def test_controller_abort():
    """Test how the controller deals with trackers stopping the simulation."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)

    def stop(state, t):
        if t >= 0.5:
            raise StopIteration("Stopped by test")

    res, info = eq.solve(
        state, t_range=2, dt=0.125, tracker=CallbackTracker(stop, 0.25), ret_info=True
    )
    assert not info["controller"]["successful"]
    assert info["controller"]["stop_reason"] == "Stopped by test"
    assert info["controller"]["t_final"] == pytest.approx(0.5)
    assert info["last_tracker_time"] == pytest.approx(0.5)
    np.testing.assert_allclose(res.data, np.exp(-0.05) * state.data)

    def finish(state, t):
        if t >= 1:
            raise FinishedSimulation("Reached goal")

    _, info = eq.solve(
        state, t_range=2, dt=0.125, tracker=CallbackTracker(finish, 0.5), ret_info=True
    )
    assert info["controller"]["successful"]
    assert info["controller"]["stop_reason"] == "Reached goal"
    assert info["controller"]["t_final"] == pytest.approx(1)


def test_controller_error():
    """Test how the controller deals with errors in the equation."""

    class ErrorPDEException(RuntimeError): ...

    class ErrorPDE(PDEBase):
        def make_linear_operator(self, state):
            return np.zeros(state.grid.spectral_shape)

        def make_nonlinear_rhs(self, state):
            def rhs(state_spec, t):
                if t < 1:
                    return np.zeros_like(state_spec)
                raise ErrorPDEException

            return rhs

        def evolution_rate(self, state, t=0):
            return state.copy()

    field = ConcentrationField(PeriodicGrid(1, 16), 1)
    eq = ErrorPDE()

    with pytest.raises(ErrorPDEException):
        eq.solve(field, t_range=2, dt=0.2, tracker=None, solver="euler")

    assert eq.diagnostics["last_tracker_time"] >= 0
    assert eq.diagnostics["last_state"] == field


def test_controller_decimal_time_step():
    """Test that rounding errors of the time step do not add an extra step."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)
    times = []
    tracker = CallbackTracker(lambda state, t: times.append(t), interrupts=0.1)

    res, info = eq.solve(
        state, t_range=1.4, dt=0.002, tracker=tracker, solver="euler", ret_info=True
    )
    assert info["solver"]["steps"] == 700
    assert info["controller"]["t_final"] == 1.4
    assert len(times) == 15
    assert times[-1] == 1.4
    expect = (1 - 0.0002) ** 700 * state.data
    np.testing.assert_allclose(res.data, expect, atol=1e-12)


def test_controller_final_handle():
    """Test that all trackers see the final state between their interrupts."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)
    times = []
    tracker = CallbackTracker(lambda state, t: times.append(t), interrupts=0.5)

    eq.solve(state, t_range=1.25, dt=0.125, tracker=tracker)
    np.testing.assert_allclose(times, [0, 0.5, 1, 1.25])
