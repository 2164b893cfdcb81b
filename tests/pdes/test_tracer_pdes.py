import numpy as np
import pytest

from gaussdiff import (
    ConcentrationField,
    DimensionError,
    PeriodicGrid,
    TracerAdvectionDiffusionPDE,
    config,
)


def test_pde_definition():
    """Test basic properties of the tracer equation."""
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)
    assert eq.diffusivity == 0.25
    assert eq.velocity is None
    assert eq.expression == "0.25 * laplace(c)"
    assert "diffusivity=0.25" in repr(eq)

    eq = TracerAdvectionDiffusionPDE(velocity=[1, 0])
    assert "gradient" in eq.expression

    with pytest.raises(ValueError):
        TracerAdvectionDiffusionPDE(diffusivity=-1)
    with pytest.raises(TypeError):
        TracerAdvectionDiffusionPDE(velocity=1)
    with pytest.raises(TypeError):
        TracerAdvectionDiffusionPDE(velocity="x")


def test_diffusion_rate():
    """Test the evolution rate of pure diffusion."""
    grid = PeriodicGrid([2 * np.pi, 2 * np.pi], [16, 32])
    state = ConcentrationField.from_expression(grid, "sin(2 * x) * cos(y)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.5)
    rate = eq.evolution_rate(state)
    assert rate.label == "evolution rate"
    np.testing.assert_allclose(rate.data, -0.5 * 5 * state.data, atol=1e-12)

    linear = eq.make_linear_operator(state)
    assert linear.shape == grid.spectral_shape
    assert eq.make_nonlinear_rhs(state) is None


def test_advection_rate():
    """Test the evolution rate of advection."""
    grid = PeriodicGrid([2 * np.pi, 2 * np.pi], 16)
    xs, ys = grid.coordinate_arrays()
    state = ConcentrationField.from_expression(grid, "sin(x) + cos(y)")

    eq = TracerAdvectionDiffusionPDE(diffusivity=0, velocity=[2, "1"])
    expect = -2 * np.cos(xs) + np.sin(ys)
    np.testing.assert_allclose(eq.evolution_rate(state).data, expect, atol=1e-12)

    # spatially varying velocity given as function and array
    for vx in [lambda x, y: np.cos(y), np.cos(ys), "cos(y)"]:
        eq = TracerAdvectionDiffusionPDE(diffusivity=0, velocity=[vx, 0])
        rate = eq.evolution_rate(state).data
        np.testing.assert_allclose(rate, -np.cos(ys) * np.cos(xs), atol=1e-12)


def test_advection_dealiasing():
    """Test that the advection term removes large wave numbers."""
    grid = PeriodicGrid(2 * np.pi, 12)
    state = ConcentrationField.from_expression(grid, "sin(5 * x)")
    xs = grid.axes_coords[0]

    eq = TracerAdvectionDiffusionPDE(diffusivity=0, velocity=[1])
    np.testing.assert_allclose(eq.evolution_rate(state).data, 0, atol=1e-12)

    eq = TracerAdvectionDiffusionPDE(diffusivity=0, velocity=[1], dealias=False)
    rate = eq.evolution_rate(state).data
    np.testing.assert_allclose(rate, -5 * np.cos(5 * xs), atol=1e-12)

    with config({"spectral.dealias_fraction": 1}):
        eq = TracerAdvectionDiffusionPDE(diffusivity=0, velocity=[1])
        rate = eq.evolution_rate(state).data
        np.testing.assert_allclose(rate, -5 * np.cos(5 * xs), atol=1e-12)


def test_velocity_data():
    """Test evaluating the velocity on grids."""
    grid = PeriodicGrid([2, 4], [4, 8])
    eq = TracerAdvectionDiffusionPDE(velocity=[1, "x"])
    vx, vy = eq.velocity_data(grid)
    np.testing.assert_allclose(vx, 1)
    np.testing.assert_allclose(vy, grid.coordinate_arrays()[0])

    assert TracerAdvectionDiffusionPDE().velocity_data(grid) is None

    # vanishing velocities do not lead to a nonlinear term
    state = ConcentrationField(grid, 1)
    eq = TracerAdvectionDiffusionPDE(velocity=[0, np.zeros(grid.shape)])
    assert eq.make_nonlinear_rhs(state) is None

    with pytest.raises(DimensionError):
        TracerAdvectionDiffusionPDE(velocity=[1]).velocity_data(grid)
    with pytest.raises(DimensionError):
        TracerAdvectionDiffusionPDE(velocity=[1, np.ones(3)]).velocity_data(grid)
