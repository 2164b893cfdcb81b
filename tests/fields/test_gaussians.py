import numpy as np
import pytest
from scipy import stats

from gaussdiff import DimensionError, PeriodicGrid
from gaussdiff.fields import gaussian_band, gaussian_blob, gaussian_line


def test_gaussian_line():
    """Test one-dimensional Gaussian profiles."""
    grid = PeriodicGrid(16, 64)
    field = gaussian_line(grid)
    assert field.integral == pytest.approx(1)
    assert field.magnitude == pytest.approx(1 / np.sqrt(2 * np.pi))
    assert field.data.argmax() == 32
    assert field.label == "Concentration"

    field = gaussian_line(grid, mean=2, std=0.5)
    assert field.integral == pytest.approx(1)
    assert grid.axes_coords[0][field.data.argmax()] == pytest.approx(2)

    # the profile is repeated along y on two-dimensional grids
    grid = PeriodicGrid([16, 4], [32, 4])
    field = gaussian_line(grid)
    for j in range(1, 4):
        np.testing.assert_allclose(field.data[:, j], field.data[:, 0])
    np.testing.assert_allclose(
        field.data[:, 0], stats.norm.pdf(grid.axes_coords[0])
    )


def test_gaussian_blob():
    """Test bivariate Gaussian blobs."""
    grid = PeriodicGrid([16, 16], 64)
    field = gaussian_blob(grid)
    assert field.integral == pytest.approx(1)
    assert field.magnitude == pytest.approx(1 / (2 * np.pi))
    np.testing.assert_allclose(field.data, field.data.T)

    field = gaussian_blob(grid, mean=(1, -2), cov=[[2, 0], [0, 0.5]])
    assert field.integral == pytest.approx(1)
    i, j = np.unravel_index(field.data.argmax(), grid.shape)
    assert grid.axes_coords[0][i] == pytest.approx(1)
    assert grid.axes_coords[1][j] == pytest.approx(-2)

    with pytest.raises(DimensionError):
        gaussian_blob(PeriodicGrid(16, 32))


def test_gaussian_band():
    """Test Gaussian bands spanning the domain."""
    grid = PeriodicGrid([8, 16], [8, 64])
    field = gaussian_band(grid)
    for i in range(1, 8):
        np.testing.assert_allclose(field.data[i], field.data[0])
    np.testing.assert_allclose(field.data[0], stats.norm.pdf(grid.axes_coords[1]))
    # the density integrates to one across the band
    assert field.integral == pytest.approx(8)

    field = gaussian_band(grid, std=2, axis="x")
    for j in range(1, 64):
        np.testing.assert_allclose(field.data[:, j], field.data[:, 0])
    np.testing.assert_allclose(
        field.data[:, 0], stats.norm.pdf(grid.axes_coords[0], scale=2)
    )

    with pytest.raises(DimensionError):
        gaussian_band(PeriodicGrid(16, 32))
