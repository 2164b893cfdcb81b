import matplotlib.pyplot as plt
import numpy as np
import pytest

from gaussdiff import PeriodicGrid, gaussian_blob, gaussian_line
from gaussdiff.visualization import (
    Movie,
    plot_concentration,
    plot_moment_growth,
    update_concentration_plot,
)


def test_plot_concentration_1d(tmp_path):
    """Test plotting one-dimensional concentrations."""
    field = gaussian_line(PeriodicGrid(16, 32))
    path = tmp_path / "line.png"
    ref = plot_concentration(field, filename=path)
    assert path.stat().st_size > 0

    assert ref.field.ax.get_title() == "Initial concentration"
    assert ref.field.ax.get_xlim() == pytest.approx((-8, 8))
    assert ref.sorted.ax.get_xlabel() == "Δl"
    assert ref.sorted.ax.get_ylim() == pytest.approx((0, field.magnitude))
    np.testing.assert_allclose(ref.sorted.element.get_ydata(), field.sorted_values())

    field.data *= 0.5
    update_concentration_plot(ref, field, title="Concentration, t=1")
    assert ref.field.ax.get_title() == "Concentration, t=1"
    sorted_title = ref.sorted.ax.get_title()
    assert sorted_title == "Initial concentration ordered highest to lowest"
    np.testing.assert_allclose(ref.field.element.get_ydata(), field.data)


def test_plot_concentration_2d():
    """Test plotting two-dimensional concentrations."""
    field = gaussian_blob(PeriodicGrid([16, 8], [32, 16]))
    ref = field.plot(title="Blob", sorted_title=None)
    assert ref.field.ax.get_title() == "Blob"
    assert ref.sorted.ax.get_title() == ""
    assert ref.sorted.ax.get_xlabel() == "ΔA"
    # the image shows x along the horizontal axis
    assert ref.field.element.get_array().shape == (16, 32)
    assert ref.field.element.get_extent() == pytest.approx([-8.25, 7.75, -4.25, 3.75])

    field.data *= 0.5
    update_concentration_plot(ref, field, sorted_title="sorted")
    np.testing.assert_allclose(ref.field.element.get_array(), field.data.T)
    assert ref.sorted.ax.get_title() == "sorted"

    # reuse an existing figure
    fig = ref.fig
    ref2 = plot_concentration(field, fig=fig)
    assert ref2.fig is fig


def test_plot_moment_growth(tmp_path):
    """Test plotting the time series of moments."""
    path = tmp_path / "moment.png"
    ref = plot_moment_growth([0, 1, 2], [1, 3, 5], ylabel="σ²", filename=path)
    assert path.stat().st_size > 0
    assert ref.ax.get_ylabel() == "σ²"
    np.testing.assert_allclose(ref.element.get_ydata(), [1, 3, 5])

    _, ax = plt.subplots()
    ref = plot_moment_growth([0, 1], [1, 2], title="growth", ax=ax)
    assert ref.ax is ax
    assert ax.get_title() == "growth"

    with pytest.raises(ValueError):
        plot_moment_growth([0, 1], [1, 2, 3])


@pytest.mark.skipif(not Movie.is_available(), reason="requires ffmpeg")
def test_movie(tmp_path):
    """Test writing movies frame by frame."""
    path = tmp_path / "test.mp4"
    field = gaussian_line(PeriodicGrid(16, 32))
    ref = plot_concentration(field)
    with Movie(path, framerate=5) as movie:
        assert movie.framerate == 5
        for i in range(3):
            field.data *= 0.9
            update_concentration_plot(ref, field, title=f"frame {i}")
            movie.add_figure(ref.fig)
    assert movie.frames == 3
    assert path.stat().st_size > 0
