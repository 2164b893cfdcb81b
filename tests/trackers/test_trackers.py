import pickle

import numpy as np
import pytest

from gaussdiff import (
    ConcentrationField,
    PeriodicGrid,
    TracerAdvectionDiffusionPDE,
    diffusivity_constant,
    gaussian_line,
    second_moment,
)
from gaussdiff.tools.misc import module_available
from gaussdiff.trackers import (
    CallbackTracker,
    ConsistencyTracker,
    DataTracker,
    MomentTracker,
    PlotTracker,
    ProgressTracker,
    TrackerCollection,
    get_named_trackers,
)
from gaussdiff.visualization import Movie


def test_named_trackers():
    """Test constructing trackers from names."""
    named = get_named_trackers()
    assert named["progress"] is ProgressTracker
    assert named["consistency"] is ConsistencyTracker

    trackers = TrackerCollection.from_data("auto")
    assert len(trackers) == 2
    assert len(TrackerCollection.from_data(None)) == 0
    assert len(TrackerCollection.from_data(["consistency", None])) == 1
    with pytest.raises(ValueError):
        TrackerCollection.from_data("unknown")
    with pytest.raises(TypeError):
        TrackerCollection.from_data(1)


def test_trackers_in_simulation():
    """Test running several trackers in a simulation."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "2 + sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)

    times = []
    trackers = [
        "progress",
        "consistency",
        CallbackTracker(lambda state: times.append(state.average), interrupts=0.5),
    ]
    eq.solve(state, t_range=1, dt=0.125, tracker=trackers)
    np.testing.assert_allclose(times, [2, 2, 2])


def test_callback_tracker():
    """Test the signature check of callback trackers."""
    with pytest.raises(ValueError):
        CallbackTracker(lambda: None)
    with pytest.raises(ValueError):
        CallbackTracker(lambda a, b, c: None)


def test_consistency_tracker():
    """Test detecting invalid states."""
    grid = PeriodicGrid(1, 4)
    tracker = ConsistencyTracker(interrupts=1)
    tracker.handle(ConcentrationField(grid, 1), 0)
    with pytest.raises(StopIteration):
        tracker.handle(ConcentrationField(grid, [1, np.nan, 1, 1]), 0)


def test_data_tracker(tmp_path):
    """Test the data tracker."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)

    path = tmp_path / "data.pickle"
    tracker = DataTracker(
        lambda state, t: state.magnitude * t, interrupts=0.25, filename=path
    )
    eq.solve(state, t_range=0.5, dt=0.125, tracker=tracker)
    np.testing.assert_allclose(tracker.times, [0, 0.25, 0.5])
    assert tracker.data[0] == 0

    with path.open("rb") as fp:
        times, data = pickle.load(fp)
    np.testing.assert_allclose(times, tracker.times)
    np.testing.assert_allclose(data, tracker.data)

    with pytest.raises(ValueError):
        tracker.to_file(tmp_path / "data.unknown")


@pytest.mark.skipif(not module_available("pandas"), reason="requires `pandas`")
def test_data_tracker_pandas(tmp_path):
    """Test storing the data of trackers with pandas."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)

    tracker = DataTracker(
        lambda state: {"max": state.magnitude, "mean": state.average},
        interrupts=0.25,
    )
    eq.solve(state, t_range=0.5, dt=0.125, tracker=tracker)
    df = tracker.dataframe
    assert list(df.columns) == ["time", "max", "mean"]
    assert len(df) == 3

    for extension in ["csv", "json"]:
        path = tmp_path / f"data.{extension}"
        tracker.to_file(path)
        assert path.stat().st_size > 0


def test_moment_tracker():
    """Test recording moments during a simulation."""
    grid = PeriodicGrid(20, 512)
    state = gaussian_line(grid, std=1)
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)

    tracker = MomentTracker(order=2, interrupts=0.5)
    res = eq.solve(state, t_range=2, dt=1 / 64, tracker=tracker, solver="etdrk4")
    np.testing.assert_allclose(tracker.times, [0, 0.5, 1, 1.5, 2])
    assert tracker.data[0] == pytest.approx(second_moment(state.data, 20 / 512))
    assert tracker.data[-1] == pytest.approx(second_moment(res.data, 20 / 512))
    assert np.all(np.diff(tracker.data) > 0)

    K = tracker.estimate_diffusivity(diffusivity_constant("line"))
    assert K == pytest.approx(0.25, rel=0.05)

    # moments with a given spacing
    tracker = MomentTracker(order=1, interrupts=1, spacing=2)
    eq.solve(state, t_range=1, dt=0.01, tracker=tracker, solver="etdrk4")
    assert tracker.data[0] == pytest.approx(reordered_first_moment(state.data, 2))

    with pytest.raises(ValueError):
        MomentTracker(order=0)


def reordered_first_moment(values, spacing):
    """helper calculating the first moment directly with numpy"""
    sorted_values = np.sort(values.ravel())[::-1]
    ranks = np.arange(1, sorted_values.size + 1)
    return spacing * (ranks * sorted_values).sum() / sorted_values.sum()


@pytest.mark.skipif(not module_available("pandas"), reason="requires `pandas`")
def test_moment_tracker_file(tmp_path):
    """Test writing the moments to a file."""
    grid = PeriodicGrid(16, 32)
    state = gaussian_line(grid)
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)

    path = tmp_path / "moments.csv"
    tracker = MomentTracker(interrupts=0.5, filename=path)
    eq.solve(state, t_range=1, dt=0.01, tracker=tracker)
    assert list(tracker.dataframe.columns) == ["time", "moment"]
    assert path.stat().st_size > 0


@pytest.mark.parametrize("dim", [1, 2])
def test_plot_tracker(dim, tmp_path):
    """Test the plot tracker writing images."""
    grid = PeriodicGrid([8] * dim, 16)
    state = ConcentrationField.from_expression(grid, "exp(-x**2)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)

    initial_file = tmp_path / "initial.png"
    final_file = tmp_path / "final.png"
    tracker = PlotTracker(0.5, initial_file=initial_file, final_file=final_file)
    eq.solve(state, t_range=1, dt=0.01, tracker=tracker)

    assert initial_file.stat().st_size > 0
    assert final_file.stat().st_size > 0
    title = tracker._plot_reference.field.ax.get_title()
    assert title == "Final concentration"

    with pytest.raises(TypeError):
        PlotTracker(movie=1)


@pytest.mark.skipif(not Movie.is_available(), reason="requires ffmpeg")
def test_plot_tracker_movie(tmp_path):
    """Test the plot tracker creating a movie."""
    grid = PeriodicGrid([8, 8], 16)
    state = ConcentrationField.from_expression(grid, "exp(-x**2 - y**2)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)

    path = tmp_path / "movie.mp4"
    tracker = PlotTracker(0.25, movie=path)
    eq.solve(state, t_range=1, dt=0.01, tracker=tracker)
    assert tracker.movie.frames == 5
    assert path.stat().st_size > 0


def test_trackers_see_final_state(tmp_path):
    """Test trackers at an end time that is not one of their interrupt times."""
    grid = PeriodicGrid(8, 32)
    state = ConcentrationField.from_expression(grid, "exp(-x**2)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)

    moments = MomentTracker(interrupts=0.1)
    plots = PlotTracker(0.1, final_file=tmp_path / "final.png")
    res = eq.solve(state, t_range=0.15, dt=0.002, tracker=[moments, plots])

    np.testing.assert_allclose(moments.times, [0, 0.1, 0.15])
    assert moments.data[-1] == pytest.approx(second_moment(res.data, 8 / 32))
    shown = plots._plot_reference.field.element.get_ydata()
    np.testing.assert_allclose(shown, res.data)


def test_progress_tracker_closes_bar():
    """Test that the progress bar is completed and closed after a run."""
    grid = PeriodicGrid(2 * np.pi, 16)
    state = ConcentrationField.from_expression(grid, "sin(x)")
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.1)

    tracker = ProgressTracker(leave=False)
    eq.solve(state, t_range=0.3, dt=0.002, tracker=tracker)
    assert tracker.progress_bar.n == tracker.progress_bar.total
    assert tracker.progress_bar.disable
