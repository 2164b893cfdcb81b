"""
Trackers analyzing, recording, and visualizing the concentration during a run.

.. autosummary::
   :nosignatures:

   CallbackTracker
   ProgressTracker
   ConsistencyTracker
   DataTracker
   MomentTracker
   PlotTracker
"""

from __future__ import annotations

import inspect
import math
import pickle
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from ..diagnostics import estimate_diffusivity, reordered_moment
from ..tools.docstrings import fill_in_docstring
from ..tools.output import get_progress_bar_class
from ..visualization.movies import Movie
from .base import InfoDict, TrackerBase
from .interrupts import InterruptData, RealtimeInterrupts

if TYPE_CHECKING:
    import pandas

    from ..fields import ConcentrationField


def _controller_info(info: InfoDict) -> dict[str, Any]:
    """extract the information of the controller from the diagnostics"""
    return {} if info is None else info.get("controller", {})


class CallbackTracker(TrackerBase):
    """Tracker calling a function with the current state

    Example:
        A callback can stop a simulation once the peak concentration dropped enough:

        .. code-block:: python

            def check_peak(state):
                if state.magnitude < 0.01:
                    raise FinishedSimulation("Peak concentration below 1%")

            tracker = CallbackTracker(check_peak, interrupts=0.5)
    """

    @fill_in_docstring
    def __init__(self, func: Callable, interrupts: InterruptData = 1):
        """
        Args:
            func:
                Function called as `func(state)` or `func(state, time)`. The state is
                the :class:`~gaussdiff.fields.ConcentrationField` used by the
                simulation, so it needs to be copied if it should be kept. Raising
                :class:`StopIteration` ends the simulation.
            interrupts:
                {ARG_TRACKER_INTERRUPT}
        """
        super().__init__(interrupts=interrupts)
        self._callback = func
        self._num_args = len(inspect.signature(func).parameters)
        if self._num_args not in {1, 2}:
            raise ValueError(
                f"`func` must accept the state and optionally the time, but it takes "
                f"{self._num_args} arguments"
            )

    def _call(self, field: ConcentrationField, t: float):
        """evaluate the callback with the arguments it accepts"""
        if self._num_args == 1:
            return self._callback(field)
        return self._callback(field, t)

    def handle(self, field: ConcentrationField, t: float) -> None:
        self._call(field, t)


class ProgressTracker(TrackerBase):
    """Tracker showing a progress bar of the simulation time"""

    name = "progress"

    @fill_in_docstring
    def __init__(
        self,
        interrupts: InterruptData | None = None,
        *,
        fancy: bool = True,
        ndigits: int = 5,
        leave: bool = True,
    ):
        """
        Args:
            interrupts:
                {ARG_TRACKER_INTERRUPT}
                By default, the bar is updated about once per second.
            fancy (bool):
                Use a widget-based progress bar in jupyter notebooks
            ndigits (int):
                Number of decimal digits of the displayed time
            leave (bool):
                Keep the progress bar visible after the simulation
        """
        if interrupts is None:
            interrupts = RealtimeInterrupts(duration=1)
        super().__init__(interrupts=interrupts)
        self.fancy = fancy
        self.ndigits = ndigits
        self.leave = leave

    def initialize(self, field: ConcentrationField, info: InfoDict = None) -> float:
        t_first = super().initialize(field, info)
        controller = _controller_info(info)
        self.progress_bar = get_progress_bar_class(self.fancy)(
            total=controller.get("t_end"),
            initial=controller.get("t_start", 0),
            leave=self.leave,
        )
        self.progress_bar.set_description("Initializing")
        return t_first

    def handle(self, field: ConcentrationField, t: float) -> None:
        total = self.progress_bar.total
        self.progress_bar.n = round(min(t, total) if total else t, self.ndigits)
        self.progress_bar.set_description("")

    def finalize(self, info: InfoDict = None) -> None:
        super().finalize(info)
        self.progress_bar.set_description("")
        controller = _controller_info(info)
        reached_end = controller.get("t_final", -math.inf) >= controller.get(
            "t_end", -math.inf
        )
        if reached_end and self.progress_bar.total:
            # show 100% even if the time is slightly off
            self.progress_bar.n = self.progress_bar.total
            self.progress_bar.refresh()
        self.progress_bar.close()


class ConsistencyTracker(TrackerBase):
    """Tracker aborting the simulation when the concentration is not finite"""

    name = "consistency"

    @fill_in_docstring
    def __init__(self, interrupts: InterruptData | None = None):
        """
        Args:
            interrupts:
                {ARG_TRACKER_INTERRUPT}
                By default, the state is checked about once per second.
        """
        if interrupts is None:
            interrupts = RealtimeInterrupts(duration=1)
        super().__init__(interrupts=interrupts)

    def handle(self, field: ConcentrationField, t: float) -> None:
        if not np.isfinite(field.data).all():
            raise StopIteration("Field was not finite")


class DataTracker(CallbackTracker):
    """Tracker storing the values returned by a function

    Example:
        Record the peak and the total amount of tracer every time unit:

        .. code-block:: python

            tracker = DataTracker(
                lambda state: {"peak": state.magnitude, "total": state.integral}
            )
            eq.solve(state, t_range=10, dt=1e-3, tracker=tracker)
            tracker.dataframe  # columns `time`, `peak`, and `total`

    Attributes:
        times (list):
            The times at which the function was called
        data (list):
            The values returned by the function
    """

    @fill_in_docstring
    def __init__(
        self,
        func: Callable,
        interrupts: InterruptData = 1,
        *,
        filename: str | Path | None = None,
    ):
        """
        Args:
            func:
                Function called as `func(state)` or `func(state, time)`, returning
                the data to record. Returning a dictionary names the columns of
                :attr:`dataframe`.
            interrupts:
                {ARG_TRACKER_INTERRUPT}
            filename (str):
                File to which the data is written when the simulation ends. The
                extension selects the format, see :meth:`to_file`.
        """
        super().__init__(func=func, interrupts=interrupts)
        self.filename = filename
        self.times: list[float] = []
        self.data: list[Any] = []

    def handle(self, field: ConcentrationField, t: float) -> None:
        self.times.append(t)
        self.data.append(self._call(field, t))

    def finalize(self, info: InfoDict = None) -> None:
        super().finalize(info)
        if self.filename:
            self.to_file(self.filename)

    @property
    def dataframe(self) -> pandas.DataFrame:
        """:class:`pandas.DataFrame`: the recorded data with a leading `time` column"""
        import pandas as pd

        df = pd.DataFrame(self.data)
        df.insert(0, "time", self.times)
        return df

    def to_file(self, filename: str | Path, **kwargs) -> None:
        r"""Write the recorded data to a file

        Args:
            filename (str):
                Path of the file. The extension `.pickle` stores the tuple
                `(times, data)`, while `.csv` and `.json` store :attr:`dataframe` and
                require :mod:`pandas`.
            \**kwargs:
                Arguments passed on to the writer of the format
        """
        path = Path(filename)
        extension = path.suffix.lower()
        if extension == ".pickle":
            with path.open("wb") as fp:
                pickle.dump((self.times, self.data), fp, **kwargs)
        elif extension == ".csv":
            self.dataframe.to_csv(path, **kwargs)
        elif extension == ".json":
            self.dataframe.to_json(path, **kwargs)
        else:
            raise ValueError(f"Unsupported file extension `{extension}`")


class MomentTracker(DataTracker):
    """Tracker recording a reordered moment of the concentration

    Example:
        The second moment of a one-dimensional Gaussian grows as :math:`8Kt`, which
        allows estimating the diffusivity after a simulation:

        .. code-block:: python

            tracker = MomentTracker(order=2, interrupts=0.1)
            eq.solve(state, t_range=10, dt=1e-3, tracker=tracker)
            tracker.estimate_diffusivity(diffusivity_constant("line"))

    Attributes:
        times (list):
            The times at which the moment was recorded
        data (list):
            The recorded values of the moment
    """

    @fill_in_docstring
    def __init__(
        self,
        order: int = 2,
        interrupts: InterruptData = 1,
        *,
        spacing: float | None = None,
        filename: str | Path | None = None,
    ):
        """
        Args:
            order (int):
                {ARG_MOMENT_ORDER}
            interrupts:
                {ARG_TRACKER_INTERRUPT}
            spacing (float, optional):
                The length or area associated with each value. If omitted, the cell
                length (one dimension) or cell area (two dimensions) of the grid of the
                simulated state is used.
            filename (str):
                A path to a file to which the time series is written at the end of the
                simulation. See :meth:`DataTracker.to_file` for supported formats.
        """
        if int(order) != order or order < 1:
            raise ValueError(f"`order` must be a positive integer, not {order}")
        super().__init__(self._moment, interrupts=interrupts, filename=filename)
        self.order = int(order)
        self.spacing = spacing

    def initialize(self, field: ConcentrationField, info: InfoDict = None) -> float:
        if self.spacing is None:
            self._spacing = field.grid.cell_volume
        else:
            self._spacing = float(self.spacing)
        self._logger.debug(
            "Record moment of order %d with spacing %g", self.order, self._spacing
        )
        return super().initialize(field, info)

    def _moment(self, field: ConcentrationField) -> float:
        """calculate the moment of the current state"""
        return reordered_moment(field.data, self._spacing, self.order)

    @property
    def dataframe(self) -> pandas.DataFrame:
        """:class:`pandas.DataFrame`: the time series with columns `time` and
        `moment`"""
        import pandas as pd

        return pd.DataFrame({"time": self.times, "moment": self.data})

    def estimate_diffusivity(self, constant: float) -> float:
        """Estimate the diffusivity from the first and the last record

        Args:
            constant (float):
                The geometric factor relating the growth rate of the moment to the
                diffusivity, see :func:`~gaussdiff.diagnostics.diffusivity_constant`

        Returns:
            float: The estimated diffusivity
        """
        return estimate_diffusivity(self.times, self.data, constant)


class PlotTracker(TrackerBase):
    """Tracker plotting the concentration together with its sorted values

    The figure is created when the simulation starts and updated at every interrupt.
    The tracker can write the initial and the final figure to image files and add
    every update as a frame to a movie.

    Example:
        Write the figures of the initial and final state and a movie:

        .. code-block:: python

            tracker = PlotTracker(
                0.1, initial_file="initial.png", final_file="final.png",
                movie="diffusion.mp4",
            )
            eq.solve(state, t_range=10, dt=1e-3, tracker=tracker)
    """

    @fill_in_docstring
    def __init__(
        self,
        interrupts: InterruptData = 1,
        *,
        title: str | Callable = "Concentration, t={time:g}",
        initial_file: str | Path | None = None,
        final_file: str | Path | None = None,
        movie: str | Path | Movie | None = None,
        show: bool = False,
        plot_args: dict[str, Any] | None = None,
    ):
        """
        Args:
            interrupts:
                {ARG_TRACKER_INTERRUPT}
            title (str or callable):
                Title of the panel showing the field. A string may contain the
                placeholder `{time}`, while a callable is called with the state and
                the time.
            initial_file (str, optional):
                Image file receiving the figure of the initial state
            final_file (str, optional):
                Image file receiving the figure of the final state
            movie (str or :class:`~gaussdiff.visualization.movies.Movie`):
                A path creates a movie that is written when the simulation ends. A
                :class:`~gaussdiff.visualization.movies.Movie` only receives the
                frames and needs to be saved by the caller.
            show (bool):
                Keep the figure open after the simulation
            plot_args (dict):
                Extra arguments of
                :func:`~gaussdiff.visualization.plotting.plot_concentration`
        """
        super().__init__(interrupts=interrupts)
        self.title = title
        self.initial_file = initial_file
        self.final_file = final_file
        self.show = show
        self.plot_args = dict(plot_args or {})

        self.movie: Movie | None
        if movie is None or isinstance(movie, Movie):
            self.movie = movie
            self._save_movie = False
        elif isinstance(movie, (str, Path)):
            self.movie = Movie(filename=movie)
            self._save_movie = True
        else:
            raise TypeError(f"Unknown type of `movie`: {movie.__class__.__name__}")

        self._plot_reference = None
        self._last_state: ConcentrationField | None = None

    def _get_title(self, state: ConcentrationField, t: float) -> str:
        """determine the title of the panel showing the field"""
        if callable(self.title):
            return str(self.title(state, t))
        return self.title.format(time=t)

    def initialize(self, state: ConcentrationField, info: InfoDict = None) -> float:
        from ..visualization.plotting import plot_concentration

        self._plot_reference = plot_concentration(state, **self.plot_args)
        if self.initial_file:
            self._plot_reference.savefig(self.initial_file)
        return super().initialize(state, info=info)

    def handle(self, state: ConcentrationField, t: float) -> None:
        from ..visualization.plotting import update_concentration_plot

        update_concentration_plot(
            self._plot_reference,  # type: ignore
            state,
            title=self._get_title(state, t),
            sorted_title="Concentration ordered highest to lowest",
        )
        if self.movie is not None:
            self.movie.add_figure(self._plot_reference.fig)  # type: ignore
        self._last_state = state.copy()

    def finalize(self, info: InfoDict = None) -> None:
        import matplotlib.pyplot as plt

        from ..visualization.plotting import update_concentration_plot

        super().finalize(info)
        if self._save_movie:
            self.movie.save()  # type: ignore

        if self._plot_reference is None:
            return
        if self.final_file and self._last_state is not None:
            update_concentration_plot(
                self._plot_reference,
                self._last_state,
                title="Final concentration",
                sorted_title="Final concentration ordered highest to lowest",
            )
            self._plot_reference.savefig(self.final_file)
        if not self.show:
            plt.close(self._plot_reference.fig)


__all__ = [
    "CallbackTracker",
    "ConsistencyTracker",
    "DataTracker",
    "MomentTracker",
    "PlotTracker",
    "ProgressTracker",
]
