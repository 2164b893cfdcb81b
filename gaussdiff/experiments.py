r"""
Diffusion experiments with Gaussian initial conditions

Each experiment diffuses a Gaussian tracer distribution with a known diffusivity,
records a reordered moment of the concentration at regular intervals and estimates
the diffusivity from the growth of this moment:

======== ============================ ================ ===========================
Name     Initial condition            Moment           Growth
======== ============================ ================ ===========================
`line`   Gaussian profile in 1d       second, length   :math:`8 K t`
`blob`   isotropic Gaussian in 2d     first, area      :math:`4 \pi K t`
`band`   Gaussian band in 2d          second, area     :math:`8 L_x^2 K t`
======== ============================ ================ ===========================

.. autosummary::
   :nosignatures:

   ExperimentResult
   run_line_experiment
   run_blob_experiment
   run_band_experiment
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from .diagnostics import diffusivity_constant
from .fields import ConcentrationField, gaussian_band, gaussian_blob, gaussian_line
from .grids import PeriodicGrid
from .pdes import TracerAdvectionDiffusionPDE
from .tools.misc import ensure_directory_exists
from .trackers import MomentTracker, PlotTracker
from .visualization import Movie, plot_moment_growth

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for experiments."""


# file names and labels used by the individual experiments
EXPERIMENT_SETTINGS: dict[str, dict[str, str]] = {
    "line": {
        "initial_file": "Initial1dconc.png",
        "final_file": "Final1dconc.png",
        "movie_file": "1d_gaussiandiff.mp4",
        "moment_file": "1d_second_moment.png",
        "ylabel": "σ̂²ₗ(t)",
        "title": "Growth of σ̂ₗ² during a diffusion\nsimulation of a Gaussian",
    },
    "blob": {
        "initial_file": "Initialblob2d.png",
        "final_file": "Finalblob2d.png",
        "movie_file": "2d_gaussiandiff_blob.mp4",
        "moment_file": "2d_blob_first_moment.png",
        "ylabel": "⟨A⟩(t)",
        "title": "Growth of average area during an isotropic diffusion\n"
        "simulation of a Gaussian blob",
    },
    "band": {
        "initial_file": "Initialband2d.png",
        "final_file": "Finalband2d.png",
        "movie_file": "2d_gaussiandiff_strip.mp4",
        "moment_file": "2d_band_second_moment.png",
        "ylabel": "σₐ²(t)",
        "title": "Growth of σₐ² during an isotropic diffusion\n"
        "simulation of a Gaussian band",
    },
}


@dataclass
class ExperimentResult:
    """Results of a diffusion experiment"""

    name: str
    """str: name of the experiment"""
    geometry: str
    """str: geometry determining the relation between moment and diffusivity"""
    times: np.ndarray
    """:class:`~numpy.ndarray`: times at which the moment was recorded"""
    moments: np.ndarray
    """:class:`~numpy.ndarray`: the recorded values of the moment"""
    diffusivity: float
    """float: the diffusivity estimated from the first and the last record"""
    expected_diffusivity: float
    """float: the diffusivity used in the simulation"""
    state: ConcentrationField
    """:class:`~gaussdiff.fields.ConcentrationField`: the final state"""
    files: list[Path] = field(default_factory=list)
    """list: paths of all files written by the experiment"""
    diagnostics: dict[str, Any] = field(default_factory=dict)
    """dict: diagnostic information of the simulation"""

    @property
    def relative_error(self) -> float:
        """float: relative deviation of the estimate from the expected value"""
        return abs(self.diffusivity / self.expected_diffusivity - 1)

    def plot(self, filename: str | Path | None = None):
        """Plot the growth of the recorded moment.

        Args:
            filename (str, optional):
                If given, the figure is written to this file

        Returns:
            :class:`~gaussdiff.visualization.plotting.PlotReference`
        """
        settings = EXPERIMENT_SETTINGS[self.name]
        return plot_moment_growth(
            self.times,
            self.moments,
            ylabel=settings["ylabel"],
            title=settings["title"],
            filename=filename,
        )


def _run_experiment(
    name: str,
    state: ConcentrationField,
    *,
    order: int,
    constant: float,
    geometry: str,
    diffusivity: float,
    dt: float,
    nsteps: int,
    nsubs: int,
    solver: str,
    output_folder: str | Path | None,
    movie: bool,
    progress: bool,
) -> ExperimentResult:
    """simulate the diffusion of `state` and estimate the diffusivity"""
    import matplotlib.pyplot as plt

    if nsteps < 1 or nsubs < 1:
        raise ValueError("`nsteps` and `nsubs` must be positive integers")
    interval = nsubs * dt
    t_end = nsteps * dt
    settings = EXPERIMENT_SETTINGS[name]

    moment_tracker = MomentTracker(order=order, interrupts=interval)
    trackers: list[Any] = [moment_tracker]
    if progress:
        trackers.append("progress")

    files: list[Path] = []
    folder: Path | None = None
    if output_folder is not None:
        folder = ensure_directory_exists(output_folder)
        movie_file: Path | None = None
        if movie:
            if Movie.is_available():
                movie_file = folder / settings["movie_file"]
            else:
                _logger.warning(
                    "Skip writing movie `%s` since ffmpeg is not available",
                    settings["movie_file"],
                )
        plot_tracker = PlotTracker(
            interval,
            initial_file=folder / settings["initial_file"],
            final_file=folder / settings["final_file"],
            movie=movie_file,
        )
        trackers.append(plot_tracker)
        files.append(folder / settings["initial_file"])
        files.append(folder / settings["final_file"])
        if movie_file is not None:
            files.append(movie_file)

    _logger.info(
        "Run `%s` experiment until t=%g with dt=%g, recording every %g",
        name,
        t_end,
        dt,
        interval,
    )
    eq = TracerAdvectionDiffusionPDE(diffusivity=diffusivity)
    final_state, info = eq.solve(
        state, t_range=t_end, dt=dt, tracker=trackers, solver=solver, ret_info=True
    )

    estimate = moment_tracker.estimate_diffusivity(constant)
    _logger.info(
        "Estimated diffusivity of `%s` experiment: %g (expected %g)",
        name,
        estimate,
        diffusivity,
    )

    result = ExperimentResult(
        name=name,
        geometry=geometry,
        times=np.array(moment_tracker.times),
        moments=np.array(moment_tracker.data),
        diffusivity=estimate,
        expected_diffusivity=diffusivity,
        state=final_state,  # type: ignore
        files=files,
        diagnostics=info,  # type: ignore
    )

    if folder is not None:
        ref = result.plot(filename=folder / settings["moment_file"])
        plt.close(ref.ax.figure)
        files.append(folder / settings["moment_file"])

    return result


def run_line_experiment(
    *,
    nx: int = 32,
    length: float = 16,
    diffusivity: float = 0.25,
    std: float = 1,
    dt: float = 0.002,
    nsteps: int = 7000,
    nsubs: int = 50,
    solver: str = "rk4",
    output_folder: str | Path | None = None,
    movie: bool = True,
    progress: bool = False,
) -> ExperimentResult:
    """Diffuse a one-dimensional Gaussian and estimate the diffusivity

    The second moment of the cumulative length of the reordered concentration grows
    as :math:`8Kt`.

    Args:
        nx (int):
            Number of support points
        length (float):
            Length of the periodic domain
        diffusivity (float):
            The diffusivity used in the simulation
        std (float):
            Initial standard deviation of the Gaussian
        dt (float):
            Time step of the solver
        nsteps (int):
            Total number of time steps
        nsubs (int):
            Number of time steps between two records of the moment
        solver (str):
            Name of the solver, see :func:`~gaussdiff.solvers.registered_solvers`
        output_folder (str, optional):
            Folder to which images and the movie are written. Nothing is written if
            omitted.
        movie (bool):
            Whether a movie is written to the output folder
        progress (bool):
            Whether a progress bar is shown

    Returns:
        :class:`ExperimentResult`
    """
    grid = PeriodicGrid([length], nx)
    state = gaussian_line(grid, mean=0, std=std)
    return _run_experiment(
        "line",
        state,
        order=2,
        constant=diffusivity_constant("line"),
        geometry="line",
        diffusivity=diffusivity,
        dt=dt,
        nsteps=nsteps,
        nsubs=nsubs,
        solver=solver,
        output_folder=output_folder,
        movie=movie,
        progress=progress,
    )


def run_blob_experiment(
    *,
    nx: int = 32,
    length: float = 16,
    diffusivity: float = 0.25,
    std: float = 1,
    dt: float = 0.002,
    nsteps: int = 7000,
    nsubs: int = 50,
    solver: str = "rk4",
    output_folder: str | Path | None = None,
    movie: bool = True,
    progress: bool = False,
) -> ExperimentResult:
    """Diffuse an isotropic Gaussian blob and estimate the diffusivity

    The average cumulative area of the reordered concentration grows as
    :math:`4 \\pi K t`. The arguments are the same as for
    :func:`run_line_experiment`, where `nx` and `length` apply to both axes.

    Returns:
        :class:`ExperimentResult`
    """
    grid = PeriodicGrid([length, length], nx)
    state = gaussian_blob(grid, mean=(0, 0), cov=std**2)
    return _run_experiment(
        "blob",
        state,
        order=1,
        constant=diffusivity_constant("blob"),
        geometry="blob",
        diffusivity=diffusivity,
        dt=dt,
        nsteps=nsteps,
        nsubs=nsubs,
        solver=solver,
        output_folder=output_folder,
        movie=movie,
        progress=progress,
    )


def run_band_experiment(
    *,
    nx: int = 32,
    length: float = 16,
    diffusivity: float = 0.25,
    std: float = 1,
    dt: float = 0.002,
    nsteps: int = 7000,
    nsubs: int = 50,
    solver: str = "rk4",
    output_folder: str | Path | None = None,
    movie: bool = True,
    progress: bool = False,
) -> ExperimentResult:
    """Diffuse a zonal Gaussian band and estimate the diffusivity

    The band spans the domain along `x` and has a Gaussian profile along `y`. The
    second moment of the cumulative area grows as :math:`8 L_x^2 K t`. The arguments
    are the same as for :func:`run_line_experiment`, where `nx` and `length` apply to
    both axes.

    Returns:
        :class:`ExperimentResult`
    """
    grid = PeriodicGrid([length, length], nx)
    state = gaussian_band(grid, mean=0, std=std, axis="y")
    return _run_experiment(
        "band",
        state,
        order=2,
        constant=diffusivity_constant("band", length=grid.lengths[0]),
        geometry="band",
        diffusivity=diffusivity,
        dt=dt,
        nsteps=nsteps,
        nsubs=nsubs,
        solver=solver,
        output_folder=output_folder,
        movie=movie,
        progress=progress,
    )


__all__ = [
    "ExperimentResult",
    "run_band_experiment",
    "run_blob_experiment",
    "run_line_experiment",
]
