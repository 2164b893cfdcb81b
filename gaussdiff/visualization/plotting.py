"""
Functions for plotting concentration fields and the growth of their moments

Each concentration figure has two panels. The top panel shows the field itself as a
line plot (one dimension) or a heat map (two dimensions), while the bottom panel shows
the concentration values ordered from highest to lowest against their rank.

.. autosummary::
   :nosignatures:

   PlotReference
   ConcentrationPlotReference
   plot_concentration
   update_concentration_plot
   plot_moment_growth
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from .. import config

if TYPE_CHECKING:
    from ..fields import ConcentrationField

_logger = logging.getLogger(__name__)


class PlotReference:
    """contains all information to update a plot element"""

    __slots__ = ["ax", "element", "parameters"]

    def __init__(self, ax, element: Any, parameters: dict[str, Any] | None = None):
        """
        Args:
            ax (:class:`matplotlib.axes.Axes`): The axes of the element
            element (:class:`matplotlib.artist.Artist`): The actual element
            parameters (dict): Parameters to recreate the plot element
        """
        self.ax = ax
        self.element = element
        self.parameters = {} if parameters is None else parameters


class ConcentrationPlotReference:
    """references to the two panels of a concentration figure"""

    __slots__ = ["fig", "field", "sorted"]

    def __init__(self, fig, field: PlotReference, sorted: PlotReference):
        self.fig = fig
        self.field = field
        self.sorted = sorted

    def savefig(self, filename: str | Path, **kwargs) -> None:
        """write the current figure to a file

        Args:
            filename (str): The path of the image file
            **kwargs: Additional arguments for :meth:`matplotlib.figure.Figure.savefig`
        """
        kwargs.setdefault("dpi", config["movie.dpi"])
        self.fig.savefig(filename, **kwargs)
        _logger.info("Wrote image `%s`", filename)


def _plot_field_panel(ax, field: ConcentrationField, cmap: str) -> PlotReference:
    """plot the concentration in real space onto `ax`"""
    grid = field.grid
    if grid.dim == 1:
        (line,) = ax.plot(grid.axes_coords[0], field.data, color="green")
        ax.set_xlim(-grid.lengths[0] / 2, grid.lengths[0] / 2)
        ax.set_xlabel("x")
        ax.set_ylabel("concentration, c(x)")
        return PlotReference(ax, line)

    # two-dimensional data is shown with `x` along the horizontal axis
    extent = []
    for coords, dx in zip(grid.axes_coords, grid.discretization):
        extent.extend([coords[0] - dx / 2, coords[-1] + dx / 2])
    c_max = float(np.abs(field.data).max())
    if c_max == 0:
        c_max = 1.0
    image = ax.imshow(
        field.data.T,
        origin="lower",
        extent=extent,
        cmap=cmap,
        vmin=-c_max,
        vmax=c_max,
        interpolation="nearest",
    )
    ax.figure.colorbar(image, ax=ax)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    return PlotReference(ax, image, {"extent": extent, "vmax": c_max})


def _plot_sorted_panel(ax, field: ConcentrationField) -> PlotReference:
    """plot the sorted concentration against the rank onto `ax`"""
    values = field.sorted_values()
    ranks = np.arange(1, len(values) + 1)
    color = "red" if field.grid.dim == 1 else "green"
    (line,) = ax.plot(ranks, values, color=color)
    ax.set_xlim(ranks[0], ranks[-1])
    if values[0] > 0:
        ax.set_ylim(0, values[0])
    ax.set_xlabel("Δl" if field.grid.dim == 1 else "ΔA")
    ax.set_ylabel("concentration")
    return PlotReference(ax, line)


def plot_concentration(
    field: ConcentrationField,
    title: str | None = "Initial concentration",
    sorted_title: str | None = "Initial concentration ordered highest to lowest",
    *,
    fig=None,
    cmap: str = "RdBu_r",
    filename: str | Path | None = None,
) -> ConcentrationPlotReference:
    """Plot a concentration field together with its sorted values.

    Args:
        field (:class:`~gaussdiff.fields.ConcentrationField`):
            The field to visualize
        title (str, optional):
            Title of the panel showing the field
        sorted_title (str, optional):
            Title of the panel showing the sorted values
        fig (:class:`matplotlib.figure.Figure`, optional):
            Figure to draw into. A new figure is created if omitted.
        cmap (str):
            Diverging colour map used for two-dimensional fields
        filename (str, optional):
            If given, the figure is written to this file

    Returns:
        :class:`ConcentrationPlotReference`: references that allow updating the plot
    """
    import matplotlib.pyplot as plt

    if fig is None:
        figsize = (7, 7) if field.grid.dim == 1 else (6, 5)
        fig = plt.figure(figsize=figsize)
    else:
        fig.clf()
    ax_field, ax_sorted = fig.subplots(2, 1)

    ref = ConcentrationPlotReference(
        fig,
        field=_plot_field_panel(ax_field, field, cmap=cmap),
        sorted=_plot_sorted_panel(ax_sorted, field),
    )
    if title is not None:
        ax_field.set_title(title)
    if sorted_title is not None:
        ax_sorted.set_title(sorted_title)
    fig.tight_layout()

    if filename is not None:
        ref.savefig(filename)
    return ref


def update_concentration_plot(
    reference: ConcentrationPlotReference,
    field: ConcentrationField,
    title: str | None = None,
    sorted_title: str | None = None,
) -> None:
    """Update the data of a figure created by :func:`plot_concentration`.

    The axes limits are kept, so the decay of the concentration stays visible.

    Args:
        reference (:class:`ConcentrationPlotReference`):
            The references returned when the figure was created
        field (:class:`~gaussdiff.fields.ConcentrationField`):
            The field whose data is shown
        title (str, optional):
            New title of the panel showing the field
        sorted_title (str, optional):
            New title of the panel showing the sorted values
    """
    if field.grid.dim == 1:
        reference.field.element.set_ydata(field.data)
    else:
        reference.field.element.set_data(field.data.T)
    reference.sorted.element.set_ydata(field.sorted_values())

    if title is not None:
        reference.field.ax.set_title(title)
    if sorted_title is not None:
        reference.sorted.ax.set_title(sorted_title)


def plot_moment_growth(
    times: Sequence[float] | np.ndarray,
    moments: Sequence[float] | np.ndarray,
    ylabel: str = "moment",
    title: str | None = None,
    *,
    ax=None,
    filename: str | Path | None = None,
) -> PlotReference:
    """Plot the time series of a reordered moment.

    Args:
        times (list of float):
            The times at which the moment was recorded
        moments (list of float):
            The values of the moment
        ylabel (str):
            Label of the vertical axis
        title (str, optional):
            Title of the plot
        ax (:class:`matplotlib.axes.Axes`, optional):
            Axes to draw into. A new figure is created if omitted.
        filename (str, optional):
            If given, the figure is written to this file

    Returns:
        :class:`PlotReference`: reference to the line showing the data
    """
    import matplotlib.pyplot as plt

    if len(times) != len(moments):
        raise ValueError("`times` and `moments` must have the same length")

    if ax is None:
        _, ax = plt.subplots()
    (line,) = ax.plot(times, moments)
    ax.set_xlabel("t")
    ax.set_ylabel(ylabel)
    if title is not None:
        ax.set_title(title)

    if filename is not None:
        ax.figure.savefig(filename, dpi=config["movie.dpi"])
        _logger.info("Wrote image `%s`", filename)
    return PlotReference(ax, line)
