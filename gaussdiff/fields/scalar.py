"""
Defines the tracer concentration field on a periodic grid

.. autosummary::
   :nosignatures:

   ConcentrationField
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from ..grids import DimensionError, PeriodicGrid
from ..tools.docstrings import fill_in_docstring
from ..tools.typing import NumberOrArray

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for fields."""


class ConcentrationField:
    """Scalar tracer concentration discretized on a periodic grid

    The field owns its data, which has the shape of the grid. Trackers receive a
    view of the current state of a simulation, so they need to copy the field if
    they want to keep it.
    """

    def __init__(
        self,
        grid: PeriodicGrid,
        data: NumberOrArray = 0,
        *,
        label: str | None = None,
    ):
        """
        Args:
            grid (:class:`~gaussdiff.grids.PeriodicGrid`):
                The periodic grid carrying the concentration
            data (number or :class:`~numpy.ndarray`):
                Field values at the support points of the grid. A single number sets
                the same value everywhere.
            label (str, optional):
                Name of the field
        """
        if not isinstance(grid, PeriodicGrid):
            raise TypeError(f"Fields require a PeriodicGrid, not {grid.__class__}")
        self.grid = grid
        self.label = label
        self._data = np.empty(grid.shape, dtype=np.double)
        self.data = data  # type: ignore

    @property
    def data(self) -> np.ndarray:
        """:class:`~numpy.ndarray`: concentration at the support points"""
        return self._data

    @data.setter
    def data(self, value: NumberOrArray) -> None:
        if isinstance(value, ConcentrationField):
            self.assert_field_compatible(value)
            value = value.data
        arr = np.asarray(value)
        if arr.ndim > 0 and arr.shape != self.grid.shape:
            raise DimensionError(
                f"Data shape {arr.shape} does not match grid shape {self.grid.shape}"
            )
        if np.iscomplexobj(arr):
            raise TypeError("Concentration fields only support real values")
        self._data[...] = arr

    @classmethod
    @fill_in_docstring
    def from_expression(
        cls, grid: PeriodicGrid, expression: str, *, label: str | None = None
    ) -> ConcentrationField:
        """evaluate a formula of the coordinates at the support points

        Warning:
            {WARNING_EXEC}

        Args:
            grid (:class:`~gaussdiff.grids.PeriodicGrid`):
                The periodic grid carrying the concentration
            expression (str):
                Mathematical expression for the concentration as a function of the
                coordinates `x` (and `y` for two-dimensional grids).
            label (str, optional):
                Name of the field
        """
        from ..tools.expressions import ScalarExpression

        expr = ScalarExpression(expression, signature=grid.axes)
        data = expr(*grid.coordinate_arrays())
        return cls(grid, np.array(data, dtype=np.double), label=label)

    @classmethod
    def from_function(
        cls,
        grid: PeriodicGrid,
        func: Callable[..., NumberOrArray],
        *,
        label: str | None = None,
    ) -> ConcentrationField:
        """create a field by evaluating a vectorized python function

        Args:
            grid (:class:`~gaussdiff.grids.PeriodicGrid`):
                The periodic grid carrying the concentration
            func (callable):
                Function called with one coordinate array per axis
            label (str, optional):
                Name of the field
        """
        coords = grid.coordinate_arrays()
        data = np.broadcast_to(func(*coords), grid.shape)
        return cls(grid, data, label=label)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(grid={self.grid!r}, "
            f"data=Array{self.data.shape}, label={self.label!r})"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.grid == other.grid and np.array_equal(self.data, other.data)

    def copy(self, *, label: str | None = None) -> ConcentrationField:
        """Return a field sharing the grid but holding a copy of the data.

        Args:
            label (str, optional):
                Name of the returned field
        """
        if label is None:
            label = self.label
        return self.__class__(self.grid, self.data.copy(), label=label)

    def assert_field_compatible(self, other: ConcentrationField) -> None:
        """Raise ValueError unless `other` lives on the same grid."""
        if self.grid != other.grid:
            raise ValueError(f"Grids {self.grid} and {other.grid} are incompatible")

    @property
    def integral(self) -> float:
        """float: integral of the concentration over the periodic domain"""
        return float(self.data.sum() * self.grid.cell_volume)

    @property
    def average(self) -> float:
        """float: average concentration over the domain"""
        return float(self.data.mean())

    @property
    def magnitude(self) -> float:
        """float: the largest concentration value"""
        return float(self.data.max())

    def sorted_values(self) -> np.ndarray:
        """Return the concentration values ordered from highest to lowest."""
        from ..diagnostics import sorted_concentration

        return sorted_concentration(self.data)

    def to_dict(self) -> dict[str, Any]:
        """Return the field as a dictionary of plain data."""
        return {"grid": self.grid.state, "data": self.data.copy(), "label": self.label}

    @classmethod
    def from_dict(cls, state: dict[str, Any]) -> ConcentrationField:
        """Create a field from a dictionary created by :meth:`to_dict`."""
        grid = PeriodicGrid.from_state(state["grid"])
        return cls(grid, state["data"], label=state.get("label"))

    def plot(self, **kwargs):
        """Visualize the field together with its sorted values.

        Args:
            **kwargs:
                Arguments forwarded to
                :func:`~gaussdiff.visualization.plotting.plot_concentration`

        Returns:
            :class:`~gaussdiff.visualization.plotting.ConcentrationPlotReference`
        """
        from ..visualization.plotting import plot_concentration

        return plot_concentration(self, **kwargs)
