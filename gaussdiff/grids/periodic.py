r"""
Periodic Cartesian grids used by pseudo-spectral simulations.

.. autosummary::
   :nosignatures:

   PeriodicGrid
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from ..tools import spectral
from .base import DimensionError, _check_shape


class PeriodicGrid:
    r"""Periodic Cartesian grid in one or two dimensions centred on the origin

    The domain along axis :math:`k` covers :math:`[-L^{(k)}/2, L^{(k)}/2)` and the
    support points are placed at

    .. math::
        x^{(k)}_i = -\frac{L^{(k)}}{2} + i \Delta x^{(k)}
        \quad \text{for} \quad i = 0, \ldots, N^{(k)} - 1
        \qquad\text{with}\qquad
        \Delta x^{(k)} = \frac{L^{(k)}}{N^{(k)}}

    so that the origin is always a support point when :math:`N^{(k)}` is even. This
    is the natural layout for discrete Fourier transforms. Data on the grid is
    stored with axis order `(x, y)`.
    """

    def __init__(self, lengths: float | Sequence[float], shape: int | Sequence[int]):
        """
        Args:
            lengths (float or list of float):
                The length of the domain along each axis. The number of entries
                determines the dimension of the grid.
            shape (int or list of int):
                The number of support points along each axis. A single number is used
                for all axes.
        """
        lengths_arr = np.atleast_1d(np.asarray(lengths, dtype=np.double))
        if lengths_arr.ndim != 1:
            raise DimensionError("`lengths` must be a number or a 1d sequence")
        if np.any(lengths_arr <= 0):
            raise ValueError(f"Domain lengths must be positive, not {lengths}")

        shape_tpl = _check_shape(shape)
        if len(shape_tpl) == 1 and len(lengths_arr) > 1:
            shape_tpl = shape_tpl * len(lengths_arr)
        if len(shape_tpl) != len(lengths_arr):
            raise DimensionError(
                f"Dimension of `lengths` ({len(lengths_arr)}) and `shape` "
                f"({len(shape_tpl)}) are not compatible"
            )
        if len(shape_tpl) > 2:
            raise DimensionError("Only one- and two-dimensional grids are supported")

        self._shape = shape_tpl
        self._lengths = tuple(float(L) for L in lengths_arr)
        self.dim = len(self._shape)
        self.axes = list("xy"[: self.dim])

        self._discretization = lengths_arr / np.array(self._shape)
        self._axes_coords = tuple(
            -L / 2 + dx * np.arange(n)
            for L, dx, n in zip(self._lengths, self._discretization, self._shape)
        )

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> PeriodicGrid:
        """Create a grid from a stored `state`.

        Args:
            state (dict):
                The state from which the grid is reconstructed.
        """
        return cls(lengths=state["lengths"], shape=state["shape"])

    @property
    def state(self) -> dict[str, Any]:
        """dict: the state of the grid"""
        return {"lengths": self.lengths, "shape": self.shape}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(lengths={self.lengths}, shape={self.shape})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.shape == other.shape and np.allclose(self.lengths, other.lengths)

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.shape, self.lengths))

    @property
    def shape(self) -> tuple[int, ...]:
        """tuple of int: the number of support points along each axis"""
        return self._shape

    @property
    def lengths(self) -> tuple[float, ...]:
        """tuple of float: the domain length along each axis"""
        return self._lengths

    @property
    def num_cells(self) -> int:
        """int: the total number of support points"""
        return int(np.prod(self.shape))

    @property
    def discretization(self) -> np.ndarray:
        """:class:`numpy.ndarray`: the grid spacing along each axis"""
        return self._discretization

    @property
    def cell_volume(self) -> float:
        """float: the length (1d) or area (2d) associated with each support point"""
        return float(np.prod(self.discretization))

    @property
    def volume(self) -> float:
        """float: total length (1d) or area (2d) of the domain"""
        return float(np.prod(self.lengths))

    @property
    def axes_coords(self) -> tuple[np.ndarray, ...]:
        """tuple: coordinates of the support points along each axis"""
        return self._axes_coords

    @property
    def cell_coords(self) -> np.ndarray:
        """:class:`~numpy.ndarray`: coordinates of all support points

        The last axis of the returned array enumerates the coordinate components.
        """
        coords = np.meshgrid(*self.axes_coords, indexing="ij")
        return np.moveaxis(np.array(coords), 0, -1)

    def coordinate_arrays(self) -> tuple[np.ndarray, ...]:
        """Return one full array of coordinates per axis (indexing `ij`)."""
        return tuple(np.meshgrid(*self.axes_coords, indexing="ij"))

    @property
    def wave_numbers(self) -> tuple[np.ndarray, ...]:
        """tuple: angular wave numbers of the real Fourier transform

        The arrays broadcast against the spectral representation of a field defined
        on this grid.
        """
        return spectral.wave_numbers(self.shape, self.discretization)

    @property
    def k2(self) -> np.ndarray:
        """:class:`~numpy.ndarray`: squared magnitude of the wave vectors"""
        k2 = np.array(0.0)
        for k in self.wave_numbers:
            k2 = k2 + k**2
        return k2

    @property
    def spectral_shape(self) -> tuple[int, ...]:
        """tuple of int: shape of the spectral representation of data"""
        return self.shape[:-1] + (self.shape[-1] // 2 + 1,)

    def get_axis_index(self, key: int | str) -> int:
        """Return the index belonging to an axis.

        Args:
            key (int or str):
                The index or name of an axis

        Returns:
            int: The index of the axis
        """
        if isinstance(key, str):
            if key in self.axes:
                return self.axes.index(key)
            raise IndexError(f"`{key}` is not in the axes {self.axes}")
        elif isinstance(key, int):
            if 0 <= key < self.dim:
                return key
            raise IndexError(f"Axis index {key} out of bounds for dim={self.dim}")
        raise IndexError("Index must be an integer or the name of an axis")
