"""Helpers shared by grid classes."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


class DimensionError(ValueError):
    """Raised when the dimensions of grids or data do not match."""


def _check_shape(shape: int | Sequence[int]) -> tuple[int, ...]:
    """Return the number of support points per axis as a tuple of positive ints."""
    values = np.atleast_1d(shape)
    if values.ndim != 1 or values.size == 0:
        raise ValueError(f"Cannot interpret {shape!r} as the shape of a grid")
    for value in values:
        if value != int(value) or value < 1:
            raise ValueError(f"{value!r} is not a valid number of support points")
    return tuple(int(value) for value in values)
