r"""
Gaussian initial conditions for tracer concentrations

The profiles are probability densities, so they integrate to one on an unbounded
domain. Diffusion with diffusivity :math:`K` widens a Gaussian of variance
:math:`\sigma_0^2` to variance :math:`\sigma_0^2 + 2 K t` along each axis.

.. autosummary::
   :nosignatures:

   gaussian_line
   gaussian_blob
   gaussian_band
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy import stats

from ..grids import DimensionError, PeriodicGrid
from .scalar import ConcentrationField


def gaussian_line(
    grid: PeriodicGrid,
    mean: float = 0,
    std: float = 1,
    *,
    label: str | None = "Concentration",
) -> ConcentrationField:
    """Normal density along the `x` axis

    On a two-dimensional grid, every column along `y` carries the same profile.

    Args:
        grid (:class:`~gaussdiff.grids.PeriodicGrid`):
            The grid on which the profile is defined
        mean (float):
            The position of the maximum
        std (float):
            The standard deviation of the profile
        label (str, optional):
            Name of the returned field

    Returns:
        :class:`~gaussdiff.fields.ConcentrationField`
    """
    profile = stats.norm(loc=mean, scale=std).pdf(grid.axes_coords[0])
    if grid.dim == 1:
        data = profile
    else:
        data = np.repeat(profile[:, np.newaxis], grid.shape[1], axis=1)
    return ConcentrationField(grid, data, label=label)


def gaussian_blob(
    grid: PeriodicGrid,
    mean: Sequence[float] = (0, 0),
    cov: np.ndarray | Sequence | float = 1,
    *,
    label: str | None = "Concentration",
) -> ConcentrationField:
    """Bivariate normal density

    Args:
        grid (:class:`~gaussdiff.grids.PeriodicGrid`):
            A two-dimensional grid
        mean (tuple):
            The position of the maximum
        cov (float or array):
            The covariance matrix. A single number gives an isotropic blob with this
            variance along each axis.
        label (str, optional):
            Name of the returned field

    Returns:
        :class:`~gaussdiff.fields.ConcentrationField`
    """
    if grid.dim != 2:
        raise DimensionError("Gaussian blobs require a two-dimensional grid")
    cov_arr = np.asarray(cov, dtype=np.double)
    if cov_arr.ndim == 0:
        cov_arr = cov_arr * np.eye(2)
    dist = stats.multivariate_normal(mean=mean, cov=cov_arr)
    return ConcentrationField(grid, dist.pdf(grid.cell_coords), label=label)


def gaussian_band(
    grid: PeriodicGrid,
    mean: float = 0,
    std: float = 1,
    *,
    axis: int | str = "y",
    label: str | None = "Concentration",
) -> ConcentrationField:
    """Normal density across a band that spans the whole domain

    Args:
        grid (:class:`~gaussdiff.grids.PeriodicGrid`):
            A two-dimensional grid
        mean (float):
            The position of the centre line of the band
        std (float):
            The standard deviation of the profile across the band
        axis (int or str):
            The axis along which the profile varies. The default `y` gives a zonal
            band that is constant along `x`.
        label (str, optional):
            Name of the returned field

    Returns:
        :class:`~gaussdiff.fields.ConcentrationField`
    """
    if grid.dim != 2:
        raise DimensionError("Gaussian bands require a two-dimensional grid")
    axis_id = grid.get_axis_index(axis)
    profile = stats.norm(loc=mean, scale=std).pdf(grid.axes_coords[axis_id])
    if axis_id == 1:
        data = np.broadcast_to(profile[np.newaxis, :], grid.shape)
    else:
        data = np.broadcast_to(profile[:, np.newaxis], grid.shape)
    return ConcentrationField(grid, data, label=label)
