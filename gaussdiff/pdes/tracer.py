r"""
Advection and diffusion of a passive tracer

.. math::
    \partial_t c + \boldsymbol u \cdot \nabla c = \kappa \nabla^2 c

The diffusive term is linear and diagonal in spectral space. The advection by a
steady velocity field :math:`\boldsymbol u` is evaluated pseudo-spectrally: the
gradient is computed in spectral space, multiplied by the velocity in real space and
transformed back, removing aliased modes with the 2/3 rule.
"""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from typing import Any, Callable

import numpy as np

from .. import config
from ..fields import ConcentrationField
from ..grids import DimensionError, PeriodicGrid
from ..tools import spectral
from ..tools.docstrings import fill_in_docstring
from ..tools.expressions import ScalarExpression
from .base import PDEBase


def _velocity_component(value: Any, grid: PeriodicGrid) -> np.ndarray:
    """evaluate one component of the velocity on the grid"""
    if isinstance(value, numbers.Number):
        return np.full(grid.shape, float(value))  # type: ignore

    elif isinstance(value, str):
        expr = ScalarExpression(value, signature=grid.axes)
        return np.array(expr(*grid.coordinate_arrays()), dtype=np.double)

    elif callable(value):
        data = value(*grid.coordinate_arrays())
        return np.array(np.broadcast_to(data, grid.shape), dtype=np.double)

    else:
        arr = np.array(value, dtype=np.double)
        if arr.shape != grid.shape:
            raise DimensionError(
                f"Velocity component has shape {arr.shape}, but the grid has shape "
                f"{grid.shape}"
            )
        return arr


class TracerAdvectionDiffusionPDE(PDEBase):
    """Advection and diffusion of a passive tracer in a steady flow

    Example:
        A Gaussian blob diffusing without advection:

        .. code-block:: python

            grid = PeriodicGrid([16, 16], 32)
            state = gaussian_blob(grid)
            eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)
            result = eq.solve(state, t_range=10, dt=0.002)
    """

    @fill_in_docstring
    def __init__(
        self,
        diffusivity: float = 1,
        velocity: Sequence | None = None,
        *,
        dealias: bool = True,
    ):
        """
        Args:
            diffusivity (float):
                The diffusivity :math:`\\kappa` of the tracer
            velocity (list, optional):
                {ARG_VELOCITY}
            dealias (bool):
                Whether modes beyond the fraction `spectral.dealias_fraction` of the
                largest wave number are removed from the advection term
        """
        super().__init__()
        if diffusivity < 0:
            raise ValueError(f"Diffusivity must not be negative, not {diffusivity}")
        if velocity is not None and isinstance(velocity, (str, numbers.Number)):
            raise TypeError("`velocity` must be a sequence with one entry per axis")
        self.diffusivity = float(diffusivity)
        self.velocity = velocity
        self.dealias = dealias

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(diffusivity={self.diffusivity:g}, "
            f"velocity={self.velocity!r}, dealias={self.dealias})"
        )

    @property
    def expression(self) -> str:
        """str: the right hand side of the equation in string form"""
        if self.velocity is None:
            return f"{self.diffusivity:g} * laplace(c)"
        return f"{self.diffusivity:g} * laplace(c) - u . gradient(c)"

    def velocity_data(self, grid: PeriodicGrid) -> list[np.ndarray] | None:
        """Evaluate the velocity field on a grid.

        Args:
            grid (:class:`~gaussdiff.grids.PeriodicGrid`):
                The grid on which the velocity is evaluated

        Returns:
            list: One array per axis or `None` if the tracer is not advected
        """
        if self.velocity is None:
            return None
        if len(self.velocity) != grid.dim:
            raise DimensionError(
                f"Velocity has {len(self.velocity)} components, but the grid has "
                f"{grid.dim} dimensions"
            )
        return [_velocity_component(value, grid) for value in self.velocity]

    def make_linear_operator(self, state: ConcentrationField) -> np.ndarray:
        """Return the spectral representation of the diffusion operator.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                An example for the state defining the grid

        Returns:
            :class:`~numpy.ndarray`: The eigenvalues :math:`-\\kappa |k|^2`
        """
        grid = state.grid
        return np.broadcast_to(-self.diffusivity * grid.k2, grid.spectral_shape).copy()

    def make_nonlinear_rhs(
        self, state: ConcentrationField
    ) -> Callable[[np.ndarray, float], np.ndarray] | None:
        """Return a function evaluating the advection term in spectral space.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                An example for the state defining the grid

        Returns:
            Function with signature `(state_spec, t)` or `None` if the velocity
            vanishes everywhere.
        """
        grid = state.grid
        velocity = self.velocity_data(grid)
        if velocity is None:
            return None

        # only keep the components that actually advect the tracer
        terms = [
            (1j * k, u) for k, u in zip(grid.wave_numbers, velocity) if np.any(u != 0)
        ]
        if not terms:
            self._logger.info("Velocity vanishes; the equation is linear")
            return None

        if self.dealias:
            mask = spectral.dealias_mask(
                grid.shape, grid.discretization, config["spectral.dealias_fraction"]
            )
        else:
            mask = None
        shape = grid.shape

        def nonlinear(state_spec: np.ndarray, t: float) -> np.ndarray:
            """Evaluate the advection term -u . grad(c)."""
            advection = np.zeros(shape)
            for ik, u in terms:
                advection += u * spectral.to_real(ik * state_spec, shape)
            result = -spectral.to_spectral(advection)
            if mask is not None:
                result *= mask
            return result

        return nonlinear

    def evolution_rate(  # type: ignore
        self, state: ConcentrationField, t: float = 0
    ) -> ConcentrationField:
        """Evaluate the right hand side of the PDE.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                The field at the current time point
            t (float):
                The current time point

        Returns:
            :class:`~gaussdiff.fields.ConcentrationField`:
                Field describing the evolution rate of the PDE
        """
        grid = state.grid
        state_spec = spectral.to_spectral(state.data)
        rate = self.make_linear_operator(state) * state_spec
        nonlinear = self.make_nonlinear_rhs(state)
        if nonlinear is not None:
            rate += nonlinear(state_spec, t)
        data = spectral.to_real(rate, grid.shape)
        return ConcentrationField(grid, data, label="evolution rate")
