r"""Package that contains the base class for pseudo-spectral solvers.

All solvers advance the spectral representation :math:`\hat c` of the concentration,
which evolves according to

.. math::
    \partial_t \hat c = \mathcal L \hat c + \mathcal N(\hat c, t)

with a diagonal linear operator :math:`\mathcal L` and a nonlinear part
:math:`\mathcal N`, both supplied by the PDE.
"""

from __future__ import annotations

import logging
import warnings
from inspect import isabstract
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from ..tools import spectral
from ..tools.misc import classproperty
from ..tools.typing import SingleStepType

if TYPE_CHECKING:
    from ..fields import ConcentrationField
    from ..pdes.base import PDEBase


_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for solvers."""


class SolverBase:
    """Base class for pseudo-spectral solvers with a fixed time step.

    Subclasses implement :meth:`_make_single_step_fixed_dt`, which advances the
    spectral data by one step. They are registered under their class name and, if
    they define one, under their short `name`.
    """

    dt_default: float = 1e-3
    """float: time step used when the caller does not supply one"""

    _subclasses: dict[str, type[SolverBase]] = {}
    """dict: registered solver classes by name"""

    _logger: logging.Logger

    def __init__(self, pde: PDEBase):
        """
        Args:
            pde (:class:`~gaussdiff.pdes.base.PDEBase`):
                The equation whose evolution rate is integrated
        """
        self.pde = pde
        self.info: dict[str, Any] = {"class": type(self).__name__}
        if pde:
            self.info["pde_class"] = type(pde).__name__

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._logger = _base_logger.getChild(cls.__qualname__)

        if isabstract(cls):
            return
        keys = [cls.__name__]
        short_name = getattr(cls, "name", None)
        if short_name:
            keys.append(short_name)
        for key in keys:
            if key in cls._subclasses:
                warnings.warn(f"Solver `{key}` is registered twice", stacklevel=2)
            cls._subclasses[key] = cls

    @classmethod
    def from_name(cls, name: str, pde: PDEBase, **kwargs) -> SolverBase:
        r"""Instantiate a registered solver.

        Args:
            name (str):
                Short name (like `rk4`) or class name of the solver
            pde (:class:`~gaussdiff.pdes.base.PDEBase`):
                The equation that is solved
            \**kwargs:
                Forwarded to the constructor of the solver

        Returns:
            :class:`SolverBase`: the solver instance
        """
        if name not in cls._subclasses:
            short_names = sorted(
                key for key in cls._subclasses if not key.endswith("Solver")
            )
            raise ValueError(
                f"Solver `{name}` is not defined. Choose one of {short_names}"
            )
        return cls._subclasses[name](pde, **kwargs)

    @classproperty
    def registered_solvers(cls) -> list[str]:
        """list of str: all names under which solvers can be created"""
        return sorted(cls._subclasses)

    def _make_single_step_fixed_dt(
        self, state: ConcentrationField, dt: float
    ) -> SingleStepType:
        """Create the function performing one step of size `dt`.

        The function has the signature `(state_spec, t)` and updates `state_spec`,
        the spectral data of the concentration, in place.
        """
        raise NotImplementedError(f"{type(self).__name__} defines no stepping scheme")

    def _make_fixed_stepper(
        self, state: ConcentrationField, dt: float
    ) -> Callable[[np.ndarray, float, int], float]:
        """Create a function applying several steps of size `dt` in a row.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                Template state defining the grid
            dt (float):
                The time step

        Returns:
            Function `(state_spec, t_start, steps)` returning the time reached
        """
        step = self._make_single_step_fixed_dt(state, dt)

        def fixed_stepper(state_spec: np.ndarray, t_start: float, steps: int) -> float:
            for i in range(steps):
                step(state_spec, t_start + i * dt)
            return t_start + steps * dt

        return fixed_stepper

    def make_stepper(
        self, state: ConcentrationField, dt: float | None = None
    ) -> Callable[[ConcentrationField, float, float], float]:
        """Create the function used by the controller to advance a field.

        The returned function transforms the field to spectral space, applies as many
        steps as bring it closest to the requested end time (at least one), and writes
        the result back into the field.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                Template state defining the grid
            dt (float):
                The time step. If omitted, :attr:`dt_default` is used and a warning is
                logged.

        Returns:
            Function `(state, t_start, t_end)` returning the time actually reached
        """
        if dt is None:
            dt = self.dt_default
            self._logger.warning("No time step given; falling back to dt=%g", dt)
        dt = float(dt)
        if not dt > 0:
            raise ValueError(f"Time step must be positive, not {dt}")

        advance = self._make_fixed_stepper(state, dt)
        shape = state.grid.shape
        self.info["dt"] = dt
        self.info["steps"] = 0

        def stepper(state: ConcentrationField, t_start: float, t_end: float) -> float:
            steps = max(1, round((t_end - t_start) / dt))
            data_spec = spectral.to_spectral(state.data)
            t_reached = advance(data_spec, t_start, steps)
            state.data = spectral.to_real(data_spec, shape)
            self.info["steps"] += steps
            return t_reached

        return stepper

    def _make_spectral_rhs(
        self, state: ConcentrationField
    ) -> Callable[[np.ndarray, float], np.ndarray]:
        """Combine the linear and nonlinear parts of the PDE.

        Returns:
            Function `(state_spec, t)` returning the full evolution rate in spectral
            space
        """
        linear = self.pde.make_linear_operator(state)
        nonlinear = self.pde.make_nonlinear_rhs(state)

        if nonlinear is None:
            return lambda state_spec, t: linear * state_spec

        def rhs(state_spec: np.ndarray, t: float) -> np.ndarray:
            return linear * state_spec + nonlinear(state_spec, t)

        return rhs
