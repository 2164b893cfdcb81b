"""Base class for defining partial differential equations solved pseudo-spectrally."""

from __future__ import annotations

import copy
import logging
from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

if TYPE_CHECKING:
    from ..fields import ConcentrationField
    from ..solvers.base import SolverBase
    from ..solvers.controller import TRangeType
    from ..trackers.base import TrackerCollectionDataType

_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for PDEs."""


class PDEBase(metaclass=ABCMeta):
    """Base class for partial differential equations on periodic grids

    Subclasses split the evolution rate into a diagonal linear operator in spectral
    space, returned by :meth:`make_linear_operator`, and a remainder, returned by
    :meth:`make_nonlinear_rhs`. The solvers defined in :mod:`~gaussdiff.solvers`
    combine both parts.
    """

    diagnostics: dict[str, Any]
    """dict: information about the last call of :meth:`solve`"""

    _logger: logging.Logger

    def __init__(self):
        self.diagnostics = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._logger = _base_logger.getChild(cls.__qualname__)

    @abstractmethod
    def make_linear_operator(self, state: ConcentrationField) -> np.ndarray:
        """Return the eigenvalues of the linear operator in spectral space.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                Template state defining the grid

        Returns:
            :class:`~numpy.ndarray`: Array with the shape of the spectral data
        """

    def make_nonlinear_rhs(
        self, state: ConcentrationField
    ) -> Callable[[np.ndarray, float], np.ndarray] | None:
        """Return a function evaluating the remaining terms in spectral space.

        Linear equations return `None`, which lets solvers skip the evaluation.
        """
        return None

    @abstractmethod
    def evolution_rate(
        self, state: ConcentrationField, t: float = 0
    ) -> ConcentrationField:
        """Evaluate the full right hand side in real space.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                The concentration at time `t`
            t (float):
                The time point

        Returns:
            :class:`~gaussdiff.fields.ConcentrationField`: the rate of change
        """

    def _make_solver(self, solver: str | type[SolverBase], **kwargs) -> SolverBase:
        """Create the solver instance used by :meth:`solve`."""
        from ..solvers.base import SolverBase

        if isinstance(solver, str):
            return SolverBase.from_name(solver, pde=self, **kwargs)
        if isinstance(solver, type) and issubclass(solver, SolverBase):
            return solver(self, **kwargs)
        if isinstance(solver, SolverBase):
            raise TypeError("Pass the solver class or its name, not an instance")
        raise TypeError(f"Cannot use {solver!r} as a solver")

    def solve(
        self,
        state: ConcentrationField,
        t_range: TRangeType,
        dt: float | None = None,
        tracker: TrackerCollectionDataType = "auto",
        *,
        solver: str | type[SolverBase] = "rk4",
        ret_info: bool = False,
        **kwargs,
    ) -> ConcentrationField | tuple[ConcentrationField, dict[str, Any]]:
        r"""Integrate the equation starting from `state`.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                Initial concentration. It is not modified.
            t_range (float or tuple):
                Either `(t_start, t_end)` or only `t_end`, in which case the
                simulation starts at zero.
            dt (float):
                The fixed time step. The solver default is used if omitted.
            tracker:
                Tracker, tracker name, or list of those that observe the simulation.
                The names are listed by
                :func:`~gaussdiff.trackers.base.get_named_trackers`. The default `auto`
                shows a progress bar and checks the state for invalid values.
            solver (str or type):
                Name of a registered solver (see
                :func:`~gaussdiff.solvers.registered_solvers`) or a subclass of
                :class:`~gaussdiff.solvers.base.SolverBase`
            ret_info (bool):
                Whether to also return a copy of :attr:`diagnostics`
            \**kwargs:
                Forwarded to the constructor of the solver

        Returns:
            :class:`~gaussdiff.fields.ConcentrationField`: the final state, or a tuple
            of the final state and the diagnostics if `ret_info` is set
        """
        from ..solvers import Controller

        controller = Controller(
            self._make_solver(solver, **kwargs), t_range=t_range, tracker=tracker
        )
        try:
            result = controller.run(state, dt)
        finally:
            self.diagnostics.update(controller.diagnostics)

        if ret_info:
            return result, copy.deepcopy(self.diagnostics)
        return result
