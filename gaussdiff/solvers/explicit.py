"""Defines explicit solvers acting on the spectral representation of the state.

.. autosummary::
   :nosignatures:

   EulerSolver
   RungeKuttaSolver
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import SolverBase

if TYPE_CHECKING:
    from ..fields import ConcentrationField
    from ..tools.typing import SingleStepType


class EulerSolver(SolverBase):
    """Explicit Euler solver."""

    name = "euler"

    def _make_single_step_fixed_dt(
        self, state: ConcentrationField, dt: float
    ) -> SingleStepType:
        """Make a simple Euler stepper with fixed time step.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                An example for the state from which the grid and other information can
                be extracted
            dt (float):
                Time step of the explicit stepping.
        """
        self.info["scheme"] = "euler"
        rhs = self._make_spectral_rhs(state)

        def stepper(state_spec: np.ndarray, t: float) -> None:
            """Perform a single Euler step."""
            state_spec += dt * rhs(state_spec, t)

        self._logger.info("Init explicit Euler stepper with dt=%g", dt)
        return stepper


class RungeKuttaSolver(SolverBase):
    """Classical fourth-order Runge-Kutta solver."""

    name = "rk4"

    def _make_single_step_fixed_dt(
        self, state: ConcentrationField, dt: float
    ) -> SingleStepType:
        """Make a fourth-order Runge-Kutta stepper with fixed time step.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                An example for the state from which the grid and other information can
                be extracted
            dt (float):
                Time step of the explicit stepping.
        """
        self.info["scheme"] = "runge-kutta"
        rhs = self._make_spectral_rhs(state)

        def stepper(state_spec: np.ndarray, t: float) -> None:
            """Perform a single Runge-Kutta step."""
            k1 = rhs(state_spec, t)
            k2 = rhs(state_spec + 0.5 * dt * k1, t + 0.5 * dt)
            k3 = rhs(state_spec + 0.5 * dt * k2, t + 0.5 * dt)
            k4 = rhs(state_spec + dt * k3, t + dt)
            state_spec += dt / 6 * (k1 + 2 * k2 + 2 * k3 + k4)

        self._logger.info("Init explicit Runge-Kutta stepper with dt=%g", dt)
        return stepper
