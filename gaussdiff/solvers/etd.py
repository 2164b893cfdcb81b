r"""Defines an exponential time differencing solver.

The solver integrates the stiff linear part of the equation exactly and treats the
nonlinear part with a fourth-order Runge-Kutta scheme (ETDRK4) following Cox and
Matthews (2002). The coefficients of the scheme are evaluated with the contour
integrals suggested by Kassam and Trefethen (2005) to avoid cancellation errors for
small eigenvalues of the linear operator.

.. autosummary::
   :nosignatures:

   etdrk4_coefficients
   ETDRK4Solver
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import SolverBase

if TYPE_CHECKING:
    from ..fields import ConcentrationField
    from ..tools.typing import SingleStepType


def etdrk4_coefficients(
    linear: np.ndarray, dt: float, contour_points: int = 32
) -> dict[str, np.ndarray]:
    """Calculate the coefficients of the ETDRK4 scheme

    Args:
        linear (:class:`~numpy.ndarray`):
            The real eigenvalues of the diagonal linear operator
        dt (float):
            The time step
        contour_points (int):
            The number of points on the contour in the complex plane

    Returns:
        dict: The propagators `E` and `E2` for a full and a half time step together
        with the coefficients `Q`, `f1`, `f2`, and `f3`
    """
    hL = dt * np.asarray(linear, dtype=np.double)
    # points on the upper half of the unit circle; the real part of the mean over the
    # half circle equals the mean over the full circle
    j = np.arange(1, contour_points + 1)
    roots = np.exp(1j * np.pi * (j - 0.5) / contour_points)
    LR = hL[..., np.newaxis] + roots
    exp_LR = np.exp(LR)

    def contour_mean(values: np.ndarray) -> np.ndarray:
        return dt * np.real(np.mean(values, axis=-1))

    return {
        "E": np.exp(hL),
        "E2": np.exp(hL / 2),
        "Q": contour_mean((np.exp(LR / 2) - 1) / LR),
        "f1": contour_mean((-4 - LR + exp_LR * (4 - 3 * LR + LR**2)) / LR**3),
        "f2": contour_mean((2 + LR + exp_LR * (LR - 2)) / LR**3),
        "f3": contour_mean((-4 - 3 * LR - LR**2 + exp_LR * (4 - LR)) / LR**3),
    }


class ETDRK4Solver(SolverBase):
    """Exponential time differencing solver of fourth order

    The diffusive part is integrated exactly, so pure diffusion problems are solved
    without time discretization errors.
    """

    name = "etdrk4"

    def __init__(self, pde, *, contour_points: int = 32):
        """
        Args:
            pde (:class:`~gaussdiff.pdes.base.PDEBase`):
                The partial differential equation that should be solved
            contour_points (int):
                The number of points used to evaluate the coefficients
        """
        super().__init__(pde)
        self.contour_points = contour_points

    def _make_single_step_fixed_dt(
        self, state: ConcentrationField, dt: float
    ) -> SingleStepType:
        """Make an ETDRK4 stepper with fixed time step.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                An example for the state from which the grid and other information can
                be extracted
            dt (float):
                Time step of the stepping.
        """
        self.info["scheme"] = "etdrk4"
        linear = self.pde.make_linear_operator(state)
        nonlinear = self.pde.make_nonlinear_rhs(state)
        coeffs = etdrk4_coefficients(linear, dt, self.contour_points)
        E, E2, Q = coeffs["E"], coeffs["E2"], coeffs["Q"]
        f1, f2, f3 = coeffs["f1"], coeffs["f2"], coeffs["f3"]

        if nonlinear is None:

            def stepper(state_spec: np.ndarray, t: float) -> None:
                """Propagate the linear equation exactly."""
                state_spec *= E

        else:

            def stepper(state_spec: np.ndarray, t: float) -> None:
                """Perform a single ETDRK4 step."""
                Nv = nonlinear(state_spec, t)
                a = E2 * state_spec + Q * Nv
                Na = nonlinear(a, t + dt / 2)
                b = E2 * state_spec + Q * Na
                Nb = nonlinear(b, t + dt / 2)
                c = E2 * a + Q * (2 * Nb - Nv)
                Nc = nonlinear(c, t + dt)
                state_spec *= E
                state_spec += Nv * f1 + 2 * (Na + Nb) * f2 + Nc * f3

        self._logger.info("Init ETDRK4 stepper with dt=%g", dt)
        return stepper
