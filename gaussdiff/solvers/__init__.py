"""Solvers define how a PDE is solved, i.e., how the initial state is advanced in time.

.. autosummary::
   :nosignatures:

   ~controller.Controller
   ~explicit.EulerSolver
   ~explicit.RungeKuttaSolver
   ~etd.ETDRK4Solver
   registered_solvers
"""

from .base import SolverBase
from .controller import Controller
from .etd import ETDRK4Solver
from .explicit import EulerSolver, RungeKuttaSolver


def registered_solvers() -> list[str]:
    """Returns all short names of the registered solvers.

    Returns:
        list of str: The names that can be passed to
        :meth:`~gaussdiff.solvers.base.SolverBase.from_name`
    """
    return [
        name for name in SolverBase.registered_solvers if not name.endswith("Solver")
    ]


__all__ = [
    "Controller",
    "ETDRK4Solver",
    "EulerSolver",
    "RungeKuttaSolver",
    "SolverBase",
    "registered_solvers",
]
