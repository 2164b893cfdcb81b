"""Grids define the periodic domains on which the tracer equation is solved.

The domain is centred on the origin and the discretization is uniform along each
axis, which allows evaluating derivatives in Fourier space.

.. autosummary::
   :nosignatures:

   ~periodic.PeriodicGrid
"""

from .base import DimensionError  # noqa: F401
from .periodic import PeriodicGrid  # noqa: F401

__all__ = ["DimensionError", "PeriodicGrid"]
