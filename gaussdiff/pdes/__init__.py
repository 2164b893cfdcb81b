"""
Package that defines the partial differential equations solved by gaussdiff.

.. autosummary::
   :nosignatures:

   ~tracer.TracerAdvectionDiffusionPDE

Additional equations can be defined by subclassing :class:`~base.PDEBase`.
"""

from .base import PDEBase
from .tracer import TracerAdvectionDiffusionPDE

__all__ = ["PDEBase", "TracerAdvectionDiffusionPDE"]
