"""
Defines the tracer concentration field and Gaussian initial conditions.

.. autosummary::
   :nosignatures:

   ~scalar.ConcentrationField
   ~gaussians.gaussian_line
   ~gaussians.gaussian_blob
   ~gaussians.gaussian_band
"""

from .gaussians import gaussian_band, gaussian_blob, gaussian_line
from .scalar import ConcentrationField

__all__ = ["ConcentrationField", "gaussian_band", "gaussian_blob", "gaussian_line"]
