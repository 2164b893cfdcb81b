"""
Diffusion of a Gaussian blob
============================

An isotropic Gaussian blob spreads in two dimensions. The average area enclosed by
the contours of the concentration grows as :math:`4 \\pi K t`.
"""

from gaussdiff import run_blob_experiment

result = run_blob_experiment(diffusivity=0.25, solver="etdrk4")
print(f"Estimated diffusivity: {result.diffusivity:.4g} (expected 0.25)")
result.plot()
