"""
Diffusion of a Gaussian profile
===============================

This example diffuses a one-dimensional Gaussian and estimates the diffusivity from
the growth of the second moment of the reordered concentration.
"""

from gaussdiff import run_line_experiment

result = run_line_experiment(diffusivity=0.25, progress=True)
print(f"Estimated diffusivity: {result.diffusivity:.4g} (expected 0.25)")

result.plot()
result.state.plot(
    title="Final concentration",
    sorted_title="Final concentration ordered highest to lowest",
)
