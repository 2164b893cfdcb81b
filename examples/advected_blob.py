"""
Diffusion in a shear flow
=========================

A Gaussian blob is advected by a steady shear flow while it diffuses. Stretching by the
flow increases the area enclosed by the concentration contours faster than diffusion
alone.
"""

from gaussdiff import (
    MomentTracker,
    PeriodicGrid,
    TracerAdvectionDiffusionPDE,
    diffusivity_constant,
    gaussian_blob,
)

grid = PeriodicGrid([16, 16], 64)
state = gaussian_blob(grid)

results = {}
for velocity in [None, ["sin(2 * pi * y / 16)", 0]]:
    eq = TracerAdvectionDiffusionPDE(diffusivity=0.25, velocity=velocity)
    tracker = MomentTracker(order=1, interrupts=0.5)
    eq.solve(state, t_range=5, dt=0.01, tracker=["progress", tracker], solver="etdrk4")
    results[str(velocity)] = tracker.estimate_diffusivity(diffusivity_constant("blob"))

for velocity, diffusivity in results.items():
    print(f"velocity={velocity}: effective diffusivity {diffusivity:.4g}")
