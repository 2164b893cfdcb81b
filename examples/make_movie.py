"""
Create a movie
==============

This example creates a movie of a diffusing Gaussian blob together with its sorted
concentration, which is only possible if `ffmpeg` is installed in a standard location.
"""

from gaussdiff import (
    PeriodicGrid,
    PlotTracker,
    TracerAdvectionDiffusionPDE,
    gaussian_blob,
)

grid = PeriodicGrid([16, 16], 32)
state = gaussian_blob(grid)

tracker = PlotTracker(interrupts=0.1, movie="gaussian_blob.mp4")
eq = TracerAdvectionDiffusionPDE(diffusivity=0.25)
eq.solve(state, t_range=2, dt=0.002, tracker=tracker)
