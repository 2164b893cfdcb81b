"""
Diffusion of a Gaussian band
============================

A band spanning the periodic domain along `x` only spreads along `y`. The second
moment of the cumulative area grows as :math:`8 L_x^2 K t`, where :math:`L_x` is the
length of the band.
"""

from gaussdiff import run_band_experiment

for nx in [16, 32, 64]:
    result = run_band_experiment(nx=nx, nsteps=2000)
    print(f"nx={nx:3d}: K={result.diffusivity:.4g}, error={result.relative_error:.2%}")
