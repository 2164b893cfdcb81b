"""
Moments of reordered concentrations
===================================

The reordered moments only depend on the distribution of concentration values and not
on their position. This example compares the moments of a Gaussian blob with those of
the same values shuffled randomly.
"""

import numpy as np

from gaussdiff import PeriodicGrid, area_first_moment, first_moment, gaussian_blob

grid = PeriodicGrid([16, 16], 64)
blob = gaussian_blob(grid, cov=2)

rng = np.random.default_rng(0)
shuffled = rng.permutation(blob.data.ravel())

print("Average area of the blob:", area_first_moment(blob))
print("Average area after shuffling:", first_moment(shuffled, grid.cell_volume))
print("Expected value for an unbounded domain:", 2 * np.pi * 2)

blob.plot(title="Gaussian blob", sorted_title="Sorted concentration")
