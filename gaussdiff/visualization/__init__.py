"""
Functions and classes for visualizing simulations.

.. autosummary::
   :nosignatures:

   ~plotting.plot_concentration
   ~plotting.update_concentration_plot
   ~plotting.plot_moment_growth
   ~movies.Movie
"""

from .movies import Movie
from .plotting import plot_concentration, plot_moment_growth, update_concentration_plot

__all__ = [
    "Movie",
    "plot_concentration",
    "plot_moment_growth",
    "update_concentration_plot",
]
