"""
Package containing several tools required in gaussdiff

.. autosummary::
   :nosignatures:

   config
   docstrings
   expressions
   misc
   numba
   output
   spectral
   typing
"""
