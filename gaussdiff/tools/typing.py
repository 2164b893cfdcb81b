"""Provides support for mypy type checking of the package."""

from __future__ import annotations

from typing import Callable, Union

import numpy as np

# a number or an array of numbers, e.g., the data of a field
NumberOrArray = Union[int, float, np.number, np.ndarray]

# a function advancing spectral data in place by a single time step
SingleStepType = Callable[[np.ndarray, float], None]
