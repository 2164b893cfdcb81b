"""Just-in-time compilation of numerical kernels with numba.

.. autosummary::
   :nosignatures:

   numba_environment
   jit
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import numba as nb
from numba.extending import is_jitted

from .. import config

TFunc = TypeVar("TFunc", bound=Callable)

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""

# fastmath flags that keep the detection of infinities and NaN values intact
FASTMATH_FLAGS = {"nsz", "arcp", "contract", "afn", "reassoc"}


def numba_environment() -> dict[str, Any]:
    """Report the numba version and the settings used for compiling kernels.

    Returns:
        dict: version, configuration flags, and threading of numba
    """
    return {
        "version": nb.__version__,
        "debug": config["numba.debug"],
        "fastmath": config["numba.fastmath"],
        "jit_disabled": bool(nb.config.DISABLE_JIT),
        "num_threads": nb.config.NUMBA_NUM_THREADS,
    }


def jit(function: TFunc, signature=None, **kwargs) -> TFunc:
    """Compile a function in nopython mode using the package configuration

    The configuration values `numba.fastmath` and `numba.debug` set the defaults of
    the respective compiler flags. Functions that are already compiled are returned
    unchanged.

    Args:
        function: The python function to compile
        signature: Optional signature enabling eager compilation
        **kwargs: Additional arguments of :func:`numba.jit`

    Returns:
        The dispatcher of the compiled function
    """
    if is_jitted(function):
        return function

    kwargs.setdefault(
        "fastmath", FASTMATH_FLAGS if config["numba.fastmath"] is True else False
    )
    kwargs.setdefault("debug", config["numba.debug"])
    kwargs.setdefault("nopython", True)

    _logger.debug("Compile `%s`", getattr(function, "__name__", function))
    return nb.jit(signature, **kwargs)(function)  # type: ignore
