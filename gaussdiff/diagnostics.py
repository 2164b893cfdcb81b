r'''
Reordered-concentration diagnostics for estimating diffusivities

The concentration values of a field are sorted from highest to lowest, so that
each value gets associated with a cumulative length (one dimension) or area (two
dimensions). Weighting the sorted values by powers of their rank gives moments of
this cumulative quantity,

.. math::
    M_p = \frac{\Delta^p \sum_{k=1}^{N} k^p C_k}{\sum_{k=1}^{N} C_k} \;,

where :math:`C_k` is the :math:`k`-th largest value and :math:`\Delta` is the
length or area of a grid cell. For diffusing Gaussians these moments grow
linearly in time, which yields the diffusivity :math:`K` from

.. math::
    K = \frac{M(t_\mathrm{last}) - M(t_\mathrm{first})}
        {c \, (t_\mathrm{last} - t_\mathrm{first})}

with a geometric constant :math:`c` given by :func:`diffusivity_constant`.

.. autosummary::
   :nosignatures:

   sorted_concentration
   reordered_moment
   first_moment
   second_moment
   length_second_moment
   area_first_moment
   area_second_moment
   diffusivity_constant
   estimate_diffusivity
'''

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal

import numpy as np

from .tools.docstrings import fill_in_docstring
from .tools.numba import jit

if TYPE_CHECKING:
    from .fields import ConcentrationField

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for diagnostics."""

GeometryType = Literal["line", "blob", "band"]


@jit
def _rank_weighted_sum(values: np.ndarray, order: int) -> float:
    """sum of `values` weighted by their one-based rank raised to `order`"""
    result = 0.0
    for i in range(values.size):
        result += (i + 1) ** order * values[i]
    return result


def sorted_concentration(values: np.ndarray) -> np.ndarray:
    """Return the flattened values ordered from highest to lowest.

    Args:
        values (:class:`~numpy.ndarray`):
            Concentration values of arbitrary shape

    Returns:
        :class:`~numpy.ndarray`: A contiguous one-dimensional array
    """
    arr = np.asarray(values, dtype=np.double).ravel()
    return np.ascontiguousarray(np.sort(arr)[::-1])


@fill_in_docstring
def reordered_moment(values: np.ndarray, spacing: float, order: int) -> float:
    """Moment of the cumulative length or area of the reordered concentration

    Args:
        values (:class:`~numpy.ndarray`):
            Concentration values. The array is flattened, so the input order (and
            shape) does not affect the result.
        spacing (float):
            The length or area :math:`\\Delta` associated with a single value
        order (int):
            {ARG_MOMENT_ORDER}

    Returns:
        float: The moment normalized by the total concentration. An all-zero or empty
        array raises :class:`ZeroDivisionError`.
    """
    if int(order) != order or order < 1:
        raise ValueError(f"`order` must be a positive integer, not {order}")
    order = int(order)

    sorted_values = sorted_concentration(values)
    weighted = spacing**order * _rank_weighted_sum(sorted_values, order)
    total = sorted_values.sum()
    return float(weighted) / float(total)


def first_moment(values: np.ndarray, spacing: float) -> float:
    """Reordered first moment, i.e., :func:`reordered_moment` with `order=1`"""
    return reordered_moment(values, spacing, order=1)


def second_moment(values: np.ndarray, spacing: float) -> float:
    """Reordered second moment, i.e., :func:`reordered_moment` with `order=2`"""
    return reordered_moment(values, spacing, order=2)


def length_second_moment(field: ConcentrationField) -> float:
    """Second moment of the cumulative length of a one-dimensional profile

    The cell length is the domain length divided by the number of support points
    along the first axis.

    Args:
        field (:class:`~gaussdiff.fields.ConcentrationField`):
            The concentration field

    Returns:
        float: The estimate of :math:`\\sigma_l^2`, which grows as :math:`8Kt`
    """
    grid = field.grid
    dl = grid.lengths[0] / grid.shape[0]
    return second_moment(field.data, dl)


def area_first_moment(field: ConcentrationField) -> float:
    """Average cumulative area of a two-dimensional blob

    Args:
        field (:class:`~gaussdiff.fields.ConcentrationField`):
            The concentration field

    Returns:
        float: The estimate of :math:`\\langle A \\rangle`, which grows as
        :math:`4 \\pi K t`
    """
    return first_moment(field.data, field.grid.cell_volume)


def area_second_moment(field: ConcentrationField) -> float:
    """Second moment of the cumulative area of a two-dimensional band

    Args:
        field (:class:`~gaussdiff.fields.ConcentrationField`):
            The concentration field

    Returns:
        float: The estimate of :math:`\\sigma_A^2`, which grows as
        :math:`8 L_x^2 K t`
    """
    return second_moment(field.data, field.grid.cell_volume)


def diffusivity_constant(geometry: GeometryType, length: float = 1) -> float:
    """Return the factor relating the growth rate of a moment to the diffusivity

    Args:
        geometry (str):
            `line` for the second moment of a one-dimensional profile, `blob` for the
            first moment of a two-dimensional blob, and `band` for the second moment
            of a two-dimensional band.
        length (float):
            The length of the band along its constant direction. Only used for the
            `band` geometry.

    Returns:
        float: The constant :math:`c` in :math:`dM/dt = c K`
    """
    if geometry == "line":
        return 8.0
    elif geometry == "blob":
        return 4 * math.pi
    elif geometry == "band":
        return 8.0 * length**2
    else:
        raise ValueError(
            f"Unknown geometry `{geometry}`. Valid values are `line`, `blob`, and "
            "`band`"
        )


def estimate_diffusivity(
    times: Sequence[float] | np.ndarray,
    moments: Sequence[float] | np.ndarray,
    constant: float,
) -> float:
    """Estimate the diffusivity from a time series of a moment

    The estimate only uses the first and the last entry of the series and thus
    assumes that the moment grows linearly over the whole interval. The quality of a
    linear fit is not checked.

    Args:
        times (list of float):
            The times at which the moment was recorded
        moments (list of float):
            The recorded values of the moment
        constant (float):
            The geometric factor, e.g., obtained from :func:`diffusivity_constant`

    Returns:
        float: The estimated diffusivity
    """
    if len(times) != len(moments):
        raise ValueError(
            f"Got {len(times)} times, but {len(moments)} values of the moment"
        )
    if len(times) < 2:
        raise ValueError("Estimating a diffusivity requires at least two records")

    d_moment = float(moments[-1]) - float(moments[0])
    d_time = float(times[-1]) - float(times[0])
    diffusivity = d_moment / (constant * d_time)
    _logger.debug(
        "Moment changed by %g in %g time units => K=%g", d_moment, d_time, diffusivity
    )
    return diffusivity


__all__ = [
    "area_first_moment",
    "area_second_moment",
    "diffusivity_constant",
    "estimate_diffusivity",
    "first_moment",
    "length_second_moment",
    "reordered_moment",
    "second_moment",
    "sorted_concentration",
]
