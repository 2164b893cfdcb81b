"""Functions for working with fields in spectral space on periodic grids.

All transforms use the real-to-complex layout of :func:`numpy.fft.rfftn`, where the
last axis only stores non-negative wave numbers.

.. autosummary::
   :nosignatures:

   wave_numbers
   dealias_mask
   to_spectral
   to_real
"""

from __future__ import annotations

import logging

import numpy as np

from .typing import NumberOrArray

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger instance."""


def wave_numbers(
    shape: tuple[int, ...], discretization: NumberOrArray = 1.0
) -> tuple[np.ndarray, ...]:
    """Return the angular wave numbers associated with a real Fourier transform.

    Args:
        shape (tuple of ints):
            Number of supports points in each spatial dimension. The number of the list
            defines the spatial dimension.
        discretization (float or list of floats):
            Discretization along each dimension. A uniform discretization in each
            direction can be indicated by a single number.

    Returns:
        tuple: One array per axis. The arrays are shaped such that they broadcast
        against the spectral representation of a field.
    """
    dim = len(shape)
    dx_arr = np.broadcast_to(discretization, (dim,))

    ks = []
    for i in range(dim):
        if i == dim - 1:
            k = 2 * np.pi * np.fft.rfftfreq(shape[i], dx_arr[i])
        else:
            k = 2 * np.pi * np.fft.fftfreq(shape[i], dx_arr[i])
        # orient the wave numbers along axis `i`
        k_shape = [1] * dim
        k_shape[i] = len(k)
        ks.append(k.reshape(k_shape))
    return tuple(ks)


def dealias_mask(
    shape: tuple[int, ...], discretization: NumberOrArray = 1.0, fraction: float = 2 / 3
) -> np.ndarray:
    """Return a boolean mask selecting modes that are kept after dealiasing.

    Modes are kept when the magnitude of their wave number along every axis is below
    `fraction` times the Nyquist wave number of that axis.

    Args:
        shape (tuple of ints):
            Number of supports points in each spatial dimension
        discretization (float or list of floats):
            Discretization along each dimension
        fraction (float):
            The fraction of the Nyquist wave number that is retained

    Returns:
        :class:`~numpy.ndarray`: boolean array in the spectral layout
    """
    if not 0 < fraction <= 1:
        raise ValueError(f"Dealias fraction must be in (0, 1], not {fraction}")
    dim = len(shape)
    dx_arr = np.broadcast_to(discretization, (dim,))

    mask = np.array(True)
    for k, dx in zip(wave_numbers(shape, discretization), dx_arr):
        k_nyquist = np.pi / dx
        mask = mask & (np.abs(k) < fraction * k_nyquist)
    return mask


def to_spectral(data: np.ndarray) -> np.ndarray:
    """Transform real data into spectral space."""
    return np.fft.rfftn(data)


def to_real(data_spec: np.ndarray, shape: tuple[int, ...]) -> np.ndarray:
    """Transform spectral data back into real space.

    Args:
        data_spec (:class:`~numpy.ndarray`):
            The spectral representation
        shape (tuple of ints):
            The shape of the data in real space, which cannot be inferred uniquely
            from the spectral representation
    """
    return np.fft.irfftn(data_spec, s=shape, axes=tuple(range(len(shape))))
