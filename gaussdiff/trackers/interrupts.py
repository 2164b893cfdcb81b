"""Schedules deciding when a tracker analyzes the running simulation.

Each schedule returns the first time a tracker is due when the simulation starts and
the following time whenever the tracker has been handled:

.. autosummary::
   :nosignatures:

   ConstantInterrupts
   FixedInterrupts
   RealtimeInterrupts
   parse_interrupt
"""

from __future__ import annotations

import copy
import math
import time
from abc import ABCMeta, abstractmethod
from collections.abc import Sequence
from typing import Union

import numpy as np


class InterruptsBase(metaclass=ABCMeta):
    """Base class of schedules for trackers."""

    dt: float
    """float: the interval between the last two interrupts"""

    def copy(self):
        """return an independent copy of the schedule"""
        return copy.copy(self)

    @abstractmethod
    def initialize(self, t: float) -> float:
        """Start the schedule.

        Args:
            t (float): The start time of the simulation

        Returns:
            float: The first time at which the simulation is interrupted
        """

    @abstractmethod
    def next(self, t: float) -> float:
        """Advance the schedule.

        Args:
            t (float):
                The current time of the simulation. Interrupts before this time are
                skipped.

        Returns:
            float: The next time at which the simulation is interrupted
        """


class FixedInterrupts(InterruptsBase):
    """Interrupts at a given list of times

    Once all times have passed, the schedule never interrupts again.
    """

    def __init__(self, interrupts: np.ndarray | Sequence[float]):
        """
        Args:
            interrupts (list of float):
                The ascending times at which the simulation is interrupted
        """
        self.interrupts = np.atleast_1d(np.asarray(interrupts, dtype=np.double))
        if self.interrupts.ndim != 1:
            raise ValueError("`interrupts` must be a 1d sequence")
        self._index = -1
        self._t_start = 0.0

    def __repr__(self):
        return f"{self.__class__.__name__}(interrupts={self.interrupts})"

    def copy(self):
        return self.__class__(self.interrupts.copy())

    def initialize(self, t: float) -> float:
        self._index = -1
        self._t_start = t
        return self.next(t)

    def next(self, t: float) -> float:
        index = max(self._index + 1, int(np.searchsorted(self.interrupts, t)))
        if index >= len(self.interrupts):
            return math.inf

        t_next = float(self.interrupts[index])
        if self._index < 0:
            self.dt = t_next - self._t_start
        else:
            self.dt = t_next - float(self.interrupts[self._index])
        self._index = index
        return t_next


class ConstantInterrupts(InterruptsBase):
    """Interrupts separated by a constant interval of simulation time."""

    def __init__(self, dt: float = 1, t_start: float | None = None):
        """
        Args:
            dt (float):
                The interval between interrupts in simulation time units
            t_start (float, optional):
                The time of the first interrupt. If omitted, the first interrupt
                happens when the simulation starts.
        """
        if dt <= 0:
            raise ValueError(f"Interrupt interval must be positive, not {dt}")
        self.dt = float(dt)
        self.t_start = None if t_start is None else float(t_start)
        self._t_next = math.nan

    def __repr__(self):
        return f"{self.__class__.__name__}(dt={self.dt:g}, t_start={self.t_start})"

    def initialize(self, t: float) -> float:
        self._t_next = t if self.t_start is None else max(t, self.t_start)
        return self._t_next

    def next(self, t: float) -> float:
        t_next = self._t_next + self.dt
        if t_next < t:
            # skip interrupts that were missed
            t_next += self.dt * math.ceil((t - t_next) / self.dt)
            if t_next < t:  # rounding errors
                t_next += self.dt
        self._t_next = t_next
        return t_next


class RealtimeInterrupts(ConstantInterrupts):
    """Interrupts approximately separated by a constant interval of wall-clock time

    The interval in simulation time is adapted after every interrupt, so the actual
    spacing depends on `dt_initial` and on how steadily the simulation progresses.
    """

    def __init__(self, duration: float, dt_initial: float = 0.01):
        """
        Args:
            duration (float):
                The targeted interval between interrupts in seconds
            dt_initial (float):
                The first interval in simulation time units
        """
        super().__init__(dt=dt_initial)
        self.duration = float(duration)
        self._last_time: float | None = None

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(duration={self.duration:g}, "
            f"dt_initial={self.dt:g})"
        )

    def initialize(self, t: float) -> float:
        self._last_time = time.monotonic()
        return super().initialize(t)

    def next(self, t: float) -> float:
        now = time.monotonic()
        if self._last_time is not None:
            elapsed = now - self._last_time
            if elapsed > 0:
                # smooth the new interval with a geometric mean
                dt_target = max(1e-3, self.dt * self.duration / elapsed)
                self.dt = math.sqrt(self.dt * dt_target)
            else:
                self.dt *= 2
        self._last_time = now
        return super().next(t)


InterruptData = Union[InterruptsBase, int, float, str, Sequence[float], np.ndarray]


def parse_interrupt(data: InterruptData) -> InterruptsBase:
    """Create a schedule from a short description.

    Args:
        data (str or number or list or :class:`InterruptsBase`):
            A schedule is returned unchanged. A number sets the interval of
            :class:`ConstantInterrupts`, a string holding a number sets the duration
            in seconds of :class:`RealtimeInterrupts`, and a sequence of times
            defines :class:`FixedInterrupts`.

    Returns:
        :class:`InterruptsBase`: The schedule
    """
    if isinstance(data, InterruptsBase):
        return data
    if isinstance(data, (int, float, np.number)):
        return ConstantInterrupts(float(data))
    if isinstance(data, str):
        try:
            return RealtimeInterrupts(float(data))
        except ValueError as err:
            raise ValueError(f"Could not interpret `{data}` as interrupt") from err
    if isinstance(data, (Sequence, np.ndarray)):
        return FixedInterrupts(data)
    raise TypeError(f"Cannot parse interrupt data `{data}`")
