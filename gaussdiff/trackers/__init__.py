"""
Classes for tracking simulation results in controlled interrupts

Trackers are classes that periodically receive the state of the simulation to analyze,
store, or output it. The trackers defined in this module are:

.. autosummary::
   :nosignatures:

   ~trackers.CallbackTracker
   ~trackers.ProgressTracker
   ~trackers.ConsistencyTracker
   ~trackers.DataTracker
   ~trackers.MomentTracker
   ~trackers.PlotTracker

Some trackers can also be referenced by name for convenience when using them in
simulations. The list of supported names is returned by
:func:`~gaussdiff.trackers.base.get_named_trackers`.

For each tracker, the times at which it is called can be decided using one of the
following classes, which determine when the simulation will be interrupted:

.. autosummary::
   :nosignatures:

   ~interrupts.FixedInterrupts
   ~interrupts.ConstantInterrupts
   ~interrupts.RealtimeInterrupts
   ~interrupts.parse_interrupt
"""

from .base import FinishedSimulation, TrackerCollection, get_named_trackers
from .interrupts import (
    ConstantInterrupts,
    FixedInterrupts,
    RealtimeInterrupts,
    parse_interrupt,
)
from .trackers import *
from .trackers import __all__ as _trackers_all

__all__ = [
    "ConstantInterrupts",
    "FinishedSimulation",
    "FixedInterrupts",
    "RealtimeInterrupts",
    "TrackerCollection",
    "get_named_trackers",
    "parse_interrupt",
] + _trackers_all
