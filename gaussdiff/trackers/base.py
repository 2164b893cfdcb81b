"""Base classes for trackers and the collection handled by the controller.

.. autosummary::
   :nosignatures:

   FinishedSimulation
   TrackerBase
   TrackerCollection
   get_named_trackers
"""

from __future__ import annotations

import logging
import math
from abc import ABCMeta, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Optional, Union

from ..tools.docstrings import fill_in_docstring
from ..tools.misc import module_available
from .interrupts import InterruptData, parse_interrupt

if TYPE_CHECKING:
    from ..fields import ConcentrationField

_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for trackers."""

InfoDict = Optional[dict[str, Any]]
TrackerDataType = Union["TrackerBase", str]


class FinishedSimulation(StopIteration):
    """Raised by a tracker to end a simulation that reached its goal."""


class TrackerBase(metaclass=ABCMeta):
    """Base class for objects analyzing the concentration during a simulation

    Subclasses defining a class attribute `name` can be referenced by that name.
    """

    _logger: logging.Logger
    _subclasses: dict[str, type[TrackerBase]] = {}  # trackers registered by name

    @fill_in_docstring
    def __init__(self, interrupts: InterruptData = 1):
        """
        Args:
            interrupts:
                {ARG_TRACKER_INTERRUPT}
        """
        self.interrupt = parse_interrupt(interrupts)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._logger = _base_logger.getChild(cls.__qualname__)
        name = getattr(cls, "name", None)
        if name is not None:
            if name == "auto":
                raise ValueError("`auto` is reserved for the default trackers")
            cls._subclasses[name] = cls

    @classmethod
    def from_data(cls, data: TrackerDataType, **kwargs) -> TrackerBase:
        """Return a tracker instance described by `data`

        Args:
            data (str or :class:`TrackerBase`):
                A tracker instance, which is returned unchanged, or the name of a
                registered tracker
            **kwargs:
                Arguments for the constructor of a named tracker

        Returns:
            :class:`TrackerBase`: The tracker
        """
        if isinstance(data, TrackerBase):
            return data
        if not isinstance(data, str):
            raise TypeError(f"Cannot create a tracker from `{data!r}`")
        if data not in cls._subclasses:
            names = ", ".join(sorted(cls._subclasses))
            raise ValueError(f"Unknown tracker `{data}`. Named trackers are {names}")
        return cls._subclasses[data](**kwargs)

    def initialize(self, field: ConcentrationField, info: InfoDict = None) -> float:
        """Prepare the tracker before the simulation starts.

        Args:
            field (:class:`~gaussdiff.fields.ConcentrationField`):
                The initial state of the simulation
            info (dict):
                Diagnostic information of the controller, which holds the start time

        Returns:
            float: The first time the tracker needs to handle data
        """
        t_start = 0
        if info is not None:
            t_start = info.get("controller", {}).get("t_start", 0)
        return self.interrupt.initialize(t_start)

    @abstractmethod
    def handle(self, field: ConcentrationField, t: float) -> None:
        """Analyze the current state of the simulation.

        Args:
            field (:class:`~gaussdiff.fields.ConcentrationField`):
                The current state of the simulation
            t (float):
                The associated time
        """

    def finalize(self, info: InfoDict = None) -> None:
        """Clean up after the simulation ended.

        Args:
            info (dict):
                Diagnostic information of the simulation
        """


TrackerCollectionDataType = Union[Sequence[TrackerDataType], TrackerDataType, None]


class TrackerCollection:
    """Several trackers that are handled together

    The collection keeps the next handling time of each tracker, so the controller
    only needs to ask for the earliest one.

    Attributes:
        trackers (list):
            The trackers in the collection
    """

    tracker_action_times: list[float]
    """list: the next time at which each tracker needs to be handled"""
    time_next_action: float
    """float: the earliest of :attr:`tracker_action_times`"""

    def __init__(self, trackers: Iterable[TrackerBase] | None = None):
        """
        Args:
            trackers (list): The trackers that are handled together
        """
        self.trackers: list[TrackerBase] = [] if trackers is None else list(trackers)
        self.tracker_action_times = []
        self.time_next_action = math.inf

    def __len__(self) -> int:
        return len(self.trackers)

    @classmethod
    def from_data(cls, data: TrackerCollectionDataType, **kwargs) -> TrackerCollection:
        """Create a collection from a flexible description of trackers.

        Args:
            data:
                `None` for no trackers, a single tracker or tracker name, or a list of
                them (`None` entries are skipped). The special value `auto` selects
                the progress bar (if :mod:`tqdm` is available) and the consistency
                check.
            **kwargs:
                Arguments for the constructors of named trackers

        Returns:
            :class:`TrackerCollection`: The collection of all trackers
        """
        if isinstance(data, TrackerCollection):
            return data
        if isinstance(data, str) and data == "auto":
            if module_available("tqdm"):
                data = ["progress", "consistency"]
            else:
                data = ["consistency"]

        if data is None:
            items: list = []
        elif isinstance(data, (str, TrackerBase)):
            items = [data]
        elif isinstance(data, (list, tuple)):
            items = [item for item in data if item is not None]
        else:
            raise TypeError(f"Cannot create trackers from `{data.__class__.__name__}`")

        trackers: list[TrackerBase] = []
        for item in items:
            tracker = TrackerBase.from_data(item, **kwargs)
            if any(tracker.interrupt is other.interrupt for other in trackers):
                # interrupts keep state, so every tracker needs its own instance
                tracker.interrupt = tracker.interrupt.copy()
            trackers.append(tracker)
        return cls(trackers)

    def _update_next_action(self) -> float:
        """determine the earliest time at which a tracker needs to be handled"""
        self.time_next_action = min(self.tracker_action_times, default=math.inf)
        return self.time_next_action

    def initialize(self, field: ConcentrationField, info: InfoDict = None) -> float:
        """Prepare all trackers before the simulation starts.

        Args:
            field (:class:`~gaussdiff.fields.ConcentrationField`):
                The initial state of the simulation
            info (dict):
                Diagnostic information of the controller

        Returns:
            float: The first time any tracker needs to handle data
        """
        self.tracker_action_times = [
            tracker.initialize(field, info) for tracker in self.trackers
        ]
        return self._update_next_action()

    def handle(
        self,
        state: ConcentrationField,
        t: float,
        atol: float = 1.0e-8,
        *,
        final: bool = False,
    ) -> float:
        """Handle all trackers that are due at time `t`.

        All due trackers are handled even if one of them stops the simulation, in
        which case its :class:`StopIteration` is raised afterwards.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                The current state of the simulation
            t (float):
                The current time
            atol (float):
                Trackers scheduled within this tolerance after `t` count as due
            final (bool):
                Handle every tracker, so the state at the end of a run is seen by
                all trackers even if `t` is not one of their interrupt times

        Returns:
            float: The next time at which a tracker needs to be handled
        """
        stop: StopIteration | None = None
        for i, tracker in enumerate(self.trackers):
            if not final and t <= self.tracker_action_times[i] - atol:
                continue
            try:
                tracker.handle(state, t)
            except StopIteration as err:
                stop = err
            self.tracker_action_times[i] = tracker.interrupt.next(t)

        if stop is not None:
            raise stop
        return self._update_next_action()

    def finalize(self, info: InfoDict = None) -> None:
        """Finalize all trackers.

        Args:
            info (dict):
                Diagnostic information of the simulation
        """
        for tracker in self.trackers:
            tracker.finalize(info=info)


def get_named_trackers() -> dict[str, type[TrackerBase]]:
    """Return the trackers that can be referenced by name.

    Returns:
        dict: Mapping of names to tracker classes
    """
    return dict(TrackerBase._subclasses)
