"""Defines the controller running a simulation from a start to an end time.

The controller alternates between advancing the state with a solver and handing the
state to trackers. It records how the run ended and how long each part took in
:attr:`Controller.diagnostics`.
"""

from __future__ import annotations

import datetime
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Union

from ..trackers.base import (
    FinishedSimulation,
    TrackerCollection,
    TrackerCollectionDataType,
)
from .base import SolverBase

if TYPE_CHECKING:
    from ..fields import ConcentrationField

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for controller."""

TRangeType = Union[float, tuple[float, float]]


class Controller:
    """Runs a solver over a time interval and handles the trackers

    Trackers are handled when the run starts, whenever one of them requests it, and
    once more when the final time is reached. A tracker raising :class:`StopIteration`
    ends the run early, which counts as a success only for
    :class:`~gaussdiff.trackers.base.FinishedSimulation`. A :class:`KeyboardInterrupt`
    ends the run gracefully, while any other exception propagates after the current
    state has been stored in :attr:`diagnostics`.
    """

    diagnostics: dict[str, Any]
    """dict: diagnostic information (available after simulation finished)"""

    _get_current_time: Callable = time.process_time
    """callable: clock used to profile the solver and the trackers"""

    def __init__(
        self,
        solver: SolverBase,
        t_range: TRangeType,
        tracker: TrackerCollectionDataType = "auto",
    ):
        """
        Args:
            solver (:class:`~gaussdiff.solvers.base.SolverBase`):
                Solver advancing the concentration in time
            t_range (float or tuple):
                The time interval of the simulation. A single value `t_end` stands for
                the interval `[0, t_end]`.
            tracker:
                Trackers analyzing the state during the run. Trackers can be given as
                instances of :class:`~gaussdiff.trackers.base.TrackerBase`, as names
                listed by :func:`~gaussdiff.trackers.base.get_named_trackers`, or as a
                list of both. The default `auto` shows a progress bar and checks that
                the concentration stays finite.
        """
        from .. import __version__

        self.solver = solver
        self.t_range = t_range  # type: ignore
        self.trackers = TrackerCollection.from_data(tracker)

        self.info: dict[str, Any] = {}
        self.diagnostics = {"controller": self.info, "package_version": __version__}

    @property
    def t_range(self) -> tuple[float, float]:
        """tuple: start and end time of the simulation"""
        return self._t_range

    @t_range.setter
    def t_range(self, value: TRangeType):
        if hasattr(value, "__len__"):
            if len(value) != 2:  # type: ignore
                raise ValueError(
                    "t_range must be set to a single number or a tuple of two numbers"
                )
            t_start, t_end = value  # type: ignore
            self._t_range: tuple[float, float] = (float(t_start), float(t_end))
        else:
            self._t_range = (0, float(value))  # type: ignore

    def _stopped_by_tracker(self, err: StopIteration, t: float) -> tuple[int, str]:
        """Record why a tracker ended the run

        Args:
            err (:class:`StopIteration`):
                The exception raised by the tracker. Its `value` holds the reason.
            t (float):
                The time at which the run stopped

        Returns:
            tuple: The log level and the message announcing the end of the run
        """
        finished = isinstance(err, FinishedSimulation)
        reason = getattr(err, "value", None)
        if not reason:
            exc_name = "FinishedSimulation" if finished else "StopIteration"
            reason = f"Tracker raised {exc_name}"
        self.info["successful"] = finished
        self.info["stop_reason"] = reason

        if finished:
            return logging.INFO, f"Simulation finished at t={t} ({reason})"
        else:
            return logging.WARNING, f"Simulation aborted at t={t} ({reason})"

    def _store_last_state(self, state: ConcentrationField, t: float) -> None:
        """keep the state of a run that did not reach its final time"""
        self.diagnostics["last_tracker_time"] = t
        self.diagnostics["last_state"] = state

    def _run(self, state: ConcentrationField, dt: float | None = None) -> None:
        """Advance `state` in place over the time range of the controller.

        Args:
            state (:class:`~gaussdiff.fields.ConcentrationField`):
                The concentration that is updated during the simulation
            dt (float):
                Time step of the solver. `None` selects the default of the solver.
        """
        clock = self._get_current_time
        t_start, t_end = self.t_range
        self.info["t_start"] = t_start
        self.info["t_end"] = t_end
        self.diagnostics["solver"] = self.solver.info
        profiler = {"solver": 0.0, "tracker": 0.0}
        self.info["profiler"] = profiler

        # preparing trackers and stepper counts as compilation time
        tic = clock()
        self.trackers.initialize(state, info=self.diagnostics)
        stepper = self.solver.make_stepper(state=state, dt=dt)
        toc = clock()
        profiler["compilation"] = toc - tic

        wall_start = datetime.datetime.now()
        self.info["solver_start"] = str(wall_start)

        # tolerance for comparing times accumulated from many steps
        dt_used = self.solver.info.get("dt", dt)
        atol = 1e-12 if dt_used is None else 1e-9 * dt_used

        t = t_start
        _logger.debug("Start simulation at t=%g", t)
        try:
            while t < t_end - atol:
                t_next = self.trackers.handle(state, t, atol=atol)
                t_stop = min(max(t_next, t + atol), t_end)

                tic = clock()
                profiler["tracker"] += tic - toc
                t = stepper(state, t, t_stop)
                toc = clock()
                profiler["solver"] += toc - tic

        except StopIteration as err:
            level, msg = self._stopped_by_tracker(err, t)
            self._store_last_state(state, t)

        except KeyboardInterrupt:
            self.info["successful"] = False
            self.info["stop_reason"] = "User interrupted simulation"
            level, msg = logging.INFO, f"Simulation interrupted at t={t}"
            self._store_last_state(state, t)

        except Exception:
            self._store_last_state(state, t)
            raise

        else:
            self.info["successful"] = True
            self.info["stop_reason"] = "Reached final time"
            level, msg = logging.INFO, f"Simulation finished at t={t_end}."
            if abs(t - t_end) <= atol:
                t = t_end  # remove rounding errors accumulated over many steps
            # every tracker sees the final state, even between its interrupts
            try:
                self.trackers.handle(state, t, atol=atol, final=True)
            except StopIteration as err:
                level, msg = self._stopped_by_tracker(err, t)

        profiler["tracker"] += clock() - toc
        self.info["solver_duration"] = str(datetime.datetime.now() - wall_start)
        self.info["t_final"] = t
        self.trackers.finalize(info=self.diagnostics)

        # log after trackers closed a potential progress bar
        _logger.log(level, msg)
        if profiler["tracker"] > max(profiler["solver"], 1):
            _logger.warning(
                "Trackers took %.3g s, longer than the solver (%.3g s)",
                profiler["tracker"],
                profiler["solver"],
            )

    def run(
        self, initial_state: ConcentrationField, dt: float | None = None
    ) -> ConcentrationField:
        """Run the simulation and return the final state

        Args:
            initial_state (:class:`~gaussdiff.fields.ConcentrationField`):
                The initial concentration, which is copied and not modified
            dt (float):
                Time step of the solver. `None` selects the default of the solver.

        Returns:
            :class:`~gaussdiff.fields.ConcentrationField`: The state at the final time
        """
        state = initial_state.copy()
        self._run(state, dt)
        return state
