"""
Notification Scheduler

Paces notifications for the wall. Rounds are drained one at a time;
within a round, each tick dispatches at most one notification for each
of the first few teams still holding a backlog.
"""

import logging
import threading
from collections import OrderedDict
from enum import Enum
from typing import Callable, List, Optional

from .notifications import Notification, Round
from .registry import TeamRegistry
from .rounds import RoundQueue

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 2.5
DEFAULT_BATCH_SIZE = 4


class SchedulerPhase(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"


class RepeatingTimer:
    """
    Calls a function every `interval` seconds on a daemon thread until
    cancelled. The first call happens one interval after start().
    """

    def __init__(self, interval: float, function: Callable[[], None]):
        self.interval = interval
        self.function = function
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        # May be called from inside function(); never join here
        self._stop.set()

    def _run_loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.function()


class NotificationScheduler:
    """
    Round-by-round notification dispatcher.

    States:
        IDLE:     no active round, no timer
        DRAINING: the active round's backlog is dispatched on a timer

    The timer is started on entering DRAINING and cancelled on every
    return to IDLE; there is never more than one.
    """

    def __init__(
        self,
        registry: TeamRegistry,
        presenter,
        queue: Optional[RoundQueue] = None,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timer_factory: Optional[Callable] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize scheduler.

        Args:
            registry: Established team registry, used for team indexes
            presenter: Receives dispatched notifications
            queue: Round queue (a new one if omitted)
            tick_seconds: Dispatch period while draining
            batch_size: Maximum teams served per tick
            timer_factory: Callable(interval, function) returning an object
                with start() and cancel(); RepeatingTimer by default
            on_change: Called after every state change
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self._registry = registry
        self._presenter = presenter
        self._queue = queue if queue is not None else RoundQueue()
        self.tick_seconds = tick_seconds
        self.batch_size = batch_size
        self._timer_factory = timer_factory or RepeatingTimer
        self._on_change = on_change

        self._lock = threading.RLock()
        self._active_round: Optional[Round] = None
        self._backlog: "OrderedDict[str, List[Notification]]" = OrderedDict()
        self._timer = None
        self._dispatched = 0

    @property
    def queue(self) -> RoundQueue:
        return self._queue

    @property
    def phase(self) -> SchedulerPhase:
        with self._lock:
            return SchedulerPhase.DRAINING if self._timer is not None else SchedulerPhase.IDLE

    @property
    def ticking(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def active_round(self) -> Optional[Round]:
        with self._lock:
            return self._active_round

    @property
    def dispatched_count(self) -> int:
        with self._lock:
            return self._dispatched

    def backlog(self) -> "OrderedDict[str, List[Notification]]":
        """Copy of the per-team backlog of the active round."""
        with self._lock:
            return OrderedDict((team, list(items)) for team, items in self._backlog.items())

    def submit(self, round_: Round) -> None:
        """Queue a round; starts draining right away if idle."""
        with self._lock:
            self._queue.enqueue(round_)
            logger.debug(f"Round {round_.id} queued ({len(round_.notifications)} notifications)")
            if self._timer is None:
                self._start_next_round()
        self._changed()

    def tick(self) -> None:
        """
        Dispatch one batch of the active round.

        A tick that finds nothing to dispatch ends the round and starts
        the next queued one, if any.
        """
        with self._lock:
            if self._timer is None:
                return
            self._advance()
        self._changed()

    def stop(self) -> None:
        """Cancel the timer and drop the active round's backlog."""
        with self._lock:
            self._stop_timer()
            self._active_round = None
            self._backlog.clear()
        logger.info("Notification scheduler stopped")
        self._changed()

    def _on_timer(self, timer) -> None:
        """Timer callback; ignores fires from a timer that is no longer current."""
        with self._lock:
            if timer is not self._timer:
                logger.debug("Ignoring tick from a cancelled timer")
                return
            self._advance()
        self._changed()

    def _advance(self) -> None:
        """Dispatch one batch, or end the round when nothing is left. Lock held."""
        batch = []
        for team in list(self._backlog)[:self.batch_size]:
            items = self._backlog[team]
            batch.append(items.pop())
            if not items:
                del self._backlog[team]

        if not batch:
            logger.debug(f"Round {self._active_round.id} drained")
            self._stop_timer()
            self._active_round = None
            self._start_next_round()
        else:
            for notification in batch:
                self._dispatch(notification)

    def _start_next_round(self) -> None:
        """Enter DRAINING with the next non-empty queued round, if any."""
        while True:
            round_ = self._queue.dequeue_next()
            if round_ is None:
                return
            if not round_.notifications:
                logger.debug(f"Round {round_.id} has no notifications, discarded")
                continue
            break

        backlog: "OrderedDict[str, List[Notification]]" = OrderedDict()
        for notification in round_.notifications:
            backlog.setdefault(notification.team, []).append(notification)

        self._active_round = round_
        self._backlog = backlog
        timer = self._timer_factory(self.tick_seconds, lambda: self._on_timer(timer))
        self._timer = timer
        timer.start()
        logger.info(f"Round {round_.id}: {len(round_.notifications)} notifications for {len(backlog)} teams")

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _dispatch(self, notification: Notification) -> None:
        team_index = self._registry.index_of(notification.team)
        if team_index is None:
            logger.debug(f"Dropping notification for unknown team {notification.team}")
            return

        self._dispatched += 1
        try:
            self._presenter.on_notification(team_index, notification)
        except Exception as e:
            logger.error(f"Presenter error for {notification.team}/{notification.service}: {e}")

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
