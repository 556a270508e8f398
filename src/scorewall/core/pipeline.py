"""
Scoreboard Pipeline

Ingestion state machine tying the stream to the wall:

    loading --(first roster frame)--> ready

While loading, the first qualifying frame establishes the team registry.
Once ready, every qualifying frame is a round: its notifications are
extracted and handed to the scheduler.
"""

import logging
from typing import Any, Optional

from ..parser.frames import RoundEventParser, RosterFrame, RoundFrame
from .notifications import NotificationExtractor, Round
from .registry import TeamRegistry
from .scheduler import NotificationScheduler
from .state import SystemState

logger = logging.getLogger(__name__)


class ScoreboardPipeline:
    """
    Frame handler for one competition stream.

    handle_frame() is called once per decoded frame, never concurrently
    with itself.
    """

    def __init__(
        self,
        presenter,
        registry: Optional[TeamRegistry] = None,
        parser: Optional[RoundEventParser] = None,
        scheduler: Optional[NotificationScheduler] = None,
        system_state: Optional[SystemState] = None,
        tick_seconds: Optional[float] = None,
        batch_size: Optional[int] = None,
        timer_factory=None,
    ):
        self.presenter = presenter
        self.registry = registry or TeamRegistry()
        self.parser = parser or RoundEventParser()
        self.extractor = NotificationExtractor(self.registry)
        self.system_state = system_state

        if scheduler is None:
            kwargs = {}
            if tick_seconds is not None:
                kwargs["tick_seconds"] = tick_seconds
            if batch_size is not None:
                kwargs["batch_size"] = batch_size
            scheduler = NotificationScheduler(
                self.registry,
                presenter,
                timer_factory=timer_factory,
                on_change=self._publish_state,
                **kwargs
            )
        self.scheduler = scheduler

    @property
    def ready(self) -> bool:
        """True once the roster is known and rounds are being extracted."""
        return self.registry.established

    def handle_frame(self, payload: Any) -> Optional[Round]:
        """
        Process one decoded stream frame.

        Args:
            payload: Decoded JSON value

        Returns:
            The Round submitted to the scheduler, or None for roster and
            ignored frames
        """
        frame = self.parser.classify(payload, self.registry.established)

        if isinstance(frame, RosterFrame):
            if self.registry.establish(frame):
                self.presenter.on_roster_ready(self.registry.teams)
                self._publish_state()
            return None

        if isinstance(frame, RoundFrame):
            round_ = self.extractor.extract(frame)
            if self.system_state is not None:
                self.system_state.update_wall(last_round_received=round_.id)
            self.scheduler.submit(round_)
            return round_

        return None

    def shutdown(self) -> None:
        """Stop the scheduler timer and drop pending rounds."""
        self.scheduler.stop()
        self.scheduler.queue.clear()

    def _publish_state(self) -> None:
        if self.system_state is None:
            return
        active = self.scheduler.active_round
        self.system_state.update_wall(
            phase="ready" if self.registry.established else "loading",
            scheduler=self.scheduler.phase.value,
            team_count=len(self.registry.teams),
            current_round=active.id if active else None,
            pending_rounds=self.scheduler.queue.pending_ids(),
            dispatched=self.scheduler.dispatched_count,
        )
