"""
Presenter Interface

The core hands the roster and every dispatched notification to a
presenter. Presenters own all visual feedback and report nothing back.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from ..core.notifications import Notification
from ..core.registry import Team

logger = logging.getLogger(__name__)


class Presenter:
    """
    Base presenter. Calls are fire-and-forget.

    Subclasses override the hooks they care about; the defaults do nothing.
    """

    def on_roster_ready(self, teams: Sequence[Team]) -> None:
        """Called once, when the team registry is established."""

    def on_notification(self, team_index: int, notification: Notification) -> None:
        """Called for each notification the scheduler dispatches."""


class LoggingPresenter(Presenter):
    """Logs every call. Used for headless runs."""

    def on_roster_ready(self, teams: Sequence[Team]) -> None:
        for team in teams:
            services = ", ".join(f"{s.name}({s.color.value})" for s in team.services)
            logger.info(f"Team {team.name}: {services}")

    def on_notification(self, team_index: int, notification: Notification) -> None:
        status = "UP" if notification.status else "DOWN"
        logger.info(f"[{team_index}] {notification.team}/{notification.service}: {status}")


class CompositePresenter(Presenter):
    """Forwards every call to several presenters, in order."""

    def __init__(self, presenters: Iterable[Presenter]):
        self._presenters = list(presenters)

    def on_roster_ready(self, teams: Sequence[Team]) -> None:
        for presenter in self._presenters:
            presenter.on_roster_ready(teams)

    def on_notification(self, team_index: int, notification: Notification) -> None:
        for presenter in self._presenters:
            presenter.on_notification(team_index, notification)


# Mock presenter for testing without a display
class MockPresenter(Presenter):
    """
    Mock presenter for testing.

    Records all calls instead of drawing anything.
    """

    def __init__(self):
        self.rosters: List[Tuple[Team, ...]] = []
        self.notifications: List[Tuple[int, Notification]] = []

    def on_roster_ready(self, teams: Sequence[Team]) -> None:
        self.rosters.append(tuple(teams))

    def on_notification(self, team_index: int, notification: Notification) -> None:
        self.notifications.append((team_index, notification))

    def dispatched(self) -> List[Notification]:
        """Notifications in dispatch order."""
        return [n for _, n in self.notifications]

    def clear(self) -> None:
        self.rosters.clear()
        self.notifications.clear()
