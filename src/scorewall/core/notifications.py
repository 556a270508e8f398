"""
Round Notifications

Turns a round frame into the list of service status notifications
worth showing on the wall.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from ..parser.frames import RoundFrame
from .registry import TeamRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A single (team, service, pass/fail) fact pending display."""
    team: str
    service: str
    status: bool

    def to_dict(self) -> dict:
        return {"team": self.team, "service": self.service, "status": self.status}


@dataclass(frozen=True)
class Round:
    """Notifications of one scoring round, in frame order."""
    id: int
    notifications: Tuple[Notification, ...]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "notifications": [n.to_dict() for n in self.notifications],
        }


class NotificationExtractor:
    """
    Extracts notifications from round frames.

    Only services with exploit activity this round are reported; a
    service nobody attacked is quiet and produces nothing.
    """

    def __init__(self, registry: TeamRegistry):
        self._registry = registry

    def extract(self, frame: RoundFrame) -> Round:
        """
        Build the round's notifications.

        Args:
            frame: Parsed round frame

        Returns:
            Round with notifications in frame order (team, then service)
        """
        notifications = []

        for team in frame.teams:
            known = self._registry.team(team.name)
            if known is None:
                logger.debug(f"Round {frame.round_id}: unknown team {team.name}, skipped")
                continue

            for service in team.services:
                if not service.has_exploit_activity:
                    continue
                if known.service(service.name) is None:
                    logger.debug(f"Round {frame.round_id}: unknown service {team.name}/{service.name}, skipped")
                    continue
                notifications.append(Notification(
                    team=team.name,
                    service=service.name,
                    status=service.is_up,
                ))

        logger.debug(f"Round {frame.round_id}: {len(notifications)} notifications")
        return Round(id=frame.round_id, notifications=tuple(notifications))
