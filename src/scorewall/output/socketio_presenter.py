"""
SocketIO Presenter

Pushes the roster and dispatched notifications to browser walls over
Flask-SocketIO. The browser page owns all drawing and animation.
"""

import logging
import threading
from typing import Optional, Sequence

from ..core.notifications import Notification
from ..core.registry import Team, TeamRegistry, STATUS_UP_HEX, STATUS_DOWN_HEX
from .presenter import Presenter

logger = logging.getLogger(__name__)


class SocketIOPresenter(Presenter):
    """
    Presenter emitting SocketIO events.

    Events:
        roster:       {"teams": [{"name", "services": [{"name", "color", "hex"}]}]}
        notification: {"team_index", "team", "service", "status",
                       "color", "status_color"}
    """

    def __init__(self, socketio, registry: TeamRegistry):
        """
        Initialize presenter.

        Args:
            socketio: flask_socketio.SocketIO instance
            registry: Team registry, for service colours
        """
        self._socketio = socketio
        self._registry = registry
        self._lock = threading.Lock()
        self._roster: Optional[dict] = None

    @property
    def roster_snapshot(self) -> Optional[dict]:
        """Last roster payload, replayed to clients that connect late."""
        with self._lock:
            return self._roster

    def on_roster_ready(self, teams: Sequence[Team]) -> None:
        payload = {"teams": [team.to_dict() for team in teams]}
        with self._lock:
            self._roster = payload
        self._socketio.emit("roster", payload)
        logger.debug(f"Emitted roster ({len(teams)} teams)")

    def on_notification(self, team_index: int, notification: Notification) -> None:
        slot = self._registry.service(notification.team, notification.service)
        payload = {
            "team_index": team_index,
            "team": notification.team,
            "service": notification.service,
            "status": notification.status,
            "color": slot.color.hex if slot else None,
            "status_color": STATUS_UP_HEX if notification.status else STATUS_DOWN_HEX,
        }
        self._socketio.emit("notification", payload)
        logger.debug(f"Emitted notification {notification.team}/{notification.service}")
