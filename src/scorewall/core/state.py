"""
SCOREWALL State Management

Centralized status snapshot for the web interface.
"""

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Optional, List, Callable
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass
class WallStatus:
    """Current pipeline and scheduler status."""
    phase: str = "loading"  # "loading" or "ready"
    scheduler: str = "idle"  # "idle" or "draining"
    team_count: int = 0
    current_round: Optional[int] = None
    pending_rounds: List[int] = field(default_factory=list)
    last_round_received: Optional[int] = None
    dispatched: int = 0
    last_update: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "phase": self.phase,
            "scheduler": self.scheduler,
            "team_count": self.team_count,
            "current_round": self.current_round,
            "pending_rounds": self.pending_rounds,
            "last_round_received": self.last_round_received,
            "dispatched": self.dispatched,
            "last_update": self.last_update.isoformat() if self.last_update else None
        }


class SystemState:
    """
    System state with thread-safe updates and change notifications.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._wall = WallStatus()
        self._stream_connected = False
        self._simulator_running = False
        self._listeners: List[Callable[[], None]] = []

    @property
    def wall(self) -> WallStatus:
        """Copy of the current wall status."""
        with self._lock:
            return replace(self._wall, pending_rounds=list(self._wall.pending_rounds))

    @property
    def stream_connected(self) -> bool:
        with self._lock:
            return self._stream_connected

    @stream_connected.setter
    def stream_connected(self, value: bool) -> None:
        with self._lock:
            self._stream_connected = value
        self._notify_listeners()

    @property
    def simulator_running(self) -> bool:
        with self._lock:
            return self._simulator_running

    @simulator_running.setter
    def simulator_running(self, value: bool) -> None:
        with self._lock:
            self._simulator_running = value
        self._notify_listeners()

    def update_wall(self, **kwargs) -> None:
        """
        Update wall status fields.

        Args:
            **kwargs: Fields to update (phase, scheduler, current_round, etc.)
        """
        with self._lock:
            for key, value in kwargs.items():
                if hasattr(self._wall, key):
                    setattr(self._wall, key, value)
            self._wall.last_update = datetime.now()
        self._notify_listeners()

    def reset(self) -> None:
        """Reset to initial status."""
        with self._lock:
            self._wall = WallStatus()
            self._stream_connected = False
            self._simulator_running = False
        self._notify_listeners()

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Add a state change listener."""
        with self._lock:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        """Remove a state change listener."""
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        """Notify all listeners of state change."""
        with self._lock:
            listeners = self._listeners.copy()
        for callback in listeners:
            try:
                callback()
            except Exception as e:
                logger.error(f"State listener error: {e}")

    def to_dict(self) -> dict:
        """Get full system state as dictionary."""
        with self._lock:
            return {
                "wall": self._wall.to_dict(),
                "stream_connected": self._stream_connected,
                "simulator_running": self._simulator_running
            }

    def to_json(self) -> str:
        """Get full system state as JSON."""
        return json.dumps(self.to_dict())


# Global state instance
state = SystemState()
