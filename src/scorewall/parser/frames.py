"""
Round Event Frame Parser

Classifies decoded frames from the competition stream.

Frame Overview:
- Every frame is a JSON object with a "message" envelope
- A qualifying message carries both "round" (int) and "teams" (list)
- Two frame kinds, decided by whether the team roster is known yet:
  - Roster frame: first qualifying frame, fixes team/service identities
  - Round frame: every later qualifying frame, one scoring round

Anything else (heartbeats, unrelated events, broken shapes) is ignored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_frame_stats = {
    "total_received": 0,
    "roster_frames": 0,
    "round_frames": 0,
    "ignored_frames": 0,
    "last_round": None,
    "last_frame_time": None,
}


def get_frame_stats() -> dict:
    """Get frame statistics for the status API."""
    return _frame_stats.copy()


def reset_frame_stats() -> None:
    """Reset frame statistics."""
    _frame_stats.update(
        total_received=0,
        roster_frames=0,
        round_frames=0,
        ignored_frames=0,
        last_round=None,
        last_frame_time=None,
    )


def record_frame(kind: Optional[str], round_id: Optional[int] = None) -> None:
    """Record frame statistics."""
    _frame_stats["total_received"] += 1
    _frame_stats["last_frame_time"] = datetime.now().isoformat()

    if kind == "roster":
        _frame_stats["roster_frames"] += 1
    elif kind == "round":
        _frame_stats["round_frames"] += 1
    else:
        _frame_stats["ignored_frames"] += 1
        return

    _frame_stats["last_round"] = round_id


@dataclass(frozen=True)
class RosterTeam:
    """Team and its service names, in stream order."""
    name: str
    services: Tuple[str, ...]


@dataclass(frozen=True)
class RosterFrame:
    """First qualifying frame: the competition roster."""
    round_id: int
    teams: Tuple[RosterTeam, ...]


@dataclass(frozen=True)
class ServiceReport:
    """One service's outcome within a round."""
    name: str
    ping_status: Optional[int]
    exploit_count: int

    @property
    def has_exploit_activity(self) -> bool:
        return self.exploit_count > 0

    @property
    def is_up(self) -> bool:
        return self.ping_status == 1


@dataclass(frozen=True)
class TeamReport:
    """One team's services within a round."""
    name: str
    services: Tuple[ServiceReport, ...]


@dataclass(frozen=True)
class RoundFrame:
    """Qualifying frame received after the roster is known."""
    round_id: int
    teams: Tuple[TeamReport, ...]


Frame = Union[RosterFrame, RoundFrame]


class RoundEventParser:
    """
    Stateless classifier for stream frames.

    Whether a frame is a roster or a round depends only on whether the
    caller's team registry has been established, which is passed in.
    """

    def _message(self, payload: Any) -> Optional[dict]:
        """Unwrap the "message" envelope if it has round and teams."""
        if not isinstance(payload, dict):
            return None
        message = payload.get("message")
        if not isinstance(message, dict):
            return None
        if "round" not in message or "teams" not in message:
            return None
        return message

    def _round_id(self, message: dict) -> Optional[int]:
        round_id = message["round"]
        # bool is an int subclass, reject it explicitly
        if isinstance(round_id, bool) or not isinstance(round_id, int):
            return None
        # Round 0 is the pre-start state, not a scoring round
        if round_id == 0:
            return None
        return round_id

    def _teams(self, message: dict) -> Optional[list]:
        """
        Check the team/service skeleton shared by both frame kinds.

        Returns:
            The raw team list, or None if any team or service is malformed
        """
        teams = message["teams"]
        if not isinstance(teams, list):
            return None

        for team in teams:
            if not isinstance(team, dict) or not isinstance(team.get("name"), str):
                return None
            services = team.get("services")
            if not isinstance(services, list):
                return None
            for service in services:
                if not isinstance(service, dict) or not isinstance(service.get("name"), str):
                    return None
        return teams

    def _ping_status(self, value: Any) -> Optional[int]:
        """Normalise ping_status; integral floats count, anything else is None."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    def _service_report(self, service: dict) -> ServiceReport:
        """
        Build one service report. Odd values never drop the round:
        a non-list "exploits" reads as quiet, an odd "ping_status" as down.
        """
        exploits = service.get("exploits")
        exploit_count = len(exploits) if isinstance(exploits, list) else 0

        ping_status = self._ping_status(service.get("ping_status"))

        return ServiceReport(
            name=service["name"],
            ping_status=ping_status,
            exploit_count=exploit_count,
        )

    def classify(self, payload: Any, registry_established: bool) -> Optional[Frame]:
        """
        Classify one decoded stream frame.

        Args:
            payload: Decoded JSON value of the frame
            registry_established: Whether the team roster is already known

        Returns:
            RosterFrame or RoundFrame, or None if the frame is ignored
        """
        message = self._message(payload)
        if message is None:
            logger.debug("Ignoring frame without round/teams message")
            record_frame(None)
            return None

        round_id = self._round_id(message)
        teams = self._teams(message)
        if round_id is None or teams is None:
            logger.debug(f"Ignoring malformed frame (round={message.get('round')!r})")
            record_frame(None)
            return None

        if not registry_established:
            record_frame("roster", round_id)
            return RosterFrame(
                round_id=round_id,
                teams=tuple(
                    RosterTeam(
                        name=team["name"],
                        services=tuple(service["name"] for service in team["services"]),
                    )
                    for team in teams
                ),
            )

        reports = [
            TeamReport(
                name=team["name"],
                services=tuple(self._service_report(service) for service in team["services"]),
            )
            for team in teams
        ]

        record_frame("round", round_id)
        return RoundFrame(round_id=round_id, teams=tuple(reports))
