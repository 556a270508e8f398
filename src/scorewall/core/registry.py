"""
Team Registry

Write-once roster of teams and their services, with the positional
display colour of every service.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..parser.frames import RosterFrame

logger = logging.getLogger(__name__)


class ServiceColor(str, Enum):
    """Service display colours, in palette order."""
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    YELLOW = "yellow"

    @property
    def hex(self) -> str:
        return COLOR_HEX[self]


COLOR_HEX = {
    ServiceColor.RED: "#F37171",
    ServiceColor.GREEN: "#AAF371",
    ServiceColor.BLUE: "#71ADF3",
    ServiceColor.PURPLE: "#BA71F3",
    ServiceColor.YELLOW: "#F3CF71",
}

PALETTE: Tuple[ServiceColor, ...] = tuple(ServiceColor)

# Status box stroke colours
STATUS_UP_HEX = "#51A544"
STATUS_DOWN_HEX = "#DF4949"


def color_for_position(position: int) -> ServiceColor:
    """Palette colour for a service position; wraps after the fifth."""
    return PALETTE[position % len(PALETTE)]


@dataclass(frozen=True)
class ServiceSlot:
    name: str
    color: ServiceColor

    def to_dict(self) -> dict:
        return {"name": self.name, "color": self.color.value, "hex": self.color.hex}


@dataclass(frozen=True)
class Team:
    name: str
    services: Tuple[ServiceSlot, ...]

    def service(self, name: str) -> Optional[ServiceSlot]:
        for slot in self.services:
            if slot.name == name:
                return slot
        return None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "services": [slot.to_dict() for slot in self.services],
        }


class TeamRegistry:
    """
    Team/service identity model, populated once from the roster frame.

    Later roster frames are ignored, so colours and team order never
    change once the wall is showing.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._established = False
        self._teams: Tuple[Team, ...] = ()
        self._index: dict = {}

    @property
    def established(self) -> bool:
        with self._lock:
            return self._established

    @property
    def teams(self) -> Tuple[Team, ...]:
        with self._lock:
            return self._teams

    def establish(self, frame: RosterFrame) -> bool:
        """
        Populate the registry from a roster frame.

        Returns:
            True if this call populated the registry, False if it was
            already established or the roster has no teams yet
        """
        with self._lock:
            if self._established:
                logger.debug(f"Registry already established, ignoring roster from round {frame.round_id}")
                return False

            if not frame.teams:
                logger.debug(f"Empty roster in round {frame.round_id}, still loading")
                return False

            teams = []
            index = {}
            for roster_team in frame.teams:
                if roster_team.name in index:
                    logger.warning(f"Duplicate team in roster: {roster_team.name}")
                    continue

                names = []
                for service_name in roster_team.services:
                    if service_name in names:
                        logger.warning(f"Duplicate service {service_name} for team {roster_team.name}")
                        continue
                    names.append(service_name)

                index[roster_team.name] = len(teams)
                teams.append(Team(
                    name=roster_team.name,
                    services=tuple(
                        ServiceSlot(name=name, color=color_for_position(i))
                        for i, name in enumerate(names)
                    ),
                ))

            self._teams = tuple(teams)
            self._index = index
            self._established = True

        logger.info(f"Roster established from round {frame.round_id}: {len(teams)} teams")
        return True

    def index_of(self, team_name: str) -> Optional[int]:
        """Position of a team in roster order, or None if unknown."""
        with self._lock:
            return self._index.get(team_name)

    def team(self, team_name: str) -> Optional[Team]:
        with self._lock:
            i = self._index.get(team_name)
            return self._teams[i] if i is not None else None

    def service(self, team_name: str, service_name: str) -> Optional[ServiceSlot]:
        team = self.team(team_name)
        return team.service(service_name) if team else None

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "established": self._established,
                "teams": [team.to_dict() for team in self._teams],
            }
