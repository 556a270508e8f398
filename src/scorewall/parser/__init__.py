"""SCOREWALL Stream Parsers"""

from .frames import (
    RoundEventParser,
    RosterFrame,
    RosterTeam,
    RoundFrame,
    TeamReport,
    ServiceReport,
)

__all__ = [
    "RoundEventParser",
    "RosterFrame",
    "RosterTeam",
    "RoundFrame",
    "TeamReport",
    "ServiceReport",
]
