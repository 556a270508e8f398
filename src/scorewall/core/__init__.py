"""SCOREWALL Core Components"""

from .state import SystemState, WallStatus
from .registry import TeamRegistry, Team, ServiceSlot, ServiceColor
from .notifications import Notification, Round, NotificationExtractor
from .rounds import RoundQueue
from .scheduler import NotificationScheduler, SchedulerPhase, RepeatingTimer
from .pipeline import ScoreboardPipeline

__all__ = [
    "SystemState",
    "WallStatus",
    "TeamRegistry",
    "Team",
    "ServiceSlot",
    "ServiceColor",
    "Notification",
    "Round",
    "NotificationExtractor",
    "RoundQueue",
    "NotificationScheduler",
    "SchedulerPhase",
    "RepeatingTimer",
    "ScoreboardPipeline",
]
