"""Shared fixtures."""

import pytest

from scorewall.core.pipeline import ScoreboardPipeline
from scorewall.core.registry import TeamRegistry
from scorewall.core.state import SystemState
from scorewall.output.presenter import MockPresenter
from scorewall.parser.frames import RosterFrame, RosterTeam, reset_frame_stats

from builders import TimerLog


@pytest.fixture(autouse=True)
def _clean_frame_stats():
    reset_frame_stats()
    yield
    reset_frame_stats()


@pytest.fixture
def timers():
    return TimerLog()


@pytest.fixture
def presenter():
    return MockPresenter()


@pytest.fixture
def registry():
    reg = TeamRegistry()
    reg.establish(RosterFrame(round_id=1, teams=(
        RosterTeam("alpha", ("web", "db")),
        RosterTeam("beta", ("web",)),
    )))
    return reg


@pytest.fixture
def system_state():
    return SystemState()


@pytest.fixture
def pipeline(presenter, timers, system_state):
    return ScoreboardPipeline(presenter, system_state=system_state, timer_factory=timers)
