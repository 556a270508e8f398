"""Tests for round-by-round notification pacing."""

import threading

import pytest

from scorewall.core.notifications import Notification, Round
from scorewall.core.registry import TeamRegistry
from scorewall.core.scheduler import (
    NotificationScheduler,
    RepeatingTimer,
    SchedulerPhase,
)
from scorewall.parser.frames import RosterFrame, RosterTeam


def _registry(team_names, services=("web", "db")):
    registry = TeamRegistry()
    registry.establish(RosterFrame(round_id=1, teams=tuple(
        RosterTeam(name, tuple(services)) for name in team_names
    )))
    return registry


def _round(round_id, *pairs, status=True):
    return Round(id=round_id, notifications=tuple(
        Notification(team, service, status) for team, service in pairs
    ))


TEAMS = ["t0", "t1", "t2", "t3", "t4", "t5", "t6"]


@pytest.fixture
def scheduler(presenter, timers):
    return NotificationScheduler(_registry(TEAMS), presenter, timer_factory=timers)


class TestTransitions:
    def test_starts_idle(self, scheduler, timers):
        assert scheduler.phase is SchedulerPhase.IDLE
        assert not scheduler.ticking
        assert scheduler.active_round is None
        assert timers.timers == []

    def test_submit_while_idle_starts_draining(self, scheduler, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        assert scheduler.phase is SchedulerPhase.DRAINING
        assert scheduler.active_round.id == 1
        assert len(timers.live) == 1
        assert timers.live[0].interval == 2.5

    def test_no_dispatch_before_first_tick(self, scheduler, presenter):
        scheduler.submit(_round(1, ("t0", "web")))
        assert presenter.notifications == []

    def test_empty_round_discarded(self, scheduler, timers):
        scheduler.submit(_round(1))
        assert scheduler.phase is SchedulerPhase.IDLE
        assert timers.timers == []
        assert len(scheduler.queue) == 0

    def test_empty_round_skipped_for_next_queued(self, presenter, timers):
        scheduler = NotificationScheduler(_registry(TEAMS), presenter, timer_factory=timers)
        scheduler.queue.enqueue(_round(1))
        scheduler.submit(_round(2, ("t1", "web")))
        assert scheduler.active_round.id == 2

    def test_submit_while_draining_queues(self, scheduler, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.submit(_round(2, ("t1", "web")))
        assert scheduler.active_round.id == 1
        assert scheduler.queue.pending_ids() == [2]
        assert len(timers.timers) == 1

    def test_tick_while_idle_is_noop(self, scheduler, presenter):
        scheduler.tick()
        assert presenter.notifications == []
        assert scheduler.phase is SchedulerPhase.IDLE

    def test_batch_size_validated(self, presenter):
        with pytest.raises(ValueError):
            NotificationScheduler(_registry(TEAMS), presenter, batch_size=0)


class TestBatching:
    def test_batch_cap_seven_teams(self, scheduler, presenter, timers):
        scheduler.submit(_round(1, *[(t, "web") for t in TEAMS]))

        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1", "t2", "t3"]

        scheduler.tick()
        assert [n.team for n in presenter.dispatched()[4:]] == ["t4", "t5", "t6"]
        assert scheduler.phase is SchedulerPhase.DRAINING

        scheduler.tick()
        assert len(presenter.notifications) == 7
        assert scheduler.phase is SchedulerPhase.IDLE
        assert timers.timers[0].cancelled

    def test_one_notification_per_team_per_tick(self, scheduler, presenter):
        scheduler.submit(_round(1, ("t0", "web"), ("t0", "db"), ("t1", "web")))
        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1"]
        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1", "t0"]

    def test_pops_from_tail_of_team_backlog(self, scheduler, presenter):
        scheduler.submit(_round(1, ("t0", "web"), ("t0", "db")))
        scheduler.tick()
        scheduler.tick()
        assert [n.service for n in presenter.dispatched()] == ["db", "web"]

    def test_exhausted_team_frees_its_slot(self, scheduler, presenter):
        pairs = [("t0", "web"), ("t0", "db")] + [(t, "web") for t in TEAMS[1:5]]
        scheduler.submit(_round(1, *pairs))
        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1", "t2", "t3"]
        scheduler.tick()
        assert [n.team for n in presenter.dispatched()[4:]] == ["t0", "t4"]

    def test_team_index_from_registry(self, scheduler, presenter):
        scheduler.submit(_round(1, ("t5", "web")))
        scheduler.tick()
        assert presenter.notifications == [(5, Notification("t5", "web", True))]

    def test_custom_batch_size(self, presenter, timers):
        scheduler = NotificationScheduler(
            _registry(TEAMS), presenter, batch_size=2, tick_seconds=1.0, timer_factory=timers
        )
        scheduler.submit(_round(1, *[(t, "web") for t in TEAMS[:3]]))
        assert timers.timers[0].interval == 1.0
        scheduler.tick()
        assert len(presenter.notifications) == 2

    def test_backlog_snapshot(self, scheduler):
        scheduler.submit(_round(1, ("t1", "web"), ("t0", "web"), ("t1", "db")))
        backlog = scheduler.backlog()
        assert list(backlog) == ["t1", "t0"]
        assert [n.service for n in backlog["t1"]] == ["web", "db"]


class TestRoundOrdering:
    def test_round_completes_before_next(self, scheduler, presenter):
        scheduler.submit(_round(1, ("t0", "web"), ("t1", "web")))
        scheduler.submit(_round(2, ("t2", "web")))

        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1"]
        assert scheduler.active_round.id == 1

        # Round 1 exhausted: this tick switches to round 2
        scheduler.tick()
        assert len(presenter.notifications) == 2
        assert scheduler.active_round.id == 2

        scheduler.tick()
        assert [n.team for n in presenter.dispatched()] == ["t0", "t1", "t2"]

    def test_one_live_timer_across_rounds(self, scheduler, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.submit(_round(2, ("t1", "web")))
        scheduler.tick()
        scheduler.tick()
        assert len(timers.timers) == 2
        assert timers.timers[0].cancelled
        assert timers.live == [timers.timers[1]]


class TestSelfTermination:
    def test_goes_idle_after_last_round(self, scheduler, presenter, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.tick()
        assert scheduler.phase is SchedulerPhase.DRAINING
        scheduler.tick()
        assert scheduler.phase is SchedulerPhase.IDLE
        assert scheduler.active_round is None
        assert timers.live == []

    def test_resumes_on_new_round(self, scheduler, presenter, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.tick()
        scheduler.tick()
        scheduler.submit(_round(2, ("t3", "db")))
        assert scheduler.phase is SchedulerPhase.DRAINING
        assert len(timers.live) == 1
        scheduler.tick()
        assert presenter.dispatched()[-1] == Notification("t3", "db", True)

    def test_stop_cancels_timer(self, scheduler, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.stop()
        assert scheduler.phase is SchedulerPhase.IDLE
        assert timers.timers[0].cancelled
        assert scheduler.backlog() == {}

    def test_late_fire_from_cancelled_timer_ignored(self, scheduler, presenter, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.stop()
        scheduler.submit(_round(2, ("t1", "db")))

        timers.timers[0].fire()
        assert presenter.dispatched() == []

        timers.timers[1].fire()
        assert presenter.dispatched() == [Notification("t1", "db", True)]

    def test_late_fire_after_round_change_ignored(self, scheduler, presenter, timers):
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.submit(_round(2, ("t1", "web"), ("t1", "db")))
        timers.timers[0].fire()
        timers.timers[0].fire()
        assert scheduler.active_round.id == 2

        timers.timers[0].fire()
        assert scheduler.backlog() == {"t1": [Notification("t1", "web", True), Notification("t1", "db", True)]}


class TestDispatchErrors:
    def test_unknown_team_skipped(self, scheduler, presenter):
        scheduler.submit(_round(1, ("mallory", "web"), ("t0", "web")))
        scheduler.tick()
        assert presenter.dispatched() == [Notification("t0", "web", True)]

    def test_presenter_error_does_not_stop_round(self, timers):
        class Flaky:
            def __init__(self):
                self.seen = []

            def on_notification(self, team_index, notification):
                self.seen.append(notification.team)
                if notification.team == "t0":
                    raise RuntimeError("display gone")

        flaky = Flaky()
        scheduler = NotificationScheduler(_registry(TEAMS), flaky, timer_factory=timers)
        scheduler.submit(_round(1, ("t0", "web"), ("t1", "web")))
        scheduler.tick()
        assert flaky.seen == ["t0", "t1"]
        assert scheduler.phase is SchedulerPhase.DRAINING

    def test_on_change_called(self, presenter, timers):
        calls = []
        scheduler = NotificationScheduler(
            _registry(TEAMS), presenter, timer_factory=timers, on_change=lambda: calls.append(1)
        )
        scheduler.submit(_round(1, ("t0", "web")))
        scheduler.tick()
        assert len(calls) == 2


class TestRepeatingTimer:
    def test_fires_until_cancelled(self):
        fired = threading.Event()
        calls = []

        def on_tick():
            calls.append(1)
            if len(calls) == 3:
                timer.cancel()
                fired.set()

        timer = RepeatingTimer(0.01, on_tick)
        timer.start()
        assert fired.wait(2.0)
        assert not timer.active
        assert len(calls) == 3

    def test_real_timer_drains_round(self, presenter):
        done = threading.Event()
        scheduler = NotificationScheduler(
            _registry(TEAMS),
            presenter,
            tick_seconds=0.01,
            on_change=lambda: done.set() if presenter.notifications and not scheduler.ticking else None,
        )
        scheduler.submit(_round(1, ("t0", "web"), ("t1", "web")))
        assert done.wait(2.0)
        assert len(presenter.notifications) == 2
        assert scheduler.phase is SchedulerPhase.IDLE
