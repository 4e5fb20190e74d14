"""Tests for the command reconciliation ledger."""

import pytest

from rts_agents.ledger import CommandLedger
from rts_agents.models import (
    BirthEvent,
    Command,
    CommandFeedback,
    DeathEvent,
    EventLog,
    ExhaustionEvent,
    FeedbackStatus,
    UnitType,
)

ME = 0
ENEMY = 1


def make_ledger(*unit_ids, start_tick=0):
    ledger = CommandLedger(start_tick=start_tick)
    for uid in unit_ids:
        ledger.track(uid)
    return ledger


def feedback(tick, command, status=FeedbackStatus.SUCCEEDED, owner=ME):
    return CommandFeedback(tick=tick, owner=owner, command=command, status=status)


def snapshot(ledger):
    return {uid: ledger.get(uid) for uid in ledger}


class TestIssue:
    def test_new_units_are_idle(self):
        ledger = make_ledger(1, 2)
        assert ledger.idle_units() == [1, 2]
        assert ledger.is_idle(1)

    def test_issue_stamps_increasing_seq(self):
        ledger = make_ledger(1, 2)
        a = ledger.issue(Command.gather(1, 10))
        b = ledger.issue(Command.gather(2, 10))
        assert a.seq == 1
        assert b.seq == 2
        assert ledger.get(1) == a
        assert not ledger.is_idle(1)

    def test_in_flight_lists_busy_units_only(self):
        ledger = make_ledger(1, 2, 3)
        a = ledger.issue(Command.gather(1, 10))
        c = ledger.issue(Command.attack(3, 50))
        assert ledger.in_flight() == [a, c]

    def test_issue_to_busy_unit_raises(self):
        ledger = make_ledger(1)
        ledger.issue(Command.attack(1, 5))
        with pytest.raises(ValueError):
            ledger.issue(Command.attack(1, 6))
        assert ledger.get(1).target_id == 5

    def test_issue_to_untracked_unit_raises(self):
        with pytest.raises(ValueError):
            make_ledger().issue(Command.attack(1, 5))

    def test_track_keeps_existing_command(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.gather(1, 10))
        ledger.track(1)
        assert ledger.get(1) == cmd


class TestFeedback:
    def test_matching_feedback_clears(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.gather(1, 10))
        ledger.reconcile(EventLog(feedback=[feedback(0, cmd)]), ME, up_to_tick=1)
        assert ledger.is_idle(1)

    def test_failed_feedback_clears_like_success(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.build(1, UnitType.FARM, 3, 0))
        ledger.reconcile(EventLog(feedback=[feedback(0, cmd, FeedbackStatus.FAILED)]), ME, up_to_tick=1)
        assert ledger.is_idle(1)

    def test_incomplete_feedback_ignored(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.gather(1, 10))
        ledger.reconcile(EventLog(feedback=[feedback(0, cmd, FeedbackStatus.INCOMPLETE)]), ME, up_to_tick=1)
        assert ledger.get(1) == cmd

    def test_stale_feedback_ignored(self):
        ledger = make_ledger(1)
        first = ledger.issue(Command.gather(1, 10))
        ledger.clear(1)
        second = ledger.issue(Command.gather(1, 10))
        # Same action and target, but the first command's feedback must not clear the second
        assert first.seq != second.seq
        ledger.reconcile(EventLog(feedback=[feedback(0, first)]), ME, up_to_tick=1)
        assert ledger.get(1) == second

    def test_other_players_feedback_ignored(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.gather(1, 10))
        ledger.reconcile(EventLog(feedback=[feedback(0, cmd, owner=ENEMY)]), ME, up_to_tick=1)
        assert ledger.get(1) == cmd


class TestBirthAndDeath:
    def test_own_birth_tracked_idle(self):
        ledger = make_ledger()
        events = EventLog(births=[BirthEvent(tick=0, unit_id=7, owner=ME), BirthEvent(tick=0, unit_id=8, owner=ENEMY)])
        ledger.reconcile(events, ME, up_to_tick=1)
        assert 7 in ledger
        assert ledger.is_idle(7)
        assert 8 not in ledger

    def test_own_death_removes_entry(self):
        ledger = make_ledger(1, 2)
        ledger.reconcile(EventLog(deaths=[DeathEvent(tick=0, unit_id=2, owner=ME)]), ME, up_to_tick=1)
        assert 2 not in ledger
        assert len(ledger) == 1

    def test_target_death_idles_attacker_in_same_pass(self):
        ledger = make_ledger(1, 2)
        ledger.issue(Command.attack(1, 50))
        ledger.issue(Command.attack(2, 51))
        ledger.reconcile(EventLog(deaths=[DeathEvent(tick=0, unit_id=50, owner=ENEMY)]), ME, up_to_tick=1)
        assert ledger.is_idle(1)
        assert ledger.get(2).target_id == 51

    def test_death_orphans_attackers_and_removes_deceased(self):
        ledger = make_ledger(1, 2)
        ledger.issue(Command.attack(1, 2))  # unit 1 attacks own unit 2
        ledger.issue(Command.gather(2, 10))
        ledger.reconcile(EventLog(deaths=[DeathEvent(tick=0, unit_id=2, owner=ME)]), ME, up_to_tick=1)
        assert ledger.is_idle(1)
        assert 2 not in ledger

    def test_attacker_and_target_die_together(self):
        ledger = make_ledger(1)
        ledger.issue(Command.attack(1, 50))
        deaths = [DeathEvent(tick=0, unit_id=50, owner=ENEMY), DeathEvent(tick=0, unit_id=1, owner=ME)]
        ledger.reconcile(EventLog(deaths=deaths), ME, up_to_tick=1)
        assert 1 not in ledger

    def test_feedback_after_death_in_same_tick_is_harmless(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.attack(1, 50))
        events = EventLog(
            deaths=[DeathEvent(tick=0, unit_id=1, owner=ME)],
            feedback=[feedback(0, cmd, FeedbackStatus.FAILED)],
        )
        ledger.reconcile(events, ME, up_to_tick=1)
        assert 1 not in ledger


class TestExhaustion:
    def test_gatherers_of_exhausted_node_idle(self):
        ledger = make_ledger(1, 2, 3)
        ledger.issue(Command.gather(1, 10))
        ledger.issue(Command.gather(2, 11))
        ledger.issue(Command.attack(3, 10))  # attack on a unit that shares the id
        ledger.reconcile(EventLog(exhaustions=[ExhaustionEvent(tick=0, node_id=10)]), ME, up_to_tick=1)
        assert ledger.is_idle(1)
        assert ledger.get(2).target_id == 11
        assert ledger.get(3).target_id == 10


class TestTickWindow:
    def test_all_elapsed_ticks_processed_in_order(self):
        ledger = make_ledger(start_tick=1)
        events = EventLog(
            births=[BirthEvent(tick=1, unit_id=7, owner=ME)],
            deaths=[DeathEvent(tick=3, unit_id=7, owner=ME)],
        )
        ledger.reconcile(events, ME, up_to_tick=4)
        assert 7 not in ledger
        assert ledger.next_tick == 4

    def test_birth_then_feedback_across_ticks(self):
        ledger = make_ledger(1, start_tick=0)
        cmd = ledger.issue(Command.produce(1, UnitType.PEASANT))
        events = EventLog(
            births=[BirthEvent(tick=2, unit_id=9, owner=ME)],
            feedback=[feedback(2, cmd)],
        )
        ledger.reconcile(events, ME, up_to_tick=5)
        assert ledger.is_idle(1)
        assert ledger.is_idle(9)

    def test_future_ticks_deferred(self):
        ledger = make_ledger(1)
        cmd = ledger.issue(Command.gather(1, 10))
        events = EventLog(feedback=[feedback(5, cmd)])
        ledger.reconcile(events, ME, up_to_tick=3)
        assert ledger.get(1) == cmd
        ledger.reconcile(events, ME, up_to_tick=6)
        assert ledger.is_idle(1)

    def test_ticks_before_window_skipped(self):
        ledger = make_ledger(start_tick=4)
        ledger.reconcile(EventLog(births=[BirthEvent(tick=2, unit_id=7, owner=ME)]), ME, up_to_tick=5)
        assert 7 not in ledger

    def test_window_never_moves_backwards(self):
        ledger = make_ledger(start_tick=10)
        ledger.reconcile(EventLog(), ME, up_to_tick=3)
        assert ledger.next_tick == 10


class TestIdempotence:
    def test_replaying_log_is_noop(self):
        ledger = make_ledger(1, 2, 3)
        attack = ledger.issue(Command.attack(1, 50))
        gather = ledger.issue(Command.gather(2, 10))
        ledger.issue(Command.gather(3, 11))
        events = EventLog(
            births=[BirthEvent(tick=1, unit_id=4, owner=ME)],
            deaths=[DeathEvent(tick=1, unit_id=50, owner=ENEMY), DeathEvent(tick=2, unit_id=3, owner=ME)],
            feedback=[feedback(2, gather)],
        )
        ledger.reconcile(events, ME, up_to_tick=3)
        assert ledger.is_idle(1)
        assert ledger.is_idle(2)

        # Give the freed units new work, then replay the same log
        again = ledger.issue(Command.attack(1, 51))
        regather = ledger.issue(Command.gather(2, 10))
        before = snapshot(ledger)
        ledger.reconcile(events, ME, up_to_tick=3)
        assert snapshot(ledger) == before
        assert ledger.get(1) == again
        assert ledger.get(2) == regather
        assert attack.seq != again.seq

    def test_at_most_one_command_per_unit(self):
        ledger = make_ledger(1, 2)
        ledger.issue(Command.gather(1, 10))
        ledger.issue(Command.gather(2, 10))
        ledger.reconcile(EventLog(exhaustions=[ExhaustionEvent(tick=0, node_id=10)]), ME, up_to_tick=1)
        ledger.issue(Command.gather(1, 11))
        assert len(list(ledger)) == len(set(ledger)) == 2
        assert sum(ledger.get(uid) is not None for uid in ledger) == 1
