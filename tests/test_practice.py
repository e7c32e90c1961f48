"""Tests for the timed practice walk."""

import pytest

from daydeck.models import Card
from daydeck.practice import SECONDS_PER_CARD, PracticeSession
from daydeck.scheduler import PracticeTimer


@pytest.fixture
def session(store, cards, timer):
    return PracticeSession(store, cards, timer=timer)


class TestStartStop:

    def test_starts_idle(self, session):
        assert session.active is False
        assert session.current_card is None

    def test_start_resets_pointer_and_timer(self, session, cards):
        session.start()
        assert session.active is True
        assert session.pointer == 0
        assert session.seconds == SECONDS_PER_CARD
        assert session.current_card == cards[0]

    def test_stop_then_start_resets(self, session):
        session.start()
        session.manual_mark("again")
        session.tick()
        session.stop()
        assert session.active is False
        session.start()
        assert session.pointer == 0
        assert session.seconds == SECONDS_PER_CARD

    def test_start_arms_and_stop_disarms(self, session, timer):
        session.start()
        assert timer.armed
        session.stop()
        assert not timer.armed
        assert timer.disarms == 1

    def test_tick_after_stop_does_nothing(self, session, timer):
        session.start()
        job = timer.job
        session.stop()
        job()
        assert session.seconds == SECONDS_PER_CARD
        assert session.pointer == 0
        assert session.active is False

    def test_tick_from_previous_start_is_ignored(self, session, timer):
        session.start()
        stale = timer.job
        session.stop()
        session.start()
        stale()
        assert session.seconds == SECONDS_PER_CARD
        timer.fire()
        assert session.seconds == SECONDS_PER_CARD - 1

    def test_close_shuts_timer_down(self, session, timer):
        session.start()
        session.close()
        assert timer.closed
        assert not timer.armed


class TestTick:

    def test_counts_down(self, session, timer):
        session.start()
        timer.fire(5)
        assert session.seconds == SECONDS_PER_CARD - 5
        assert session.pointer == 0

    def test_advances_once_countdown_is_spent(self, session, timer):
        session.start()
        timer.fire(SECONDS_PER_CARD)
        assert session.seconds == 0
        assert session.pointer == 0
        timer.fire()
        assert session.pointer == 1
        assert session.seconds == SECONDS_PER_CARD

    def test_single_card_wraps_to_itself(self, store, timer):
        session = PracticeSession(store, [Card(id="1", title="Only")], timer=timer)
        session.start()
        timer.fire(10)
        assert session.pointer == 0
        assert session.seconds == 10
        timer.fire(10)
        assert session.seconds == 0
        timer.fire()
        assert session.pointer == 0
        assert session.seconds == SECONDS_PER_CARD

    def test_wraps_at_end(self, session, timer):
        session.start()
        timer.fire((SECONDS_PER_CARD + 1) * 3)
        assert session.pointer == 0

    def test_empty_list_is_noop(self, store, timer):
        session = PracticeSession(store, [], timer=timer)
        session.start()
        timer.fire(50)
        assert session.active is True
        assert session.pointer == 0
        assert session.seconds == SECONDS_PER_CARD
        assert session.current_card is None

    def test_custom_duration(self, store, cards, timer):
        session = PracticeSession(store, cards, timer=timer, seconds_per_card=2)
        session.start()
        timer.fire(3)
        assert session.pointer == 1
        assert session.seconds == 2

    def test_ignored_while_idle(self, session):
        session.tick()
        assert session.seconds == SECONDS_PER_CARD


class TestManualMark:

    def test_marks_and_advances_immediately(self, session, store, timer):
        session.start()
        timer.fire(7)
        assert session.manual_mark("done") == "10"
        assert store.status_of("10") == "done"
        assert session.pointer == 1
        assert session.seconds == SECONDS_PER_CARD

    def test_full_cycle_returns_to_start(self, session):
        session.start()
        for _ in range(3):
            session.manual_mark("again")
        assert session.pointer == 0

    def test_does_not_touch_reveal(self, session, store):
        store.toggle_reveal("10")
        session.start()
        session.manual_mark("done")
        assert store.is_revealed("10") is True

    def test_no_cards_is_noop(self, store, timer):
        session = PracticeSession(store, [], timer=timer)
        session.start()
        assert session.manual_mark("done") is None
        assert session.pointer == 0

    def test_idle_is_noop(self, session, store):
        assert session.manual_mark("done") is None
        assert store.status_of("10") is None

    def test_mark_for_a_card_no_longer_shown_is_ignored(self, session, store, timer):
        session.start()
        timer.fire(SECONDS_PER_CARD + 1)
        assert session.manual_mark("done", expected_id="10") is None
        assert store.status_of("10") is None
        assert store.status_of("11") is None
        assert session.pointer == 1
        assert session.manual_mark("done", expected_id="11") == "11"
        assert session.pointer == 2

    def test_mark_then_tick_does_not_double_advance(self, session, timer):
        session.start()
        timer.fire(SECONDS_PER_CARD)
        session.manual_mark("done")
        timer.fire()
        assert session.pointer == 1
        assert session.seconds == SECONDS_PER_CARD - 1


class TestReplaceCards:

    def test_running_session_is_stopped(self, session, timer, cards):
        session.start()
        session.manual_mark("again")
        session.replace_cards(cards[:1])
        assert session.active is False
        assert session.pointer == 0
        assert not timer.armed
        assert session.cards == cards[:1]


class TestPracticeTimer:

    def test_rearm_keeps_a_single_job(self):
        timer = PracticeTimer(interval_seconds=60)
        try:
            timer.arm(lambda: None)
            timer.arm(lambda: None)
            assert len(timer.scheduler.get_jobs()) == 1
            assert timer.armed
            timer.disarm()
            assert timer.scheduler.get_jobs() == []
            assert not timer.armed
            timer.disarm()
        finally:
            timer.shutdown()

    def test_restart_without_stop_does_not_stack_triggers(self, store, cards):
        timer = PracticeTimer(interval_seconds=60)
        session = PracticeSession(store, cards, timer=timer)
        try:
            session.start()
            session.start()
            assert len(timer.scheduler.get_jobs()) == 1
        finally:
            session.close()
        assert not timer.scheduler.running
