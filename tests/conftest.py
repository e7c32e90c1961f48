"""
Shared fixtures: a progress store on a temporary file, a fake practice
timer and a small three-day deck.
"""

import pytest

from daydeck.models import Card, DayBucket, Deck
from daydeck.storage import JsonFileStore, ProgressStore


class FakeTimer:
    """Records arm/disarm calls instead of starting a scheduler thread."""

    def __init__(self):
        self.job = None
        self.arms = 0
        self.disarms = 0
        self.closed = False

    @property
    def armed(self):
        return self.job is not None

    def arm(self, job):
        self.arms += 1
        self.job = job

    def disarm(self):
        self.disarms += 1
        self.job = None

    def shutdown(self):
        self.closed = True

    def fire(self, times=1):
        for _ in range(times):
            if self.job is not None:
                self.job()


@pytest.fixture
def kv(tmp_path):
    return JsonFileStore(tmp_path / "state.json")


@pytest.fixture
def store(kv):
    return ProgressStore(kv)


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def cards():
    return [
        Card(id="10", title="Ten", lines=("a", "b", "c")),
        Card(id="11", title="Eleven", lines=("d", "e", "f")),
        Card(id="12", title="Twelve", lines=("g", "h", "i")),
    ]


@pytest.fixture
def deck(cards):
    extra = Card(id="20", title="Twenty", lines=("x", "y", "z"))
    return Deck(
        days=(
            DayBucket(day=1, cards=("10", "11", "12")),
            DayBucket(day=2, cards=("20", "99")),
            DayBucket(day=3, cards=()),
        ),
        cards=tuple(cards) + (extra,),
    )
