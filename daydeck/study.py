from __future__ import annotations

from datetime import date
import logging

from .deck import index_cards, materialize_cards, resolve_bucket, select_today_bucket_index
from .models import Card, DayBucket, DaySummary, Deck, Progress
from .practice import SECONDS_PER_CARD, PracticeSession
from .scheduler import PracticeTimer
from .storage import ProgressStore
from .summary import summarize_day

logger = logging.getLogger(__name__)


def rotation_length(deck: Deck, rotation_days: int = 0) -> int:
    if rotation_days > 0:
        return rotation_days
    return len(deck.days) or 7


class StudyDay:
    """One day of the deck: its cards, their progress and the practice walk.

    All reads and writes of progress go through ``self.progress``; marks
    and reveals made here never move the practice pointer or timer.
    """

    def __init__(
        self,
        deck: Deck,
        progress: ProgressStore,
        timer: PracticeTimer | None = None,
        seconds_per_card: int = SECONDS_PER_CARD,
        rotation_days: int = 0,
        today: date | None = None,
    ) -> None:
        self.deck = deck
        self.progress = progress
        self.catalog = index_cards(deck.cards)
        self.day_index = select_today_bucket_index(rotation_length(deck, rotation_days), today)
        self.session = PracticeSession(
            progress,
            self.cards,
            timer=timer,
            seconds_per_card=seconds_per_card,
        )

    @property
    def bucket(self) -> DayBucket:
        return resolve_bucket(self.deck.days, self.day_index)

    @property
    def cards(self) -> list[Card]:
        return materialize_cards(self.bucket, self.catalog)

    def select_day(self, index: int) -> None:
        previous = self.bucket
        self.day_index = max(0, index)
        if self.bucket == previous:
            return
        self.session.replace_cards(self.cards)
        logger.debug("Selected day %d", self.bucket.day)

    def load_progress(self) -> Progress:
        return self.progress.load()

    def mark(self, card_id: str, value: str) -> Progress:
        return self.progress.mark_status(card_id, value)

    def toggle_reveal(self, card_id: str) -> Progress:
        return self.progress.toggle_reveal(card_id)

    def reset_day(self) -> Progress:
        logger.info("Resetting progress for day %d", self.bucket.day)
        return self.progress.reset_bucket(self.bucket.cards)

    def summary(self, preview: int = 3) -> DaySummary:
        return summarize_day(self.bucket, self.cards, self.progress.load(), preview)

    def start_practice(self) -> None:
        self.session.start()

    def stop_practice(self) -> None:
        self.session.stop()

    def practice_mark(self, value: str, expected_id: str | None = None) -> str | None:
        return self.session.manual_mark(value, expected_id)

    def close(self) -> None:
        self.session.close()
