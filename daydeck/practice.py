from __future__ import annotations

from typing import Sequence
import logging
import threading

from .models import Card
from .scheduler import PracticeTimer
from .storage import ProgressStore

logger = logging.getLogger(__name__)

SECONDS_PER_CARD = 20


class PracticeSession:
    """Timed, cyclic walk through the cards of one day.

    Idle until ``start()``. While running, ``tick()`` counts the current
    card down and moves to the next one once the countdown is spent;
    ``manual_mark()`` records a verdict and moves on immediately. The
    pointer wraps at the end of the list, so the walk never completes.
    """

    def __init__(
        self,
        progress: ProgressStore,
        cards: Sequence[Card] = (),
        timer: PracticeTimer | None = None,
        seconds_per_card: int = SECONDS_PER_CARD,
    ) -> None:
        self.progress = progress
        self.cards = list(cards)
        self.timer = timer
        self.seconds_per_card = seconds_per_card
        self.active = False
        self.pointer = 0
        self.seconds = seconds_per_card
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def current_card(self) -> Card | None:
        if not self.active or not (0 <= self.pointer < len(self.cards)):
            return None
        return self.cards[self.pointer]

    def _advance(self) -> None:
        self.pointer = (self.pointer + 1) % len(self.cards)
        self.seconds = self.seconds_per_card

    def start(self) -> None:
        with self._lock:
            self.active = True
            self.pointer = 0
            self.seconds = self.seconds_per_card
            self._generation += 1
            generation = self._generation
            if self.timer is not None:
                self.timer.arm(lambda: self.tick(generation))
        logger.info("Practice started over %d cards", len(self.cards))

    def stop(self) -> None:
        with self._lock:
            if self.timer is not None:
                self.timer.disarm()
            was_active = self.active
            self.active = False
            self.pointer = 0
            self.seconds = self.seconds_per_card
            self._generation += 1
        if was_active:
            logger.info("Practice stopped")

    def close(self) -> None:
        self.stop()
        if self.timer is not None:
            self.timer.shutdown()

    def tick(self, generation: int | None = None) -> None:
        with self._lock:
            # ticks queued by an earlier start() carry a stale generation
            if generation is not None and generation != self._generation:
                return
            if not self.active or not self.cards:
                return
            if self.seconds > 0:
                self.seconds -= 1
                return
            self._advance()
            logger.debug("Time is up, moved to card %d", self.pointer)

    def manual_mark(self, value: str, expected_id: str | None = None) -> str | None:
        """Mark the current card and move on.

        With ``expected_id``, nothing is recorded if the pointer has already
        left that card, e.g. because the countdown ran out meanwhile.
        """
        with self._lock:
            if not self.active or not self.cards:
                return None
            card = self.cards[self.pointer % len(self.cards)]
            if expected_id is not None and card.id != expected_id:
                logger.debug("Card %s is no longer current, ignoring mark", expected_id)
                return None
            self.progress.mark_status(card.id, value)
            self._advance()
            logger.debug("Marked %s as %s, moved to card %d", card.id, value, self.pointer)
            return card.id

    def replace_cards(self, cards: Sequence[Card]) -> None:
        # a running walk is stopped rather than re-pointed into a new list
        self.stop()
        with self._lock:
            self.cards = list(cards)
