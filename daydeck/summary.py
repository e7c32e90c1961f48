from __future__ import annotations

from typing import Sequence
import math

from .models import STATUS_DONE, Card, DayBucket, DaySummary, Progress


def percent_done(done: int, total: int) -> int:
    if not total:
        return 0
    # half-up, so 1 of 8 reads as 13 rather than 12
    return math.floor(done / total * 100 + 0.5)


def summarize_day(
    bucket: DayBucket,
    cards: Sequence[Card],
    progress: Progress,
    preview: int = 3,
) -> DaySummary:
    done = sum(1 for c in cards if progress.status.get(c.id) == STATUS_DONE)
    pending = [c for c in cards if progress.status.get(c.id) != STATUS_DONE][: max(0, preview)]
    return DaySummary(
        day=bucket.day,
        total=len(cards),
        done=done,
        percent=percent_done(done, len(cards)),
        pending=pending,
    )
