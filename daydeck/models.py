from __future__ import annotations

from dataclasses import dataclass, field

STATUS_DONE = "done"
STATUS_AGAIN = "again"
STATUSES = frozenset({STATUS_DONE, STATUS_AGAIN})


@dataclass(frozen=True)
class Card:
    id: str
    title: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class DayBucket:
    day: int
    cards: tuple[str, ...] = ()


@dataclass(frozen=True)
class Deck:
    days: tuple[DayBucket, ...] = ()
    cards: tuple[Card, ...] = ()


@dataclass
class Progress:
    status: dict[str, str] = field(default_factory=dict)
    reveal: dict[str, bool] = field(default_factory=dict)


@dataclass
class DaySummary:
    day: int
    total: int
    done: int
    percent: int
    pending: list[Card] = field(default_factory=list)
