from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Iterable, Sequence
import json
import logging

import requests

from .models import Card, DayBucket, Deck

logger = logging.getLogger(__name__)

PLACEHOLDER_DAYS = 7


def select_today_bucket_index(total_days: int, today: date | None = None) -> int:
    """Map today's weekday (Monday=0 .. Sunday=6) onto ``[0, total_days)``."""
    today = today or date.today()
    monday_based = today.weekday()
    return monday_based % max(1, total_days)


def resolve_bucket(buckets: Sequence[DayBucket], index: int) -> DayBucket:
    index = max(0, index)
    if not buckets:
        return DayBucket(day=index + 1, cards=())
    return buckets[min(index, len(buckets) - 1)]


def index_cards(cards: Iterable[Card]) -> dict[str, Card]:
    return {card.id: card for card in cards}


def materialize_cards(bucket: DayBucket, catalog_by_id: dict[str, Card]) -> list[Card]:
    return [catalog_by_id[cid] for cid in bucket.cards if cid in catalog_by_id]


def day_labels(deck: Deck) -> list[int]:
    if not deck.days:
        return list(range(1, PLACEHOLDER_DAYS + 1))
    return [bucket.day for bucket in deck.days]


def _normalize_day(raw: Any, position: int) -> DayBucket | None:
    if not isinstance(raw, dict):
        return None
    try:
        day = int(raw.get("day"))
    except (TypeError, ValueError):
        day = position + 1
    cards = raw.get("cards")
    if not isinstance(cards, list):
        cards = []
    return DayBucket(day=day, cards=tuple(str(cid) for cid in cards if cid is not None))


def _normalize_card(raw: Any) -> Card | None:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    lines = raw.get("lines")
    if not isinstance(lines, list):
        lines = []
    return Card(
        id=str(raw["id"]),
        title=str(raw.get("title") or ""),
        lines=tuple(str(ln) for ln in lines),
    )


def normalize_deck(raw: Any) -> Deck:
    """Turn a loosely shaped deck document into a ``Deck``.

    Anything unrecognised is dropped instead of raising, so a damaged
    document degrades to fewer (or no) days and cards.
    """
    if not isinstance(raw, dict):
        return Deck()

    raw_days = raw.get("days")
    raw_cards = raw.get("cards")
    days = []
    for i, item in enumerate(raw_days if isinstance(raw_days, list) else []):
        bucket = _normalize_day(item, i)
        if bucket is not None:
            days.append(bucket)

    cards = []
    for item in raw_cards if isinstance(raw_cards, list) else []:
        card = _normalize_card(item)
        if card is not None:
            cards.append(card)

    return Deck(days=tuple(days), cards=tuple(cards))


def _read_source(source: str, timeout: int) -> Any:
    if source.startswith(("http://", "https://")):
        resp = requests.get(
            source,
            timeout=timeout,
            headers={"User-Agent": "daydeck/1.0", "Cache-Control": "no-store"},
        )
        resp.raise_for_status()
        return resp.json()
    with open(Path(source), "r", encoding="utf-8") as f:
        return json.load(f)


def load_deck(source: str, timeout: int = 15) -> tuple[Deck, str | None]:
    """Load and normalize the deck document.

    Returns ``(deck, error)``. On failure the deck is empty and ``error``
    holds a single message for the user; nothing is raised.
    """
    try:
        raw = _read_source(source, timeout)
    except (OSError, ValueError, requests.RequestException) as e:
        logger.warning("Failed to read deck %s: %s", source, e)
        return Deck(), f"Could not load deck from {source}"

    if not isinstance(raw, dict):
        logger.warning("Deck at %s is not a JSON object", source)
        return Deck(), f"Deck at {source} is malformed"

    deck = normalize_deck(raw)
    logger.debug("Loaded %d days and %d cards from %s", len(deck.days), len(deck.cards), source)
    return deck, None
