from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo
import argparse
import logging
import sys

from .config import Settings, load_settings
from .deck import day_labels, load_deck, materialize_cards, resolve_bucket
from .models import STATUS_AGAIN, STATUS_DONE, Card
from .scheduler import PracticeTimer
from .storage import JsonFileStore, ProgressStore
from .study import StudyDay
from .summary import summarize_day

PRACTICE_KEYS = {"d": STATUS_DONE, "a": STATUS_AGAIN}


def _card_label(card: Card) -> str:
    return f"#{card.id.zfill(2)} {card.title}"


def build_study_day(settings: Settings, timer: PracticeTimer | None = None) -> StudyDay:
    deck, error = load_deck(settings.deck_source)
    if error:
        print(error, file=sys.stderr)
    store = ProgressStore(JsonFileStore(settings.state_file), settings.storage_key)
    return StudyDay(
        deck,
        store,
        timer=timer,
        seconds_per_card=settings.practice.seconds_per_card,
        rotation_days=settings.rotation_days,
        today=datetime.now(ZoneInfo(settings.timezone)).date(),
    )


def _select_day(study: StudyDay, day: int | None) -> None:
    if day is not None:
        study.select_day(day - 1)


def cmd_days(study: StudyDay) -> None:
    progress = study.load_progress()
    for i, label in enumerate(day_labels(study.deck)):
        bucket = resolve_bucket(study.deck.days, i)
        s = summarize_day(bucket, materialize_cards(bucket, study.catalog), progress)
        marker = "*" if i == study.day_index else " "
        print(f"{marker} Day {label}: {s.done}/{s.total} · {s.percent}%")


def cmd_today(study: StudyDay, preview: int) -> None:
    progress = study.load_progress()
    summary = study.summary(preview)
    print(f"Day {summary.day}: {summary.done}/{summary.total} memorized · {summary.percent}%")
    for card in study.cards:
        status = progress.status.get(card.id, "-")
        print(f"  {_card_label(card)} [{status}]")
        if progress.reveal.get(card.id):
            for line in card.lines:
                print(f"      {line}")
    if summary.pending:
        print("Next up: " + ", ".join(_card_label(c) for c in summary.pending))
    else:
        print("Nothing pending for this day.")


def cmd_practice(study: StudyDay) -> None:
    study.start_practice()
    session = study.session
    try:
        while True:
            card = session.current_card
            if card is None:
                print("No cards for this day.")
                break
            print(f"\n{_card_label(card)} ({session.seconds}s)")
            for line in card.lines:
                print(f"  {line}")
            try:
                answer = input("[d]one / [a]gain / [q]uit, Enter to refresh: ").strip().lower()
            except EOFError:
                break
            if answer == "q":
                break
            if answer in PRACTICE_KEYS:
                if study.practice_mark(PRACTICE_KEYS[answer], expected_id=card.id) is None:
                    print(f"Time ran out on {_card_label(card)}, answer not recorded.")
    finally:
        study.close()
    summary = study.summary()
    print(f"Day {summary.day}: {summary.done}/{summary.total} · {summary.percent}%")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Daily memorization deck")
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("days")
    p_today = sub.add_parser("today")
    p_today.add_argument("--day", type=int)
    p_mark = sub.add_parser("mark")
    p_mark.add_argument("card_id")
    p_mark.add_argument("status", choices=[STATUS_DONE, STATUS_AGAIN])
    p_reveal = sub.add_parser("reveal")
    p_reveal.add_argument("card_id")
    p_reset = sub.add_parser("reset-day")
    p_reset.add_argument("--day", type=int)
    p_practice = sub.add_parser("practice")
    p_practice.add_argument("--day", type=int)
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "practice":
        study = build_study_day(settings, PracticeTimer(settings.timezone))
        _select_day(study, args.day)
        cmd_practice(study)
        return

    study = build_study_day(settings)
    if args.cmd == "days":
        cmd_days(study)
    elif args.cmd == "today":
        _select_day(study, args.day)
        cmd_today(study, settings.practice.pending_preview)
    elif args.cmd == "mark":
        study.mark(args.card_id, args.status)
    elif args.cmd == "reveal":
        revealed = study.toggle_reveal(args.card_id).reveal[args.card_id]
        print("revealed" if revealed else "hidden")
    elif args.cmd == "reset-day":
        _select_day(study, args.day)
        study.reset_day()
        print(f"Day {study.bucket.day} reset")


if __name__ == "__main__":
    main()
