from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable
import json
import logging

from .models import STATUSES, Progress

logger = logging.getLogger(__name__)

DEFAULT_KEY = "pdfMem.progress.v1"


class JsonFileStore:
    """String key/value slots kept in one JSON file on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: top level is not an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def clear(self) -> None:
        self._write_all({})


def progress_from_dict(data: Any) -> Progress:
    if not isinstance(data, dict):
        return Progress()
    raw_status = data.get("status")
    raw_reveal = data.get("reveal")
    status = {
        str(cid): value
        for cid, value in (raw_status.items() if isinstance(raw_status, dict) else [])
        if value in STATUSES
    }
    reveal = {
        str(cid): value
        for cid, value in (raw_reveal.items() if isinstance(raw_reveal, dict) else [])
        if isinstance(value, bool)
    }
    return Progress(status=status, reveal=reveal)


def progress_to_dict(progress: Progress) -> dict[str, dict]:
    return {"status": dict(progress.status), "reveal": dict(progress.reveal)}


class ProgressStore:
    """The only reader/writer of the progress key.

    Every mutation loads the whole value, changes it and writes it back.
    """

    def __init__(self, kv: JsonFileStore, key: str = DEFAULT_KEY) -> None:
        self.kv = kv
        self.key = key

    def load(self) -> Progress:
        raw = self.kv.get_item(self.key)
        if not raw:
            return Progress()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Progress under %s is not valid JSON, starting empty", self.key)
            return Progress()
        return progress_from_dict(data)

    def save(self, progress: Progress) -> None:
        try:
            self.kv.set_item(self.key, json.dumps(progress_to_dict(progress), ensure_ascii=False))
        except OSError:
            logger.exception("Failed to persist progress under %s", self.key)
            raise

    def status_of(self, card_id: str) -> str | None:
        return self.load().status.get(str(card_id))

    def is_revealed(self, card_id: str) -> bool:
        return bool(self.load().reveal.get(str(card_id), False))

    def mark_status(self, card_id: str, value: str) -> Progress:
        if value not in STATUSES:
            raise ValueError(f"Unknown status {value!r}, expected one of {sorted(STATUSES)}")
        progress = self.load()
        progress.status[str(card_id)] = value
        self.save(progress)
        logger.debug("Marked card %s as %s", card_id, value)
        return progress

    def toggle_reveal(self, card_id: str) -> Progress:
        progress = self.load()
        cid = str(card_id)
        progress.reveal[cid] = not progress.reveal.get(cid, False)
        self.save(progress)
        return progress

    def reset_bucket(self, card_ids: Iterable[str]) -> Progress:
        progress = self.load()
        for cid in card_ids:
            progress.status.pop(str(cid), None)
            progress.reveal.pop(str(cid), None)
        self.save(progress)
        return progress
