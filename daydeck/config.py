from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

import yaml
from dotenv import dotenv_values

from .practice import SECONDS_PER_CARD
from .storage import DEFAULT_KEY


@dataclass
class PracticePrefs:
    seconds_per_card: int = SECONDS_PER_CARD
    pending_preview: int = 3


@dataclass
class Settings:
    timezone: str
    deck_source: str
    state_file: Path
    storage_key: str
    rotation_days: int
    log_level: str
    practice: PracticePrefs


def load_settings(config_path: str = "config.yaml", env_file: str | None = None) -> Settings:
    project_root = Path(__file__).resolve().parent.parent
    env_path = Path(env_file) if env_file else project_root / ".env"
    config_file = Path(config_path)
    if not config_file.exists():
        config_file = project_root / config_path
    raw_env = dotenv_values(env_path) if env_path.exists() else {}
    env = {str(k).lstrip("\ufeff"): (v or "") for k, v in raw_env.items()}

    def get_env(name: str, default: str = "") -> str:
        # Process environment overrides .env file.
        v = os.getenv(name)
        if v is not None and v != "":
            return v.strip()
        # Blank entries, as in a copied .env.example, keep the default.
        value = str(env.get(name) or default).replace("\ufeff", "").strip()
        return value or default

    cfg = {}
    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    return Settings(
        timezone=get_env("DAYDECK_TIMEZONE", cfg.get("timezone", "UTC")),
        deck_source=get_env("DAYDECK_DECK_SOURCE", cfg.get("deck_source", "data/pdf-cards.json")),
        state_file=Path(get_env("DAYDECK_STATE_FILE", cfg.get("state_file", "data/state.json"))),
        storage_key=cfg.get("storage_key", DEFAULT_KEY),
        rotation_days=int(cfg.get("rotation_days", 0)),
        log_level=get_env("DAYDECK_LOG_LEVEL", cfg.get("log_level", "INFO")).upper(),
        practice=PracticePrefs(**(cfg.get("practice") or {})),
    )
