"""Application settings with JSON persistence.

Settings are stored at:
    ~/.pomokeeper/settings.json

Usage::

    settings = load_settings()
    settings.work_minutes = 50
    if not validate_settings(settings):
        save_settings(settings)

The timer engine trusts whatever it is given, so anything headed for it
should pass :func:`validate_settings` first.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / ".pomokeeper"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

SOUND_THEMES = ("soft", "bell", "none")


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_before_long_break: int = 4

    # ── audio ─────────────────────────────────────────────────────────
    sound_theme: str = "soft"
    volume: float = 0.7                    # 0.0-1.0
    mute_work: bool = False
    mute_break: bool = False


def validate_settings(settings: Settings) -> list[str]:
    """Return human-readable problems; an empty list means valid."""
    errors: list[str] = []

    if not 1 <= settings.work_minutes <= 90:
        errors.append("Work duration must be between 1 and 90 minutes")
    if not 1 <= settings.short_break_minutes <= 30:
        errors.append("Short break must be between 1 and 30 minutes")
    if not 1 <= settings.long_break_minutes <= 60:
        errors.append("Long break must be between 1 and 60 minutes")
    if not 2 <= settings.sessions_before_long_break <= 10:
        errors.append("Sessions before long break must be between 2 and 10")
    if not 0 <= settings.volume <= 1:
        errors.append("Volume must be between 0 and 1")
    if settings.sound_theme not in SOUND_THEMES:
        errors.append(f"Sound theme must be one of {', '.join(SOUND_THEMES)}")

    return errors


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            settings = Settings(**filtered)
            errors = validate_settings(settings)
            if not errors:
                return settings
            logger.warning(f"Ignoring invalid settings in {path}: {'; '.join(errors)}")
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning(f"Could not read settings from {path}: {exc}")
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
