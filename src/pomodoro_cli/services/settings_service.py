"""Timer settings persisted as scalar values in the key-value store."""

from __future__ import annotations

from pomodoro_cli.models.settings import TimerSettings
from pomodoro_cli.repositories import KeyValueStore
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)

WORK_DURATION_KEY = "work_duration"
BREAK_DURATION_KEY = "break_duration"
NOTIFICATIONS_KEY = "notifications"
VIBRATION_KEY = "vibration"
SOUND_KEY = "sound"

_FIELD_KEYS = {
    "work_duration_minutes": WORK_DURATION_KEY,
    "break_duration_minutes": BREAK_DURATION_KEY,
    "enable_notifications": NOTIFICATIONS_KEY,
    "enable_vibration": VIBRATION_KEY,
    "enable_sound": SOUND_KEY,
}


def _parse_int(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 1 else None


def _parse_bool(raw: str) -> bool | None:
    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    return None


class SettingsService:
    """Read and write TimerSettings.

    Missing or garbled values fall back to the defaults one field at a
    time, so one bad key never discards the others.
    """

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def get(self) -> TimerSettings:
        values = {}
        for field, key in _FIELD_KEYS.items():
            raw = self.kv_store.get(key)
            if raw is None:
                continue
            parse = _parse_int if field.endswith("_minutes") else _parse_bool
            value = parse(raw)
            if value is None:
                logger.warning("ignoring invalid setting %s=%r", key, raw)
                continue
            values[field] = value
        return TimerSettings(**values)

    def set(self, settings: TimerSettings) -> None:
        for field, key in _FIELD_KEYS.items():
            value = getattr(settings, field)
            self.kv_store.set(key, str(value).lower() if isinstance(value, bool) else str(value))
        logger.debug("timer settings saved: %s", settings.model_dump())

    def update(self, **changes) -> TimerSettings:
        """Apply field changes (``None`` values are ignored) and save."""
        current = self.get()
        merged = current.model_dump()
        merged.update({k: v for k, v in changes.items() if v is not None})
        settings = TimerSettings(**merged)
        self.set(settings)
        return settings
