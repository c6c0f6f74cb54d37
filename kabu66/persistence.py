"""JSON storage for settings and statistics records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from .rules_schema import GameSettings
from .stats import GameStats

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
STATS_FILE = "stats.json"
SETTINGS_FILE = "settings.json"


class JsonRecordStore:
    """Keep the stats and settings records as JSON files in one directory.

    Unreadable or invalid files fall back to defaults; the app keeps working
    with a fresh record rather than failing on startup.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    @property
    def stats_path(self) -> Path:
        return self.directory / STATS_FILE

    @property
    def settings_path(self) -> Path:
        return self.directory / SETTINGS_FILE

    def load_stats(self) -> GameStats:
        data = self._read(self.stats_path)
        try:
            return GameStats(**data)
        except ValidationError as exc:
            logger.warning("Ignoring invalid stats record %s: %s", self.stats_path, exc)
            return GameStats()

    def save_stats(self, stats: GameStats) -> None:
        self._write(self.stats_path, stats.model_dump())

    def load_settings(self) -> GameSettings:
        data = self._read(self.settings_path)
        merged = {**GameSettings().model_dump(mode="json"), **data}
        try:
            return GameSettings(**merged)
        except ValidationError as exc:
            logger.warning("Ignoring invalid settings record %s: %s", self.settings_path, exc)
            return GameSettings()

    def save_settings(self, settings: GameSettings) -> None:
        self._write(self.settings_path, settings.model_dump(mode="json"))

    def clear(self) -> None:
        for path in (self.stats_path, self.settings_path):
            if path.exists():
                path.unlink()

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Unexpected record layout in %s", path)
            return {}
        payload.pop("schema_version", None)
        return payload

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {"schema_version": SCHEMA_VERSION, **data}
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
