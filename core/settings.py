"""
Settings store.

Holds the last chosen difficulty and a couple of UI flags. The store is
passed into the session explicitly; there is no process-wide instance.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Optional, Protocol, Union

import config
from .errors import InvalidGridSpec, SettingsError
from .models import GridSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSettings:
    rows: int = config.DEFAULT_ROWS
    columns: int = config.DEFAULT_COLUMNS
    use_custom_grid_size: bool = False
    has_seen_documentation: bool = False

    @property
    def grid(self) -> GridSpec:
        return GridSpec(self.rows, self.columns)


class SettingsStore(Protocol):
    def get_grid_spec(self) -> GridSpec: ...

    def set_grid_spec(self, grid: GridSpec) -> None: ...


class MemorySettingsStore:
    """Settings kept in memory only."""

    def __init__(self, settings: Optional[GameSettings] = None):
        self._settings = settings or GameSettings()

    @property
    def settings(self) -> GameSettings:
        return self._settings

    def _save(self, settings: GameSettings) -> None:
        self._settings = settings

    def get_grid_spec(self) -> GridSpec:
        return self._settings.grid

    def set_grid_spec(self, grid: GridSpec) -> None:
        self._save(replace(self._settings, rows=grid.rows, columns=grid.columns,
                           use_custom_grid_size=True))

    def reset_to_default(self) -> None:
        self._save(replace(self._settings, rows=config.DEFAULT_ROWS, columns=config.DEFAULT_COLUMNS,
                           use_custom_grid_size=False))

    def has_seen_documentation(self) -> bool:
        return self._settings.has_seen_documentation

    def mark_documentation_seen(self) -> None:
        if not self._settings.has_seen_documentation:
            self._save(replace(self._settings, has_seen_documentation=True))


class JsonSettingsStore(MemorySettingsStore):
    """Settings persisted to a JSON file, rewritten atomically on every change."""

    def __init__(self, path: Union[str, Path] = config.SETTINGS_PATH):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> GameSettings:
        if not self.path.exists():
            return GameSettings()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            settings = GameSettings(
                rows=int(raw.get("rows", config.DEFAULT_ROWS)),
                columns=int(raw.get("columns", config.DEFAULT_COLUMNS)),
                use_custom_grid_size=bool(raw.get("use_custom_grid_size", False)),
                has_seen_documentation=bool(raw.get("has_seen_documentation", False)),
            )
            GridSpec(settings.rows, settings.columns)
        except (OSError, json.JSONDecodeError, TypeError, ValueError, AttributeError, InvalidGridSpec):
            logger.exception("Failed to load settings from %s, using defaults.", self.path)
            return GameSettings()
        return settings

    def _save(self, settings: GameSettings) -> None:
        # Atomic write: temp file, then replace
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(asdict(settings), f, indent=4)
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.exception("Failed to save settings to %s", self.path)
            if temp_path.exists():
                temp_path.unlink()
            raise SettingsError(f"Could not save settings to {self.path}: {e}") from e
        super()._save(settings)
