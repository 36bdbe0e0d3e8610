"""Configuration and settings models for Royal Court."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from court.storage import SETTINGS_KEY, KeyValueStore, StorageError
from games.royal_court.roles import Language

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """
    Player-facing preferences persisted under ``royalCourtSettings``.

    Stored with the camelCase keys the game has always used.
    """

    language: Language = Field(default=Language.NEPALI, description="Role-name language")
    master_volume: float = Field(default=0.5, ge=0.0, le=1.0, alias="masterVolume")
    sfx_volume: float = Field(default=1.0, ge=0.0, le=1.0, alias="sfxVolume")
    music_volume: float = Field(default=0.5, ge=0.0, le=1.0, alias="musicVolume")

    class Config:
        populate_by_name = True
        extra = "ignore"


class CourtConfig(BaseModel):
    """Process-level configuration for a Royal Court session."""

    storage_dir: str = Field(
        default="./court_data",
        description="Directory holding the scores and settings JSON files",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducible deals",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging",
    )

    class Config:
        extra = "forbid"


def load_config(filepath: str) -> CourtConfig:
    """
    Load configuration from YAML or JSON file.

    Args:
        filepath: Path to config file

    Returns:
        CourtConfig instance
    """
    path = Path(filepath)
    content = path.read_text()

    if path.suffix in [".yaml", ".yml"]:
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML config files: pip install pyyaml")
        data = yaml.safe_load(content) or {}
    else:
        data = json.loads(content)

    return CourtConfig(**data)


def load_settings(store: KeyValueStore) -> Settings:
    """Read stored settings; unreadable or invalid data falls back to defaults."""
    try:
        raw = store.read(SETTINGS_KEY)
    except StorageError as exc:
        logger.warning("Ignoring unreadable settings: %s", exc)
        return Settings()
    if raw is None:
        return Settings()
    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Ignoring invalid settings: %s", exc)
        return Settings()


def save_settings(store: KeyValueStore, settings: Settings) -> bool:
    """Persist *settings*; returns False (and logs) when the write fails."""
    try:
        store.write(SETTINGS_KEY, settings.model_dump(mode="json", by_alias=True))
    except StorageError as exc:
        logger.error("Failed to save settings: %s", exc)
        return False
    return True
