"""
Royal Court - session layer around the game engine.

Components:
- storage: Key-value persistence port and its JSON-file / in-memory adapters
- config: Settings blob and process configuration
- leaderboard: Stats aggregation and Rich standings renderer
- session: GameSession, the single object a UI layer drives
"""

from court.config import CourtConfig, Settings, load_config, load_settings, save_settings
from court.leaderboard import ScoreRecord, StatsAggregator
from court.session import GameSession
from court.storage import (
    SCORES_KEY,
    SETTINGS_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    StorageError,
)

__all__ = [
    "CourtConfig",
    "GameSession",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SCORES_KEY",
    "SETTINGS_KEY",
    "ScoreRecord",
    "Settings",
    "StatsAggregator",
    "StorageError",
    "load_config",
    "load_settings",
    "save_settings",
]
