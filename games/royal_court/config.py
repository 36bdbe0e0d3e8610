"""Royal Court setup configuration and player-name validation."""

import re
from typing import List

from pydantic import BaseModel, Field, ValidationError, field_validator

from games.royal_court.roles import MAX_PLAYERS, MIN_PLAYERS

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9 _-]+$")
MAX_NAME_LENGTH = 20

PLAYER_COLORS: List[str] = [
    "#dc2626",  # red
    "#2563eb",  # blue
    "#16a34a",  # green
    "#d97706",  # amber
    "#9333ea",  # purple
    "#0891b2",  # cyan
    "#db2777",  # pink
    "#65a30d",  # lime
]

PLAYER_ICONS: List[str] = ["Crown", "Shield", "Sword", "Scroll", "Key", "Coins", "Flag", "Gem"]


class SetupError(ValueError):
    """Setup input was rejected; the message is safe to show and retry on."""


class PlayerSetup(BaseModel):
    """One row of the setup screen."""

    name: str = Field(..., description="Display name, 1–20 chars of letters, digits, space, - or _")
    color: str = Field(default="", description="Cosmetic card color")
    icon: str = Field(default="", description="Cosmetic card icon")

    @field_validator("name")
    @classmethod
    def validate_name(cls, name: str) -> str:
        if not name.strip():
            raise ValueError("All players must have a name!")
        if len(name) > MAX_NAME_LENGTH or not NAME_PATTERN.match(name):
            raise ValueError("Names must be 1-20 chars (Letters, Numbers, spaces, - _)")
        return name

    class Config:
        extra = "forbid"


class RoyalCourtGameConfig(BaseModel):
    """
    Validated table for a new session.

    Attributes:
        players: Ordered seats, 4–8 of them, with case-insensitively unique
                 names.  The engine trusts this list and never re-validates.
    """

    players: List[PlayerSetup] = Field(
        ...,
        min_length=MIN_PLAYERS,
        max_length=MAX_PLAYERS,
        description="Ordered player seats",
    )

    @field_validator("players")
    @classmethod
    def validate_unique_names(cls, players: List[PlayerSetup]) -> List[PlayerSetup]:
        names = [p.name.strip().lower() for p in players]
        if len(set(names)) != len(names):
            raise ValueError("Names must be unique!")
        return players

    class Config:
        extra = "forbid"


def validate_setup(players) -> RoyalCourtGameConfig:
    """
    Validate raw setup rows (dicts or ``PlayerSetup``) into a config.

    Raises:
        SetupError: with the first human-readable problem found.
    """
    rows = [p.model_dump() if isinstance(p, PlayerSetup) else p for p in players]
    if not (MIN_PLAYERS <= len(rows) <= MAX_PLAYERS):
        raise SetupError(f"Royal Court needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(rows)}")
    try:
        return RoyalCourtGameConfig(players=rows)
    except ValidationError as exc:
        error = exc.errors()[0]
        message = str(error.get("ctx", {}).get("error") or error["msg"])
        raise SetupError(message) from exc


def default_setup(count: int = MIN_PLAYERS) -> List[PlayerSetup]:
    """Placeholder seats the setup screen starts from."""
    return [
        PlayerSetup(
            name=f"Player {i + 1}",
            color=PLAYER_COLORS[i % len(PLAYER_COLORS)],
            icon=PLAYER_ICONS[i % len(PLAYER_ICONS)],
        )
        for i in range(count)
    ]
