"""Accusation resolution.

| Player's role | accusation correct | accusation incorrect |
|---------------|--------------------|----------------------|
| Thief         | +0, no win         | +800, win            |
| Police        | +800, win          | +0, no win           |
| anyone else   | +catalog points, win iff points > 0 (either way) |
"""

from dataclasses import dataclass
from typing import Dict, Sequence

from games.royal_court.roles import DEFAULT_CATALOG, Role, RoleCatalog
from games.royal_court.state import Player

THIEF_BONUS = 800
POLICE_REWARD = 800


@dataclass(frozen=True)
class ScoreDelta:
    """Per-player increments produced by one resolution."""

    score: int
    rounds: int = 1
    wins: int = 0


@dataclass(frozen=True)
class Resolution:
    is_correct: bool
    deltas: Dict[str, ScoreDelta]


def resolve(
    players: Sequence[Player],
    thief_id: str,
    police_id: str,
    accused_id: str,
    catalog: RoleCatalog = DEFAULT_CATALOG,
) -> Resolution:
    """
    Score a confirmed accusation.

    Deltas depend only on each player's role this round and on whether
    *accused_id* names the Thief-holder.  *police_id* is accepted so the
    call mirrors the round's distinguished holders; it does not change the
    outcome.
    """
    is_correct = accused_id == thief_id
    deltas: Dict[str, ScoreDelta] = {}

    for player in players:
        if player.role == Role.THIEF:
            deltas[player.id] = (
                ScoreDelta(score=0, wins=0) if is_correct
                else ScoreDelta(score=THIEF_BONUS, wins=1)
            )
        elif player.role == Role.POLICE:
            deltas[player.id] = (
                ScoreDelta(score=POLICE_REWARD, wins=1) if is_correct
                else ScoreDelta(score=0, wins=0)
            )
        elif player.role is not None:
            points = catalog.points(player.role)
            deltas[player.id] = ScoreDelta(score=points, wins=1 if points > 0 else 0)
        else:
            deltas[player.id] = ScoreDelta(score=0, wins=0)

    return Resolution(is_correct=is_correct, deltas=deltas)
