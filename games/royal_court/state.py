"""Per-session player records and the mutable round context."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from games.royal_court.roles import Role


class Phase(Enum):
    """Distinct stages within a Royal Court round, in forward order."""

    SETUP = "setup"
    DISTRIBUTION = "distribution"
    REVEAL_RULER = "reveal_ruler"
    REVEAL_POLICE = "reveal_police"
    GUESSING = "guessing"
    ROUND_END = "round_end"


@dataclass
class Player:
    """
    One seat at the table.

    Identity, name and cosmetics are fixed for the whole session.  Score,
    rounds and wins only ever grow; role and the two reveal flags are
    reset at every redraw.
    """

    id: str
    name: str
    color: str = ""
    icon: str = ""
    role: Optional[Role] = None
    score: int = 0
    rounds_played: int = 0
    wins: int = 0
    self_revealed: bool = False
    publicly_revealed: bool = False

    def to_dict(self, reveal_role: bool = True) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "role": self.role.value if (self.role and reveal_role) else None,
            "score": self.score,
            "rounds_played": self.rounds_played,
            "wins": self.wins,
            "self_revealed": self.self_revealed,
            "publicly_revealed": self.publicly_revealed,
        }


@dataclass(frozen=True)
class RoundOutcome:
    """Result of a confirmed accusation."""

    round_number: int
    accused_id: str
    thief_id: str
    police_id: str
    is_correct: bool
    message: str
    score_deltas: Dict[str, int] = field(default_factory=dict)
    winners: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "accused_id": self.accused_id,
            "thief_id": self.thief_id,
            "police_id": self.police_id,
            "is_correct": self.is_correct,
            "message": self.message,
            "score_deltas": dict(self.score_deltas),
            "winners": list(self.winners),
        }


@dataclass
class GameRound:
    """
    The live round context.

    Holders of the three distinguished roles are stored as player ids so
    they survive the next role redraw.
    """

    phase: Phase = Phase.SETUP
    players: List[Player] = field(default_factory=list)
    ruler_id: Optional[str] = None
    police_id: Optional[str] = None
    thief_id: Optional[str] = None
    round_number: int = 1
    message: str = ""
    suspect_id: Optional[str] = None
    outcome: Optional[RoundOutcome] = None

    def find_player(self, player_id: Any) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def holder_of(self, role: Role) -> Optional[Player]:
        for player in self.players:
            if player.role == role:
                return player
        return None

    @property
    def all_self_revealed(self) -> bool:
        return bool(self.players) and all(p.self_revealed for p in self.players)
