"""Royal Court game module.

A pass-the-device deduction game for 4–8 players in the spirit of
*Raja Mantri Chor Sipahi*: everyone secretly views a role card, the Raja and
the Police reveal themselves, and the Police gets one accusation to find the
Chor.  Scores accumulate across rounds of the same session.

Components:
- roles:     Role catalog and the player-count escalation table
- assigner:  Uniform random role deal
- state:     Player and round records
- game:      Round phase state machine (RoyalCourtGame)
- scoring:   Accusation resolution
- config:    Setup validation (Pydantic)
"""

from games.royal_court.assigner import RoleAssigner
from games.royal_court.config import (
    PlayerSetup,
    RoyalCourtGameConfig,
    SetupError,
    default_setup,
    validate_setup,
)
from games.royal_court.game import GAME_TYPE, Action, DispatchResult, RoyalCourtGame
from games.royal_court.roles import (
    DEFAULT_CATALOG,
    ConfigurationError,
    Language,
    Role,
    RoleCatalog,
    RoleDef,
    roles_for_count,
)
from games.royal_court.scoring import Resolution, ScoreDelta, resolve
from games.royal_court.state import GameRound, Phase, Player, RoundOutcome

__all__ = [
    "Action",
    "ConfigurationError",
    "DEFAULT_CATALOG",
    "DispatchResult",
    "GAME_TYPE",
    "GameRound",
    "Language",
    "Phase",
    "Player",
    "PlayerSetup",
    "Resolution",
    "Role",
    "RoleAssigner",
    "RoleCatalog",
    "RoleDef",
    "RoundOutcome",
    "RoyalCourtGame",
    "RoyalCourtGameConfig",
    "ScoreDelta",
    "SetupError",
    "create_game",
    "default_setup",
    "resolve",
    "roles_for_count",
    "validate_setup",
]


def create_game(game_config, seed=None, language=Language.NEPALI, catalog=DEFAULT_CATALOG):
    """
    Factory: create a RoyalCourtGame already dealt for *game_config*.

    *game_config* is a validated ``RoyalCourtGameConfig``; the returned game
    sits in the DISTRIBUTION phase of round 1.
    """
    game = RoyalCourtGame(catalog=catalog, seed=seed, language=language)
    game.dispatch(Action.START_GAME, {"players": list(game_config.players)})
    return game
