"""
Session runner for Royal Court.

Wires a validated table into the round engine and feeds every resolved
round into the stats aggregator, so the UI layer only ever talks to one
object.
"""

import logging
import random
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from court.config import CourtConfig, Settings, load_settings, save_settings
from court.leaderboard.data import ScoreRecord, StatsAggregator, session_records, sort_records
from court.storage import JsonFileStore, KeyValueStore
from games.royal_court import (
    DEFAULT_CATALOG,
    Action,
    DispatchResult,
    RoleCatalog,
    RoyalCourtGame,
    validate_setup,
)

logger = logging.getLogger(__name__)


class GameSession:
    """
    One run of the application from player setup until exit.

    Example:
        session = GameSession(MemoryStore())
        session.start([{"name": "Asha"}, {"name": "Bikash"}, ...])
        session.dispatch(Action.VIEW_ROLE, {"player_id": "p-0"})
        ...
        session.dispatch(Action.CONFIRM_ACCUSATION)   # stats committed here
    """

    def __init__(
        self,
        store: KeyValueStore,
        catalog: RoleCatalog = DEFAULT_CATALOG,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.settings = settings if settings is not None else load_settings(store)
        self.aggregator = StatsAggregator(store, clock=clock)
        self.game = RoyalCourtGame(
            catalog=catalog,
            seed=seed,
            rng=rng,
            language=self.settings.language,
        )

    @classmethod
    def from_config(cls, config: CourtConfig) -> "GameSession":
        return cls(JsonFileStore(config.storage_dir), seed=config.seed)

    # ------------------------------------------------------------------
    # gameplay
    # ------------------------------------------------------------------

    def start(self, players: Iterable[Any]) -> DispatchResult:
        """
        Validate setup rows and deal round 1.

        Raises:
            SetupError: if the rows fail validation; nothing changes.
        """
        config = validate_setup(list(players))
        self.game.reset()
        self.aggregator.begin_session()
        return self.game.dispatch(Action.START_GAME, {"players": list(config.players)})

    def dispatch(self, action: Any, payload: Optional[Dict[str, Any]] = None) -> DispatchResult:
        """
        Forward *action* to the engine; commit stats when a round resolves.

        START_GAME is rejected here; sessions begin through ``start()``.
        """
        if action in (Action.START_GAME, Action.START_GAME.value):
            logger.debug("Rejected START_GAME through dispatch; use start()")
            return DispatchResult(
                accepted=False,
                action=Action.START_GAME,
                round=self.game.round,
                reason="Use GameSession.start() to begin a session",
            )

        result = self.game.dispatch(action, payload)
        if result.accepted and result.action == Action.CONFIRM_ACCUSATION:
            if not self.aggregator.commit(result.round.players):
                logger.warning("Round %d stats were not saved", result.round.round_number)
        return result

    def end(self) -> None:
        """Leave the table; the next ``start`` begins a fresh session."""
        self.game.reset()
        self.aggregator.begin_session()

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------

    def update_settings(self, **changes: Any) -> Settings:
        """
        Apply and persist settings changes.

        Raises:
            pydantic.ValidationError: if a value is out of range.
        """
        self.settings = Settings.model_validate({**self.settings.model_dump(), **changes})
        self.game.language = self.settings.language
        save_settings(self.store, self.settings)
        return self.settings

    # ------------------------------------------------------------------
    # leaderboards
    # ------------------------------------------------------------------

    def session_leaderboard(self, sort_by: str = "total_score", descending: bool = True) -> List[ScoreRecord]:
        return sort_records(session_records(self.game.players), sort_by, descending)

    def all_time_leaderboard(self, sort_by: str = "total_score", descending: bool = True) -> List[ScoreRecord]:
        return sort_records(self.aggregator.load_table(), sort_by, descending)

    def reset_all_data(self) -> bool:
        """Erase the all-time table together with the session snapshot."""
        return self.aggregator.reset()
