"""
Leaderboard records and the round-by-round stats aggregator.

After every resolved round the aggregator:
  1. Loads the all-time table (missing or corrupt data counts as empty).
  2. Merges each player into the table by exact name.  Existing rows grow
     by the *difference* between the player's session totals and the
     previous commit's session snapshot; new rows are seeded from the
     session totals.
  3. Overwrites the whole table in storage.
  4. Replaces the session snapshot with the players' current totals.

Because rows are keyed by display name, two different people who use the
same name on one device share a single history.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from court.storage import SCORES_KEY, KeyValueStore, StorageError
from games.royal_court.state import Player

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "total_score", "rounds_played", "wins")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


class ScoreRecord(BaseModel):
    """One leaderboard row, keyed by player name."""

    name: str
    rounds_played: int = Field(default=0, ge=0, alias="roundsPlayed")
    total_score: int = Field(default=0, alias="totalScore")
    wins: int = Field(default=0, ge=0)
    last_played: datetime = Field(default_factory=_utcnow, alias="lastPlayed")

    class Config:
        populate_by_name = True

    def to_json(self) -> Dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Merge rules
# ---------------------------------------------------------------------------


def merge_round(
    table: Sequence[ScoreRecord],
    players: Sequence[Player],
    prior_snapshot: Mapping[str, ScoreRecord],
    now: datetime,
) -> List[ScoreRecord]:
    """
    Fold one round's player totals into the all-time *table*.

    Returns a new list; *table* is not modified.
    """
    merged = [record.model_copy() for record in table]
    index = {record.name: i for i, record in enumerate(merged)}

    for player in players:
        prior = prior_snapshot.get(player.name)
        prior_score = prior.total_score if prior else 0
        prior_wins = prior.wins if prior else 0

        if player.name in index:
            i = index[player.name]
            existing = merged[i]
            merged[i] = existing.model_copy(update={
                "rounds_played": existing.rounds_played + 1,
                "total_score": existing.total_score + (player.score - prior_score),
                "wins": existing.wins + (1 if player.wins > prior_wins else 0),
                "last_played": now,
            })
        else:
            index[player.name] = len(merged)
            merged.append(ScoreRecord(
                name=player.name,
                rounds_played=1,
                total_score=player.score,
                wins=player.wins,
                last_played=now,
            ))

    return merged


def snapshot_players(players: Sequence[Player], now: datetime) -> Dict[str, ScoreRecord]:
    """Session-cumulative totals per name, used as the next merge's prior."""
    return {
        p.name: ScoreRecord(
            name=p.name,
            rounds_played=p.rounds_played,
            total_score=p.score,
            wins=p.wins,
            last_played=now,
        )
        for p in players
    }


def sort_records(
    records: Sequence[ScoreRecord],
    sort_by: str = "total_score",
    descending: bool = True,
) -> List[ScoreRecord]:
    """Order leaderboard rows by one of ``SORT_FIELDS``."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort_by}. Available: {list(SORT_FIELDS)}")
    return sorted(records, key=lambda r: getattr(r, sort_by), reverse=descending)


def session_records(players: Sequence[Player], now: Optional[datetime] = None) -> List[ScoreRecord]:
    """Leaderboard rows for the players of the live session."""
    return list(snapshot_players(players, now or _utcnow()).values())


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class StatsAggregator:
    """
    Owns the durable all-time table and the in-memory session snapshot.

    Storage problems are absorbed here: they are logged and reported through
    return values, never raised into the round that triggered them.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self._clock = clock or _utcnow
        self._session: Dict[str, ScoreRecord] = {}

    @property
    def session_snapshot(self) -> Dict[str, ScoreRecord]:
        return {name: record.model_copy() for name, record in self._session.items()}

    def begin_session(self) -> None:
        """Forget the previous session's snapshot; durable rows are kept."""
        self._session = {}

    def load_table(self) -> List[ScoreRecord]:
        """Read the all-time table; missing or corrupt data yields ``[]``."""
        try:
            raw = self.store.read(SCORES_KEY)
        except StorageError as exc:
            logger.warning("Treating unreadable score table as empty: %s", exc)
            return []
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Treating malformed score table as empty: expected a list")
            return []
        try:
            return [ScoreRecord.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            logger.warning("Treating malformed score table as empty: %s", exc)
            return []

    def commit(
        self,
        players: Sequence[Player],
        prior_snapshot: Optional[Mapping[str, ScoreRecord]] = None,
    ) -> bool:
        """
        Merge a just-resolved round into storage and refresh the snapshot.

        Args:
            players: Players carrying their session-cumulative totals.
            prior_snapshot: Totals from the previous commit; defaults to the
                aggregator's own snapshot.

        Returns:
            True if the table was written.  On a failed write both the
            durable table and the session snapshot are left as they were.
        """
        prior = self._session if prior_snapshot is None else prior_snapshot
        now = self._clock()

        table = merge_round(self.load_table(), players, prior, now)
        try:
            self.store.write(SCORES_KEY, [record.to_json() for record in table])
        except StorageError as exc:
            logger.error("Failed to save scores: %s", exc)
            return False

        self._session = snapshot_players(players, now)
        logger.info("Committed stats for %d players (%d all-time rows)", len(players), len(table))
        return True

    def reset(self) -> bool:
        """
        Erase the all-time table and the session snapshot together.

        Returns:
            False (with neither cleared) if the durable delete fails.
        """
        try:
            self.store.delete(SCORES_KEY)
        except StorageError as exc:
            logger.error("Failed to reset scores: %s", exc)
            return False
        self._session = {}
        logger.info("Reset all-time scores and session snapshot")
        return True
