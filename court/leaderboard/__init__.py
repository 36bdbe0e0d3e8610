"""
Royal Court leaderboard — stats aggregation and Rich terminal renderer.

Usage
-----
    python -m court.leaderboard [config.yaml]    # render all-time standings

Programmatic
------------
    from court.leaderboard import StatsAggregator, render_leaderboard

    aggregator = StatsAggregator(JsonFileStore("./court_data"))
    render_leaderboard(aggregator.load_table(), title="Hall of Fame")
"""

import logging
import sys

from court.config import CourtConfig, load_config
from court.leaderboard.data import (
    SORT_FIELDS,
    ScoreRecord,
    StatsAggregator,
    merge_round,
    session_records,
    snapshot_players,
    sort_records,
)
from court.leaderboard.display import (
    build_standings_table,
    render_leaderboard,
    render_round_summary,
)
from court.storage import JsonFileStore


def main() -> None:
    """Render the all-time standings stored under the configured directory."""
    config = load_config(sys.argv[1]) if len(sys.argv) > 1 else CourtConfig()
    logging.basicConfig(level=logging.DEBUG if config.verbose else logging.WARNING)

    aggregator = StatsAggregator(JsonFileStore(config.storage_dir))
    render_leaderboard(aggregator.load_table(), title="Hall of Fame")


__all__ = [
    "SORT_FIELDS",
    "ScoreRecord",
    "StatsAggregator",
    "build_standings_table",
    "main",
    "merge_round",
    "render_leaderboard",
    "render_round_summary",
    "session_records",
    "snapshot_players",
    "sort_records",
]
