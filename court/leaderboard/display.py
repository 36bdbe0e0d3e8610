"""
Rich terminal display for Royal Court standings.

Renders up to three sections:
  1. Header panel (row count, leader)
  2. Standings table (rank, name, score, rounds, wins, win%, last played)
  3. Optional round summary (who was accused, who was the Chor, deltas)
"""

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from court.leaderboard.data import ScoreRecord, sort_records
from games.royal_court.state import GameRound


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _rank_badge(rank: int) -> str:
    if rank == 1:
        return "[bold gold1]#1[/]"
    if rank == 2:
        return "[bold bright_white]#2[/]"
    if rank == 3:
        return "[bold orange1]#3[/]"
    return f"[dim]#{rank}[/]"


def _pct(wins: int, rounds: int) -> str:
    return f"{wins / rounds * 100:.1f}%" if rounds > 0 else "—"


def _score_color(score: int, top: int) -> str:
    if top <= 0:
        return "dim"
    ratio = score / top
    if ratio >= 0.9:
        return "bold bright_green"
    if ratio >= 0.6:
        return "green"
    if ratio >= 0.3:
        return "yellow"
    return "orange1"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def build_standings_table(
    records: Sequence[ScoreRecord],
    title: str = "Royal Standings",
    sort_by: str = "total_score",
    descending: bool = True,
) -> Table:
    """Return a rich ``Table`` of *records* sorted by *sort_by*."""
    rows: List[ScoreRecord] = sort_records(records, sort_by=sort_by, descending=descending)
    top = max((r.total_score for r in rows), default=0)

    table = Table(
        box=box.ROUNDED,
        show_header=True,
        header_style="bold dim",
        title=f"[bold]{escape(title)}[/]",
        min_width=72,
        pad_edge=True,
    )
    table.add_column("#", width=4, justify="right")
    table.add_column("Name", width=20)
    table.add_column("Score", width=8, justify="right")
    table.add_column("Rounds", width=7, justify="right", style="dim")
    table.add_column("Wins", width=5, justify="right", style="green")
    table.add_column("Win%", width=7, justify="right")
    table.add_column("Last Played", width=17, justify="right", style="dim")

    for rank, r in enumerate(rows, start=1):
        table.add_row(
            _rank_badge(rank),
            escape(r.name),
            f"[{_score_color(r.total_score, top)}]{r.total_score:,}[/]",
            str(r.rounds_played),
            str(r.wins),
            _pct(r.wins, r.rounds_played),
            r.last_played.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def render_leaderboard(
    records: Sequence[ScoreRecord],
    title: str = "Royal Standings",
    sort_by: str = "total_score",
    descending: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Render a standings table with a header panel."""
    if console is None:
        console = Console()

    console.print()
    if records:
        leader = sort_records(records, "total_score")[0]
        summary = Text.assemble(
            (f"{len(records)} players", "cyan"),
            ("  •  ", "dim"),
            ("Leader: ", "dim"),
            (leader.name, "bold bright_white"),
            (f" ({leader.total_score:,})", "cyan"),
        )
    else:
        summary = Text("No rounds recorded yet", style="dim italic")

    console.print(Panel(
        summary,
        title="[bold gold1]  ROYAL COURT  [/]",
        border_style="gold1",
        expand=False,
        padding=(0, 2),
    ))
    console.print()
    if records:
        console.print(build_standings_table(records, title, sort_by, descending))
        console.print()


def render_round_summary(game_round: GameRound, console: Optional[Console] = None) -> None:
    """Render the outcome of a resolved round; no-op before resolution."""
    outcome = game_round.outcome
    if outcome is None:
        return
    if console is None:
        console = Console()

    table = Table(
        box=box.ROUNDED,
        show_header=True,
        header_style="bold dim",
        title=f"[bold]Round {outcome.round_number}[/]",
    )
    table.add_column("Name", width=20)
    table.add_column("Role", width=12)
    table.add_column("Points", width=8, justify="right")
    table.add_column("Total", width=8, justify="right", style="dim")

    for player in game_round.players:
        delta = outcome.score_deltas.get(player.id, 0)
        marks = ""
        if player.id == outcome.accused_id:
            marks += " [red](accused)[/]"
        if player.id in outcome.winners:
            marks += " [green]★[/]"
        table.add_row(
            escape(player.name) + marks,
            player.role.value if player.role else "—",
            f"+{delta:,}" if delta else "[dim]0[/]",
            f"{player.score:,}",
        )

    style = "bold green" if outcome.is_correct else "bold red"
    console.print(Text(outcome.message, style=style))
    console.print(table)
