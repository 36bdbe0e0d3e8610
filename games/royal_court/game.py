"""Core Royal Court round engine.

Phase state-machine
-------------------
SETUP          ->  START_GAME deals roles            ->  DISTRIBUTION

DISTRIBUTION   ->  VIEW_ROLE (any player, idempotent)
                   BEGIN_ROUND once every player has viewed  ->  REVEAL_RULER

REVEAL_RULER   ->  Ruler-holder reveals publicly     ->  REVEAL_POLICE

REVEAL_POLICE  ->  Police-holder reveals publicly    ->  GUESSING

GUESSING       ->  SELECT_SUSPECT (not revealed, not the Police; replaceable)
                   CONFIRM_ACCUSATION scores the round  ->  ROUND_END

ROUND_END      ->  NEXT_ROUND redraws roles          ->  DISTRIBUTION
"""

import copy
import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from core.game import PartyGame
from games.royal_court.assigner import RoleAssigner
from games.royal_court.roles import DEFAULT_CATALOG, Language, Role, RoleCatalog
from games.royal_court.scoring import resolve
from games.royal_court.state import GameRound, Phase, Player, RoundOutcome

logger = logging.getLogger(__name__)

GAME_TYPE = "royal_court"

# Phases in which a distinguished holder is known to the whole table.
_RULER_KNOWN = (Phase.REVEAL_RULER, Phase.REVEAL_POLICE, Phase.GUESSING, Phase.ROUND_END)
_POLICE_KNOWN = (Phase.REVEAL_POLICE, Phase.GUESSING, Phase.ROUND_END)


class Action(Enum):
    """Commands the UI layer may dispatch."""

    START_GAME = "START_GAME"
    VIEW_ROLE = "VIEW_ROLE"
    BEGIN_ROUND = "BEGIN_ROUND"
    REVEAL_RULER = "REVEAL_RULER"
    REVEAL_POLICE = "REVEAL_POLICE"
    SELECT_SUSPECT = "SELECT_SUSPECT"
    CONFIRM_ACCUSATION = "CONFIRM_ACCUSATION"
    NEXT_ROUND = "NEXT_ROUND"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one ``dispatch`` call."""

    accepted: bool
    action: Optional[Action]
    round: GameRound
    reason: Optional[str] = None
    outcome: Optional[RoundOutcome] = None


class RoyalCourtGame(PartyGame):
    """
    Single-device engine for one Royal Court session.

    Design invariants:
    - Exactly one live ``GameRound``; it is replaced wholesale on every deal.
    - Phases only move forward, except ROUND_END -> DISTRIBUTION.
    - Rejected actions leave the round untouched and never raise.
    - Scoring runs exactly once per round, on CONFIRM_ACCUSATION.
    """

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        catalog: RoleCatalog = DEFAULT_CATALOG,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        language: Language = Language.NEPALI,
    ):
        """
        Args:
            catalog:  Role table used for dealing and scoring.
            seed:     Seed for reproducible deals.  Ignored when *rng* is given.
            rng:      Explicit entropy source.
            language: Language used for role names in status messages.
        """
        self.catalog = catalog
        self.language = language
        self._seed = seed
        self._external_rng = rng
        self.reset(seed)

    # ------------------------------------------------------------------
    # identity
    # ------------------------------------------------------------------

    @property
    def game_type(self) -> str:
        return GAME_TYPE

    # ------------------------------------------------------------------
    # reset
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None) -> None:
        """Drop the session and return to SETUP.  Pass a new seed to change deals."""
        if seed is not None:
            self._seed = seed
        rng = self._external_rng if self._external_rng is not None else random.Random(self._seed)
        self._assigner = RoleAssigner(self.catalog, rng=rng)
        self._round = GameRound()
        self._history: List[RoundOutcome] = []

    # ------------------------------------------------------------------
    # private helpers
    # ------------------------------------------------------------------

    def _name(self, role: Role) -> str:
        return self.catalog.display_name(role, self.language)

    def _deal(self, players: Sequence[Player], round_number: int, message: str) -> None:
        """Replace the live round with a fresh deal over *players*."""
        cleared = [
            replace(p, self_revealed=False, publicly_revealed=False) for p in players
        ]
        dealt = self._assigner.assign(cleared)
        new_round = GameRound(
            phase=Phase.DISTRIBUTION,
            players=dealt,
            round_number=round_number,
            message=message,
        )
        new_round.ruler_id = new_round.holder_of(Role.RULER).id
        new_round.police_id = new_round.holder_of(Role.POLICE).id
        new_round.thief_id = new_round.holder_of(Role.THIEF).id
        self._round = new_round

    def _accept(self, action: Action, outcome: Optional[RoundOutcome] = None) -> DispatchResult:
        return DispatchResult(accepted=True, action=action, round=self.round, outcome=outcome)

    def _reject(self, action: Optional[Action], reason: str) -> DispatchResult:
        logger.debug(
            "Rejected %s in phase %s: %s",
            action.value if action else None,
            self._round.phase.value,
            reason,
        )
        return DispatchResult(accepted=False, action=action, round=self.round, reason=reason)

    def _expect_phase(self, action: Action, phase: Phase) -> Optional[DispatchResult]:
        if self._round.phase != phase:
            return self._reject(
                action, f"{action.value} is only valid in the {phase.value} phase"
            )
        return None

    # ------------------------------------------------------------------
    # state views
    # ------------------------------------------------------------------

    @property
    def round(self) -> GameRound:
        """Read-only snapshot of the live round."""
        return copy.deepcopy(self._round)

    @property
    def phase(self) -> Phase:
        return self._round.phase

    @property
    def message(self) -> str:
        return self._round.message

    @property
    def outcome(self) -> Optional[RoundOutcome]:
        return self._round.outcome

    @property
    def history(self) -> List[RoundOutcome]:
        return list(self._history)

    @property
    def players(self) -> List[Player]:
        return [copy.copy(p) for p in self._round.players]

    def get_players(self) -> List[str]:
        return [p.id for p in self._round.players]

    def get_state(self) -> Dict[str, Any]:
        return {
            "public": self.get_public_state(),
            "private_states": {p.id: self.get_private_state(p.id) for p in self._round.players},
            "metadata": {
                "phase": self._round.phase.value,
                "round_number": self._round.round_number,
                "language": self.language.value,
            },
        }

    def get_public_state(self) -> Dict[str, Any]:
        r = self._round
        return {
            "phase": r.phase.value,
            "round_number": r.round_number,
            "message": r.message,
            # Roles stay hidden until publicly revealed.
            "players": [p.to_dict(reveal_role=p.publicly_revealed) for p in r.players],
            "ruler_id": r.ruler_id if r.phase in _RULER_KNOWN else None,
            "police_id": r.police_id if r.phase in _POLICE_KNOWN else None,
            "suspect_id": r.suspect_id,
            "outcome": r.outcome.to_dict() if r.outcome else None,
        }

    def get_private_state(self, player_id: str) -> Dict[str, Any]:
        player = self._round.find_player(player_id)
        if player is None:
            raise ValueError(f"Unknown player: {player_id}")

        state: Dict[str, Any] = {
            "player_id": player.id,
            "name": player.name,
            "role": None,
        }
        if player.role is not None:
            definition = self.catalog.get(player.role)
            state.update({
                "role": player.role.value,
                "role_name": definition.display_name(self.language),
                "points": definition.points,
                "description": definition.description,
                "objective": definition.objective,
                "abilities": list(definition.abilities),
            })
        return state

    # ------------------------------------------------------------------
    # available actions
    # ------------------------------------------------------------------

    def get_available_actions(self) -> List[Dict[str, Any]]:
        r = self._round

        if r.phase == Phase.SETUP:
            return [{
                "action_type": Action.START_GAME.value,
                "description": "Start the session with 4–8 validated players.",
            }]

        if r.phase == Phase.DISTRIBUTION:
            actions: List[Dict[str, Any]] = [
                {"action_type": Action.VIEW_ROLE.value, "player_id": p.id, "viewed": p.self_revealed}
                for p in r.players
            ]
            if r.all_self_revealed:
                actions.append({"action_type": Action.BEGIN_ROUND.value})
            return actions

        if r.phase == Phase.REVEAL_RULER:
            return [{"action_type": Action.REVEAL_RULER.value, "player_id": r.ruler_id}]

        if r.phase == Phase.REVEAL_POLICE:
            return [{"action_type": Action.REVEAL_POLICE.value, "player_id": r.police_id}]

        if r.phase == Phase.GUESSING:
            actions = [{
                "action_type": Action.SELECT_SUSPECT.value,
                "valid_targets": [
                    p.id for p in r.players
                    if not p.publicly_revealed and p.id != r.police_id
                ],
            }]
            if r.suspect_id is not None:
                actions.append({
                    "action_type": Action.CONFIRM_ACCUSATION.value,
                    "suspect_id": r.suspect_id,
                })
            return actions

        if r.phase == Phase.ROUND_END:
            return [{"action_type": Action.NEXT_ROUND.value}]

        return []

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------

    def dispatch(self, action: Any, payload: Optional[Dict[str, Any]] = None) -> DispatchResult:
        """
        Validate and apply *action*.

        Args:
            action:  An ``Action`` or its string value.
            payload: Action arguments (``players``, ``player_id`` or
                     ``suspect_id`` depending on the action).

        Returns:
            ``DispatchResult``; ``accepted`` is False for any illegal action.
        """
        payload = payload or {}
        try:
            action = Action(action)
        except ValueError:
            return self._reject(None, f"Unknown action: '{action}'")

        handler = {
            Action.START_GAME: self._handle_start,
            Action.VIEW_ROLE: self._handle_view_role,
            Action.BEGIN_ROUND: self._handle_begin_round,
            Action.REVEAL_RULER: self._handle_reveal_ruler,
            Action.REVEAL_POLICE: self._handle_reveal_police,
            Action.SELECT_SUSPECT: self._handle_select_suspect,
            Action.CONFIRM_ACCUSATION: self._handle_confirm,
            Action.NEXT_ROUND: self._handle_next_round,
        }[action]
        return handler(payload)

    # ------------------------------------------------------------------
    # action handlers
    # ------------------------------------------------------------------

    def _handle_start(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.START_GAME, Phase.SETUP)
        if rejected:
            return rejected

        seats = [
            seat if isinstance(seat, dict) else seat.model_dump()
            for seat in payload.get("players") or []
        ]
        players = [
            Player(
                id=f"p-{index}",
                name=seat["name"],
                color=seat.get("color", ""),
                icon=seat.get("icon", ""),
            )
            for index, seat in enumerate(seats)
        ]
        self._deal(players, round_number=1,
                   message="Pass the device. Tap to secretly view your role.")
        self._history = []
        logger.info("Started game with %d players", len(players))
        return self._accept(Action.START_GAME)

    def _handle_view_role(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.VIEW_ROLE, Phase.DISTRIBUTION)
        if rejected:
            return rejected

        player = self._round.find_player(payload.get("player_id"))
        if player is None:
            return self._reject(Action.VIEW_ROLE, f"Unknown player: {payload.get('player_id')}")

        player.self_revealed = True
        return self._accept(Action.VIEW_ROLE)

    def _handle_begin_round(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.BEGIN_ROUND, Phase.DISTRIBUTION)
        if rejected:
            return rejected

        waiting = [p.name for p in self._round.players if not p.self_revealed]
        if waiting:
            return self._reject(
                Action.BEGIN_ROUND, f"Waiting for all to view: {', '.join(waiting)}"
            )

        self._round.phase = Phase.REVEAL_RULER
        self._round.message = (
            f"The Court is in session. {self._name(Role.RULER)}, reveal yourself!"
        )
        return self._accept(Action.BEGIN_ROUND)

    def _handle_reveal_ruler(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.REVEAL_RULER, Phase.REVEAL_RULER)
        if rejected:
            return rejected
        if payload.get("player_id") != self._round.ruler_id:
            return self._reject(Action.REVEAL_RULER, "Only the Ruler may reveal now")

        self._round.find_player(self._round.ruler_id).publicly_revealed = True
        self._round.phase = Phase.REVEAL_POLICE
        self._round.message = (
            f"{self._name(Role.RULER)} Revealed! "
            f"Now, {self._name(Role.POLICE)}, show your badge!"
        )
        return self._accept(Action.REVEAL_RULER)

    def _handle_reveal_police(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.REVEAL_POLICE, Phase.REVEAL_POLICE)
        if rejected:
            return rejected
        if payload.get("player_id") != self._round.police_id:
            return self._reject(Action.REVEAL_POLICE, "Only the Police may reveal now")

        self._round.find_player(self._round.police_id).publicly_revealed = True
        self._round.phase = Phase.GUESSING
        self._round.message = (
            f"{self._name(Role.POLICE)}, identify the {self._name(Role.THIEF)}! "
            "Select a suspect."
        )
        return self._accept(Action.REVEAL_POLICE)

    def _handle_select_suspect(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.SELECT_SUSPECT, Phase.GUESSING)
        if rejected:
            return rejected

        suspect = self._round.find_player(payload.get("suspect_id"))
        if suspect is None:
            return self._reject(
                Action.SELECT_SUSPECT, f"Unknown player: {payload.get('suspect_id')}"
            )
        if suspect.id == self._round.police_id:
            return self._reject(Action.SELECT_SUSPECT, "The Police cannot accuse themselves")
        if suspect.publicly_revealed:
            return self._reject(Action.SELECT_SUSPECT, "Revealed players cannot be accused")

        self._round.suspect_id = suspect.id
        return self._accept(Action.SELECT_SUSPECT)

    def _handle_confirm(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.CONFIRM_ACCUSATION, Phase.GUESSING)
        if rejected:
            return rejected

        r = self._round
        if r.suspect_id is None:
            return self._reject(Action.CONFIRM_ACCUSATION, "No suspect selected")

        resolution = resolve(r.players, r.thief_id, r.police_id, r.suspect_id, self.catalog)
        for player in r.players:
            delta = resolution.deltas[player.id]
            player.score += delta.score
            player.rounds_played += delta.rounds
            player.wins += delta.wins
            player.publicly_revealed = True

        thief_name = r.find_player(r.thief_id).name
        thief = self._name(Role.THIEF)
        if resolution.is_correct:
            message = f"Justice Served! The {thief} was {thief_name}."
        else:
            message = f"The {thief} Escapes! It was {thief_name}."

        outcome = RoundOutcome(
            round_number=r.round_number,
            accused_id=r.suspect_id,
            thief_id=r.thief_id,
            police_id=r.police_id,
            is_correct=resolution.is_correct,
            message=message,
            score_deltas={pid: d.score for pid, d in resolution.deltas.items()},
            winners=[pid for pid, d in resolution.deltas.items() if d.wins],
        )
        r.outcome = outcome
        r.message = message
        r.phase = Phase.ROUND_END
        self._history.append(outcome)

        logger.info(
            "Round %d resolved: accused=%s thief=%s correct=%s",
            r.round_number, r.suspect_id, r.thief_id, resolution.is_correct,
        )
        return self._accept(Action.CONFIRM_ACCUSATION, outcome=outcome)

    def _handle_next_round(self, payload: Dict[str, Any]) -> DispatchResult:
        rejected = self._expect_phase(Action.NEXT_ROUND, Phase.ROUND_END)
        if rejected:
            return rejected

        round_number = self._round.round_number + 1
        self._deal(self._round.players, round_number=round_number,
                   message="New Round! Tap to view your new role.")
        logger.info("Dealt round %d", round_number)
        return self._accept(Action.NEXT_ROUND)

    # ------------------------------------------------------------------
    # serialisation
    # ------------------------------------------------------------------

    def serialize(self) -> Dict[str, Any]:
        """Full-fidelity snapshot including hidden roles."""
        r = self._round
        return {
            "game_type": self.game_type,
            "seed": self._seed,
            "language": self.language.value,
            "phase": r.phase.value,
            "round_number": r.round_number,
            "message": r.message,
            "players": [p.to_dict() for p in r.players],
            "ruler_id": r.ruler_id,
            "police_id": r.police_id,
            "thief_id": r.thief_id,
            "suspect_id": r.suspect_id,
            "outcome": r.outcome.to_dict() if r.outcome else None,
            "history": [o.to_dict() for o in self._history],
        }
