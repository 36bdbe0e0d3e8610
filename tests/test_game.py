"""Tests for the Royal Court round engine.

Coverage:
- START_GAME dealing and round-1 state
- Distribution gating (BEGIN_ROUND only after every player viewed)
- Ordered public reveals (Ruler, then Police)
- Suspect selection guards and replacement
- Resolution scoring, wins, rounds and ROUND_END reveal
- Rejected actions are no-ops
- NEXT_ROUND redraw and persistence of totals
- Public / private state redaction and serialisation
"""

import pytest

from games.royal_court import (
    GAME_TYPE,
    Action,
    ConfigurationError,
    Language,
    Phase,
    Role,
    RoyalCourtGame,
    create_game,
    default_setup,
    validate_setup,
)


# ── helpers ───────────────────────────────────────────────────────────────────


def _make_game(n: int = 4, seed: int = 42, language: Language = Language.NEPALI) -> RoyalCourtGame:
    game = RoyalCourtGame(seed=seed, language=language)
    players = [{"name": f"Player {i + 1}"} for i in range(n)]
    result = game.dispatch(Action.START_GAME, {"players": players})
    assert result.accepted
    return game


def _holder(game: RoyalCourtGame, role: Role) -> str:
    """Return the id of the player holding *role* this round."""
    for player in game.players:
        if player.role == role:
            return player.id
    raise ValueError(f"Role {role} not dealt")


def _view_all(game: RoyalCourtGame) -> None:
    for pid in game.get_players():
        game.dispatch(Action.VIEW_ROLE, {"player_id": pid})


def _to_guessing(game: RoyalCourtGame) -> None:
    _view_all(game)
    assert game.dispatch(Action.BEGIN_ROUND).accepted
    assert game.dispatch(Action.REVEAL_RULER, {"player_id": _holder(game, Role.RULER)}).accepted
    assert game.dispatch(Action.REVEAL_POLICE, {"player_id": _holder(game, Role.POLICE)}).accepted
    assert game.phase == Phase.GUESSING


def _accuse(game: RoyalCourtGame, suspect_id: str):
    assert game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": suspect_id}).accepted
    return game.dispatch(Action.CONFIRM_ACCUSATION)


def _scores(game: RoyalCourtGame):
    return {p.id: p.score for p in game.players}


# ── TestStart ─────────────────────────────────────────────────────────────────


class TestStart:
    def test_initial_phase_is_setup(self):
        game = RoyalCourtGame(seed=0)
        assert game.phase == Phase.SETUP
        assert game.players == []

    @pytest.mark.parametrize("n", range(4, 9))
    def test_deal(self, n):
        game = _make_game(n)
        r = game.round
        assert r.phase == Phase.DISTRIBUTION
        assert r.round_number == 1
        assert len(r.players) == n
        assert all(p.role is not None for p in r.players)
        assert all(p.score == 0 and not p.self_revealed for p in r.players)
        assert r.ruler_id == _holder(game, Role.RULER)
        assert r.police_id == _holder(game, Role.POLICE)
        assert r.thief_id == _holder(game, Role.THIEF)
        assert r.message == "Pass the device. Tap to secretly view your role."

    def test_ids_follow_seat_order(self):
        game = _make_game(5)
        assert game.get_players() == ["p-0", "p-1", "p-2", "p-3", "p-4"]
        assert [p.name for p in game.players] == [f"Player {i}" for i in range(1, 6)]

    def test_accepts_validated_config(self):
        game = create_game(validate_setup(default_setup(6)), seed=3)
        assert game.phase == Phase.DISTRIBUTION
        assert len(game.players) == 6

    def test_same_seed_same_deal(self):
        a, b = _make_game(7, seed=11), _make_game(7, seed=11)
        assert [p.role for p in a.players] == [p.role for p in b.players]

    def test_too_few_players_raises(self):
        game = RoyalCourtGame(seed=0)
        with pytest.raises(ConfigurationError):
            game.dispatch(Action.START_GAME, {"players": [{"name": "A"}, {"name": "B"}]})

    def test_start_twice_rejected(self):
        game = _make_game()
        result = game.dispatch(Action.START_GAME, {"players": [{"name": "X"}] * 4})
        assert not result.accepted
        assert [p.name for p in game.players][0] == "Player 1"


# ── TestDistribution ──────────────────────────────────────────────────────────


class TestDistribution:
    def test_view_role_sets_flag(self):
        game = _make_game()
        assert game.dispatch(Action.VIEW_ROLE, {"player_id": "p-1"}).accepted
        viewed = {p.id: p.self_revealed for p in game.players}
        assert viewed == {"p-0": False, "p-1": True, "p-2": False, "p-3": False}

    def test_view_role_idempotent(self):
        game = _make_game()
        game.dispatch(Action.VIEW_ROLE, {"player_id": "p-0"})
        assert game.dispatch(Action.VIEW_ROLE, {"player_id": "p-0"}).accepted
        assert game.phase == Phase.DISTRIBUTION

    def test_view_unknown_player_rejected(self):
        game = _make_game()
        assert not game.dispatch(Action.VIEW_ROLE, {"player_id": "p-99"}).accepted

    def test_begin_blocked_until_all_viewed(self):
        game = _make_game()
        for pid in ("p-0", "p-1", "p-2"):
            game.dispatch(Action.VIEW_ROLE, {"player_id": pid})
        result = game.dispatch(Action.BEGIN_ROUND)
        assert not result.accepted
        assert "Player 4" in result.reason
        assert game.phase == Phase.DISTRIBUTION

    def test_begin_round(self):
        game = _make_game()
        _view_all(game)
        assert game.dispatch(Action.BEGIN_ROUND).accepted
        assert game.phase == Phase.REVEAL_RULER
        assert "Raja" in game.message

    def test_available_actions(self):
        game = _make_game()
        types = [a["action_type"] for a in game.get_available_actions()]
        assert types == ["VIEW_ROLE"] * 4
        _view_all(game)
        types = [a["action_type"] for a in game.get_available_actions()]
        assert types == ["VIEW_ROLE"] * 4 + ["BEGIN_ROUND"]

    def test_view_role_listed_after_viewing(self):
        game = _make_game()
        game.dispatch(Action.VIEW_ROLE, {"player_id": "p-2"})
        listed = {
            a["player_id"]: a["viewed"]
            for a in game.get_available_actions()
            if a["action_type"] == "VIEW_ROLE"
        }
        assert listed == {"p-0": False, "p-1": False, "p-2": True, "p-3": False}
        assert game.dispatch(Action.VIEW_ROLE, {"player_id": "p-2"}).accepted


# ── TestReveals ───────────────────────────────────────────────────────────────


class TestReveals:
    def _ready(self) -> RoyalCourtGame:
        game = _make_game(6)
        _view_all(game)
        game.dispatch(Action.BEGIN_ROUND)
        return game

    def test_only_ruler_may_reveal(self):
        game = self._ready()
        police = _holder(game, Role.POLICE)
        assert not game.dispatch(Action.REVEAL_RULER, {"player_id": police}).accepted
        assert game.phase == Phase.REVEAL_RULER

    def test_police_cannot_reveal_before_ruler(self):
        game = self._ready()
        police = _holder(game, Role.POLICE)
        assert not game.dispatch(Action.REVEAL_POLICE, {"player_id": police}).accepted

    def test_reveal_sequence(self):
        game = self._ready()
        ruler, police = _holder(game, Role.RULER), _holder(game, Role.POLICE)
        game.dispatch(Action.REVEAL_RULER, {"player_id": ruler})
        assert game.phase == Phase.REVEAL_POLICE
        assert game.message == "Raja Revealed! Now, Prahari, show your badge!"

        game.dispatch(Action.REVEAL_POLICE, {"player_id": police})
        assert game.phase == Phase.GUESSING
        revealed = {p.id for p in game.players if p.publicly_revealed}
        assert revealed == {ruler, police}

    def test_english_messages(self):
        game = _make_game(language=Language.ENGLISH)
        _view_all(game)
        game.dispatch(Action.BEGIN_ROUND)
        game.dispatch(Action.REVEAL_RULER, {"player_id": _holder(game, Role.RULER)})
        assert game.message == "King Revealed! Now, Police, show your badge!"


# ── TestGuessing ──────────────────────────────────────────────────────────────


class TestGuessing:
    def test_cannot_accuse_police(self):
        game = _make_game()
        _to_guessing(game)
        police = _holder(game, Role.POLICE)
        assert not game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": police}).accepted
        assert game.round.suspect_id is None

    def test_cannot_accuse_revealed_ruler(self):
        game = _make_game()
        _to_guessing(game)
        ruler = _holder(game, Role.RULER)
        assert not game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": ruler}).accepted

    def test_unknown_suspect_rejected(self):
        game = _make_game()
        _to_guessing(game)
        assert not game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": "nobody"}).accepted

    def test_selection_replaceable(self):
        game = _make_game()
        _to_guessing(game)
        thief, consort = _holder(game, Role.THIEF), _holder(game, Role.CONSORT)
        game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": thief})
        game.dispatch(Action.SELECT_SUSPECT, {"suspect_id": consort})
        assert game.round.suspect_id == consort
        assert game.phase == Phase.GUESSING

    def test_confirm_without_suspect_rejected(self):
        game = _make_game()
        _to_guessing(game)
        result = game.dispatch(Action.CONFIRM_ACCUSATION)
        assert not result.accepted
        assert game.phase == Phase.GUESSING

    def test_valid_targets(self):
        game = _make_game(5)
        _to_guessing(game)
        targets = game.get_available_actions()[0]["valid_targets"]
        assert _holder(game, Role.POLICE) not in targets
        assert _holder(game, Role.RULER) not in targets
        assert len(targets) == 3


# ── TestResolution ────────────────────────────────────────────────────────────


class TestResolution:
    def test_correct_accusation(self):
        game = _make_game()
        _to_guessing(game)
        thief = _holder(game, Role.THIEF)
        result = _accuse(game, thief)

        assert result.accepted
        assert result.outcome.is_correct
        assert game.phase == Phase.ROUND_END
        scores = _scores(game)
        assert scores[_holder(game, Role.RULER)] == 2000
        assert scores[_holder(game, Role.POLICE)] == 800
        assert scores[thief] == 0
        assert scores[_holder(game, Role.CONSORT)] == 1800
        thief_name = next(p.name for p in game.players if p.id == thief)
        assert game.message == f"Justice Served! The Chor was {thief_name}."

    def test_wrong_accusation(self):
        game = _make_game()
        _to_guessing(game)
        thief, consort = _holder(game, Role.THIEF), _holder(game, Role.CONSORT)
        result = _accuse(game, consort)

        assert not result.outcome.is_correct
        scores = _scores(game)
        assert scores[_holder(game, Role.POLICE)] == 0
        assert scores[thief] == 800
        assert scores[consort] == 1800
        assert "Escapes" in game.message

    def test_wins_and_rounds(self):
        game = _make_game()
        _to_guessing(game)
        thief = _holder(game, Role.THIEF)
        _accuse(game, thief)
        wins = {p.id: p.wins for p in game.players}
        assert wins[thief] == 0
        assert wins[_holder(game, Role.POLICE)] == 1
        assert all(p.rounds_played == 1 for p in game.players)

    def test_everyone_revealed_after_resolution(self):
        game = _make_game(8)
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        assert all(p.publicly_revealed for p in game.players)
        public = game.get_public_state()
        assert all(p["role"] is not None for p in public["players"])

    def test_scored_exactly_once(self):
        game = _make_game()
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        before = _scores(game)
        assert not game.dispatch(Action.CONFIRM_ACCUSATION).accepted
        assert _scores(game) == before
        assert len(game.history) == 1

    def test_total_points_conserved_per_round(self):
        game = _make_game(8)
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        # 2000 + 1800 + 1500 + 1200 + 400 + 200 + Police 800
        assert sum(_scores(game).values()) == 7900


# ── TestNoOps ─────────────────────────────────────────────────────────────────


class TestNoOps:
    @pytest.mark.parametrize("action", [
        Action.BEGIN_ROUND,
        Action.REVEAL_RULER,
        Action.REVEAL_POLICE,
        Action.SELECT_SUSPECT,
        Action.CONFIRM_ACCUSATION,
        Action.NEXT_ROUND,
    ])
    def test_wrong_phase_leaves_round_unchanged(self, action):
        game = _make_game()
        before = game.serialize()
        result = game.dispatch(action, {"player_id": "p-0", "suspect_id": "p-0"})
        assert not result.accepted
        assert result.reason
        assert game.serialize() == before

    def test_unknown_action(self):
        game = _make_game()
        result = game.dispatch("DANCE")
        assert not result.accepted
        assert result.action is None

    def test_string_actions_accepted(self):
        game = _make_game()
        assert game.dispatch("VIEW_ROLE", {"player_id": "p-0"}).accepted

    def test_returned_round_is_a_copy(self):
        game = _make_game()
        snapshot = game.round
        snapshot.players[0].score = 99999
        assert game.players[0].score == 0


# ── TestNextRound ─────────────────────────────────────────────────────────────


class TestNextRound:
    def test_redraw_keeps_totals(self):
        game = _make_game(5)
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        totals = _scores(game)

        assert game.dispatch(Action.NEXT_ROUND).accepted
        r = game.round
        assert r.phase == Phase.DISTRIBUTION
        assert r.round_number == 2
        assert r.suspect_id is None
        assert r.outcome is None
        assert r.message == "New Round! Tap to view your new role."
        assert _scores(game) == totals
        assert all(not p.self_revealed and not p.publicly_revealed for p in r.players)
        assert all(p.role is not None for p in r.players)

    def test_holders_match_new_deal(self):
        game = _make_game(6)
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        game.dispatch(Action.NEXT_ROUND)
        r = game.round
        assert r.thief_id == _holder(game, Role.THIEF)
        assert r.police_id == _holder(game, Role.POLICE)
        assert r.ruler_id == _holder(game, Role.RULER)

    def test_scores_accumulate(self):
        game = _make_game()
        for _ in range(3):
            _to_guessing(game)
            _accuse(game, _holder(game, Role.THIEF))
            game.dispatch(Action.NEXT_ROUND)
        assert all(p.rounds_played == 3 for p in game.players)
        assert sum(_scores(game).values()) == 3 * (2000 + 1800 + 800)
        assert game.round.round_number == 4

    def test_reset_returns_to_setup(self):
        game = _make_game()
        game.reset()
        assert game.phase == Phase.SETUP
        assert game.history == []


# ── TestStateViews ────────────────────────────────────────────────────────────


class TestStateViews:
    def test_public_state_hides_roles(self):
        game = _make_game()
        public = game.get_public_state()
        assert all(p["role"] is None for p in public["players"])
        assert public["ruler_id"] is None
        assert public["police_id"] is None
        assert "thief_id" not in public

    def test_public_state_after_reveals(self):
        game = _make_game()
        _to_guessing(game)
        public = game.get_public_state()
        assert public["ruler_id"] == _holder(game, Role.RULER)
        assert public["police_id"] == _holder(game, Role.POLICE)
        shown = {p["id"] for p in public["players"] if p["role"]}
        assert shown == {public["ruler_id"], public["police_id"]}

    def test_private_state(self):
        game = _make_game()
        thief = _holder(game, Role.THIEF)
        private = game.get_private_state(thief)
        assert private["role"] == "Chor"
        assert private["points"] == 0
        assert private["role_name"] == "Chor"

    def test_private_state_unknown_player(self):
        game = _make_game()
        with pytest.raises(ValueError):
            game.get_private_state("p-42")

    def test_serialize(self):
        game = _make_game()
        _to_guessing(game)
        _accuse(game, _holder(game, Role.THIEF))
        data = game.serialize()
        assert data["game_type"] == GAME_TYPE == game.game_type == "royal_court"
        assert data["phase"] == "round_end"
        assert data["thief_id"] == _holder(game, Role.THIEF)
        assert len(data["history"]) == 1
        assert data["outcome"]["is_correct"] is True
