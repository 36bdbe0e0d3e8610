"""
Abstract game interface for pass-the-device party games.

A single shared device drives the game: the UI layer forwards one discrete
player action at a time and re-renders from the views exposed here.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PartyGame(ABC):
    """
    Abstract base class for single-device, action-driven party games.

    Key concepts:
    - **Players**: Identified by string IDs stable for the whole session
    - **State**: Divided into public (table-visible) and private (per-player)
    - **Actions**: Named commands with an optional payload dict, applied via
      ``dispatch``.  Illegal actions are rejected, never raised.

    Example implementation:
        class MyGame(PartyGame):
            def dispatch(self, action, payload=None):
                if action == "ADVANCE" and self.phase == "lobby":
                    self.phase = "play"
                    return {"accepted": True}
                return {"accepted": False}
    """

    @property
    @abstractmethod
    def game_type(self) -> str:
        """
        Return the game type identifier.

        Returns:
            String identifier for this game type (e.g., "royal_court")
        """
        pass

    @abstractmethod
    def reset(self, seed: Optional[int] = None) -> None:
        """
        Discard the session and return to the setup phase.

        Args:
            seed: Optional random seed for reproducible deals
        """
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """
        Get the complete current game state.

        Returns:
            Dict containing:
                - public: Public game state
                - private_states: Dict mapping player_id to their private state
                - metadata: Round number, phase, etc.
        """
        pass

    @abstractmethod
    def get_public_state(self) -> Dict[str, Any]:
        """
        Get the state every player at the table may see.

        Hidden information (unrevealed roles) must be redacted.
        """
        pass

    @abstractmethod
    def get_private_state(self, player_id: str) -> Dict[str, Any]:
        """
        Get what only *player_id* may see when holding the device.

        Args:
            player_id: The player's unique identifier

        Returns:
            Dict with player-specific private state
        """
        pass

    @abstractmethod
    def get_available_actions(self) -> List[Dict[str, Any]]:
        """
        List the actions that would currently be accepted.

        Returns:
            List of action dicts, each containing:
                - action_type: String identifying the action
                - Additional payload fields the action expects
        """
        pass

    @abstractmethod
    def dispatch(self, action: Any, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Apply one player action.

        Args:
            action: Action identifier
            payload: Action-specific arguments

        Returns:
            A game-specific result describing acceptance or rejection.
        """
        pass

    def get_players(self) -> List[str]:
        """
        Get list of all player IDs in the game.

        Default implementation returns an empty list.
        """
        return []

    def serialize(self) -> Dict[str, Any]:
        """
        Serialize the complete game state for debugging or replay.

        Default implementation uses get_state().
        """
        return self.get_state()
