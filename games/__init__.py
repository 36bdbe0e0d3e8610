"""
Game implementations.

Each game is a self-contained submodule under games/<game_type>/ providing:
- game.py: Core game logic implementing core.PartyGame
- config.py: Setup configuration (Pydantic model)
- create_game(): Factory function building a dealt game from its config
"""
