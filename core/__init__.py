"""
Core abstract interfaces for pass-the-device party games.

Every game exposes the same view/dispatch surface so a UI layer can drive it
without knowing its rules.
"""

from core.game import PartyGame

__all__ = [
    "PartyGame",
]
