"""Role definitions and the player-count escalation table for Royal Court.

Every point value, reveal priority and display name lives here so that the
engine in game.py and the scorer in scoring.py stay table-driven.  Adding or
tweaking a role requires changes only in this module.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple


class ConfigurationError(ValueError):
    """Raised when the catalog cannot serve the requested table size."""


class Role(Enum):
    """Royal Court character identities."""

    RULER = "Raja"
    CONSORT = "Rani"
    MINISTER = "Mantri"
    GENERAL = "Senapati"
    POLICE = "Police"
    COURTESAN = "Courtesan"
    CITIZEN = "Praja"
    THIEF = "Chor"


class Language(Enum):
    """Display languages for role names and status messages."""

    NEPALI = "NEPALI"
    ENGLISH = "ENGLISH"


@dataclass(frozen=True)
class RoleDef:
    """Static catalog entry for one role."""

    role: Role
    names: Mapping[Language, str]
    points: int
    priority: int
    description: str = ""
    objective: str = ""
    abilities: Tuple[str, ...] = field(default_factory=tuple)

    def display_name(self, language: Language = Language.NEPALI) -> str:
        return self.names[language]


# ── player-count table ───────────────────────────────────────────────────────

MIN_PLAYERS = 4
MAX_PLAYERS = 8

BASE_ROLES: List[Role] = [Role.RULER, Role.POLICE, Role.THIEF, Role.CONSORT]

# One extra seat per tier, in this exact order.
ESCALATION: Dict[int, Role] = {
    5: Role.MINISTER,
    6: Role.GENERAL,
    7: Role.COURTESAN,
    8: Role.CITIZEN,
}


# ── catalog ──────────────────────────────────────────────────────────────────

ROLE_DEFS: Dict[Role, RoleDef] = {
    Role.RULER: RoleDef(
        role=Role.RULER,
        names={Language.NEPALI: "Raja", Language.ENGLISH: "King"},
        points=2000,
        priority=8,
        description="The Ruler. Reveals first. Always scores 2000.",
        objective="Protect your kingdom and ensure lawful order prevails",
        abilities=("First revelation", "Point security"),
    ),
    Role.CONSORT: RoleDef(
        role=Role.CONSORT,
        names={Language.NEPALI: "Rani", Language.ENGLISH: "Queen"},
        points=1800,
        priority=7,
        description="The High Royal. Supports the Raja.",
        objective="Support the Raja and maintain royal authority",
        abilities=("High point value", "Royal protection"),
    ),
    Role.MINISTER: RoleDef(
        role=Role.MINISTER,
        names={Language.NEPALI: "Mantri", Language.ENGLISH: "Minister"},
        points=1500,
        priority=6,
        description="The Advisor. Guides the court.",
        objective="Guide the court with wisdom and strategic counsel",
        abilities=("Moderate point value", "Advisory position"),
    ),
    Role.GENERAL: RoleDef(
        role=Role.GENERAL,
        names={Language.NEPALI: "Senapati", Language.ENGLISH: "General"},
        points=1200,
        priority=5,
        description="The Commander. Protects the realm.",
        objective="Defend the royal court from internal threats",
        abilities=("Military authority", "Moderate protection"),
    ),
    Role.POLICE: RoleDef(
        role=Role.POLICE,
        names={Language.NEPALI: "Prahari", Language.ENGLISH: "Police"},
        points=800,
        priority=4,
        description="The Investigator. Must find the Chor to score.",
        objective="Identify and accuse the Chor before they escape",
        abilities=("Investigation power", "Single accusation"),
    ),
    Role.COURTESAN: RoleDef(
        role=Role.COURTESAN,
        names={Language.NEPALI: "Nartak", Language.ENGLISH: "Courtesan"},
        points=400,
        priority=3,
        description="The Entertainer. Neutral observer.",
        objective="Navigate court politics while maintaining neutrality",
        abilities=("Low risk", "Neutral position"),
    ),
    Role.CITIZEN: RoleDef(
        role=Role.CITIZEN,
        names={Language.NEPALI: "Praja", Language.ENGLISH: "Citizen"},
        points=200,
        priority=2,
        description="The Citizen. Common folk.",
        objective="Survive the court intrigue with minimal losses",
        abilities=("Minimal risk", "Commoner perspective"),
    ),
    Role.THIEF: RoleDef(
        role=Role.THIEF,
        names={Language.NEPALI: "Chor", Language.ENGLISH: "Thief"},
        points=0,
        priority=1,
        description="The Criminal. Steals 800 points if Police fails.",
        objective="Evade detection and undermine the Police investigation",
        abilities=("Deception", "Point reversal"),
    ),
}


class RoleCatalog:
    """
    Immutable role table injected into the engine.

    Holds one ``RoleDef`` per identity and answers which identities are in
    play for a given table size.
    """

    def __init__(self, definitions: Optional[Mapping[Role, RoleDef]] = None):
        defs = dict(definitions if definitions is not None else ROLE_DEFS)
        missing = [r for r in BASE_ROLES + list(ESCALATION.values()) if r not in defs]
        if missing:
            raise ConfigurationError(
                f"Catalog is missing definitions for: {[r.name for r in missing]}"
            )
        for role, definition in defs.items():
            if definition.role != role:
                raise ConfigurationError(
                    f"Catalog entry for {role.name} describes {definition.role.name}"
                )
        self._defs: Dict[Role, RoleDef] = defs

    def __len__(self) -> int:
        return len(self._defs)

    def __contains__(self, role: Role) -> bool:
        return role in self._defs

    def get(self, role: Role) -> RoleDef:
        return self._defs[role]

    def points(self, role: Role) -> int:
        return self._defs[role].points

    def display_name(self, role: Role, language: Language = Language.NEPALI) -> str:
        return self._defs[role].display_name(language)

    def by_priority(self) -> List[RoleDef]:
        """Return every definition, highest reveal priority first."""
        return sorted(self._defs.values(), key=lambda d: -d.priority)

    def roles_for_count(self, n: int) -> List[Role]:
        """Return the ordered role identities used at a table of *n* players."""
        if not (MIN_PLAYERS <= n <= MAX_PLAYERS):
            raise ConfigurationError(
                f"Royal Court supports {MIN_PLAYERS}–{MAX_PLAYERS} players, got {n}"
            )
        roles = list(BASE_ROLES)
        for seat in range(MIN_PLAYERS + 1, n + 1):
            roles.append(ESCALATION[seat])
        return roles


DEFAULT_CATALOG = RoleCatalog()


def roles_for_count(n: int) -> List[Role]:
    """Escalation table lookup against the default catalog."""
    return DEFAULT_CATALOG.roles_for_count(n)
