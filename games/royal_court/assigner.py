"""Random role assignment for a table of players."""

import random
from dataclasses import replace
from typing import List, Optional, Sequence

from games.royal_court.roles import DEFAULT_CATALOG, RoleCatalog
from games.royal_court.state import Player


class RoleAssigner:
    """
    Deals one role per player as a uniformly random permutation.

    The role list for the table size is shuffled in place with
    ``random.Random.shuffle`` (a Fisher–Yates shuffle) and zipped
    positionally with the players, so each of the n! deals is equally
    likely.  Pass *rng* or *seed* for reproducible deals.
    """

    def __init__(
        self,
        catalog: RoleCatalog = DEFAULT_CATALOG,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self.catalog = catalog
        self._rng = rng if rng is not None else random.Random(seed)

    def assign(self, players: Sequence[Player]) -> List[Player]:
        """Return copies of *players*, each holding exactly one role."""
        pool = self.catalog.roles_for_count(len(players))
        self._rng.shuffle(pool)
        return [replace(player, role=role) for player, role in zip(players, pool)]
