"""
Battle session state for an interactive front-end.

Holds the authoritative tournament plus the battle currently on screen.
Cancelling simply forgets the in-flight battle, since nothing is recorded
until a winner is chosen.
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from .errors import NoBattleInProgressError
from .models import Battle, Track, Tournament
from .outcome import complete_battle
from .pairing import next_battle
from .ranking import rankings


@dataclass
class BattleSession:
    """Drive one tournament through next / choose / cancel."""

    tournament: Tournament
    current: Optional[Battle] = None
    rng: Optional[random.Random] = field(default=None, repr=False)

    @property
    def progress(self) -> tuple[int, int]:
        """(completed battles, total battles)."""
        return (len(self.tournament.battles), self.tournament.total_battles)

    @property
    def is_complete(self) -> bool:
        return self.tournament.is_complete

    def next(self) -> Optional[Battle]:
        """Return the in-flight battle, drawing a new one if there is none."""
        if self.current is None:
            self.current = next_battle(self.tournament, self.rng)
        return self.current

    def choose(self, winner_id: str) -> Tournament:
        """
        Record the winner of the in-flight battle.

        Returns:
            The new tournament (also stored on the session)

        Raises:
            NoBattleInProgressError: If no battle is in flight
            TournamentError: Propagated from complete_battle; session unchanged
        """
        if self.current is None:
            raise NoBattleInProgressError("No battle in progress")
        self.tournament = complete_battle(self.tournament, self.current, winner_id)
        self.current = None
        return self.tournament

    def cancel(self) -> None:
        if self.current is not None:
            logger.debug(f"Cancelled battle {self.current.id}")
        self.current = None

    def rankings(self) -> list[Track]:
        return rankings(self.tournament)
