"""
Tournament domain module.

Round-robin battle engine: pair generation, outcome recording, ranking and
reconciliation of battle history after track edits. All operations are pure
transitions over immutable values.
"""

from .errors import (
    BattleAlreadyCompletedError,
    DuplicateBattleError,
    DuplicateTrackIdError,
    ImportFormatError,
    InconsistentStateError,
    InsufficientTracksError,
    InvalidWinnerError,
    NoBattleInProgressError,
    PlaylistNotFoundError,
    TournamentError,
    UnknownTrackError,
)
from .models import (
    Battle,
    Track,
    Tournament,
    battled_pairs,
    create_tournament,
    make_track,
    total_possible_battles,
)
from .pairing import available_pairs, next_battle
from .outcome import complete_battle
from .ranking import Standing, rankings, standings
from .reconcile import check_consistency, reconcile, replay_statistics, reset_battles
from .session import BattleSession
from .library import PlaylistLibrary

__all__ = [
    # Models
    "Track",
    "Battle",
    "Tournament",
    "make_track",
    "create_tournament",
    "total_possible_battles",
    "battled_pairs",
    # Engine
    "available_pairs",
    "next_battle",
    "complete_battle",
    "rankings",
    "standings",
    "Standing",
    "reconcile",
    "reset_battles",
    "replay_statistics",
    "check_consistency",
    # Front-end state
    "BattleSession",
    "PlaylistLibrary",
    # Errors
    "TournamentError",
    "InvalidWinnerError",
    "BattleAlreadyCompletedError",
    "UnknownTrackError",
    "DuplicateBattleError",
    "InsufficientTracksError",
    "DuplicateTrackIdError",
    "NoBattleInProgressError",
    "PlaylistNotFoundError",
    "ImportFormatError",
    "InconsistentStateError",
]
