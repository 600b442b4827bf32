"""
Outcome recording for completed battles.

Applies a declared winner to the tournament and returns the new state.
All validation runs before any value is built, so a failed call leaves the
caller holding the same (unchanged) tournament.
"""

from dataclasses import replace

from loguru import logger

from .errors import (
    BattleAlreadyCompletedError,
    DuplicateBattleError,
    InvalidWinnerError,
    UnknownTrackError,
)
from .models import Battle, Tournament, _now, battled_pairs


def complete_battle(tournament: Tournament, battle: Battle, winner_id: str) -> Tournament:
    """
    Record the winner of an in-flight battle.

    Statistics are taken from the tournament's current tracks rather than
    from the battle snapshots, which may be stale if the battle was drawn
    before another one was recorded.

    Args:
        tournament: Current tournament state
        battle: Battle returned by next_battle, without a winner
        winner_id: Id of the chosen track

    Returns:
        New Tournament with both tracks updated and the battle appended

    Raises:
        InvalidWinnerError: If winner_id matches neither side
        BattleAlreadyCompletedError: If the battle already has a winner
        UnknownTrackError: If either side is no longer in the tournament
        DuplicateBattleError: If this pair already has a recorded battle
    """
    if battle.is_completed:
        raise BattleAlreadyCompletedError(
            f"Battle {battle.id} already has winner {battle.winner_id!r}"
        )
    if not battle.involves(winner_id):
        raise InvalidWinnerError(winner_id, battle.id)

    loser_id = battle.track_b.id if winner_id == battle.track_a.id else battle.track_a.id

    winner = tournament.get_track(winner_id)
    if winner is None:
        raise UnknownTrackError(winner_id)
    loser = tournament.get_track(loser_id)
    if loser is None:
        raise UnknownTrackError(loser_id)

    if battle.track_ids in battled_pairs(tournament):
        raise DuplicateBattleError(
            f"{winner_id} and {loser_id} have already battled in {tournament.id}"
        )

    winner = winner.with_stats(winner.wins + 1, winner.losses)
    loser = loser.with_stats(loser.wins, loser.losses + 1)
    updated = {winner.id: winner, loser.id: loser}

    now = _now()
    completed = replace(
        battle,
        track_a=updated[battle.track_a.id],
        track_b=updated[battle.track_b.id],
        winner_id=winner_id,
        timestamp=now,
    )

    logger.debug(
        f"Battle {battle.id}: {winner.id} beat {loser.id} "
        f"({winner.wins}-{winner.losses} vs {loser.wins}-{loser.losses})"
    )

    return replace(
        tournament,
        tracks=tuple(updated.get(track.id, track) for track in tournament.tracks),
        battles=tournament.battles + (completed,),
        updated_at=now,
    )
