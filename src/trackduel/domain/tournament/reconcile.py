"""
Reconciliation of battle history with an edited track list.

When tracks are added, removed or renamed, the battle log is filtered to
the battles whose both sides still exist and every statistic is replayed
from that log. Replaying from scratch keeps counts self-consistent no matter
how many edits accumulate.
"""

from dataclasses import replace
from typing import Iterable, Sequence

from loguru import logger

from .models import Battle, Track, Tournament, _now, ensure_unique_ids


def replay_statistics(
    track_ids: Iterable[str], battles: Iterable[Battle]
) -> dict[str, tuple[int, int]]:
    """
    Count wins and losses per track by replaying a battle log.

    Battles without a winner, and sides not listed in track_ids, are ignored.

    Args:
        track_ids: Ids to count for
        battles: Battle log to replay

    Returns:
        Dict mapping track id -> (wins, losses)
    """
    stats = {track_id: [0, 0] for track_id in track_ids}
    for battle in battles:
        if battle.winner_id is None:
            continue
        if battle.winner_id in stats:
            stats[battle.winner_id][0] += 1
        if battle.loser_id in stats:
            stats[battle.loser_id][1] += 1
    return {track_id: (wins, losses) for track_id, (wins, losses) in stats.items()}


def reconcile(tournament: Tournament, new_tracks: Sequence[Track]) -> Tournament:
    """
    Adapt a tournament to a new track list without losing valid history.

    1. Merge: known ids carry over their statistics, new ids start at 0-0.
       Metadata always comes from new_tracks.
    2. Filter: keep only battles whose both sides are in new_tracks.
    3. Recompute: replay the surviving battles and override every count.
    4. Finalize: replace tracks and battles wholesale.

    Fewer than 2 new tracks is allowed; such a tournament is never complete.

    Args:
        tournament: Current tournament state
        new_tracks: Edited track list in display order

    Returns:
        New reconciled Tournament

    Raises:
        DuplicateTrackIdError: If new_tracks repeats an id
    """
    ensure_unique_ids(new_tracks)

    existing = {track.id: track for track in tournament.tracks}
    merged = []
    for track in new_tracks:
        previous = existing.get(track.id)
        if previous is not None:
            merged.append(track.with_stats(previous.wins, previous.losses))
        else:
            merged.append(track.cleared())

    new_ids = {track.id for track in merged}
    surviving = tuple(
        battle
        for battle in tournament.battles
        if battle.track_a.id in new_ids and battle.track_b.id in new_ids
    )

    replayed = replay_statistics(new_ids, surviving)
    final_tracks = tuple(track.with_stats(*replayed[track.id]) for track in merged)

    dropped = len(tournament.battles) - len(surviving)
    added = len(new_ids - existing.keys())
    removed = len(existing.keys() - new_ids)
    logger.info(
        f"Reconciled playlist {tournament.id}: +{added} / -{removed} tracks, "
        f"{len(surviving)} battles kept, {dropped} dropped"
    )

    return replace(
        tournament,
        tracks=final_tracks,
        battles=surviving,
        updated_at=_now(),
    )


def reset_battles(tournament: Tournament) -> Tournament:
    """Clear the battle history and zero every track, keeping identity."""
    logger.info(
        f"Reset playlist {tournament.id} ({len(tournament.battles)} battles cleared)"
    )
    return replace(
        tournament,
        tracks=tuple(track.cleared() for track in tournament.tracks),
        battles=(),
        updated_at=_now(),
    )


def check_consistency(tournament: Tournament) -> list[str]:
    """
    Describe every way the tournament disagrees with its own battle log.

    Returns:
        List of problem descriptions (empty when consistent)
    """
    problems = []
    track_ids = tournament.track_ids()
    known = set(track_ids)

    if len(known) != len(track_ids):
        problems.append("playlist contains duplicate track ids")

    seen = set()
    for battle in tournament.battles:
        if battle.track_a.id == battle.track_b.id:
            problems.append(f"battle {battle.id} pits a track against itself")
        missing = [tid for tid in (battle.track_a.id, battle.track_b.id) if tid not in known]
        if missing:
            problems.append(
                f"battle {battle.id} references missing tracks: {', '.join(missing)}"
            )
        if battle.winner_id is None:
            problems.append(f"battle {battle.id} has no winner")
        elif not battle.involves(battle.winner_id):
            problems.append(f"battle {battle.id} winner {battle.winner_id} is not a side")
        if battle.track_ids in seen:
            problems.append(
                f"battle {battle.id} repeats pair {battle.track_a.id} / {battle.track_b.id}"
            )
        seen.add(battle.track_ids)

    replayed = replay_statistics(known, tournament.battles)
    for track in tournament.tracks:
        expected = replayed.get(track.id, (0, 0))
        if (track.wins, track.losses) != expected:
            problems.append(
                f"track {track.id} has {track.wins}-{track.losses}, "
                f"battle log says {expected[0]}-{expected[1]}"
            )

    return problems
