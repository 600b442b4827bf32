"""
Pair generation for round-robin battles.

Pure functional implementation with no side effects: the tournament is only
read, and the caller decides what to do with the returned battle.
"""

import random
from typing import Optional

from loguru import logger

from .models import Battle, Track, Tournament, _now, battled_pairs, new_battle_id


def available_pairs(tournament: Tournament) -> list[tuple[Track, Track]]:
    """
    List every unordered track pair that has not battled yet.

    Pairs are matched by id, so (A, B) and (B, A) are the same pair.

    Args:
        tournament: Tournament to inspect

    Returns:
        Pairs in track order (i < j); empty when fewer than 2 tracks
    """
    done = battled_pairs(tournament)
    tracks = tournament.tracks
    pairs = []
    for i in range(len(tracks)):
        for j in range(i + 1, len(tracks)):
            if frozenset((tracks[i].id, tracks[j].id)) not in done:
                pairs.append((tracks[i], tracks[j]))
    return pairs


def next_battle(
    tournament: Tournament, rng: Optional[random.Random] = None
) -> Optional[Battle]:
    """
    Pick the next matchup uniformly at random among the unbattled pairs.

    The choice is drawn fresh on every call so repeated plays of the same
    playlist do not follow a fixed order.

    Args:
        tournament: Tournament to draw from
        rng: Random source (defaults to the module-level generator)

    Returns:
        A new Battle without a winner, or None when no pair is left
        (tournament complete or fewer than 2 tracks)
    """
    pairs = available_pairs(tournament)
    if not pairs:
        logger.debug(f"No battles left for playlist {tournament.id}")
        return None

    chooser = rng if rng is not None else random
    track_a, track_b = chooser.choice(pairs)

    battle = Battle(
        id=new_battle_id(),
        track_a=track_a,
        track_b=track_b,
        timestamp=_now(),
    )
    logger.debug(
        f"Drew battle {battle.id}: {track_a.id} vs {track_b.id} "
        f"({len(pairs)} pairs available)"
    )
    return battle
