"""
Ranking calculation from battle statistics.
"""

from typing import NamedTuple

from .models import Track, Tournament


class Standing(NamedTuple):
    """A ranked track with its 1-based position."""

    position: int
    track: Track


def ranking_key(track: Track) -> tuple[float, int, int]:
    """Sort key: score, then wins, then battles played (all descending)."""
    return (-track.score, -track.wins, -track.battles)


def rankings(tournament: Tournament) -> list[Track]:
    """
    Order all tracks from best to worst.

    Tracks tied on score, wins and battles keep their playlist order
    (sorted() is stable); no further tie-break is applied.

    Args:
        tournament: Tournament to rank, complete or not

    Returns:
        New list containing every track
    """
    return sorted(tournament.tracks, key=ranking_key)


def standings(tournament: Tournament) -> list[Standing]:
    return [
        Standing(position=index, track=track)
        for index, track in enumerate(rankings(tournament), start=1)
    ]
