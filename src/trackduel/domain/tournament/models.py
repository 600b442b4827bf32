"""
Tournament domain models.

Contains immutable data structures for tracks, battles and tournaments.
Every transition builds new values with dataclasses.replace; nothing here
is ever mutated in place.
"""

import uuid
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Sequence

from .errors import DuplicateTrackIdError, InsufficientTracksError

MIN_TRACKS = 2


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Track:
    """A playlist entry carrying cumulative battle statistics.

    Display metadata is opaque to the engine. Only `id` matters for
    pairing, recording and reconciliation.
    """

    id: str
    name: str
    artist: str = ""
    album: str = ""
    image_url: str = ""
    preview_url: str = ""
    duration: Optional[int] = None  # milliseconds
    wins: int = 0
    losses: int = 0

    @property
    def battles(self) -> int:
        return self.wins + self.losses

    @property
    def score(self) -> float:
        """Win rate, 0 for a track that has never battled."""
        if self.battles == 0:
            return 0.0
        return self.wins / self.battles

    def with_stats(self, wins: int, losses: int) -> "Track":
        return replace(self, wins=wins, losses=losses)

    def cleared(self) -> "Track":
        return replace(self, wins=0, losses=0)


@dataclass(frozen=True)
class Battle:
    """A single pairwise comparison between two tracks.

    Battles returned by the pair generator have no winner. Once a winner is
    recorded the battle is final and is only ever dropped by reconciliation.
    """

    id: str
    track_a: Track
    track_b: Track
    timestamp: datetime
    winner_id: Optional[str] = None

    @property
    def track_ids(self) -> frozenset[str]:
        return frozenset((self.track_a.id, self.track_b.id))

    @property
    def is_completed(self) -> bool:
        return self.winner_id is not None

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        if self.winner_id == self.track_a.id:
            return self.track_b.id
        return self.track_a.id

    def involves(self, track_id: str) -> bool:
        return track_id in (self.track_a.id, self.track_b.id)


@dataclass(frozen=True)
class Tournament:
    """A playlist and its pairwise battle history.

    Track order is display order only. `is_complete` is derived from the
    battle and track counts on every access.
    """

    id: str
    name: str
    tracks: tuple[Track, ...] = ()
    battles: tuple[Battle, ...] = ()
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def total_battles(self) -> int:
        return total_possible_battles(len(self.tracks))

    @property
    def is_complete(self) -> bool:
        if len(self.tracks) < MIN_TRACKS:
            return False
        return len(self.battles) >= self.total_battles

    def track_ids(self) -> list[str]:
        return [track.id for track in self.tracks]

    def get_track(self, track_id: str) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None


def total_possible_battles(track_count: int) -> int:
    """Number of unordered pairs among `track_count` tracks."""
    if track_count < MIN_TRACKS:
        return 0
    return track_count * (track_count - 1) // 2


def battled_pairs(tournament: Tournament) -> set[frozenset[str]]:
    """Unordered track id pairs that already have a recorded battle."""
    return {battle.track_ids for battle in tournament.battles}


def find_duplicate_ids(tracks: Sequence[Track]) -> list[str]:
    counts = Counter(track.id for track in tracks)
    return sorted(track_id for track_id, count in counts.items() if count > 1)


def ensure_unique_ids(tracks: Sequence[Track]) -> None:
    """
    Reject track lists that repeat an id.

    Raises:
        DuplicateTrackIdError: If any id appears more than once
    """
    duplicates = find_duplicate_ids(tracks)
    if duplicates:
        raise DuplicateTrackIdError(duplicates)


def make_track(
    id: str,
    name: str,
    artist: str = "",
    album: str = "",
    image_url: str = "",
    preview_url: str = "",
    duration: Optional[int] = None,
) -> Track:
    """Build a track that has never battled."""
    return Track(
        id=str(id),
        name=name,
        artist=artist,
        album=album,
        image_url=image_url,
        preview_url=preview_url,
        duration=duration,
    )


def new_playlist_id() -> str:
    return f"playlist-{uuid.uuid4().hex}"


def new_battle_id() -> str:
    return f"battle-{uuid.uuid4().hex}"


def create_tournament(
    name: str,
    tracks: Sequence[Track],
    tournament_id: Optional[str] = None,
) -> Tournament:
    """
    Create a fresh tournament with an empty battle history.

    Incoming statistics are discarded; every track starts at 0-0.

    Args:
        name: Playlist name shown to the user
        tracks: Tracks in display order
        tournament_id: Optional caller-assigned id (generated if omitted)

    Returns:
        New Tournament

    Raises:
        InsufficientTracksError: If fewer than 2 tracks are given
        DuplicateTrackIdError: If any track id appears more than once
    """
    if len(tracks) < MIN_TRACKS:
        raise InsufficientTracksError(
            f"Need at least {MIN_TRACKS} tracks to battle, got {len(tracks)}"
        )
    ensure_unique_ids(tracks)

    now = _now()
    return Tournament(
        id=tournament_id or new_playlist_id(),
        name=name.strip(),
        tracks=tuple(track.cleared() for track in tracks),
        battles=(),
        created_at=now,
        updated_at=now,
    )
