"""Tournament-specific exceptions for error handling."""


class TournamentError(Exception):
    """Base exception for tournament operations."""

    pass


class InvalidWinnerError(TournamentError):
    """Raised when the declared winner is neither side of the battle."""

    def __init__(self, winner_id: str, battle_id: str):
        self.winner_id = winner_id
        self.battle_id = battle_id
        super().__init__(
            f"Track {winner_id!r} is not part of battle {battle_id!r}"
        )


class BattleAlreadyCompletedError(TournamentError):
    """Raised when a battle that already has a winner is completed again."""

    pass


class UnknownTrackError(TournamentError):
    """Raised when a battle references a track missing from the tournament."""

    def __init__(self, track_id: str):
        self.track_id = track_id
        super().__init__(f"Track {track_id!r} is not in this tournament")


class DuplicateBattleError(TournamentError):
    """Raised when a pair of tracks has already battled."""

    pass


class InsufficientTracksError(TournamentError):
    """Raised when a tournament is created with fewer than 2 tracks."""

    pass


class DuplicateTrackIdError(TournamentError):
    """Raised when a track list contains the same id more than once."""

    def __init__(self, track_ids: list[str]):
        self.track_ids = track_ids
        super().__init__(f"Duplicate track ids: {', '.join(track_ids)}")


class NoBattleInProgressError(TournamentError):
    """Raised when a winner is chosen but no battle is in flight."""

    pass


class PlaylistNotFoundError(TournamentError):
    """Raised when a playlist id is not in the library."""

    def __init__(self, playlist_id: str):
        self.playlist_id = playlist_id
        super().__init__(f"Playlist {playlist_id!r} not found")


class ImportFormatError(TournamentError):
    """Raised when an import file cannot be parsed."""

    pass


class InconsistentStateError(TournamentError):
    """Raised when stored statistics disagree with the battle log."""

    def __init__(self, playlist_id: str, problems: list[str]):
        self.playlist_id = playlist_id
        self.problems = problems
        super().__init__(
            f"Playlist {playlist_id!r} is inconsistent: " + "; ".join(problems)
        )
