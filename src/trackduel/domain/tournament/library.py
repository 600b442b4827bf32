"""
In-memory playlist library.

Keeps every known tournament plus the one currently selected. Each update
replaces the stored value wholesale so readers holding an older snapshot
are never affected.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from loguru import logger

from .errors import PlaylistNotFoundError
from .models import Track, Tournament, _now, new_playlist_id
from .reconcile import reconcile, reset_battles


class PlaylistLibrary:
    """Collection of tournaments keyed by id, in insertion order."""

    def __init__(self, playlists: Iterable[Tournament] = ()):
        self._playlists: dict[str, Tournament] = {}
        self._current_id: Optional[str] = None
        for playlist in playlists:
            self.add(playlist)

    def __len__(self) -> int:
        return len(self._playlists)

    def __contains__(self, playlist_id: object) -> bool:
        return playlist_id in self._playlists

    def all(self) -> list[Tournament]:
        return list(self._playlists.values())

    def get(self, playlist_id: str) -> Tournament:
        try:
            return self._playlists[playlist_id]
        except KeyError:
            raise PlaylistNotFoundError(playlist_id) from None

    def add(self, playlist: Tournament) -> Tournament:
        """Add a playlist. An existing playlist with the same id is replaced."""
        self._playlists[playlist.id] = playlist
        logger.debug(f"Added playlist {playlist.id} ({playlist.name})")
        return playlist

    def update(self, playlist: Tournament) -> Tournament:
        if playlist.id not in self._playlists:
            raise PlaylistNotFoundError(playlist.id)
        self._playlists[playlist.id] = playlist
        return playlist

    def delete(self, playlist_id: str) -> None:
        if playlist_id not in self._playlists:
            raise PlaylistNotFoundError(playlist_id)
        del self._playlists[playlist_id]
        if self._current_id == playlist_id:
            self._current_id = None
        logger.info(f"Deleted playlist {playlist_id}")

    def set_current(self, playlist_id: Optional[str]) -> Optional[Tournament]:
        if playlist_id is not None and playlist_id not in self._playlists:
            raise PlaylistNotFoundError(playlist_id)
        self._current_id = playlist_id
        return self.current

    @property
    def current(self) -> Optional[Tournament]:
        if self._current_id is None:
            return None
        return self._playlists[self._current_id]

    def reset(self, playlist_id: str) -> Tournament:
        return self.update(reset_battles(self.get(playlist_id)))

    def edit_tracks(
        self,
        playlist_id: str,
        new_tracks: Sequence[Track],
        name: Optional[str] = None,
    ) -> Tournament:
        """Reconcile a playlist with an edited track list, optionally renaming it."""
        playlist = reconcile(self.get(playlist_id), new_tracks)
        if name is not None and name.strip():
            playlist = replace(playlist, name=name.strip())
        return self.update(playlist)

    def import_playlists(self, playlists: Iterable[Tournament]) -> list[Tournament]:
        """
        Add imported playlists, assigning fresh ids to any that collide.

        Returns:
            The playlists as stored
        """
        imported = []
        for playlist in playlists:
            if playlist.id in self._playlists:
                new_id = new_playlist_id()
                logger.info(f"Playlist id {playlist.id} already exists, importing as {new_id}")
                playlist = replace(playlist, id=new_id, updated_at=_now())
            imported.append(self.add(playlist))
        return imported
