"""Tests for the in-memory playlist library."""

from dataclasses import replace

import pytest

from trackduel.domain.tournament import (
    PlaylistLibrary,
    PlaylistNotFoundError,
    make_track,
)


@pytest.fixture
def library(completed) -> PlaylistLibrary:
    return PlaylistLibrary([completed])


class TestPlaylistLibrary:
    """Tests for CRUD and current selection."""

    def test_get_and_contains(self, library, completed) -> None:
        assert completed.id in library
        assert library.get(completed.id) is completed
        assert len(library) == 1

    def test_get_unknown(self, library) -> None:
        with pytest.raises(PlaylistNotFoundError):
            library.get("nope")

    def test_update_replaces(self, library, completed) -> None:
        renamed = replace(completed, name="Renamed")
        library.update(renamed)
        assert library.get(completed.id).name == "Renamed"

    def test_update_unknown(self, library, completed) -> None:
        with pytest.raises(PlaylistNotFoundError):
            library.update(replace(completed, id="other"))

    def test_current_follows_updates(self, library, completed) -> None:
        library.set_current(completed.id)
        library.update(replace(completed, name="Renamed"))
        assert library.current.name == "Renamed"

    def test_delete_clears_current(self, library, completed) -> None:
        library.set_current(completed.id)
        library.delete(completed.id)
        assert library.current is None
        assert len(library) == 0

    def test_set_current_unknown(self, library) -> None:
        with pytest.raises(PlaylistNotFoundError):
            library.set_current("nope")

    def test_reset(self, library, completed) -> None:
        result = library.reset(completed.id)
        assert result.battles == ()
        assert library.get(completed.id).battles == ()

    def test_edit_tracks_reconciles_and_renames(self, library, completed) -> None:
        result = library.edit_tracks(
            completed.id,
            [make_track("A", "Alpha"), make_track("B", "Bravo")],
            name=" Trimmed ",
        )
        assert result.name == "Trimmed"
        assert len(result.battles) == 1
        assert library.get(completed.id) is result

    def test_import_assigns_new_id_on_collision(self, library, completed) -> None:
        imported = library.import_playlists([completed])
        assert imported[0].id != completed.id
        assert len(library) == 2
        assert imported[0].battles == completed.battles

    def test_import_keeps_free_id(self, tournament) -> None:
        library = PlaylistLibrary()
        imported = library.import_playlists([tournament])
        assert imported[0].id == tournament.id
