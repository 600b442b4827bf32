"""Shared fixtures for trackduel tests."""

from datetime import datetime, timezone
from typing import Callable

import pytest

from trackduel.domain.tournament import (
    Battle,
    Track,
    Tournament,
    complete_battle,
    create_tournament,
    make_track,
)


@pytest.fixture
def tracks() -> list[Track]:
    """Three tracks A, B, C with no battle history."""
    return [
        make_track("A", "Alpha", artist="Artist A", album="First"),
        make_track("B", "Bravo", artist="Artist B", album="Second"),
        make_track("C", "Charlie", artist="Artist C", album="Third"),
    ]


@pytest.fixture
def tournament(tracks: list[Track]) -> Tournament:
    return create_tournament("Test Playlist", tracks, tournament_id="playlist-test")


@pytest.fixture
def battle_between() -> Callable[[Tournament, str, str], Battle]:
    """Build an in-flight battle between two tracks of a tournament."""

    def _battle(tournament: Tournament, a_id: str, b_id: str) -> Battle:
        return Battle(
            id=f"battle-{a_id}-{b_id}",
            track_a=tournament.get_track(a_id),
            track_b=tournament.get_track(b_id),
            timestamp=datetime.now(timezone.utc),
        )

    return _battle


@pytest.fixture
def play(battle_between) -> Callable[[Tournament, list[tuple[str, str]]], Tournament]:
    """Record a list of (winner, loser) results in order."""

    def _play(tournament: Tournament, results: list[tuple[str, str]]) -> Tournament:
        for winner_id, loser_id in results:
            battle = battle_between(tournament, winner_id, loser_id)
            tournament = complete_battle(tournament, battle, winner_id)
        return tournament

    return _play


@pytest.fixture
def completed(tournament: Tournament, play) -> Tournament:
    """A beats B, A beats C, C beats B."""
    return play(tournament, [("A", "B"), ("A", "C"), ("C", "B")])
