"""
Tests for recording battle outcomes.
"""

import pytest

from trackduel.domain.tournament import (
    BattleAlreadyCompletedError,
    DuplicateBattleError,
    InvalidWinnerError,
    UnknownTrackError,
    complete_battle,
    make_track,
    next_battle,
    reconcile,
)


class TestCompleteBattle:
    """Test applying a winner to a tournament."""

    def test_updates_winner_and_loser(self, tournament, battle_between):
        battle = battle_between(tournament, "A", "B")
        after = complete_battle(tournament, battle, "A")

        a, b = after.get_track("A"), after.get_track("B")
        assert (a.wins, a.losses, a.battles, a.score) == (1, 0, 1, 1.0)
        assert (b.wins, b.losses, b.battles, b.score) == (0, 1, 1, 0.0)

    def test_untouched_track_unchanged(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "A", "B"), "B")
        assert after.get_track("C") == tournament.get_track("C")

    def test_appends_completed_battle(self, tournament, battle_between):
        battle = battle_between(tournament, "A", "B")
        after = complete_battle(tournament, battle, "B")

        assert len(after.battles) == 1
        recorded = after.battles[0]
        assert recorded.id == battle.id
        assert recorded.winner_id == "B"
        assert recorded.loser_id == "A"
        assert recorded.timestamp >= battle.timestamp

    def test_battle_snapshots_carry_updated_stats(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "A", "B"), "A")
        recorded = after.battles[0]
        assert recorded.track_a.wins == 1
        assert recorded.track_b.losses == 1

    def test_keeps_track_order(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "C", "A"), "C")
        assert after.track_ids() == ["A", "B", "C"]

    def test_refreshes_updated_at(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "A", "B"), "A")
        assert after.updated_at >= tournament.updated_at
        assert after.created_at == tournament.created_at

    def test_input_tournament_not_mutated(self, tournament, battle_between):
        battle = battle_between(tournament, "A", "B")
        complete_battle(tournament, battle, "A")
        assert tournament.battles == ()
        assert tournament.get_track("A").wins == 0
        assert battle.winner_id is None

    def test_uses_current_stats_not_stale_snapshot(self, tournament, battle_between):
        # Drawn before A-C was recorded, so its A snapshot is 0-0
        stale = battle_between(tournament, "A", "B")
        after = complete_battle(tournament, battle_between(tournament, "A", "C"), "A")
        after = complete_battle(after, stale, "A")
        assert after.get_track("A").wins == 2

    def test_marks_complete_on_last_pair(self, tournament, play):
        after = play(tournament, [("A", "B"), ("A", "C")])
        assert not after.is_complete
        after = play(after, [("C", "B")])
        assert after.is_complete


class TestCompleteBattleErrors:
    """Test contract violations leave state unchanged."""

    def test_invalid_winner(self, tournament, battle_between):
        battle = battle_between(tournament, "A", "B")
        with pytest.raises(InvalidWinnerError) as exc_info:
            complete_battle(tournament, battle, "C")
        assert exc_info.value.winner_id == "C"
        assert tournament.battles == ()

    def test_already_completed(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "A", "B"), "A")
        with pytest.raises(BattleAlreadyCompletedError):
            complete_battle(after, after.battles[0], "B")

    def test_rematch_rejected(self, tournament):
        battle = next_battle(tournament)
        after = complete_battle(tournament, battle, battle.track_a.id)
        with pytest.raises(DuplicateBattleError):
            complete_battle(after, battle, battle.track_b.id)
        assert len(after.battles) == 1

    def test_rematch_in_reverse_order_rejected(self, tournament, battle_between):
        after = complete_battle(tournament, battle_between(tournament, "A", "B"), "A")
        with pytest.raises(DuplicateBattleError):
            complete_battle(after, battle_between(after, "B", "A"), "B")

    def test_removed_track(self, tournament, battle_between):
        battle = battle_between(tournament, "A", "C")
        edited = reconcile(tournament, [make_track("A", "Alpha"), make_track("B", "Bravo")])
        with pytest.raises(UnknownTrackError) as exc_info:
            complete_battle(edited, battle, "A")
        assert exc_info.value.track_id == "C"
