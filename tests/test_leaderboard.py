"""Tests for aipuzzle.core.leaderboard – ranking the player among the listed players."""

from __future__ import annotations

from aipuzzle.core.leaderboard import (
    PLAYER_NAME,
    LeaderboardEntry,
    player_rank,
    rank_badge,
    rank_players,
)

PLAYERS = (
    LeaderboardEntry("PuzzleMaster99", 15400, "🦁"),
    LeaderboardEntry("LogicQueen", 12500, "👸"),
    LeaderboardEntry("CasualCat", 5000, "🐱"),
    LeaderboardEntry("GlobalChamp", 42000, "🌍"),
)


class TestRankPlayers:
    def test_sorted_by_score(self):
        ranked = rank_players(PLAYERS, 0)
        scores = [e.score for e in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_player_inserted(self):
        ranked = rank_players(PLAYERS, 13000)
        me = [e for e in ranked if e.is_me]
        assert len(me) == 1
        assert me[0].name == PLAYER_NAME
        assert player_rank(ranked) == 3

    def test_tie_puts_player_after_listed(self):
        ranked = rank_players(PLAYERS, 5000)
        assert [e.name for e in ranked[-2:]] == ["CasualCat", PLAYER_NAME]

    def test_listed_players_never_marked(self):
        marked = (LeaderboardEntry("Sneaky", 1, is_me=True),)
        ranked = rank_players(marked, 0)
        assert [e.is_me for e in ranked] == [False, True]

    def test_limit(self):
        ranked = rank_players(PLAYERS, 0, limit=2)
        assert [e.name for e in ranked] == ["GlobalChamp", "PuzzleMaster99"]
        assert player_rank(ranked) == 0


class TestRankBadge:
    def test_medals(self):
        assert [rank_badge(r) for r in (1, 2, 3)] == ["🥇", "🥈", "🥉"]

    def test_plain_number(self):
        assert rank_badge(4) == "4"
