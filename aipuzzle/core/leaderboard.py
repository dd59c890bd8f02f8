from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

PLAYER_NAME = "Вы"
PLAYER_AVATAR = "👤"
LEADERBOARD_LIMIT = 100

_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    avatar: str = ""
    is_me: bool = False


def rank_players(
    entries: Iterable[LeaderboardEntry],
    player_score: int,
    *,
    player_name: str = PLAYER_NAME,
    limit: int = LEADERBOARD_LIMIT,
) -> List[LeaderboardEntry]:
    """Insert the current player among the listed players and sort by score, highest first.

    Ties keep listing order, with the current player after everyone already listed.
    """
    players = [LeaderboardEntry(e.name, e.score, e.avatar, is_me=False) for e in entries]
    players.append(LeaderboardEntry(player_name, player_score, PLAYER_AVATAR, is_me=True))
    players.sort(key=lambda e: e.score, reverse=True)
    return players[:limit]


def player_rank(ranked: List[LeaderboardEntry]) -> int:
    """1-based rank of the current player, 0 if they fell outside the list."""
    for index, entry in enumerate(ranked, start=1):
        if entry.is_me:
            return index
    return 0


def rank_badge(rank: int) -> str:
    return _MEDALS.get(rank, str(rank))
