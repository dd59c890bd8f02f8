from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from aipuzzle.core.board import BoardSnapshot, PuzzleBoard, Scheduler
from aipuzzle.core.config import EconomyConfig
from aipuzzle.core.levels import LevelData, fallback_level
from aipuzzle.core.progress import InsufficientFundsError, LevelReward, ProgressTracker
from aipuzzle.core.shop import Shop

logger = logging.getLogger(__name__)

NOT_ENOUGH_PZZLS = "Недостаточно PZZLS! Посетите магазин."


class Screen(Enum):
    INTRO = "INTRO"
    ABOUT = "ABOUT"
    TERMS = "TERMS"
    SUBSCRIPTION = "SUBSCRIPTION"
    LOADING = "LOADING"
    PLAYING = "PLAYING"
    WON = "WON"
    SHOP = "SHOP"
    LEADERBOARD = "LEADERBOARD"
    TRANSACTIONS = "TRANSACTIONS"
    STUDIO = "STUDIO"


_ONBOARDING_NEXT = {
    Screen.INTRO: Screen.ABOUT,
    Screen.ABOUT: Screen.TERMS,
    Screen.TERMS: Screen.SUBSCRIPTION,
}


class ChangeKind(Enum):
    SCREEN = "screen"
    BOARD = "board"
    BALANCE = "balance"
    REJECTED = "rejected"
    NOTICE = "notice"


@dataclass(frozen=True)
class SessionChange:
    kind: ChangeKind
    message: str = ""


class GameSession:
    """Everything a running game owns: progress, the current level, its board and the screen.

    The presentation layer subscribes once and redraws on each ``SessionChange``.
    Level content arrives asynchronously: ``begin_level`` hands out a token and
    ``finish_level`` only applies content whose token is still current.
    """

    def __init__(
        self,
        economy: EconomyConfig,
        *,
        tracker: Optional[ProgressTracker] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._economy = economy
        self._tracker = tracker or ProgressTracker()
        self._shop = Shop(economy, self._tracker)
        self._rng = rng or random.Random()
        self._scheduler = scheduler
        self._listener: Optional[Callable[[SessionChange], None]] = None
        self._screen = Screen.INTRO
        self._level_data: Optional[LevelData] = None
        self._board: Optional[PuzzleBoard] = None
        self._request_token = 0
        self._pending_level: Optional[int] = None
        self._purchasing = False
        self._last_reward: Optional[LevelReward] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def screen(self) -> Screen:
        return self._screen

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    @property
    def shop(self) -> Shop:
        return self._shop

    @property
    def economy(self) -> EconomyConfig:
        return self._economy

    @property
    def level_data(self) -> Optional[LevelData]:
        return self._level_data

    @property
    def board(self) -> Optional[PuzzleBoard]:
        return self._board

    @property
    def pending_level(self) -> Optional[int]:
        return self._pending_level

    @property
    def is_purchasing(self) -> bool:
        return self._purchasing

    @property
    def last_reward(self) -> Optional[LevelReward]:
        return self._last_reward

    def subscribe(self, listener: Optional[Callable[[SessionChange], None]]) -> None:
        """Register the single change listener (``None`` to detach)."""
        self._listener = listener

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, screen: Screen) -> None:
        if screen in (Screen.LOADING, Screen.WON):
            raise ValueError(f"{screen.name} is entered by the game flow, not by navigation")
        if screen is Screen.PLAYING and self._board is None:
            logger.debug("No level in play, staying on %s", self._screen.name)
            return
        self._set_screen(screen)

    def advance_onboarding(self) -> None:
        """INTRO -> ABOUT -> TERMS -> SUBSCRIPTION."""
        nxt = _ONBOARDING_NEXT.get(self._screen)
        if nxt is None:
            raise ValueError(f"No onboarding step after {self._screen.name}")
        self._set_screen(nxt)

    def decline_terms(self) -> None:
        self._set_screen(Screen.INTRO)

    # ------------------------------------------------------------------
    # Level flow
    # ------------------------------------------------------------------

    def begin_level(self, level_number: Optional[int] = None) -> int:
        """Tear down the current board and wait for content. Returns the request token."""
        if level_number is None:
            level_number = self._tracker.level
        self._request_token += 1
        self._pending_level = level_number
        self._board = None
        self._level_data = None
        logger.info("Loading level %d", level_number)
        self._set_screen(Screen.LOADING)
        return self._request_token

    def finish_level(self, token: int, data: LevelData) -> bool:
        """Apply loaded content. Returns False for a stale response, which is dropped."""
        if token != self._request_token or self._pending_level is None:
            logger.debug("Dropping stale content for level %d (token %d)", data.id, token)
            return False
        self._pending_level = None
        self._level_data = data
        board = PuzzleBoard(
            data.grid_size,
            rng=self._rng,
            scheduler=self._scheduler,
            on_solved=lambda: self._on_board_solved(token),
            on_change=lambda: self._emit(ChangeKind.BOARD),
        )
        self._board = board
        # The shuffle may leave the board solved; that still counts as a win.
        self._set_screen(Screen.WON if board.is_solved else Screen.PLAYING)
        return True

    def resume(self, data: LevelData, snapshot: Optional[BoardSnapshot] = None) -> None:
        """Continue a saved level without asking for new content."""
        token = self.begin_level(data.id)
        self.finish_level(token, data)
        board = self._board
        if snapshot is None or board is None or snapshot.grid_size != data.grid_size:
            return
        board.restore(snapshot)
        if not board.is_solved and self._screen is not Screen.PLAYING:
            self._set_screen(Screen.PLAYING)

    def start_level(self, loader: Callable[[int], LevelData], level_number: Optional[int] = None) -> int:
        """Load and apply a level synchronously (no worker thread)."""
        token = self.begin_level(level_number)
        self.finish_level(token, loader(self._pending_level or self._tracker.level))
        return token

    def click_tile(self, tile_id: int) -> bool:
        if self._board is None or self._screen is not Screen.PLAYING:
            return False
        return self._board.select_or_swap(tile_id)

    def next_level(self) -> Optional[int]:
        """Credit the won level and request the next one. None unless the level is won."""
        if self._screen is not Screen.WON:
            logger.debug("next_level ignored on %s", self._screen.name)
            return None
        return self._advance()

    def fail_level(self, token: int) -> bool:
        """Apply the fallback level when a content request died unexpectedly."""
        level_number = self._pending_level or self._tracker.level
        return self.finish_level(token, fallback_level(level_number))

    def _advance(self) -> int:
        level = self._tracker.level
        self._last_reward = self._tracker.complete_level(
            self._economy.level_points(level),
            self._economy.level_reward(level),
        )
        self._emit(ChangeKind.BALANCE)
        return self.begin_level(self._tracker.level)

    def _on_board_solved(self, token: int) -> None:
        # Boards from an earlier request, or one still being built, never end the level.
        if token != self._request_token or self._board is None:
            return
        logger.info("Level %d solved", self._tracker.level)
        self._set_screen(Screen.WON)

    # ------------------------------------------------------------------
    # Paid actions
    # ------------------------------------------------------------------

    def use_hint(self) -> bool:
        board = self._board
        if board is None or board.is_solved:
            self._emit(ChangeKind.NOTICE, "Подсказка сейчас недоступна.")
            return False
        try:
            self._shop.buy_hint()
        except InsufficientFundsError:
            self._emit(ChangeKind.REJECTED, NOT_ENOUGH_PZZLS)
            return False
        self._emit(ChangeKind.BALANCE)
        board.apply_hint()
        return True

    def use_skip(self) -> Optional[int]:
        """Pay to skip the level. The skipped level is credited like a win."""
        try:
            self._shop.buy_skip()
        except InsufficientFundsError:
            self._emit(ChangeKind.REJECTED, NOT_ENOUGH_PZZLS)
            return None
        self._emit(ChangeKind.BALANCE)
        return self._advance()

    def buy_discount(self) -> bool:
        try:
            self._shop.buy_discount()
        except InsufficientFundsError:
            self._emit(ChangeKind.REJECTED, "Недостаточно PZZLS!")
            return False
        self._emit(ChangeKind.BALANCE)
        self._emit(ChangeKind.NOTICE, "Скидка 50% на подписку активирована!")
        return True

    def begin_purchase(self) -> bool:
        """Mark a simulated payment as pending. False if one is already running."""
        if self._purchasing:
            return False
        self._purchasing = True
        return True

    def complete_purchase(self, pack_id: int, currency: str) -> None:
        try:
            tx = self._shop.buy_pack(pack_id, currency)
        finally:
            self._purchasing = False
        self._emit(ChangeKind.BALANCE)
        self._emit(ChangeKind.NOTICE, f"Успешно куплено {tx.amount} PZZLS!")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_screen(self, screen: Screen) -> None:
        self._screen = screen
        self._emit(ChangeKind.SCREEN)

    def _emit(self, kind: ChangeKind, message: str = "") -> None:
        if self._listener is not None:
            self._listener(SessionChange(kind, message))
