from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Set

from PySide6.QtCore import QObject, QRunnable, Qt, QThreadPool, QTimer, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from aipuzzle.core.config import GameConfig
from aipuzzle.core.content import ContentError, ContentProvider, GameConcept, load_level
from aipuzzle.core.leaderboard import rank_players
from aipuzzle.core.progress import ProgressStore
from aipuzzle.core.session import ChangeKind, GameSession, Screen, SessionChange
from aipuzzle.ui.board_widget import BoardWidget
from aipuzzle.ui.colors import PuzzleColors
from aipuzzle.ui.overlays import LevelWonOverlay, NoticeOverlay
from aipuzzle.ui.screens import (
    AboutScreen,
    IntroScreen,
    LoadingScreen,
    SubscriptionScreen,
    TermsScreen,
    button,
    label,
)
from aipuzzle.ui.shop_screens import LeaderboardScreen, ShopScreen, TransactionsScreen
from aipuzzle.ui.studio import CONCEPT_ERROR, MARKETING_ERROR, StudioScreen

logger = logging.getLogger(__name__)

WIN_OVERLAY_DELAY_MS = 500


def qt_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    QTimer.singleShot(delay_ms, callback)


class _TaskSignals(QObject):
    finished = Signal(object)
    failed = Signal(str)


class BackgroundTask(QRunnable):
    """Run a blocking call on the thread pool; results come back through Qt signals."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        super().__init__()
        self._fn = fn
        self.signals = _TaskSignals()

    def run(self) -> None:
        try:
            result = self._fn()
        except ContentError as e:
            self.signals.failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Background task crashed")
            self.signals.failed.emit(f"{type(e).__name__}: {e}")
            return
        self.signals.finished.emit(result)


class PlayingScreen(QWidget):
    """Header with score/balance, the board, and the hint/skip buttons."""

    def __init__(
        self,
        *,
        on_tile_click: Callable[[int], None],
        on_hint: Callable[[], None],
        on_skip: Callable[[], None],
        on_navigate: Callable[[Screen], None],
        hint_cost: int,
        skip_cost: int,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(24, 16, 24, 16)
        outer.setSpacing(12)

        header = QHBoxLayout()
        self._score = self._header_button(lambda: on_navigate(Screen.LEADERBOARD))
        self._level = label("", f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 18px; font-weight: 800;",
                            align=Qt.AlignCenter)
        self._balance = self._header_button(lambda: on_navigate(Screen.SHOP))
        header.addWidget(self._score)
        header.addWidget(self._level, 1)
        header.addWidget(self._balance)
        outer.addLayout(header)

        self._theme = label("", f"color: {PuzzleColors.TEXT_SECONDARY}; font-size: 14px;", align=Qt.AlignCenter)
        outer.addWidget(self._theme)

        self.board_widget = BoardWidget(on_tile_click)
        self.board_widget.setMinimumSize(360, 360)
        outer.addWidget(self.board_widget, 1)

        powerups = QHBoxLayout()
        powerups.addWidget(button(f"💡 Подсказка · {hint_cost:,} 💎", on_hint, primary=False))
        powerups.addWidget(button(f"⏭️ Пропуск · {skip_cost:,} 💎", on_skip, primary=False))
        outer.addLayout(powerups)

        links = QHBoxLayout()
        links.addWidget(button("Магазин PZZLS", lambda: on_navigate(Screen.SHOP), primary=False))
        links.addWidget(button("Студия идей", lambda: on_navigate(Screen.STUDIO), primary=False))
        outer.addLayout(links)

    @staticmethod
    def _header_button(on_click: Callable[[], None]) -> QPushButton:
        btn = QPushButton("")
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setStyleSheet(
            f"QPushButton {{ background: white; border: none; border-radius: 14px; padding: 8px 14px;"
            f" color: {PuzzleColors.PURPLE}; font-size: 16px; font-weight: 800; }}"
        )
        btn.clicked.connect(on_click)
        return btn

    def set_header(self, level: int, theme: str, score: int, balance: int) -> None:
        self._level.setText(f"Уровень {level}")
        self._theme.setText(theme)
        self._score.setText(f"🏆 {score}")
        self._balance.setText(f"{balance} 💎")


class MainWindow(QMainWindow):
    """Hosts every screen in a stack and mirrors the ``GameSession`` onto them.

    The window is the session's single subscriber. Content requests run on the
    global thread pool; level responses carry their request token so the session
    can drop stale ones.
    """

    def __init__(
        self,
        config: GameConfig,
        session: GameSession,
        provider: Optional[ContentProvider],
        store: Optional[ProgressStore] = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._session = session
        self._provider = provider
        self._store = store
        self._pool = QThreadPool.globalInstance()
        self._tasks: Set[BackgroundTask] = set()
        self._screens: Dict[Screen, QWidget] = {}
        self._shown_board = None

        self.setWindowTitle("AI_Puzzle")
        self.setMinimumSize(520, 760)
        self._build_ui()
        self._session.subscribe(self._on_session_change)
        self._on_session_change(SessionChange(ChangeKind.SCREEN))

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        economy = self._config.economy
        s = self._session
        root = QWidget()
        root.setObjectName("root")
        root.setStyleSheet(f"QWidget#root {{ background: {PuzzleColors.BG}; }}")
        layout = QVBoxLayout(root)
        layout.setContentsMargins(0, 0, 0, 0)
        self._stack = QStackedWidget()
        layout.addWidget(self._stack)
        self.setCentralWidget(root)

        self._loading = LoadingScreen()
        self._playing = PlayingScreen(
            on_tile_click=s.click_tile,
            on_hint=s.use_hint,
            on_skip=self._skip_level,
            on_navigate=s.navigate,
            hint_cost=economy.cost_hint,
            skip_cost=economy.cost_skip,
        )
        self._shop = ShopScreen(
            s.shop,
            on_back=lambda: s.navigate(Screen.PLAYING),
            on_history=lambda: s.navigate(Screen.TRANSACTIONS),
            on_skip=self._skip_level,
            on_discount=s.buy_discount,
            on_buy=self._buy_pack,
        )
        self._transactions = TransactionsScreen(on_back=lambda: s.navigate(Screen.SHOP))
        self._leaderboard = LeaderboardScreen(on_back=lambda: s.navigate(Screen.PLAYING))
        self._studio = StudioScreen(
            on_back=lambda: s.navigate(Screen.PLAYING),
            on_generate_concept=self._generate_concept,
            on_generate_marketing=self._generate_marketing,
        )

        screens = {
            Screen.INTRO: IntroScreen(s.advance_onboarding),
            Screen.ABOUT: AboutScreen(s.advance_onboarding),
            Screen.TERMS: TermsScreen(on_accept=s.advance_onboarding, on_decline=s.decline_terms),
            Screen.SUBSCRIPTION: SubscriptionScreen(lambda: self._start_level()),
            Screen.LOADING: self._loading,
            Screen.PLAYING: self._playing,
            Screen.SHOP: self._shop,
            Screen.TRANSACTIONS: self._transactions,
            Screen.LEADERBOARD: self._leaderboard,
            Screen.STUDIO: self._studio,
        }
        for screen, widget in screens.items():
            self._screens[screen] = widget
            self._stack.addWidget(widget)
        # The win overlay sits on top of the playing screen.
        self._screens[Screen.WON] = self._playing

        self._won_overlay = LevelWonOverlay(root)
        self._won_overlay.next_requested.connect(self._next_level)
        self._notice = NoticeOverlay(root)

    def _show_screen(self, screen: Screen) -> None:
        if screen is Screen.LOADING:
            self._loading.set_level(self._session.pending_level or self._session.tracker.level)
        elif screen is Screen.SHOP:
            self._refresh_shop()
        elif screen is Screen.TRANSACTIONS:
            self._transactions.refresh(list(self._session.tracker.transactions))
        elif screen is Screen.LEADERBOARD:
            self._leaderboard.refresh(rank_players(self._config.leaderboard, self._session.tracker.score))
        elif screen in (Screen.PLAYING, Screen.WON):
            self._refresh_header()
        self._stack.setCurrentWidget(self._screens[screen])
        if screen is Screen.WON:
            QTimer.singleShot(WIN_OVERLAY_DELAY_MS, self._show_win)

    def _refresh_header(self) -> None:
        data = self._session.level_data
        tracker = self._session.tracker
        self._playing.set_header(tracker.level, data.theme if data else "", tracker.score, tracker.balance)

    def _refresh_shop(self) -> None:
        self._shop.refresh(self._session.tracker.balance, self._session.is_purchasing)

    def _show_win(self) -> None:
        if self._session.screen is not Screen.WON:
            return
        level = self._session.tracker.level
        economy = self._config.economy
        data = self._session.level_data
        self._won_overlay.show_result(
            economy.level_points(level),
            economy.level_reward(level),
            data.fun_fact if data else "",
        )

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    def _on_session_change(self, change: SessionChange) -> None:
        if change.kind is ChangeKind.SCREEN:
            screen = self._session.screen
            if screen in (Screen.PLAYING, Screen.WON) and self._session.board is not None:
                self._sync_board()
            self._show_screen(screen)
        elif change.kind is ChangeKind.BOARD:
            self._playing.board_widget.refresh()
        elif change.kind is ChangeKind.BALANCE:
            self._refresh_header()
            self._refresh_shop()
        elif change.kind in (ChangeKind.REJECTED, ChangeKind.NOTICE):
            self._notice.show_message(change.message)

    def _sync_board(self) -> None:
        board = self._session.board
        data = self._session.level_data
        if board is self._shown_board:
            return
        self._shown_board = board
        self._playing.board_widget.set_board(board, data.colors if data else ())

    # ------------------------------------------------------------------
    # Level flow
    # ------------------------------------------------------------------

    def _start_level(self, level_number: Optional[int] = None) -> None:
        token = self._session.begin_level(level_number)
        self._request_level(token, self._session.pending_level or 1)

    def _next_level(self) -> None:
        token = self._session.next_level()
        if token is not None:
            self._request_level(token, self._session.tracker.level)

    def _skip_level(self) -> None:
        token = self._session.use_skip()
        if token is not None:
            self._request_level(token, self._session.tracker.level)

    def _request_level(self, token: int, level_number: int) -> None:
        provider = self._provider
        self._run(
            lambda: (token, load_level(provider, level_number)),
            on_done=lambda result: self._session.finish_level(*result),
            on_error=lambda message: self._session.fail_level(token),
        )

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def _buy_pack(self, pack_id: int, currency: str) -> None:
        if not self._session.begin_purchase():
            return
        self._refresh_shop()
        # Stands in for the payment provider round-trip.
        QTimer.singleShot(
            self._config.economy.purchase_delay_ms,
            lambda: self._session.complete_purchase(pack_id, currency),
        )

    # ------------------------------------------------------------------
    # Studio
    # ------------------------------------------------------------------

    def _generate_concept(self, topic: str) -> None:
        if self._provider is None:
            self._studio.show_error(CONCEPT_ERROR)
            return
        provider = self._provider
        self._run(
            lambda: provider.request_concept(topic),
            on_done=self._studio.show_concept,
            on_error=lambda message: self._studio.show_error(CONCEPT_ERROR),
        )

    def _generate_marketing(self, concept: GameConcept) -> None:
        if self._provider is None:
            self._studio.show_error(MARKETING_ERROR)
            return
        provider = self._provider
        self._run(
            lambda: provider.request_marketing_strategy(concept),
            on_done=self._studio.show_marketing,
            on_error=lambda message: self._studio.show_error(MARKETING_ERROR),
        )

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _run(
        self,
        fn: Callable[[], Any],
        *,
        on_done: Callable[[Any], None],
        on_error: Optional[Callable[[str], None]] = None,
    ) -> None:
        task = BackgroundTask(fn)
        self._tasks.add(task)

        def _finished(result: Any) -> None:
            self._tasks.discard(task)
            on_done(result)

        def _failed(message: str) -> None:
            self._tasks.discard(task)
            logger.warning("Background request failed: %s", message)
            if on_error is not None:
                on_error(message)

        task.signals.finished.connect(_finished, Qt.QueuedConnection)
        task.signals.failed.connect(_failed, Qt.QueuedConnection)
        self._pool.start(task)

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._store is not None:
            session = self._session
            board = session.board
            self._store.save(session.tracker, session.level_data, board.snapshot() if board is not None else None)
        super().closeEvent(event)
