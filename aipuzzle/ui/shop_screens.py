"""Shop, transaction history and leaderboard screens."""

from __future__ import annotations

from typing import Callable, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from aipuzzle.core.leaderboard import LeaderboardEntry, rank_badge
from aipuzzle.core.progress import Transaction
from aipuzzle.core.shop import Shop
from aipuzzle.ui.colors import PuzzleColors, amount_color, format_amount
from aipuzzle.ui.screens import CenteredCard, body_label, button, label, title_label


def _clear_layout(layout: QVBoxLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()


def _row_frame(highlight: bool = False) -> QFrame:
    frame = QFrame()
    border = PuzzleColors.PURPLE if highlight else "#f3f4f6"
    background = "rgba(139, 92, 246, 0.10)" if highlight else "#ffffff"
    frame.setStyleSheet(f"QFrame {{ background: {background}; border: 1px solid {border}; border-radius: 12px; }}")
    return frame


def _header(title: str, on_back: Callable[[], None], extra: Optional[QPushButton] = None) -> QHBoxLayout:
    row = QHBoxLayout()
    back = button("←", on_back, primary=False)
    back.setFixedWidth(48)
    row.addWidget(back)
    row.addWidget(title_label(title), 1)
    if extra is not None:
        extra.setFixedWidth(48)
        row.addWidget(extra)
    else:
        row.addSpacing(48)
    return row


class _ScrollList(QScrollArea):
    def __init__(self) -> None:
        super().__init__()
        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.NoFrame)
        self.setMinimumHeight(320)
        body = QWidget()
        self.rows = QVBoxLayout(body)
        self.rows.setSpacing(8)
        self.setWidget(body)


class ShopScreen(CenteredCard):
    """Spend PZZLS on skip/discount, or buy packs in the selected display currency."""

    def __init__(
        self,
        shop: Shop,
        *,
        on_back: Callable[[], None],
        on_history: Callable[[], None],
        on_skip: Callable[[], None],
        on_discount: Callable[[], None],
        on_buy: Callable[[int, str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__("shopCard", parent)
        self._shop = shop
        self._on_buy = on_buy
        self._buy_buttons: List[QPushButton] = []
        c = self.content
        c.addLayout(_header("Магазин PZZLS", on_back, button("📜", on_history, primary=False)))

        self._balance = label(
            "",
            f"background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 {PuzzleColors.PURPLE},"
            f" stop:1 {PuzzleColors.PINK}); color: white; border-radius: 16px; padding: 16px;"
            " font-size: 22px; font-weight: 800;",
        )
        c.addWidget(self._balance)

        c.addWidget(label("ПОТРАТИТЬ PZZLS", f"color: {PuzzleColors.TEXT_MUTED}; font-weight: 800; font-size: 12px;"))
        c.addWidget(button(f"⏭️  Пропуск уровня — {shop.economy.cost_skip:,} 💎", on_skip, primary=False))
        c.addWidget(button(f"🏷️  Скидка 50% на Premium — {shop.economy.cost_discount:,} 💎", on_discount, primary=False))

        buy_header = QHBoxLayout()
        buy_header.addWidget(
            label("КУПИТЬ PZZLS", f"color: {PuzzleColors.TEXT_MUTED}; font-weight: 800; font-size: 12px;"), 1
        )
        self._currency = QComboBox()
        for code in shop.currencies:
            self._currency.addItem(code, code)
        self._currency.currentIndexChanged.connect(lambda _: self._refresh_prices())
        buy_header.addWidget(self._currency)
        c.addLayout(buy_header)

        self._packs_layout = QVBoxLayout()
        self._packs_layout.setSpacing(8)
        c.addLayout(self._packs_layout)
        c.addWidget(
            label(
                "Покупки защищены. Нажимая кнопку, вы подтверждаете оплату выбранным способом.",
                f"color: {PuzzleColors.TEXT_MUTED}; font-size: 10px;",
                align=Qt.AlignCenter,
            )
        )
        self._refresh_prices()

    @property
    def currency(self) -> str:
        return self._currency.currentData()

    def _refresh_prices(self) -> None:
        _clear_layout(self._packs_layout)
        self._buy_buttons = []
        for pack in self._shop.packs:
            frame = _row_frame(highlight=pack.popular)
            row = QHBoxLayout(frame)
            row.setContentsMargins(12, 10, 12, 10)
            caption = f"💎 {pack.pzzls:,} PZZLS" + ("   POPULAR" if pack.popular else "")
            row.addWidget(label(caption, f"color: {PuzzleColors.TEXT_PRIMARY}; font-weight: 700;"), 1)
            buy = button(self._shop.price_label(pack, self.currency), lambda _=False, p=pack.id: self._on_buy(p, self.currency))
            buy.setFixedWidth(120)
            row.addWidget(buy)
            self._buy_buttons.append(buy)
            self._packs_layout.addWidget(frame)

    def refresh(self, balance: int, purchasing: bool) -> None:
        self._balance.setText(f"Ваш баланс\n{balance:,} PZZLS")
        for btn in self._buy_buttons:
            btn.setEnabled(not purchasing)


class TransactionsScreen(CenteredCard):
    def __init__(self, on_back: Callable[[], None], parent: Optional[QWidget] = None) -> None:
        super().__init__("transactionsCard", parent)
        self.content.addLayout(_header("История", on_back))
        self._list = _ScrollList()
        self.content.addWidget(self._list)

    def refresh(self, transactions: List[Transaction]) -> None:
        rows = self._list.rows
        _clear_layout(rows)
        if not transactions:
            rows.addWidget(label("🧾\nИстория пуста", f"color: {PuzzleColors.TEXT_MUTED};", align=Qt.AlignCenter))
        for tx in transactions:
            frame = _row_frame()
            row = QHBoxLayout(frame)
            row.setContentsMargins(12, 8, 12, 8)
            text = QVBoxLayout()
            text.addWidget(
                label(tx.date.strftime("%H:%M:%S %d.%m.%Y"), f"color: {PuzzleColors.TEXT_MUTED}; font-size: 11px;")
            )
            text.addWidget(label(tx.description, f"color: {PuzzleColors.TEXT_PRIMARY}; font-weight: 700;"))
            row.addLayout(text, 1)
            row.addWidget(
                label(
                    format_amount(tx.amount),
                    f"color: {amount_color(tx.amount)}; font-family: monospace; font-weight: 800;",
                    wrap=False,
                )
            )
            rows.addWidget(frame)
        rows.addStretch(1)


class LeaderboardScreen(CenteredCard):
    def __init__(self, on_back: Callable[[], None], parent: Optional[QWidget] = None) -> None:
        super().__init__("leaderboardCard", parent)
        self.content.addLayout(_header("Топ Игроков", on_back))
        self.content.addWidget(body_label("Глобальный рейтинг"))
        self._list = _ScrollList()
        self.content.addWidget(self._list)

    def refresh(self, ranked: List[LeaderboardEntry]) -> None:
        rows = self._list.rows
        _clear_layout(rows)
        for rank, entry in enumerate(ranked, start=1):
            frame = _row_frame(highlight=entry.is_me)
            row = QHBoxLayout(frame)
            row.setContentsMargins(12, 8, 12, 8)
            badge_style = "font-size: 20px;" if rank <= 3 else f"color: {PuzzleColors.TEXT_MUTED}; font-weight: 800;"
            badge = label(rank_badge(rank), badge_style, wrap=False, align=Qt.AlignCenter)
            badge.setFixedWidth(32)
            row.addWidget(badge)
            row.addWidget(label(entry.avatar, "font-size: 20px;", wrap=False))
            name = f"{entry.name} (Вы)" if entry.is_me else entry.name
            name_color = PuzzleColors.PURPLE if entry.is_me else PuzzleColors.TEXT_PRIMARY
            row.addWidget(label(name, f"color: {name_color}; font-weight: 700;"), 1)
            row.addWidget(
                label(f"{entry.score:,}", f"color: {PuzzleColors.TEXT_SECONDARY}; font-family: monospace; font-weight: 800;", wrap=False)
            )
            rows.addWidget(frame)
        rows.addStretch(1)
