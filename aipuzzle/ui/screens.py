"""Onboarding and loading screens."""

from __future__ import annotations

from typing import Callable, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from aipuzzle.ui.colors import PuzzleColors
from aipuzzle.ui.overlays import card_container, primary_button_style, secondary_button_style


def label(text: str, style: str, *, wrap: bool = True, align=Qt.AlignLeft) -> QLabel:
    lbl = QLabel(text)
    lbl.setWordWrap(wrap)
    lbl.setAlignment(align)
    lbl.setStyleSheet(style)
    return lbl


def title_label(text: str, color: str = PuzzleColors.TEXT_PRIMARY) -> QLabel:
    return label(text, f"color: {color}; font-size: 24px; font-weight: 800;", align=Qt.AlignCenter)


def body_label(text: str) -> QLabel:
    return label(text, f"color: {PuzzleColors.TEXT_SECONDARY}; font-size: 14px;")


def button(text: str, on_click: Callable[[], None], *, primary: bool = True) -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(primary_button_style() if primary else secondary_button_style())
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
    btn.clicked.connect(on_click)
    return btn


def callout(title: str, lines: List[str], accent: str) -> QFrame:
    box = QFrame()
    box.setStyleSheet(f"QFrame {{ background: #f9fafb; border-left: 4px solid {accent}; border-radius: 10px; }}")
    layout = QVBoxLayout(box)
    layout.setContentsMargins(14, 10, 14, 10)
    layout.addWidget(label(title, f"color: {accent}; font-weight: 800; font-size: 13px;"))
    for line in lines:
        layout.addWidget(body_label(line))
    return box


class CenteredCard(QWidget):
    """A screen made of one centered card."""

    def __init__(self, object_name: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(16, 16, 16, 16)
        outer.addStretch(1)
        row = QHBoxLayout()
        row.addStretch(1)
        self.card = card_container(radius=32, object_name=object_name)
        self.content = QVBoxLayout(self.card)
        self.content.setContentsMargins(32, 28, 32, 28)
        self.content.setSpacing(16)
        row.addWidget(self.card)
        row.addStretch(1)
        outer.addLayout(row)
        outer.addStretch(1)


class IntroScreen(CenteredCard):
    def __init__(self, on_next: Callable[[], None], parent: Optional[QWidget] = None) -> None:
        super().__init__("introCard", parent)
        c = self.content
        c.addWidget(label("🧩", "font-size: 48px;", align=Qt.AlignCenter))
        c.addWidget(title_label("AI_Puzzle"))
        c.addWidget(
            label(
                "12+",
                f"background: {PuzzleColors.PURPLE_DARK}; color: white; border-radius: 10px;"
                " padding: 2px 10px; font-weight: 800; font-size: 11px;",
                align=Qt.AlignCenter,
            ),
            0,
            Qt.AlignHCenter,
        )
        c.addWidget(
            body_label(
                "Добро пожаловать в AI_Puzzle!\n\n"
                "Это интерактивная игра-пазл с элементами логики. Игра создана для развлечения "
                "и подходит для пользователей 12+ (так как есть внутренняя валюта и покупки)."
            )
        )
        c.addWidget(callout("Контакты разработчика:", ["Telegram: @ai_gameover"], PuzzleColors.PURPLE))
        c.addWidget(
            label(
                "Нажимая «Далее», вы соглашаетесь с Правилами использования и Политикой конфиденциальности.",
                f"color: {PuzzleColors.TEXT_MUTED}; font-size: 11px;",
            )
        )
        c.addWidget(button("Далее", on_next))


class AboutScreen(CenteredCard):
    def __init__(self, on_next: Callable[[], None], parent: Optional[QWidget] = None) -> None:
        super().__init__("aboutCard", parent)
        c = self.content
        c.addWidget(title_label("Об игре"))
        c.addWidget(
            body_label("AI_Puzzle — это пазл, где вы проходите уровни, решаете задачи и повышаете свой рейтинг.")
        )
        c.addWidget(
            callout("Цель:", ["Предоставить увлекательную игру без вредоносного функционала."], "#3b82f6")
        )
        c.addWidget(
            callout(
                "Рейтинг:",
                [
                    "• Каждый игрок получает очки за пройденные уровни",
                    "• Рейтинг показывает глобальный топ среди всех игроков",
                ],
                PuzzleColors.YELLOW,
            )
        )
        c.addWidget(
            label(
                "Примечание: темы уровней придумывает ИИ, но он не используется для анализа игроков.",
                f"color: {PuzzleColors.TEXT_MUTED}; font-size: 11px; font-style: italic;",
            )
        )
        c.addWidget(button("Далее", on_next))


class TermsScreen(CenteredCard):
    _TERMS = [
        "Игра предназначена только для развлечения.",
        "Функционал безопасен.",
        "Вы принимаете правила использования.",
        "Ваши данные (ID, рейтинг, покупки) обрабатываются для работы игры.",
        "Данные не передаются третьим лицам.",
        "Оформляемые подписки и покупки PZZLS прозрачны и отменяемы в любой момент.",
    ]

    def __init__(
        self,
        on_accept: Callable[[], None],
        on_decline: Callable[[], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__("termsCard", parent)
        c = self.content
        c.addWidget(title_label("Соглашение"))

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        scroll.setMinimumHeight(220)
        body = QWidget()
        body_layout = QVBoxLayout(body)
        body_layout.addWidget(body_label("Используя AI_Puzzle, вы подтверждаете, что:"))
        for term in self._TERMS:
            body_layout.addWidget(body_label(f"• {term}"))
        body_layout.addStretch(1)
        scroll.setWidget(body)
        c.addWidget(scroll)

        row = QHBoxLayout()
        row.setSpacing(12)
        row.addWidget(button("Не согласен", on_decline, primary=False))
        row.addWidget(button("Согласен", on_accept))
        c.addLayout(row)


class SubscriptionScreen(CenteredCard):
    _PERKS = [
        "Доступ к премиум-уровням",
        "Дополнительные подсказки",
        "Отключение рекламы",
        "Бонусные PZZLS ежедневно",
    ]

    def __init__(self, on_start: Callable[[], None], parent: Optional[QWidget] = None) -> None:
        super().__init__("subscriptionCard", parent)
        c = self.content
        c.addWidget(title_label("AI_Puzzle+", PuzzleColors.PURPLE))
        c.addWidget(label("Премиум возможности", f"color: {PuzzleColors.TEXT_MUTED};", align=Qt.AlignCenter))
        for perk in self._PERKS:
            c.addWidget(label(f"✓  {perk}", f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 14px;"))
        c.addWidget(
            label(
                "299 ₽ / мес\nАвтопродление • Отмена в любой момент",
                f"background: {PuzzleColors.BG}; border-radius: 12px; padding: 12px;"
                f" color: {PuzzleColors.TEXT_PRIMARY}; font-size: 16px; font-weight: 700;",
                align=Qt.AlignCenter,
            )
        )
        # Both choices start the game; payment is not wired up.
        c.addWidget(button("Оформить подписку", on_start))
        c.addWidget(button("Играть бесплатно с рекламой", on_start, primary=False))


class LoadingScreen(QWidget):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.addStretch(1)
        self._title = label(
            "",
            f"color: {PuzzleColors.TEXT_SECONDARY}; font-size: 24px; font-weight: 800;",
            align=Qt.AlignCenter,
        )
        layout.addWidget(self._title)
        layout.addWidget(
            label("ИИ генерирует задачу", f"color: {PuzzleColors.TEXT_MUTED};", align=Qt.AlignCenter)
        )
        layout.addStretch(1)

    def set_level(self, level: int) -> None:
        self._title.setText(f"Загрузка уровня {level}...")
