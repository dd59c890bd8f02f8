"""Studio: generate a game concept, show a moodboard for it, and write its marketing copy."""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLineEdit, QPushButton, QWidget

from aipuzzle.core.content import GameConcept, MarketingData
from aipuzzle.ui.colors import PuzzleColors
from aipuzzle.ui.screens import CenteredCard, body_label, button, label, title_label

TOPIC_SUGGESTIONS = ("Подводная пекарня", "Сонные коты", "Неоновая геометрия", "Уборка в лесу")

CONCEPT_ERROR = "Ой! Не удалось придумать идею. Попробуйте снова."
MARKETING_ERROR = "Не удалось подготовить рекламу. Попробуйте снова."

MOODBOARD_PALETTES: Tuple[Tuple[str, ...], ...] = (
    ("#FFD166", "#06D6A0", "#118AB2", "#EF476F"),
    ("#8EECF5", "#90DBF4", "#A3C4F3", "#CFBAF0"),
    ("#FF99C8", "#FCF6BD", "#D0F4DE", "#A9DEF9"),
)


def moodboard_palette(concept: GameConcept) -> Sequence[str]:
    """Pick one of the casual palettes, rotating by title length."""
    return MOODBOARD_PALETTES[len(concept.title) % len(MOODBOARD_PALETTES)]


class StudioScreen(CenteredCard):
    def __init__(
        self,
        *,
        on_back: Callable[[], None],
        on_generate_concept: Callable[[str], None],
        on_generate_marketing: Callable[[GameConcept], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__("studioCard", parent)
        self._on_generate_concept = on_generate_concept
        self._on_generate_marketing = on_generate_marketing
        self._concept: Optional[GameConcept] = None
        c = self.content

        header = QHBoxLayout()
        back = button("←", on_back, primary=False)
        back.setFixedWidth(48)
        header.addWidget(back)
        header.addWidget(title_label("Придумай яркую идею"), 1)
        header.addSpacing(48)
        c.addLayout(header)

        c.addWidget(body_label("Введите тему, чтобы сгенерировать концепт казуальной головоломки."))
        row = QHBoxLayout()
        self._topic = QLineEdit()
        self._topic.setPlaceholderText("например, уборка на книжной полке, кормление облаков...")
        self._topic.returnPressed.connect(self._request_concept)
        row.addWidget(self._topic, 1)
        self._concept_btn = button("Создать", self._request_concept)
        self._concept_btn.setFixedWidth(120)
        row.addWidget(self._concept_btn)
        c.addLayout(row)

        chips = QHBoxLayout()
        for topic in TOPIC_SUGGESTIONS:
            chip = QPushButton(topic)
            chip.setCursor(Qt.CursorShape.PointingHandCursor)
            chip.setStyleSheet(
                f"QPushButton {{ background: {PuzzleColors.BG_ACCENT}; color: {PuzzleColors.PURPLE_DARK};"
                " border: none; border-radius: 10px; padding: 4px 10px; font-size: 12px; }"
            )
            chip.clicked.connect(lambda _=False, t=topic: self._topic.setText(t))
            chips.addWidget(chip)
        c.addLayout(chips)

        self._status = label("", f"color: {PuzzleColors.SPEND}; font-size: 13px;")
        c.addWidget(self._status)

        self._concept_box = label("", f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 14px;")
        c.addWidget(self._concept_box)

        self._swatches = QHBoxLayout()
        self._swatches.setSpacing(6)
        c.addLayout(self._swatches)

        self._marketing_btn = button("Сделать рекламу", self._request_marketing, primary=False)
        self._marketing_btn.setEnabled(False)
        c.addWidget(self._marketing_btn)

        self._marketing_box = label("", f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 14px;")
        c.addWidget(self._marketing_box)

    def _request_concept(self) -> None:
        topic = self._topic.text().strip()
        if not topic:
            return
        self.set_busy(True, "")
        self._on_generate_concept(topic)

    def _request_marketing(self) -> None:
        if self._concept is None:
            return
        self.set_busy(True, "")
        self._on_generate_marketing(self._concept)

    def set_busy(self, busy: bool, message: str) -> None:
        self._concept_btn.setEnabled(not busy)
        self._marketing_btn.setEnabled(not busy and self._concept is not None)
        self._status.setText(message)

    def show_concept(self, concept: GameConcept) -> None:
        self._concept = concept
        self._marketing_box.setText("")
        self._concept_box.setText(
            f"<b>{concept.title}</b><br><i>{concept.tagline}</i><br><br>"
            f"<b>Почему весело:</b> {concept.fun_factor}<br>"
            f"<b>Механика:</b> {concept.core_mechanic}<br>"
            f"<b>Стиль:</b> {concept.visual_style}"
        )
        while self._swatches.count():
            item = self._swatches.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        for color in moodboard_palette(concept):
            swatch = QFrame()
            swatch.setFixedSize(48, 48)
            swatch.setStyleSheet(f"background: {color}; border-radius: 12px;")
            swatch.setToolTip(color)
            self._swatches.addWidget(swatch)
        self._swatches.addStretch(1)
        self.set_busy(False, "")

    def show_marketing(self, data: MarketingData) -> None:
        self._marketing_box.setText(
            f"<b>{data.headline}</b><br><br>{data.social_post}<br><br>"
            f"<b>Аудитория:</b> {data.target_audience}<br>"
            f"<b>Монетизация:</b> {data.monetization_strategy}"
        )
        self.set_busy(False, "")

    def show_error(self, message: str) -> None:
        self.set_busy(False, message)
