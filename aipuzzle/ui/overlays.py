"""In-window overlays (notices, level won)."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt, QEvent, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from aipuzzle.ui.colors import PuzzleColors


def card_container(radius: int = 24, object_name: str = "overlayContainer") -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(380)
    container.setMaximumWidth(460)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 4px solid {PuzzleColors.CARD_BORDER};
            border-radius: {radius}px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(24)
    shadow.setOffset(0, 8)
    shadow.setColor(QColor(91, 33, 182, 40))
    container.setGraphicsEffect(shadow)
    return container


def primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
                stop:0 {PuzzleColors.PURPLE}, stop:1 {PuzzleColors.PINK});
            color: white;
            padding: 12px 18px;
            border: none;
            border-radius: 12px;
            font-weight: 700;
            font-size: 15px;
        }}
        QPushButton:hover {{ background: {PuzzleColors.PURPLE_DARK}; }}
        QPushButton:disabled {{ background: #d1d5db; color: #f9fafb; }}
    """


def secondary_button_style() -> str:
    return f"""
        QPushButton {{
            background: #f3f4f6;
            color: {PuzzleColors.TEXT_SECONDARY};
            padding: 10px 16px;
            border: 1px solid #e5e7eb;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{
            background: #e5e7eb;
            border-color: {PuzzleColors.PURPLE};
            color: {PuzzleColors.PURPLE};
        }}
    """


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(91, 33, 182, 0.18);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.setCursor(Qt.CursorShape.ArrowCursor)
    overlay_bg.setMinimumSize(1, 1)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


class _Overlay(QWidget):
    """Covers its parent and follows the parent's size while shown."""

    def __init__(self, parent: Optional[QWidget], dismiss_on_background: bool) -> None:
        super().__init__(parent)
        self._main_layout = QGridLayout(self)
        self._main_layout.setContentsMargins(0, 0, 0, 0)
        self._main_layout.setSpacing(0)
        self._main_layout.setRowStretch(0, 1)
        self._main_layout.setColumnStretch(0, 1)
        on_bg_click = self.dismiss if dismiss_on_background else (lambda: None)
        self._main_layout.addWidget(_overlay_background(self, on_bg_click), 0, 0)
        self.hide()

    def _set_card(self, container: QFrame) -> None:
        self._main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

    def dismiss(self) -> None:
        self.hide()

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        self.raise_()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class NoticeOverlay(_Overlay):
    """Short message with an OK button (insufficient funds, purchase done, ...)."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, dismiss_on_background=True)
        container = card_container(object_name="noticeContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(18)

        self._message = QLabel("")
        self._message.setWordWrap(True)
        self._message.setAlignment(Qt.AlignCenter)
        self._message.setStyleSheet(
            f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 15px; font-weight: 600;"
        )
        content.addWidget(self._message)

        ok_btn = QPushButton("OK")
        ok_btn.setStyleSheet(primary_button_style())
        ok_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        ok_btn.clicked.connect(self.dismiss)
        content.addWidget(ok_btn)
        self._set_card(container)

    def show_message(self, message: str) -> None:
        self._message.setText(message)
        self.show()


class LevelWonOverlay(_Overlay):
    """Victory card with the level reward and its fun fact."""

    next_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, dismiss_on_background=False)
        container = card_container(radius=32, object_name="levelWonContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(32, 28, 32, 28)
        content.setSpacing(16)

        trophy = QLabel("🏆")
        trophy.setAlignment(Qt.AlignCenter)
        trophy.setStyleSheet("font-size: 56px;")
        content.addWidget(trophy)

        title = QLabel("Победа!")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(f"color: {PuzzleColors.PURPLE}; font-size: 32px; font-weight: 900;")
        content.addWidget(title)

        pills = QHBoxLayout()
        pills.setSpacing(12)
        pills.addStretch(1)
        self._points_pill = QLabel("")
        self._points_pill.setStyleSheet(
            f"background: #f3f4f6; color: {PuzzleColors.TEXT_SECONDARY};"
            " border-radius: 8px; padding: 4px 10px; font-weight: 700;"
        )
        self._pzzls_pill = QLabel("")
        self._pzzls_pill.setStyleSheet(
            f"background: rgba(20, 184, 166, 0.12); color: {PuzzleColors.TEAL};"
            " border-radius: 8px; padding: 4px 10px; font-weight: 700;"
        )
        pills.addWidget(self._points_pill)
        pills.addWidget(self._pzzls_pill)
        pills.addStretch(1)
        content.addLayout(pills)

        fact_box = QFrame()
        fact_box.setStyleSheet(
            f"QFrame {{ background: {PuzzleColors.BG}; border-left: 4px solid {PuzzleColors.YELLOW};"
            " border-radius: 12px; }"
        )
        fact_layout = QVBoxLayout(fact_box)
        fact_layout.setContentsMargins(16, 12, 16, 12)
        fact_caption = QLabel("ФАКТ УРОВНЯ")
        fact_caption.setStyleSheet(f"color: {PuzzleColors.YELLOW}; font-size: 11px; font-weight: 800;")
        self._fact = QLabel("")
        self._fact.setWordWrap(True)
        self._fact.setStyleSheet(f"color: {PuzzleColors.TEXT_PRIMARY}; font-size: 14px;")
        fact_layout.addWidget(fact_caption)
        fact_layout.addWidget(self._fact)
        content.addWidget(fact_box)

        next_btn = QPushButton("Следующий уровень →")
        next_btn.setStyleSheet(primary_button_style())
        next_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        next_btn.clicked.connect(lambda: (self.hide(), self.next_requested.emit()))
        content.addWidget(next_btn)
        self._set_card(container)

    def show_result(self, points: int, pzzls: int, fun_fact: str) -> None:
        self._points_pill.setText(f"+ {points} Очков")
        self._pzzls_pill.setText(f"+ {pzzls} 💎")
        self._fact.setText(fun_fact)
        self.show()
