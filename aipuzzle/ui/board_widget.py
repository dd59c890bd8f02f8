"""Puzzle board UI: painted tiles laid out by their current slot."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QLinearGradient, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QGridLayout, QSizePolicy, QWidget

from aipuzzle.core.board import PuzzleBoard, TileDecoration
from aipuzzle.ui.colors import PuzzleColors, blend_hex, gradient_stops


class TileWidget(QWidget):
    """One tile. Shows the slice of the level gradient that belongs to its correct slot."""

    def __init__(
        self,
        tile_id: int,
        decoration: TileDecoration,
        grid_size: int,
        colors: Sequence[str],
        on_click: Callable[[int], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._tile_id = tile_id
        self._decoration = decoration
        self._grid_size = grid_size
        self._stops = gradient_stops(colors)
        self._on_click = on_click
        self._selected = False
        self._correct = False
        self.setCursor(Qt.PointingHandCursor)
        self.setMinimumSize(56, 56)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    @property
    def tile_id(self) -> int:
        return self._tile_id

    def set_state(self, *, selected: bool, correct: bool) -> None:
        if selected != self._selected or correct != self._correct:
            self._selected = selected
            self._correct = correct
            self.update()

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self._on_click(self._tile_id)
        super().mousePressEvent(event)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        w, h = float(self.width()), float(self.height())
        inset = 4.0 if self._selected else 0.0
        rect = QRectF(inset, inset, w - 2 * inset, h - 2 * inset)
        path = QPainterPath()
        path.addRoundedRect(rect, 12, 12)

        # Gradient spans the whole board; each tile is offset to its own row/column.
        d = self._decoration
        board_w, board_h = w * self._grid_size, h * self._grid_size
        origin = QPointF(-d.col * w, -d.row * h)
        gradient = QLinearGradient(origin, QPointF(origin.x() + board_w, origin.y() + board_h))
        for pos, color in self._stops:
            if self._selected:
                color = blend_hex(color, "#FFFFFF", 0.25)
            gradient.setColorAt(pos, QColor(color))
        painter.fillPath(path, QBrush(gradient))

        if self._selected:
            painter.setPen(QPen(QColor("#ffffff"), 3))
            painter.drawPath(path)
            painter.setPen(QPen(QColor(PuzzleColors.PURPLE), 2))
            painter.drawRoundedRect(rect.adjusted(-2, -2, 2, 2), 13, 13)

        if self._correct:
            painter.setPen(QPen(QColor(255, 255, 255, 160), 3))
            font = painter.font()
            font.setPointSize(14)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(rect, Qt.AlignCenter, "✓")
        else:
            painter.setPen(QColor(255, 255, 255, 170))
            font = painter.font()
            font.setPointSize(11)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(rect.adjusted(8, 4, 0, 0), Qt.AlignLeft | Qt.AlignTop, str(self._tile_id + 1))
        painter.end()


class BoardWidget(QWidget):
    """Grid of ``TileWidget``s, rebuilt per level and re-laid out on every board change."""

    def __init__(self, on_tile_click: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_tile_click = on_tile_click
        self._tiles: Dict[int, TileWidget] = {}
        self._board: Optional[PuzzleBoard] = None
        self._grid = QGridLayout(self)
        self._grid.setContentsMargins(8, 8, 8, 8)
        self._grid.setSpacing(8)
        self.setObjectName("boardFrame")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(
            """
            QWidget#boardFrame {
                background: #ffffff;
                border-radius: 24px;
            }
            """
        )

    def set_board(self, board: Optional[PuzzleBoard], colors: Sequence[str]) -> None:
        for widget in self._tiles.values():
            self._grid.removeWidget(widget)
            widget.deleteLater()
        self._tiles.clear()
        self._board = board
        if board is None:
            return
        for tile in board.tiles:
            widget = TileWidget(
                tile.id,
                board.decoration(tile.id),
                board.grid_size,
                colors,
                self._on_tile_click,
                self,
            )
            self._tiles[tile.id] = widget
        self.refresh()

    def refresh(self) -> None:
        board = self._board
        if board is None:
            return
        size = board.grid_size
        for slot, tile_id in enumerate(board.slots()):
            widget = self._tiles[tile_id]
            self._grid.removeWidget(widget)
            row, col = divmod(slot, size)
            self._grid.addWidget(widget, row, col)
            widget.set_state(selected=board.selected_tile_id == tile_id, correct=tile_id == slot)
