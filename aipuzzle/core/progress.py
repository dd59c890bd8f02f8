from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from aipuzzle.core.board import BoardSnapshot
from aipuzzle.core.levels import LevelData, normalize_palette

logger = logging.getLogger(__name__)


class TransactionType(str, Enum):
    EARN = "EARN"
    SPEND = "SPEND"
    PURCHASE = "PURCHASE"


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    amount: int
    description: str
    date: datetime


@dataclass(frozen=True)
class LevelReward:
    level: int
    points: int
    pzzls: int


class InsufficientFundsError(Exception):
    """Raised when a spend would take the balance below zero."""

    def __init__(self, cost: int, balance: int) -> None:
        super().__init__(f"Not enough PZZLS: need {cost}, have {balance}")
        self.cost = cost
        self.balance = balance


def _new_transaction_id() -> str:
    return uuid.uuid4().hex[:12]


class ProgressTracker:
    """Level counter, score, PZZLS balance and the transaction ledger.

    Every balance change records exactly one ``Transaction``; the ledger is kept
    newest first and is never edited.
    """

    def __init__(
        self,
        *,
        level: int = 1,
        score: int = 0,
        balance: int = 0,
        transactions: Optional[List[Transaction]] = None,
        id_factory: Callable[[], str] = _new_transaction_id,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if level < 1:
            raise ValueError("level must be at least 1")
        if score < 0 or balance < 0:
            raise ValueError("score and balance must not be negative")
        self._level = level
        self._score = score
        self._balance = balance
        self._transactions: List[Transaction] = list(transactions or [])
        self._id_factory = id_factory
        self._clock = clock

    @property
    def level(self) -> int:
        return self._level

    @property
    def score(self) -> int:
        return self._score

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def can_afford(self, cost: int) -> bool:
        return self._balance >= cost

    def earn(self, amount: int, description: str) -> Transaction:
        if amount < 0:
            raise ValueError("earn amount must not be negative")
        return self._record(TransactionType.EARN, amount, description)

    def purchase(self, amount: int, description: str) -> Transaction:
        if amount < 0:
            raise ValueError("purchase amount must not be negative")
        return self._record(TransactionType.PURCHASE, amount, description)

    def spend(self, cost: int, description: str) -> Transaction:
        if cost < 0:
            raise ValueError("cost must not be negative")
        if not self.can_afford(cost):
            raise InsufficientFundsError(cost, self._balance)
        return self._record(TransactionType.SPEND, -cost, description)

    def complete_level(self, points: int, pzzls: int) -> LevelReward:
        """Credit a finished level and move on to the next one."""
        reward = LevelReward(level=self._level, points=points, pzzls=pzzls)
        self._record(TransactionType.EARN, pzzls, f"Победа: Уровень {self._level}")
        self._score += points
        self._level += 1
        logger.info("Level %d complete: +%d points, +%d PZZLS", reward.level, points, pzzls)
        return reward

    def _record(self, kind: TransactionType, amount: int, description: str) -> Transaction:
        tx = Transaction(
            id=self._id_factory(),
            type=kind,
            amount=amount,
            description=description,
            date=self._clock(),
        )
        self._balance += amount
        self._transactions.insert(0, tx)
        return tx


@dataclass
class SavedGame:
    tracker: ProgressTracker
    level: Optional[LevelData] = None
    board: Optional[BoardSnapshot] = None


class ProgressStore:
    """Optional save file for the tracker, the level in play and its board.

    Nothing is written unless a path is configured (``AIPUZZLE_SAVE_FILE`` or
    ``save_path`` in the game config).
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def save(
        self,
        tracker: ProgressTracker,
        level: Optional[LevelData] = None,
        board: Optional[BoardSnapshot] = None,
    ) -> None:
        payload = {
            "level": tracker.level,
            "score": tracker.score,
            "balance": tracker.balance,
            "transactions": [
                {
                    "id": tx.id,
                    "type": tx.type.value,
                    "amount": tx.amount,
                    "description": tx.description,
                    "date": tx.date.isoformat(),
                }
                for tx in tracker.transactions
            ],
            "level_data": asdict(level) if level is not None else None,
            "board": asdict(board) if board is not None and level is not None else None,
        }
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)

    def load(self) -> Optional[SavedGame]:
        """Return the saved game, or None if there is no usable save file.

        A level or board that does not check out is dropped with a warning and the
        tracker is still restored.
        """
        if not self._file_path.exists():
            return None
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
            transactions = [
                Transaction(
                    id=str(item["id"]),
                    type=TransactionType(item["type"]),
                    amount=int(item["amount"]),
                    description=str(item["description"]),
                    date=datetime.fromisoformat(item["date"]),
                )
                for item in payload.get("transactions", [])
            ]
            tracker = ProgressTracker(
                level=int(payload.get("level", 1)),
                score=int(payload.get("score", 0)),
                balance=int(payload.get("balance", 0)),
                transactions=transactions,
            )
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return None

        level = None
        board = None
        try:
            level = _parse_level(payload.get("level_data"))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding saved level in %s: %s", self._file_path, e)
        if level is not None:
            try:
                board = _parse_board(payload.get("board"), level.grid_size)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding saved board in %s: %s", self._file_path, e)
        return SavedGame(tracker=tracker, level=level, board=board)


def _parse_level(raw: Any) -> Optional[LevelData]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise TypeError("level_data must be an object")
    grid_size = raw["grid_size"]
    if not isinstance(grid_size, int) or grid_size < 2:
        raise ValueError(f"bad grid size: {grid_size!r}")
    return LevelData(
        id=int(raw["id"]),
        theme=str(raw["theme"]),
        colors=normalize_palette(raw["colors"]),
        fun_fact=str(raw["fun_fact"]),
        grid_size=grid_size,
    )


def _parse_board(raw: Any, grid_size: int) -> Optional[BoardSnapshot]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise TypeError("board must be an object")
    if raw["grid_size"] != grid_size:
        raise ValueError(f"board is {raw['grid_size']!r}, level is {grid_size}")
    positions = raw["positions"]
    n = grid_size * grid_size
    if (
        not isinstance(positions, list)
        or not all(isinstance(p, int) for p in positions)
        or sorted(positions) != list(range(n))
    ):
        raise ValueError(f"positions must be a permutation of 0..{n - 1}")
    selected = raw.get("selected_tile_id")
    if selected is not None and (isinstance(selected, bool) or not isinstance(selected, int) or not 0 <= selected < n):
        raise ValueError(f"bad selected tile: {selected!r}")
    return BoardSnapshot(grid_size=grid_size, positions=list(positions), selected_tile_id=selected)
