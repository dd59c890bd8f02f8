from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

SETTLE_DELAY_MS = 300
HINT_TILES = 3

Scheduler = Callable[[int, Callable[[], None]], None]


def run_immediately(delay_ms: int, callback: Callable[[], None]) -> None:
    """Scheduler that skips the settle window entirely."""
    callback()


@dataclass
class Tile:
    """One puzzle piece: ``id`` is its correct slot, ``current_pos`` where it sits now."""

    id: int
    current_pos: int

    @property
    def is_correct(self) -> bool:
        return self.id == self.current_pos


class BoardState(Enum):
    SCRAMBLED = "scrambled"
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"


@dataclass(frozen=True)
class TileDecoration:
    """Where a tile's slice of the level gradient sits, by its correct row/column."""

    row: int
    col: int
    x_percent: float
    y_percent: float


@dataclass
class BoardSnapshot:
    grid_size: int
    positions: List[int]
    selected_tile_id: Optional[int] = None


def decoration_for(tile_id: int, grid_size: int) -> TileDecoration:
    """Gradient slice of a tile. Depends on the tile id only, never on its current slot."""
    row, col = divmod(tile_id, grid_size)
    span = max(grid_size - 1, 1)
    return TileDecoration(
        row=row,
        col=col,
        x_percent=col / span * 100.0,
        y_percent=row / span * 100.0,
    )


class PuzzleBoard:
    """Swap puzzle over ``grid_size ** 2`` tiles.

    Clicking one tile arms it, clicking another exchanges the two slots. During the
    settle window after a swap further clicks are ignored. ``apply_hint`` moves up to
    ``HINT_TILES`` misplaced tiles into their correct slots.

    ``on_solved`` fires once per level, the first time every tile sits in its own slot.
    ``on_change`` fires after any change of positions or selection.
    """

    def __init__(
        self,
        grid_size: int = 3,
        *,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        on_solved: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._scheduler: Scheduler = scheduler or run_immediately
        self._on_solved = on_solved
        self._on_change = on_change
        self._grid_size = 0
        self._tiles: List[Tile] = []
        self._selected_id: Optional[int] = None
        self._swapping = False
        self._touched = False
        self._solved_notified = False
        self._generation = 0
        self.initialize(grid_size)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def size(self) -> int:
        return len(self._tiles)

    @property
    def tiles(self) -> List[Tile]:
        """Copies of the tiles in ascending id order."""
        return [Tile(t.id, t.current_pos) for t in self._tiles]

    @property
    def selected_tile_id(self) -> Optional[int]:
        return self._selected_id

    @property
    def is_swapping(self) -> bool:
        return self._swapping

    @property
    def is_solved(self) -> bool:
        return all(t.is_correct for t in self._tiles)

    @property
    def misplaced_count(self) -> int:
        return sum(1 for t in self._tiles if not t.is_correct)

    @property
    def state(self) -> BoardState:
        if self.is_solved:
            return BoardState.SOLVED
        return BoardState.IN_PROGRESS if self._touched else BoardState.SCRAMBLED

    def tile(self, tile_id: int) -> Optional[Tile]:
        if 0 <= tile_id < len(self._tiles):
            t = self._tiles[tile_id]
            return Tile(t.id, t.current_pos)
        return None

    def tile_at(self, slot: int) -> Optional[Tile]:
        for t in self._tiles:
            if t.current_pos == slot:
                return Tile(t.id, t.current_pos)
        return None

    def slots(self) -> List[int]:
        """Tile ids in slot order (index = slot)."""
        order = [0] * len(self._tiles)
        for t in self._tiles:
            order[t.current_pos] = t.id
        return order

    def decoration(self, tile_id: int) -> TileDecoration:
        return decoration_for(tile_id, self._grid_size)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def initialize(self, grid_size: int) -> None:
        """Create a fresh set of tiles and scramble their positions (Fisher-Yates)."""
        if grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {grid_size}")
        self._generation += 1
        self._grid_size = grid_size
        self._tiles = [Tile(i, i) for i in range(grid_size * grid_size)]
        for i in range(len(self._tiles) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            a, b = self._tiles[i], self._tiles[j]
            a.current_pos, b.current_pos = b.current_pos, a.current_pos
        self._selected_id = None
        self._swapping = False
        self._touched = False
        self._solved_notified = False
        logger.debug("Board initialized: %dx%d, %d misplaced", grid_size, grid_size, self.misplaced_count)
        self._changed()
        # A board can come out of the shuffle already solved; it still counts as a win.
        self._check_solved()

    def select_or_swap(self, tile_id: int) -> bool:
        """Handle a click on a tile. Returns True if the board changed."""
        if self._swapping:
            logger.debug("Click on tile %s ignored: swap in flight", tile_id)
            return False
        if not 0 <= tile_id < len(self._tiles):
            logger.debug("Click on unknown tile %s ignored", tile_id)
            return False
        if self.is_solved:
            return False

        self._touched = True
        if self._selected_id is None:
            self._selected_id = tile_id
            self._changed()
            return True
        if self._selected_id == tile_id:
            self._selected_id = None
            self._changed()
            return True

        first = self._tiles[self._selected_id]
        second = self._tiles[tile_id]
        first.current_pos, second.current_pos = second.current_pos, first.current_pos
        self._swapping = True
        generation = self._generation
        self._changed()
        self._check_solved()
        self._scheduler(SETTLE_DELAY_MS, lambda: self._settle(generation))
        return True

    def apply_hint(self) -> List[int]:
        """Put up to ``HINT_TILES`` misplaced tiles into their own slots.

        Tiles are taken in ascending id order and fixed one after another, each step
        reading the board as left by the previous one. Returns the ids targeted.
        """
        misplaced = [t for t in self._tiles if not t.is_correct]
        if not misplaced:
            return []

        targeted = misplaced[:HINT_TILES]
        for tile in targeted:
            occupant = self._occupant(tile.id)
            occupant.current_pos, tile.current_pos = tile.current_pos, tile.id
        self._selected_id = None
        logger.debug("Hint fixed tiles %s, %d still misplaced", [t.id for t in targeted], self.misplaced_count)
        self._changed()
        self._check_solved()
        return [t.id for t in targeted]

    def arrange(self, positions: List[int]) -> None:
        """Place tiles directly: ``positions[tile_id]`` is the slot of that tile."""
        n = self._grid_size * self._grid_size
        if len(positions) != n or sorted(positions) != list(range(n)):
            raise ValueError(f"positions must be a permutation of 0..{n - 1}")
        for tile, pos in zip(self._tiles, positions):
            tile.current_pos = int(pos)
        self._selected_id = None
        self._swapping = False
        self._touched = True
        self._changed()
        self._check_solved()

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            grid_size=self._grid_size,
            positions=[t.current_pos for t in self._tiles],
            selected_tile_id=self._selected_id,
        )

    def restore(self, snapshot: BoardSnapshot) -> None:
        self._generation += 1
        if snapshot.grid_size != self._grid_size:
            self._grid_size = snapshot.grid_size
            self._tiles = [Tile(i, i) for i in range(snapshot.grid_size * snapshot.grid_size)]
        self._solved_notified = False
        self.arrange(list(snapshot.positions))
        selected = snapshot.selected_tile_id
        if selected is not None and 0 <= selected < len(self._tiles) and not self.is_solved:
            self._selected_id = selected
            self._changed()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _occupant(self, slot: int) -> Tile:
        for t in self._tiles:
            if t.current_pos == slot:
                return t
        raise RuntimeError(f"No tile occupies slot {slot}")

    def _settle(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._swapping = False
        self._selected_id = None
        self._changed()

    def _check_solved(self) -> bool:
        if not self.is_solved:
            return False
        if not self._solved_notified:
            self._solved_notified = True
            logger.info("Board solved (%dx%d)", self._grid_size, self._grid_size)
            if self._on_solved is not None:
                self._on_solved()
        return True

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
