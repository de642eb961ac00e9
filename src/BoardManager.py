"""
BoardManager.py
Description: Owns the board model. Defines the Tile class for each grid cell and the
BoardManager class holding the grid, the precomputed neighbor and neighbor-mine-count
tables, mine placement, and the aggregate mine/flag/closed sets.
Inputs: Board dimensions, mine count, random source
Outputs: None
External Sources: None
"""

import logging
import random
from typing import Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

# Row/col offsets in ring order, so neighboring entries are one turn apart
MOVES: List[Tuple[str, Cell]] = [
    ("N", (-1, 0)),
    ("NE", (-1, 1)),
    ("E", (0, 1)),
    ("SE", (1, 1)),
    ("S", (1, 0)),
    ("SW", (1, -1)),
    ("W", (0, -1)),
    ("NW", (-1, -1)),
]


class Tile:
    """Represents a single tile on the Minesweeper board."""

    def __init__(self, row: int, col: int, index: int) -> None:
        """Initialize tile position and state."""
        self.row: int = row
        self.col: int = col
        self.index: int = index
        self.is_open: bool = False
        self.is_mine: bool = False
        self.is_flag: bool = False
        self.is_culprit: bool = False
        self.is_glasses: bool = False

    @property
    def key(self) -> str:
        """Stable key that changes whenever the tile is flagged or opened."""
        return f"{self.row},{self.col} {self.is_flag} {self.is_open}"

    def cell(self) -> Cell:
        return self.row, self.col

    def __repr__(self) -> str:
        return f"Tile({self.row}, {self.col})"


def validate_dimensions(height: int, width: int, n_mines: int) -> None:
    """Reject boards on which mine placement could never finish."""
    if height < 1 or width < 1:
        raise ValueError(f"Board must be at least 1x1, got {height}x{width}")
    if not 0 <= n_mines < height * width:
        raise ValueError(f"Mine count must be between 0 and {height * width - 1}, got {n_mines}")


class BoardManager:
    """Manages the Minesweeper grid and the indexes derived from it.

    All tile mutation goes through this class so that ``mines``, ``flags``,
    ``closed`` and ``n_flagged_mines`` always agree with the per-tile flags.
    """

    def __init__(self, height: int, width: int, n_mines: int, rng: Optional[random.Random] = None) -> None:
        """Build the grid, neighbor table and mine layout."""
        validate_dimensions(height, width, n_mines)
        self.height = height
        self.width = width
        self.n_mines = n_mines
        self.rng = rng if rng is not None else random.Random()

        self.grid: List[List[Tile]] = [
            [Tile(row, col, row * width + col) for col in range(width)] for row in range(height)
        ]
        self.tiles: List[Tile] = [tile for row in self.grid for tile in row]
        self.neighbors: List[List[Tile]] = [self._compute_neighbors(tile) for tile in self.tiles]
        self.neighbor_mine_counts: List[int] = [0] * len(self.tiles)

        self.mines: Set[Tile] = set()
        self.flags: Set[Tile] = set()
        self.closed: Set[Tile] = set(self.tiles)
        self.n_flagged_mines: int = 0

        self.place_random_mines()

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if (row, col) is within board."""
        return 0 <= row < self.height and 0 <= col < self.width

    def tile(self, row: int, col: int) -> Tile:
        """Get tile at (row, col)."""
        return self.grid[row][col]

    def _compute_neighbors(self, tile: Tile) -> List[Tile]:
        result: List[Tile] = []
        for _, (d_row, d_col) in MOVES:
            row, col = tile.row + d_row, tile.col + d_col
            if self.in_bounds(row, col):
                result.append(self.grid[row][col])
        return result

    def neighbors_of(self, tile: Tile) -> List[Tile]:
        """Return the in-bounds neighbors of a tile (up to 8)."""
        return self.neighbors[tile.index]

    def neighbor_mine_count(self, tile: Tile) -> int:
        return self.neighbor_mine_counts[tile.index]

    def neighbor_flag_count(self, tile: Tile) -> int:
        return sum(1 for neighbor in self.neighbors[tile.index] if neighbor.is_flag)

    def _clear_mines(self) -> None:
        for tile in self.mines:
            tile.is_mine = False
        self.mines = set()
        self.n_flagged_mines = 0

    def _recount_neighbor_mines(self) -> None:
        for tile in self.tiles:
            self.neighbor_mine_counts[tile.index] = sum(
                1 for neighbor in self.neighbors[tile.index] if neighbor.is_mine
            )
        self.n_flagged_mines = len(self.mines & self.flags)

    def place_random_mines(self) -> None:
        """Place n_mines at unique random tiles by rejection sampling."""
        self._clear_mines()
        chosen = 0
        while chosen < self.n_mines:
            tile = self.grid[self.rng.randrange(self.height)][self.rng.randrange(self.width)]
            if tile.is_mine:
                continue
            tile.is_mine = True
            self.mines.add(tile)
            chosen += 1

        self._recount_neighbor_mines()
        logger.debug("Placed %d mines on a %dx%d board", self.n_mines, self.height, self.width)

    def place_mines_at(self, cells: Iterable[Cell]) -> None:
        """Replace the current layout with mines at exactly the given cells."""
        cells = list(cells)
        if len(set(cells)) != len(cells):
            raise ValueError("Mine cells must be unique")
        for row, col in cells:
            if not self.in_bounds(row, col):
                raise ValueError(f"Mine cell ({row}, {col}) is outside the board")
        validate_dimensions(self.height, self.width, len(cells))

        self._clear_mines()
        for row, col in cells:
            tile = self.grid[row][col]
            tile.is_mine = True
            self.mines.add(tile)
        self.n_mines = len(cells)
        self._recount_neighbor_mines()

    def open_tile(self, tile: Tile) -> None:
        """Reveal a single tile. Never cascades."""
        tile.is_open = True
        self.closed.discard(tile)

    def close_tile(self, tile: Tile) -> None:
        """Cover a single tile again."""
        tile.is_open = False
        self.closed.add(tile)

    def set_flag(self, tile: Tile, value: bool) -> None:
        """Set flag state on a tile, keeping flag counters in sync."""
        if tile.is_flag == value:
            return
        tile.is_flag = value
        if value:
            self.flags.add(tile)
            if tile.is_mine:
                self.n_flagged_mines += 1
        else:
            self.flags.discard(tile)
            if tile.is_mine:
                self.n_flagged_mines -= 1
