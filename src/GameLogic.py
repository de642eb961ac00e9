"""
Module: GameLogic
Description: Board engine. Handles opening with cascade reveal, flagging, win/loss state and
the post-win animation lifecycle, and notifies listeners after every visible change.
Inputs: Board dimensions, mine count, optional listener, random source and frame scheduler
Outputs: Change notifications (zero-argument callbacks)
External Sources: None
"""

import contextlib
import enum
import logging
import random
from typing import Callable, Iterator, List, Optional, Set

from BoardManager import BoardManager, Tile
from FrameScheduler import FrameScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class GameState(enum.Enum):
    Playing = "playing"
    EndWin = "won"
    EndLose = "lost"


class GameLogic:
    """Imperative game API consumed by the presentation layer."""

    def __init__(
        self,
        height: int,
        width: int,
        n_mines: int,
        on_change: Optional[Listener] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[FrameScheduler] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.board = BoardManager(height, width, n_mines, self.rng)
        self.state: GameState = GameState.Playing
        self.scheduler = scheduler
        self.animator = None
        self.is_live: bool = True

        self._listeners: List[Listener] = []
        if on_change is not None:
            self._listeners.append(on_change)
        self._batch_depth: int = 0
        self._changed: bool = False

        logger.debug("New %dx%d game with %d mines", height, width, n_mines)

    # ----------------------------
    # Read surface
    # ----------------------------
    @property
    def status(self) -> str:
        return self.state.value

    @property
    def n_mines(self) -> int:
        return self.board.n_mines

    @property
    def flags_remaining(self) -> int:
        """Mines minus placed flags; may go negative."""
        return self.board.n_mines - len(self.board.flags)

    def tile(self, row: int, col: int) -> Tile:
        return self.board.tile(row, col)

    def neighbor_mine_count(self, tile: Tile) -> int:
        return self.board.neighbor_mine_count(tile)

    # ----------------------------
    # Change notification
    # ----------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @contextlib.contextmanager
    def _batch(self) -> Iterator[None]:
        """Collapse nested mutations into one notification from the outermost call."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0 and self._changed:
            self._changed = False
            for listener in list(self._listeners):
                listener()

    def mark_changed(self) -> None:
        """Record a visible change; listeners fire when the outermost batch closes."""
        with self._batch():
            self._changed = True

    # ----------------------------
    # Player actions
    # ----------------------------
    def flag(self, tile: Tile) -> None:
        """Toggle the flag on a closed tile."""
        if not self.is_live or tile.is_open or self.state != GameState.Playing:
            return

        with self._batch():
            self.board.set_flag(tile, not tile.is_flag)
            self._changed = True
            self.check_win_condition()

    def open(self, tile: Tile) -> None:
        """Open a tile and cascade through neighbors whose mines are accounted for.

        A tile cascades when it has no neighboring mines, or when the number of
        flagged neighbors equals its neighboring mine count. Flagged tiles are
        never opened, and each tile is visited at most once per call.
        """
        if not self.is_live or tile.is_flag or self.state == GameState.EndWin:
            return

        with self._batch():
            visited: Set[int] = set()
            stack: List[Tile] = [tile]
            while stack:
                current = stack.pop()
                if current.index in visited or current.is_flag:
                    continue
                # Only the clicked tile may already be open (chord on a number)
                if current is not tile and current.is_open:
                    continue
                self._open_one(current)
                visited.add(current.index)

                count = self.board.neighbor_mine_count(current)
                if count == 0 or count == self.board.neighbor_flag_count(current):
                    for neighbor in self.board.neighbors_of(current):
                        if neighbor.index not in visited and not neighbor.is_open and not neighbor.is_flag:
                            stack.append(neighbor)

            if self.state == GameState.Playing:
                self.check_win_condition()

    def _open_one(self, tile: Tile) -> None:
        if not tile.is_open:
            self.board.open_tile(tile)
            self._changed = True
        if tile.is_mine and self.state == GameState.Playing:
            tile.is_culprit = True
            self.lose()

    # ----------------------------
    # End conditions
    # ----------------------------
    def lose(self) -> None:
        """End the game as lost and reveal every mine."""
        if self.state == GameState.EndLose:
            return

        with self._batch():
            self.state = GameState.EndLose
            for mine in self.board.mines:
                if not mine.is_open:
                    self.board.open_tile(mine)
            self._changed = True
        logger.info("Game lost")

    def check_win_condition(self) -> bool:
        """Win once every mine is flagged and every safe tile is open."""
        if self.state == GameState.EndLose:
            return False

        board = self.board
        if board.n_flagged_mines == board.n_mines and len(board.closed) == board.n_mines:
            self.win()
            return True
        return False

    def win(self) -> None:
        """End the game as won and start the snake animation."""
        if self.state == GameState.EndWin:
            return

        with self._batch():
            self.state = GameState.EndWin
            self._changed = True
        logger.info("Game won")

        if self.scheduler is not None and self.is_live:
            from SnakeAnimator import SnakeAnimator

            self.animator = SnakeAnimator(self, self.scheduler, self.rng)
            self.animator.start()

    def auto_win(self) -> None:
        """Solve the board directly: flag every mine, open every safe tile."""
        if not self.is_live or self.state != GameState.Playing:
            return

        with self._batch():
            board = self.board
            for tile in board.tiles:
                if tile.is_mine:
                    board.set_flag(tile, True)
                    board.close_tile(tile)
                else:
                    board.set_flag(tile, False)
                    board.open_tile(tile)
            board.n_flagged_mines = len(board.mines & board.flags)
            board.closed = {tile for tile in board.tiles if not tile.is_open}
            self._changed = True
            self.check_win_condition()

    def dispose(self) -> None:
        """Stop the animation and ignore further input. Called when the board is replaced."""
        self.is_live = False
        if self.animator is not None:
            self.animator.stop()
