"""
Module: SnakeAnimator
Description: Decorative animation played on a won board. A "snake" wanders the grid,
covering the tile under its head and uncovering tiles as its tail leaves them.
Inputs: GameLogic, FrameScheduler, random source
Outputs: Tile open/close and head-marker changes, one change notification per step
External Sources: None
"""

import random
from collections import deque
from typing import Deque, List, Optional, Tuple

import config
from BoardManager import MOVES, Tile
from FrameScheduler import FrameScheduler

# Ring offsets from the current heading that count as a smooth turn
NEAR_TURNS = (-1, 0, 1)


class SnakeAnimator:
    def __init__(
        self,
        game,
        scheduler: FrameScheduler,
        rng: Optional[random.Random] = None,
        frame_skip: int = config.SNAKE_FRAME_SKIP,
        length: int = config.SNAKE_LENGTH,
    ) -> None:
        """Bind the game and scheduler; the snake does not move until start()."""
        self.game = game
        self.board = game.board
        self.scheduler = scheduler
        self.rng = rng if rng is not None else random.Random()
        self.frame_skip = max(1, frame_skip)
        self.length = max(1, length)

        self.frame: int = 0
        self.current_tile: Optional[Tile] = None
        self.current_move: int = 0  # index into MOVES
        self.queue: Deque[Tile] = deque()
        self.handle: Optional[int] = None
        self.running: bool = False

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def start(self) -> None:
        """Place the head on a random unflagged tile and begin ticking."""
        if self.running:
            return

        candidates = [tile for tile in self.board.tiles if not tile.is_flag]
        if not candidates:
            return

        self.current_tile = self.rng.choice(candidates)
        self.current_move = self.rng.randrange(len(MOVES))
        self.current_tile.is_glasses = True
        self.running = True
        self.handle = self.scheduler.request_frame(self.tick)

    def stop(self) -> None:
        """Cancel the pending frame; the snake freezes where it is."""
        self.running = False
        if self.handle is not None:
            self.scheduler.cancel(self.handle)
            self.handle = None

    def tick(self) -> None:
        """Frame callback. Steps every frame_skip frames, then reschedules itself."""
        self.handle = None
        if not self.running or not self.game.is_live:
            self.running = False
            return

        self.frame += 1
        if self.frame % self.frame_skip == 0:
            self.step()
        self.handle = self.scheduler.request_frame(self.tick)

    # ----------------------------
    # Movement
    # ----------------------------
    def destination(self, move: int) -> Optional[Tile]:
        """Tile reached from the head by MOVES[move], or None if off-board or flagged."""
        _, (d_row, d_col) = MOVES[move]
        row, col = self.current_tile.row + d_row, self.current_tile.col + d_col
        if not self.board.in_bounds(row, col):
            return None
        tile = self.board.tile(row, col)
        if tile.is_flag:
            return None
        return tile

    def candidate_tiers(self) -> List[List[Tuple[int, Tile, int]]]:
        """Group legal moves as (move, tile, weight), best tier first.

        Tiers: near the heading and off the trail, near the heading and on the
        trail, then the remaining directions in the same order.
        """
        near_free, near_taken, far_free, far_taken = [], [], [], []
        near_moves = {(self.current_move + turn) % len(MOVES) for turn in NEAR_TURNS}

        for move in range(len(MOVES)):
            tile = self.destination(move)
            if tile is None:
                continue
            weight = config.SNAKE_STRAIGHT_WEIGHT if move == self.current_move else 1
            free = tile not in self.queue
            if move in near_moves:
                (near_free if free else near_taken).append((move, tile, weight))
            else:
                (far_free if free else far_taken).append((move, tile, 1))

        return [near_free, near_taken, far_free, far_taken]

    def choose_move(self) -> Optional[Tuple[int, Tile]]:
        for tier in self.candidate_tiers():
            if tier:
                move, tile, _ = self.rng.choices(tier, weights=[weight for _, _, weight in tier])[0]
                return move, tile
        return None

    def step(self) -> None:
        """Advance the snake one tile."""
        choice = self.choose_move()
        if choice is None:
            return

        move, tile = choice
        self.current_tile.is_glasses = False
        self.board.close_tile(tile)
        tile.is_glasses = True
        self.current_tile = tile
        self.current_move = move

        self.queue.append(tile)
        if len(self.queue) > self.length:
            tail = self.queue.popleft()
            # Keep the tile covered if the trail crossed it again
            if tail not in self.queue:
                self.board.open_tile(tail)

        self.game.mark_changed()
