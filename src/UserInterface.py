"""
Module: UserInterface
Description: pygame host for the board engine. Renders the board, routes user input to the
input handler and pumps the frame scheduler that drives the win animation.
Inputs: GameLogic, FrameScheduler
Outputs: User Input (click type, (row, col))
External Sources: None
"""

import logging
from typing import Callable, Optional, Tuple

import pygame

import config
from BoardManager import Tile
from FrameScheduler import FrameScheduler
from GameLogic import GameLogic, GameState
from InputHandler import InputHandler

logger = logging.getLogger(__name__)


def window_size(game: GameLogic) -> Tuple[int, int]:
    """Window size needed to fit the board plus margins."""
    width = config.BOARD_MARGIN_LEFT + game.board.width * config.CELL_SIZE + config.BOARD_MARGIN_RIGHT
    height = config.BOARD_MARGIN_TOP + game.board.height * config.CELL_SIZE + config.BOARD_MARGIN_BOTTOM
    return max(width, config.MIN_WINDOW_WIDTH), height


def coords_to_index(coords: Tuple[int, int], game: GameLogic) -> Optional[Tuple[int, int]]:
    """Convert mouse coordinates to board indices - returns (row, col) or None."""
    x_click, y_click = coords
    col = (x_click - config.BOARD_MARGIN_LEFT) // config.CELL_SIZE
    row = (y_click - config.BOARD_MARGIN_TOP) // config.CELL_SIZE

    if game.board.in_bounds(row, col):
        return row, col
    return None


def tile_face(tile: Tile, game: GameLogic) -> str:
    """Decide what a tile shows.

    Returns one of "glasses", "culprit", "mine", "flag", "wrong_flag", "closed",
    or the neighboring mine count as a string ("" for zero).
    """
    if tile.is_glasses:
        return "glasses"
    if game.state == GameState.EndLose:
        if tile.is_culprit:
            return "culprit"
        if tile.is_flag and not tile.is_mine:
            return "wrong_flag"
        if tile.is_mine and tile.is_flag:
            return "flag"
        if tile.is_mine:
            return "mine"
    if not tile.is_open:
        return "flag" if tile.is_flag else "closed"
    count = game.neighbor_mine_count(tile)
    return str(count) if count else ""


def new_game(preset: str, scheduler: FrameScheduler, on_change: Callable[[], None]) -> GameLogic:
    """Build a fresh game from a named preset."""
    height, width, mines = config.PRESETS[preset]
    logger.info("Starting %s game (%dx%d, %d mines)", preset, height, width, mines)
    return GameLogic(height, width, mines, on_change=on_change, scheduler=scheduler)


def render_tile(screen, font, tile: Tile, game: GameLogic) -> None:
    rect = pygame.Rect(
        config.BOARD_MARGIN_LEFT + tile.col * config.CELL_SIZE,
        config.BOARD_MARGIN_TOP + tile.row * config.CELL_SIZE,
        config.CELL_SIZE,
        config.CELL_SIZE,
    )
    face = tile_face(tile, game)
    background = config.OPEN_BG if tile.is_open else config.CLOSED_BG
    if face == "culprit":
        background = config.RED
    pygame.draw.rect(screen, background, rect)

    if face in ("mine", "culprit"):
        pygame.draw.circle(screen, config.BLACK, rect.center, rect.width // 4)
    elif face in ("flag", "wrong_flag"):
        pole_x = rect.left + rect.width // 3
        pygame.draw.line(screen, config.BLACK, (pole_x, rect.top + 4), (pole_x, rect.bottom - 4), 2)
        pygame.draw.polygon(
            screen,
            config.RED,
            [(pole_x + 2, rect.top + 4), (rect.right - 4, rect.top + 8), (pole_x + 2, rect.top + 12)],
        )
        if face == "wrong_flag":
            pygame.draw.line(screen, config.BLACK, rect.topleft, rect.bottomright, 2)
    elif face == "glasses":
        pygame.draw.circle(screen, config.BLACK, (rect.centerx - 5, rect.centery), 4, 2)
        pygame.draw.circle(screen, config.BLACK, (rect.centerx + 5, rect.centery), 4, 2)
    elif face and face != "closed":
        color = config.NUMBER_COLORS.get(int(face), config.BLACK)
        label = font.render(face, True, color)
        screen.blit(label, label.get_rect(center=rect.center))

    pygame.draw.rect(screen, config.GRID_LINE, rect, 1)


def render_ui(screen, fonts, game: GameLogic) -> None:
    """Render the header and the board."""
    screen.fill(config.WHITE)
    header_font, tile_font = fonts

    counter = header_font.render(f"Mines: {game.flags_remaining}", True, config.BLACK)
    screen.blit(counter, (config.BOARD_MARGIN_LEFT, 16))

    if game.state == GameState.EndLose:
        result = header_font.render("YOU LOSE :(  Press R", True, config.RED)
        screen.blit(result, (config.BOARD_MARGIN_LEFT, 44))
    elif game.state == GameState.EndWin:
        result = header_font.render("YOU WIN :)  Press R", True, config.BLACK)
        screen.blit(result, (config.BOARD_MARGIN_LEFT, 44))

    for tile in game.board.tiles:
        render_tile(screen, tile_font, tile, game)

    if game.state == GameState.EndWin:
        board_rect = pygame.Rect(
            config.BOARD_MARGIN_LEFT,
            config.BOARD_MARGIN_TOP,
            game.board.width * config.CELL_SIZE,
            game.board.height * config.CELL_SIZE,
        )
        pygame.draw.rect(screen, config.GOLD, board_rect.inflate(8, 8), 4)


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    pygame.init()
    pygame.display.set_caption("Minesweeper")
    clock = pygame.time.Clock()
    fonts = (pygame.font.SysFont("arialblack", 18), pygame.font.SysFont("arial", 16, bold=True))

    scheduler = FrameScheduler()
    input_handler = InputHandler()
    dirty = [True]

    def on_change() -> None:
        dirty[0] = True

    preset = config.DEFAULT_PRESET
    game = new_game(preset, scheduler, on_change)
    screen = pygame.display.set_mode(window_size(game))

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.MOUSEBUTTONDOWN:
                coords = coords_to_index(event.pos, game)
                if coords:
                    row, col = coords
                    input_handler.handle_click(game, event, row, col)

            elif event.type == pygame.KEYDOWN:
                response = input_handler.handle_keyboard_input(game, event)
                if response.command is not None:
                    if response.command != "restart":
                        preset = response.command
                    # Stop the old board's animation before it is dropped
                    game.dispose()
                    game = new_game(preset, scheduler, on_change)
                    screen = pygame.display.set_mode(window_size(game))
                    dirty[0] = True

        scheduler.run_frame()

        if dirty[0]:
            render_ui(screen, fonts, game)
            pygame.display.flip()
            dirty[0] = False
        clock.tick(config.FPS)

    game.dispose()
    pygame.quit()


if __name__ == "__main__":
    main()
