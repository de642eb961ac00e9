"""
Module: InputHandler
Description: Contains InputHandler class with functions that handle user clicks and keyboard
inputs, apply them to the game and return the type of response that was given.
Inputs: pygame events, GameLogic
Outputs: Response
External Sources: None
"""

import enum
from typing import Optional

import pygame

import config
from GameLogic import GameLogic, GameState

LEFT_BUTTON = 1
RIGHT_BUTTON = 3

PRESET_KEYS = {
    pygame.K_1: config.PRESET_ORDER[0],
    pygame.K_2: config.PRESET_ORDER[1],
    pygame.K_3: config.PRESET_ORDER[2],
}


class ResponseCode(enum.Enum):
    Finished = 0
    Failed = 1
    InProgress = 2
    Ignored = 3


class Response:
    """Package and send input handling results."""

    def __init__(
        self,
        game: GameLogic,
        response_code: ResponseCode,
        message: str = "",
        command: Optional[str] = None,
    ) -> None:
        self.game: GameLogic = game
        self.response_code: ResponseCode = response_code
        self.message: str = message
        # Host-level request: "restart" or a preset name
        self.command: Optional[str] = command


class InputHandler:
    """Handles keyboard and mouse input."""

    def handle_click(self, game: GameLogic, event, row: int, col: int) -> Response:
        """Left click opens a tile, right click toggles its flag."""
        if game.state != GameState.Playing:
            return Response(game, ResponseCode.Ignored, "Game must be in progress")

        if event.type != pygame.MOUSEBUTTONDOWN:
            return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

        tile = game.tile(row, col)
        if event.button == LEFT_BUTTON:
            game.open(tile)
            return Response(game, ResponseCode.Finished, f"Opened tile at ({row}, {col})")

        if event.button == RIGHT_BUTTON:
            game.flag(tile)
            return Response(game, ResponseCode.Finished, f"Toggled flag at ({row}, {col})")

        return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

    def handle_keyboard_input(self, game: GameLogic, event) -> Response:
        """R restarts, 1-3 pick a board preset, A solves the board."""
        if event.type != pygame.KEYDOWN:
            return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")

        if event.key == pygame.K_r:
            return Response(game, ResponseCode.Finished, "Restarting", command="restart")

        if event.key in PRESET_KEYS:
            preset = PRESET_KEYS[event.key]
            return Response(game, ResponseCode.Finished, f"Selected {preset}", command=preset)

        if event.key == pygame.K_a:
            if game.state != GameState.Playing:
                return Response(game, ResponseCode.Failed, "Game is already over")
            game.auto_win()
            return Response(game, ResponseCode.Finished, "Board solved")

        return Response(game, ResponseCode.Ignored, "Ignored irrelevant input")
