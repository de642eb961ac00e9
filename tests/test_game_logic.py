import random

import pytest

from FrameScheduler import FrameScheduler
from GameLogic import GameLogic, GameState


def make_game(height, width, mine_cells, **kwargs):
    """Game with an explicit mine layout."""
    game = GameLogic(height, width, 0, rng=random.Random(0), **kwargs)
    game.board.place_mines_at(mine_cells)
    return game


def open_cells(game):
    return {tile.cell() for tile in game.board.tiles if tile.is_open}


def test_new_game_is_playing():
    game = GameLogic(9, 9, 10, rng=random.Random(5))
    assert game.state == GameState.Playing
    assert game.status == "playing"
    assert game.n_mines == 10
    assert game.flags_remaining == 10
    assert len(game.board.closed) == 81


def test_invalid_mine_count_fails_fast():
    with pytest.raises(ValueError):
        GameLogic(2, 2, 4)


def test_cascade_stops_at_numbers():
    game = make_game(3, 3, [(2, 2)])
    game.open(game.tile(0, 0))

    every_safe = {(r, c) for r in range(3) for c in range(3)} - {(2, 2)}
    assert open_cells(game) == every_safe
    assert game.board.closed == {game.tile(2, 2)}
    assert game.state == GameState.Playing


def test_cascade_opens_zero_region_and_its_border_only():
    # column of mines splits the board; the right side must stay closed
    game = make_game(4, 5, [(0, 2), (1, 2), (2, 2), (3, 2)])
    game.open(game.tile(0, 0))

    assert open_cells(game) == {(r, c) for r in range(4) for c in range(2)}
    assert game.neighbor_mine_count(game.tile(0, 1)) == 2
    assert all(not game.tile(r, c).is_open for r in range(4) for c in range(2, 5))


def test_flag_blocks_cascade():
    game = make_game(1, 5, [(0, 4)])
    game.flag(game.tile(0, 1))
    game.open(game.tile(0, 0))

    assert open_cells(game) == {(0, 0)}
    assert game.tile(0, 1).is_flag
    assert not game.tile(0, 1).is_open


def test_opening_a_flagged_tile_is_a_noop():
    game = make_game(2, 2, [(0, 0)])
    mine = game.tile(0, 0)
    game.flag(mine)
    game.open(mine)

    assert not mine.is_open
    assert game.state == GameState.Playing


def test_chord_on_open_number_opens_neighbors():
    game = make_game(3, 3, [(2, 2)])
    center = game.tile(1, 1)
    game.open(center)
    assert open_cells(game) == {(1, 1)}

    game.flag(game.tile(2, 2))
    game.open(center)

    assert len(open_cells(game)) == 8
    assert game.state == GameState.EndWin


def test_chord_with_wrong_flag_loses():
    game = make_game(3, 3, [(2, 2)])
    game.flag(game.tile(0, 2))
    game.open(game.tile(0, 0))

    assert game.state == GameState.EndLose
    assert game.tile(2, 2).is_culprit
    assert not game.tile(0, 2).is_open


def test_opening_a_mine_loses():
    game = make_game(2, 2, [(0, 0)])
    game.open(game.tile(0, 0))

    assert game.status == "lost"
    assert game.tile(0, 0).is_culprit
    assert game.tile(0, 0).is_open


def test_loss_reveals_all_mines_and_is_terminal():
    game = make_game(3, 3, [(0, 0), (2, 2)])
    calls = []
    game.add_listener(lambda: calls.append(1))
    game.flag(game.tile(2, 2))
    calls.clear()

    game.open(game.tile(0, 0))
    assert calls == [1]
    assert game.state == GameState.EndLose
    assert all(mine.is_open for mine in game.board.mines)
    # a flagged mine is revealed but keeps its flag
    assert game.tile(2, 2).is_flag

    game.open(game.tile(2, 2))
    game.open(game.tile(0, 2))
    game.flag(game.tile(2, 0))
    game.lose()

    assert game.state == GameState.EndLose
    assert [tile.cell() for tile in game.board.tiles if tile.is_culprit] == [(0, 0)]
    assert not game.tile(2, 0).is_flag


def test_flag_driven_win():
    game = make_game(3, 3, [(2, 2)])
    game.open(game.tile(0, 0))
    assert game.state == GameState.Playing

    game.flag(game.tile(2, 2))
    assert game.state == GameState.EndWin
    assert game.board.n_flagged_mines == 1
    assert len(game.board.closed) == 1


def test_open_driven_win():
    game = make_game(3, 3, [(2, 2)])
    game.flag(game.tile(2, 2))
    assert game.state == GameState.Playing

    game.open(game.tile(0, 0))
    assert game.state == GameState.EndWin
    assert game.board.n_flagged_mines == game.n_mines
    assert len(game.board.closed) == game.n_mines


def test_no_win_with_unflagged_mine():
    game = make_game(3, 3, [(2, 2)])
    game.open(game.tile(0, 0))
    assert not game.check_win_condition()
    assert game.state == GameState.Playing


def test_flag_guards():
    game = make_game(3, 3, [(2, 2)])
    opened = game.tile(0, 0)
    game.open(opened)
    game.flag(opened)
    assert not opened.is_flag

    game.flag(game.tile(2, 2))
    assert game.state == GameState.EndWin
    game.flag(game.tile(2, 2))
    assert game.tile(2, 2).is_flag
    assert game.flags_remaining == 0


def test_won_board_ignores_open():
    game = make_game(3, 3, [(2, 2)])
    game.auto_win()
    game.open(game.tile(2, 2))
    assert not game.tile(2, 2).is_open
    assert game.state == GameState.EndWin


def test_auto_win_solves_board():
    game = GameLogic(8, 8, 10, rng=random.Random(11))
    game.flag(next(tile for tile in game.board.tiles if not tile.is_mine))
    game.auto_win()

    assert game.state == GameState.EndWin
    for tile in game.board.tiles:
        if tile.is_mine:
            assert tile.is_flag and not tile.is_open
        else:
            assert tile.is_open and not tile.is_flag
    assert game.board.flags == game.board.mines
    assert game.board.closed == game.board.mines
    assert game.board.n_flagged_mines == 10


def test_auto_win_does_not_revive_lost_game():
    game = make_game(2, 2, [(0, 0)])
    game.open(game.tile(0, 0))
    game.auto_win()
    assert game.state == GameState.EndLose


def test_zero_mine_boards_terminate_and_win():
    for height, width in [(1, 10), (10, 1), (60, 60)]:
        game = GameLogic(height, width, 0, rng=random.Random(2))
        game.open(game.tile(height - 1, width - 1))
        assert not game.board.closed
        assert game.state == GameState.EndWin


def test_random_boards_never_open_flags():
    rng = random.Random(99)
    for _ in range(20):
        game = GameLogic(12, 12, 20, rng=rng)
        flagged = rng.sample(game.board.tiles, 6)
        for tile in flagged:
            game.flag(tile)
        target = next(t for t in game.board.tiles if not t.is_mine and not t.is_flag)
        game.open(target)
        if game.state != GameState.EndLose:
            assert not any(tile.is_open for tile in flagged)
        assert game.board.closed == {t for t in game.board.tiles if not t.is_open}


def test_one_notification_per_call():
    calls = []
    game = make_game(3, 3, [(2, 2)], on_change=lambda: calls.append(1))

    game.open(game.tile(0, 0))
    assert len(calls) == 1

    game.flag(game.tile(2, 2))
    assert len(calls) == 2

    # no-ops do not notify
    game.flag(game.tile(0, 0))
    game.open(game.tile(2, 2))
    assert len(calls) == 2


def test_remove_listener():
    calls = []
    listener = lambda: calls.append(1)
    game = make_game(2, 2, [(0, 0)])
    game.add_listener(listener)
    game.remove_listener(listener)
    game.remove_listener(listener)
    game.flag(game.tile(0, 0))
    assert calls == []


def test_win_starts_animation_once():
    scheduler = FrameScheduler()
    game = make_game(3, 3, [(2, 2)], scheduler=scheduler)
    game.auto_win()

    animator = game.animator
    assert animator is not None
    assert scheduler.pending == 1

    game.win()
    game.check_win_condition()
    assert game.animator is animator
    assert scheduler.pending == 1


def test_headless_win_has_no_animation():
    game = make_game(3, 3, [(2, 2)])
    game.auto_win()
    assert game.animator is None


def test_dispose_stops_animation_and_input():
    scheduler = FrameScheduler()
    game = make_game(3, 3, [(2, 2)], scheduler=scheduler)
    game.auto_win()
    game.dispose()

    assert scheduler.pending == 0
    snapshot = [(t.is_open, t.is_glasses) for t in game.board.tiles]
    for _ in range(50):
        scheduler.run_frame()
    assert [(t.is_open, t.is_glasses) for t in game.board.tiles] == snapshot


def test_disposed_game_ignores_actions():
    game = make_game(3, 3, [(2, 2)])
    game.dispose()
    game.open(game.tile(0, 0))
    game.flag(game.tile(1, 1))
    assert not open_cells(game)
    assert not game.board.flags
