import random

import pytest

from gridsnake import game as game_module
from gridsnake.game import (
    BoardFullError,
    Collision,
    Direction,
    GameAlreadyStartedError,
    GameClosedError,
    GameNotStartedError,
    InvalidPositionError,
    SnakeGame,
)


def body_cells(game):
    cells = []
    game.for_each(cells, lambda cell, context: context.append(cell))
    return cells


def test_start_resets_state():
    for width, height in [(2, 2), (4, 4), (7, 3)]:
        game = SnakeGame(width, height, seed=1)
        game.start(1, 1)
        assert game.started
        assert game.body_size == 1
        assert game.head == (1, 1)
        assert game.length == 2
        assert game.movement == (0, 0)
        assert body_cells(game) == [(1, 1)]


def test_board_must_be_at_least_2x2():
    with pytest.raises(ValueError):
        SnakeGame(1, 5)


def test_start_twice_raises():
    game = SnakeGame(4, 4, seed=1)
    game.start(1, 1)
    with pytest.raises(GameAlreadyStartedError):
        game.start(1, 1)


def test_start_out_of_bounds_raises():
    game = SnakeGame(4, 4, seed=1)
    with pytest.raises(InvalidPositionError):
        game.start(4, 0)
    with pytest.raises(InvalidPositionError):
        game.start(0, -1)
    assert not game.started


def test_interaction_before_start_raises():
    game = SnakeGame(4, 4, seed=1)
    with pytest.raises(GameNotStartedError):
        game.update()
    with pytest.raises(GameNotStartedError):
        game.set_direction(Direction.UP)


def test_direction_lock():
    game = SnakeGame(4, 4, seed=1)
    game.start(1, 1)
    assert game.set_direction(Direction.UP)
    assert not game.set_direction(Direction.DOWN)
    assert not game.set_direction(Direction.UP)
    assert game.movement == (0, 1)
    assert game.set_direction(Direction.LEFT)
    assert game.movement == (-1, 0)


def test_none_direction_is_rejected():
    game = SnakeGame(4, 4, seed=1)
    game.start(1, 1)
    assert not game.set_direction(Direction.NONE)
    assert game.movement == (0, 0)


def test_update_without_direction_is_noop():
    game = SnakeGame(4, 4, seed=1)
    game.start(1, 1)
    result = game.update()
    assert not result.done
    assert game.head == (1, 1)
    assert game.body_size == 1


def test_move_right_on_4x4():
    game = SnakeGame(4, 4, seed=3)
    game.start(1, 1)
    game._food = (0, 0)
    assert game.set_direction(Direction.RIGHT)
    result = game.update()
    assert not result.done
    assert not result.ate_food
    assert game.head == (2, 1)
    assert body_cells(game) == [(1, 1), (2, 1)]
    assert game.started


def test_wall_ends_game_on_2x2():
    game = SnakeGame(2, 2, seed=3)
    game.start(0, 0)
    assert game.set_direction(Direction.LEFT)
    result = game.update()
    assert result.done
    assert result.collision is Collision.WALL
    assert not game.started
    # state is left intact for inspection and restart
    assert body_cells(game) == [(0, 0)]
    game.start(1, 1)
    assert game.started


def test_eating_grows_without_pop():
    game = SnakeGame(8, 8, seed=5)
    game.start(1, 1)
    game._food = (6, 6)
    game.set_direction(Direction.RIGHT)
    game.update()
    assert game.body_size == 2

    game._food = (3, 1)
    previous_size = game.body_size
    result = game.update()
    assert result.ate_food
    assert game.length == 3
    assert game.body_size == min(previous_size + 1, game.length)
    assert body_cells(game) == [(1, 1), (2, 1), (3, 1)]
    assert game.food_position() not in body_cells(game)


def test_steady_state_keeps_size():
    game = SnakeGame(10, 10, seed=7)
    game.start(0, 5)
    game.set_direction(Direction.RIGHT)
    game._food = (0, 0)
    for _ in range(4):
        game.update()
        game._food = (0, 0)
    assert game.body_size == game.length == 2
    before = body_cells(game)
    game.update()
    after = body_cells(game)
    assert len(after) == len(before)
    assert after[:-1] == before[1:]
    assert after[-1] == game.head


def test_self_collision_reports_self():
    game = SnakeGame(8, 8, seed=11)
    game.start(2, 2)
    game._length = 10
    game._food = (7, 7)
    moves = [Direction.RIGHT, Direction.RIGHT, Direction.UP, Direction.LEFT]
    for direction in moves:
        game.set_direction(direction)
        assert not game.update().done
    assert game.head == (3, 3)
    game.set_direction(Direction.DOWN)
    result = game.update()
    assert result.done
    assert result.collision is Collision.SELF


def test_food_spawn_law():
    game = SnakeGame(6, 5, seed=0)
    game.start(2, 2)
    game.set_direction(Direction.RIGHT)
    for _ in range(200):
        fx, fy = game._random_food()
        assert 0 <= fx < game.width - 1
        assert 0 <= fy < game.height - 1
        assert (fx, fy) not in body_cells(game)
        assert (fx, fy) != (game.head[0] + 1, game.head[1])


def test_food_never_on_last_row_or_column():
    seen = set()
    for seed in range(50):
        game = SnakeGame(3, 3, seed=seed)
        game.start(2, 2)
        seen.add(game.food_position())
    assert seen <= {(0, 0), (0, 1), (1, 0), (1, 1)}


def test_food_fallback_scans_free_cells(monkeypatch):
    monkeypatch.setattr(game_module, "MAX_FOOD_ATTEMPTS", 0)
    game = SnakeGame(3, 3, seed=0)
    game.start(0, 0)
    assert game.food_position() in {(0, 1), (1, 0), (1, 1)}


def test_food_on_2x2_origin_uses_whole_board():
    game = SnakeGame(2, 2, seed=0)
    game.start(0, 0)
    assert game.food_position() in {(0, 1), (1, 0), (1, 1)}


def test_full_board_raises():
    game = SnakeGame(2, 2, seed=0)
    game.start(0, 0)
    for cell in [(1, 0), (1, 1), (0, 1)]:
        game._body.append(cell)
    with pytest.raises(BoardFullError):
        game._random_food()


def test_head_is_newest_body_entry():
    game = SnakeGame(6, 6, seed=2)
    game.start(0, 0)
    game.set_direction(Direction.UP)
    for _ in range(4):
        game.update()
        assert game._body.peek_newest() == game.head
    assert list(game.body()) == body_cells(game)


def test_closed_game_rejects_use():
    game = SnakeGame(4, 4, seed=1)
    game.start(1, 1)
    game.close()
    with pytest.raises(GameClosedError):
        game.update()
    with pytest.raises(GameClosedError):
        game.start(1, 1)


def test_filling_spawn_region_raises_and_leaves_state():
    game = SnakeGame(3, 3, seed=0)
    game.start(1, 1)
    for food, direction in [((1, 0), Direction.DOWN), ((0, 0), Direction.LEFT)]:
        game._food = food
        game.set_direction(direction)
        assert game.update().ate_food
    assert game.length == 4
    assert body_cells(game) == [(1, 1), (1, 0), (0, 0)]

    # eating at (0, 1) would leave no free cell in [0, 2) x [0, 2)
    game._food = (0, 1)
    game.set_direction(Direction.UP)
    with pytest.raises(BoardFullError):
        game.update()
    assert game.length == 4
    assert game.head == (0, 0)
    assert game.food_position() == (0, 1)
    assert body_cells(game) == [(1, 1), (1, 0), (0, 0)]


def test_food_stays_in_spawn_region_during_play():
    directions = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]
    for seed in range(50):
        game = SnakeGame(3, 3, seed=seed)
        turns = random.Random(seed)
        game.start(1, 1)
        for _ in range(100):
            game.set_direction(turns.choice(directions))
            try:
                result = game.update()
            except BoardFullError:
                break
            if result.done:
                break
            fx, fy = game.food_position()
            assert 0 <= fx < 2 and 0 <= fy < 2
            assert (fx, fy) not in body_cells(game)


def test_moving_into_tail_cell_ends_game():
    game = SnakeGame(4, 4, seed=0)
    game.start(2, 2)
    game._length = 4
    game._food = (0, 0)
    for direction in (Direction.RIGHT, Direction.UP, Direction.LEFT):
        game.set_direction(direction)
        game.update()
    assert body_cells(game) == [(2, 2), (3, 2), (3, 3), (2, 3)]
    assert game.body_size == game.length

    game.set_direction(Direction.DOWN)
    result = game.update()
    assert result.done
    assert result.collision is Collision.SELF
