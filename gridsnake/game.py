from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Iterator, List, Optional, Tuple

from gridsnake.bounded_queue import BoundedQueue

Vec2 = Tuple[int, int]

INITIAL_LENGTH = 2
MAX_FOOD_ATTEMPTS = 1000


def add_pos(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


class Direction(IntEnum):
    NONE = 0
    DOWN = 1
    UP = 2
    RIGHT = 3
    LEFT = 4


# y grows upwards, matching the renderer's NDC layout.
DIRECTIONS = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.LEFT: (-1, 0),
}


class Collision(Enum):
    WALL = "wall"
    SELF = "self"


class GameError(RuntimeError):
    """Raised when the calling code breaks the game's usage contract."""


class GameNotStartedError(GameError):
    pass


class GameAlreadyStartedError(GameError):
    pass


class InvalidPositionError(GameError, ValueError):
    pass


class BoardFullError(GameError):
    pass


class GameClosedError(GameError):
    pass


@dataclass
class StepResult:
    done: bool
    ate_food: bool
    collision: Optional[Collision]
    head: Vec2


class SnakeGame:
    """Snake rules on a fixed ``width`` x ``height`` board.

    A lost round only clears ``started``; call :meth:`start` again to play
    another round on the same board.
    """

    def __init__(self, width: int, height: int, seed: Optional[int] = None) -> None:
        if width < 2 or height < 2:
            raise ValueError(f"board must be at least 2x2, got {width}x{height}")
        self._width = width
        self._height = height
        self.random = random.Random(seed)

        self._started = False
        self._closed = False
        self._move: Vec2 = (0, 0)
        self._head: Vec2 = (0, 0)
        self._food: Vec2 = (0, 0)
        self._length = 0
        self._body: BoundedQueue[Vec2] = BoundedQueue(width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def started(self) -> bool:
        return self._started

    @property
    def head(self) -> Vec2:
        return self._head

    @property
    def movement(self) -> Vec2:
        return self._move

    @property
    def length(self) -> int:
        return self._length

    @property
    def body_size(self) -> int:
        return len(self._body)

    def in_bounds(self, pos: Vec2) -> bool:
        x, y = pos
        return 0 <= x < self._width and 0 <= y < self._height

    def start(self, head_x: int, head_y: int) -> None:
        self._check_open()
        if self._started:
            raise GameAlreadyStartedError("attempting to start an already started game")
        if not self.in_bounds((head_x, head_y)):
            raise InvalidPositionError(
                f"attempting to start a game with an invalid position: ({head_x}, {head_y})"
            )

        self._head = (head_x, head_y)
        self._move = (0, 0)
        self._length = INITIAL_LENGTH
        self._body.clear()
        self._body.append(self._head)
        self._food = self._random_food(whole_board_fallback=True)
        self._started = True

    def set_direction(self, direction: Direction) -> bool:
        """Aim the snake. Returns False if the turn is along the current axis."""
        self._check_started()
        if direction == Direction.NONE:
            return False

        dx, dy = DIRECTIONS[direction]
        if dx == 0 and self._move[1] != 0:
            return False
        if dy == 0 and self._move[0] != 0:
            return False

        self._move = (dx, dy)
        return True

    def update(self) -> StepResult:
        self._check_started()
        if self._move == (0, 0):
            return self._result(ate_food=False, collision=None)

        new_head = add_pos(self._head, self._move)
        collision = self._collision(new_head)
        if collision is not None:
            self._started = False
            return self._result(ate_food=False, collision=collision)

        ate_food = new_head == self._food
        if ate_food:
            # Head and tail are still in place, so the new food avoids both.
            food = self._random_food()
            self._length += 1
            self._food = food

        if len(self._body) >= self._length:
            self._body.pop_oldest()

        self._head = new_head
        self._body.append(new_head)
        return self._result(ate_food=ate_food, collision=None)

    def food_position(self) -> Vec2:
        return self._food

    def for_each(self, context: Any, visitor: Callable[[Vec2, Any], None]) -> None:
        """Call ``visitor(cell, context)`` for each body cell, tail to head."""
        self._check_open()
        self._body.for_each(context, visitor)

    def body(self) -> Iterator[Vec2]:
        self._check_open()
        return iter(self._body)

    def close(self) -> None:
        self._check_open()
        self._body.close()
        self._started = False
        self._closed = True

    def _collision(self, pos: Vec2) -> Optional[Collision]:
        if not self.in_bounds(pos):
            return Collision.WALL
        if pos in self._body:
            return Collision.SELF
        return None

    def _is_blocked(self, pos: Vec2) -> bool:
        return pos == add_pos(self._head, self._move) or pos in self._body

    def _random_food(self, whole_board_fallback: bool = False) -> Vec2:
        # The last column and row are never drawn.
        span_x, span_y = self._width - 1, self._height - 1
        for _ in range(MAX_FOOD_ATTEMPTS):
            candidate = (self.random.randrange(span_x), self.random.randrange(span_y))
            if not self._is_blocked(candidate):
                return candidate

        available = self._free_cells(span_x, span_y)
        if not available and whole_board_fallback:
            # Only reachable from start on a 2x2 board with the head at (0, 0).
            available = self._free_cells(self._width, self._height)
        if not available:
            raise BoardFullError("no free cell left to place food")
        return self.random.choice(available)

    def _free_cells(self, span_x: int, span_y: int) -> List[Vec2]:
        occupied = set(self._body)
        occupied.add(add_pos(self._head, self._move))
        return [
            (x, y)
            for x in range(span_x)
            for y in range(span_y)
            if (x, y) not in occupied
        ]

    def _result(self, ate_food: bool, collision: Optional[Collision]) -> StepResult:
        return StepResult(
            done=not self._started,
            ate_food=ate_food,
            collision=collision,
            head=self._head,
        )

    def _check_open(self) -> None:
        if self._closed:
            raise GameClosedError("game has been closed")

    def _check_started(self) -> None:
        self._check_open()
        if not self._started:
            raise GameNotStartedError("attempting to interact with a game that hasn't started yet")
