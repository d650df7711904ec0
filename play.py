from __future__ import annotations

import argparse

import pygame

from gridsnake.game import Direction, SnakeGame
from gridsnake.render import BoardRenderer

GRID_SIZE = 15
WINDOW_SIZE = 600
UPDATE_INTERVAL = 8
FPS = 60

# Polled in order; a later pressed key overrides an earlier one.
KEY_DIRECTIONS = (
    (pygame.K_DOWN, Direction.DOWN),
    (pygame.K_UP, Direction.UP),
    (pygame.K_RIGHT, Direction.RIGHT),
    (pygame.K_LEFT, Direction.LEFT),
)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake on a fixed grid")
    parser.add_argument("--grid", type=int, nargs=2, default=(GRID_SIZE, GRID_SIZE))
    parser.add_argument("--window", type=int, default=WINDOW_SIZE, help="Window size in pixels")
    parser.add_argument(
        "--update-interval",
        type=int,
        default=UPDATE_INTERVAL,
        help="Frames between two simulation ticks",
    )
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def poll_direction(pressed) -> Direction:
    direction = Direction.NONE
    for key, candidate in KEY_DIRECTIONS:
        if pressed[key]:
            direction = candidate
    return direction


def main() -> None:
    args = parse_args()
    width, height = args.grid
    interval = max(1, args.update_interval)

    game = SnakeGame(width, height, seed=args.seed)
    renderer = BoardRenderer((width, height), (args.window, args.window))
    clock = pygame.time.Clock()
    start = (width // 2, height // 2)

    game.start(*start)
    print(f"Snake on a {width}x{height} board. Arrow keys to steer, Esc to quit.")

    frame = 0
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        pressed = pygame.key.get_pressed()
        if pressed[pygame.K_ESCAPE]:
            running = False

        direction = poll_direction(pressed)
        if direction != Direction.NONE:
            # A quick turn right after a tick brings the next tick forward.
            if game.set_direction(direction) and frame < interval // 3:
                frame = 0

        if (interval + frame) % interval == 0:
            result = game.update()
            if result.done:
                print(f"Game over ({result.collision.value}). Length reached: {game.length}")
                game.start(*start)
        frame += 1

        renderer.draw(game)
        clock.tick(args.fps)

    game.close()
    renderer.close()


if __name__ == "__main__":
    main()
