# src/dockjumper/game.py
import sys, argparse, logging
from pathlib import Path

import pygame
from pygame import K_ESCAPE

from .config import FPS, DT, SEED_DEFAULT, Playfield
from .render import draw_frame
from .scores import JsonScoreStore
from .world import FrameDriver

DEFAULT_SCORES_PATH = Path.home() / ".dockjumper" / "scores.json"


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="DockJumper: climb until the floor catches you.")
    p.add_argument("--seed", type=int, default=None,
                   help="Level seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--scores", type=Path, default=DEFAULT_SCORES_PATH,
                   help="Where the high score and scoreboard are kept.")
    p.add_argument("--name", type=str, default=None,
                   help="Scoreboard name (remembered for next time).")
    p.add_argument("--log-level", type=str, default="WARNING",
                   help="Logging level, e.g. DEBUG to trace respawns and streaming.")
    return p.parse_args(argv)


def scoreboard_lines(store, limit: int = 5):
    entries = store.load_scoreboard()[:limit]
    lines = ["Local best"]
    for i, e in enumerate(entries):
        lines.append(f"{i + 1}. {e.name}  {e.score}")
    if not entries:
        lines.append("no runs yet")
    return lines


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        launch_seed = SEED_DEFAULT
    elif args.seed == -1:
        launch_seed = None
    else:
        launch_seed = args.seed

    store = JsonScoreStore(args.scores)
    if args.name:
        store.save_player_name(args.name)

    playfield = Playfield()
    pygame.init()
    pygame.display.set_caption("DockJumper")
    screen = pygame.display.set_mode((int(playfield.width), int(playfield.height)))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 13)

    driver = FrameDriver(seed=launch_seed, playfield=playfield, store=store)
    board = scoreboard_lines(store)
    accumulator = 0.0

    while True:
        elapsed = clock.tick(FPS) / 1000.0
        accumulator += min(elapsed, 0.25)   # clamp stalls

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                driver.controls.handle_key(event.key, True)
            if event.type == pygame.KEYUP:
                driver.controls.handle_key(event.key, False)

        while accumulator >= DT:
            accumulator -= DT
            if driver.tick(DT):
                board = scoreboard_lines(store)

        frame = driver.snapshot()
        # scoreboard only while a run hasn't started scoring yet
        draw_frame(screen, frame, playfield, font, board if frame.score == 0 else None)
        pygame.display.flip()


if __name__ == "__main__":
    run()
