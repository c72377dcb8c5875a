from __future__ import annotations

import argparse
import logging
from typing import Optional

from tetris_rl.game import GameConfig, GameSession, GameSnapshot
from .pygame_clock import PygameClockScheduler


logger = logging.getLogger(__name__)


def format_snapshot(snapshot: GameSnapshot) -> str:
    board = snapshot.field.copy()
    if snapshot.active is not None and snapshot.active.x is not None:
        for dy, row in enumerate(snapshot.active.matrix):
            for dx, filled in enumerate(row):
                y, x = snapshot.active.y + dy, snapshot.active.x + dx
                if filled and 0 <= y < board.shape[0] and 0 <= x < board.shape[1]:
                    board[y, x] = -1
    lines = ["".join("@" if cell < 0 else "█" if cell else "·" for cell in row) for row in board]
    lines.append(f"score={snapshot.score} level={snapshot.level} state={snapshot.state.value}")
    return "\n".join(lines)


def run(fps: int = 60, max_frames: Optional[int] = None, seed: Optional[int] = None) -> GameSnapshot:
    """Let gravity play a session on the wall clock until it tops out."""
    scheduler = PygameClockScheduler(fps=fps)
    session = GameSession(GameConfig(random_seed=seed), scheduler=scheduler)
    session.start()
    frames = scheduler.run(max_frames=max_frames)
    snapshot = session.snapshot()
    logger.info("%d frame(s), final state %s", frames, snapshot.state.value)
    return snapshot


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--max_frames", type=int, default=None)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    snapshot = run(args.fps, args.max_frames, args.seed)
    print(format_snapshot(snapshot))


if __name__ == "__main__":  # pragma: no cover
    main()
