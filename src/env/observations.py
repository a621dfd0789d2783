# src/env/observations.py
from __future__ import annotations
from typing import List, Tuple

import numpy as np

from src.dockjumper.config import (
    MOVE_SPEED, MAX_RISE_SPEED, PLATFORM_MAX_W, PLAYER_H, PLATFORM_H, Playfield
)

# How many platforms above the player are described
N_PLATFORMS: int = 3
OBS_SIZE: int = 5 + 4 * N_PLATFORMS
# "no platform" sentinel block: [dx, dy, width, moving]
EMPTY_SLOT: Tuple[float, float, float, float] = (0.0, 1.0, 0.0, 0.0)


def observation_bounds() -> Tuple[np.ndarray, np.ndarray]:
    low = np.array([-1.0, 0.0, -1.0, -1.0, 0.0] + [-1.0, -1.0, 0.0, 0.0] * N_PLATFORMS,
                   dtype=np.float32)
    high = np.array([1.0, 1.0, 1.0, 1.0, 1.0] + [1.0, 1.0, 1.0, 1.0] * N_PLATFORMS,
                    dtype=np.float32)
    return low, high


def _clip(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else (hi if v > hi else v)


def build_observation(driver) -> np.ndarray:
    """
    Returns a fixed (17,) float32 vector:
      [ x_norm, height_above_kill_zone, vx_norm, vy_norm, grounded,
        dx, dy, width, moving   (nearest platform at/above the feet)
        ... x3 ]
    - x_norm, dx in [-1,1] (playfield half width / full width)
    - height and dy normalised by 2 x playfield height
    - width by the widest platform; moving / grounded are 0/1
    - missing platform slots use EMPTY_SLOT
    """
    player = driver.player
    playfield: Playfield = driver.playfield
    span = 2.0 * playfield.height

    feats: List[float] = [
        _clip(player.x / playfield.half_width, -1.0, 1.0),
        _clip((player.y - driver.camera.kill_zone_y) / span, 0.0, 1.0),
        _clip(player.vx / MOVE_SPEED, -1.0, 1.0),
        _clip(player.vy / MAX_RISE_SPEED, -1.0, 1.0),
        1.0 if player.grounded else 0.0,
    ]

    # include the platform underfoot: its centre sits half a body + half a slab below us
    floor_y = player.y - PLAYER_H / 2 - PLATFORM_H
    ahead = sorted((p for p in driver.level.platforms if p.y >= floor_y), key=lambda p: p.y)

    for i in range(N_PLATFORMS):
        if i < len(ahead):
            p = ahead[i]
            feats.extend([
                _clip((p.x - player.x) / playfield.width, -1.0, 1.0),
                _clip((p.y - player.y) / span, -1.0, 1.0),
                _clip(p.width / PLATFORM_MAX_W, 0.0, 1.0),
                1.0 if p.moving else 0.0,
            ])
        else:
            feats.extend(EMPTY_SLOT)

    return np.asarray(feats, dtype=np.float32)
