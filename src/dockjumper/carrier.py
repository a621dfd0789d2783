# src/dockjumper/carrier.py
from __future__ import annotations

from .config import CARRY_RELEASE_VY
from .level import LevelGen, Platform
from .player import Player

_EPS = 1e-9


class MovingPlatformCarrier:
    """
    Moves a grounded player by the displacement of the moving platform under
    it. The player keeps its own velocity; only the position is corrected, so
    jumping and air control are never overridden.
    """
    def __init__(self, level: LevelGen):
        self.level = level

    def attach(self, player: Player, platform: Platform):
        player.carrying = self.level.handle(platform)
        player.carry_anchor = (platform.x, platform.y)

    def release(self, player: Player):
        player.carrying = None

    def carrying(self, player: Player) -> Platform | None:
        return self.level.resolve(player.carrying)

    def sync(self, player: Player, now: float) -> bool:
        """Apply the platform delta since the last snapshot. Returns True if the player moved."""
        if not player.grounded_recently(now):
            player.carrying = None
            return False
        if player.carrying is None:
            return False
        platform = self.level.resolve(player.carrying)
        if platform is None:
            # culled or the layout was rebuilt
            player.carrying = None
            return False

        ax, ay = player.carry_anchor
        if abs(player.vy) > CARRY_RELEASE_VY:
            player.carrying = None
            return False

        dx = platform.x - ax
        dy = platform.y - ay
        moved = False
        if abs(dx) > _EPS:
            player.x += dx
            moved = True
        if abs(dy) > _EPS:
            player.y += dy
            # don't let gravity pull us straight back into the platform
            player.vy = max(player.vy, 0.0)
            moved = True
        player.carry_anchor = (platform.x, platform.y)
        return moved
