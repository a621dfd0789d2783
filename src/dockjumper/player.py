# src/dockjumper/player.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import (
    PLAYER_W, PLAYER_H, SPAWN_X, SPAWN_Y,
    MOVE_SPEED, GROUND_ACCEL, AIR_ACCEL, MAX_FALL_SPEED, MAX_RISE_SPEED, JUMP_VELOCITY,
    EDGE_JUMP_MIN_VY, EDGE_JUMP_MIN_VX, EDGE_JUMP_COOLDOWN_S, CARRY_GRACE_S
)
from .level import PlatformHandle
from .physics import Body, Category


@dataclass
class Player:
    """
    The climber. Position and velocity live on the physics body; everything
    else is contact/jump bookkeeping driven by the run controller.
    """
    body: Body
    facing: int = 1                         # +1 right, -1 left
    ground_contacts: int = 0                # open contacts with `ground` surfaces, never < 0
    last_jump_time: float = -math.inf
    last_ground_time: float = -math.inf
    carrying: Optional[PlatformHandle] = None
    carry_anchor: Tuple[float, float] = (0.0, 0.0)

    @classmethod
    def spawn(cls, x: float = SPAWN_X, y: float = SPAWN_Y) -> "Player":
        body = Body(
            x=float(x), y=float(y), width=PLAYER_W, height=PLAYER_H,
            category=Category.PLAYER, dynamic=True,
            collision_mask=Category.GROUND | Category.WALL,
            contact_mask=Category.GROUND | Category.HAZARD,
        )
        player = cls(body=body)
        body.owner = player
        return player

    # -------------------- Kinematics --------------------

    @property
    def x(self) -> float:
        return self.body.x

    @x.setter
    def x(self, value: float):
        self.body.x = value

    @property
    def y(self) -> float:
        return self.body.y

    @y.setter
    def y(self, value: float):
        self.body.y = value

    @property
    def vx(self) -> float:
        return self.body.vx

    @vx.setter
    def vx(self, value: float):
        self.body.vx = value

    @property
    def vy(self) -> float:
        return self.body.vy

    @vy.setter
    def vy(self, value: float):
        self.body.vy = value

    # -------------------- Ground state --------------------

    @property
    def grounded(self) -> bool:
        return self.ground_contacts > 0

    def grounded_recently(self, now: float) -> bool:
        """Grounded, or lost the ground less than CARRY_GRACE_S ago."""
        return self.grounded or (now - self.last_ground_time) < CARRY_GRACE_S

    def touch_ground(self, now: float):
        self.ground_contacts += 1
        self.last_ground_time = now

    def leave_ground(self, now: float):
        self.ground_contacts = max(self.ground_contacts - 1, 0)
        if self.ground_contacts == 0:
            self.last_ground_time = now

    # -------------------- Control --------------------

    def apply_horizontal_control(self, direction: float):
        """Blend vx toward direction * MOVE_SPEED; snappier on the ground than in the air."""
        target = direction * MOVE_SPEED
        accel = GROUND_ACCEL if self.grounded else AIR_ACCEL
        vx = self.vx + (target - self.vx) * accel
        self.vx = max(-MOVE_SPEED, min(vx, MOVE_SPEED))
        if self.vy < MAX_FALL_SPEED:
            self.vy = MAX_FALL_SPEED

    def can_jump(self, now: float) -> bool:
        if self.grounded:
            return True
        # edge jump while running fast off a ledge, never a free mid-air jump
        return (self.vy > EDGE_JUMP_MIN_VY
                and abs(self.vx) > EDGE_JUMP_MIN_VX
                and (now - self.last_jump_time) > EDGE_JUMP_COOLDOWN_S)

    def try_jump(self, now: float) -> bool:
        """Jump if allowed. Returns True if performed."""
        if not self.can_jump(now):
            return False
        self.last_jump_time = now
        if self.vy < 0.0:
            self.vy = 0.0
        self.vy = min(self.vy + JUMP_VELOCITY, MAX_RISE_SPEED)
        # leaving the surface: stop riding whatever we stood on
        self.carrying = None
        return True

    def reset(self, x: float = SPAWN_X, y: float = SPAWN_Y, now: float = 0.0):
        self.x, self.y = float(x), float(y)
        self.vx = self.vy = 0.0
        self.facing = 1
        self.ground_contacts = 0
        self.last_ground_time = now
        self.carrying = None
        self.carry_anchor = (0.0, 0.0)
